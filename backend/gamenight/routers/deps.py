"""Shared router dependencies."""
from typing import Optional
from fastapi import Query

from gamenight.errors import ValidationError
from gamenight.services.identity_service import Credential, InviteCapability, UserCredential


def get_credential(
    actor_user_id: Optional[str] = Query(None, description="Signed-in user acting on the game night"),
    invite_token: Optional[str] = Query(None, description="Invite token held by an anonymous guest"),
) -> Optional[Credential]:
    """Build the caller credential; resolving it against an event is the services' job."""
    if actor_user_id and invite_token:
        raise ValidationError("Use either actor_user_id or invite_token, not both")
    if actor_user_id:
        return UserCredential(actor_user_id)
    if invite_token:
        return InviteCapability(invite_token)
    return None
