"""Tests for the polled chat channel."""
from datetime import timedelta

from gamenight.config import settings
from gamenight.models.chat import ChatMessage
from tests.conftest import add_guest, as_token, as_user, create_game_night, create_test_user


def _setup(client):
    host = create_test_user(client, name="Hana")
    event = create_game_night(client, host)
    guest = add_guest(client, event, host, name="Gus")["guest"]
    return host, event, guest


def _post(client, event, params, content):
    return client.post(f"/api/game-nights/{event['event_id']}/chat/", params=params, json={"content": content})


class TestChat:

    def test_post_snapshots_author(self, client):
        host, event, guest = _setup(client)
        resp = _post(client, event, as_token(guest), "  who's bringing dice?  ")
        assert resp.status_code == 201
        msg = resp.json()
        assert msg["content"] == "who's bringing dice?"
        assert msg["author_id"] == guest["guest_id"]
        assert msg["author_name"] == "Gus"
        assert msg["is_edited"] is False

    def test_list_in_order_with_poll_interval(self, client):
        host, event, guest = _setup(client)
        for i, params in enumerate([as_user(host), as_token(guest), as_user(host)]):
            _post(client, event, params, f"message {i}")
        page = client.get(f"/api/game-nights/{event['event_id']}/chat/", params=as_token(guest)).json()
        assert [m["content"] for m in page["messages"]] == ["message 0", "message 1", "message 2"]
        assert [m["author_name"] for m in page["messages"]] == ["Hana", "Gus", "Hana"]
        assert page["poll_interval_seconds"] == settings.CHAT_POLL_INTERVAL_SECONDS

    def test_since_id_returns_only_newer(self, client):
        host, event, guest = _setup(client)
        first = _post(client, event, as_user(host), "one").json()
        _post(client, event, as_user(host), "two")
        _post(client, event, as_token(guest), "three")
        page = client.get(
            f"/api/game-nights/{event['event_id']}/chat/",
            params={**as_token(guest), "since_id": first["message_id"]},
        ).json()
        assert [m["content"] for m in page["messages"]] == ["two", "three"]

    def test_since_latest_is_empty(self, client):
        host, event, guest = _setup(client)
        last = _post(client, event, as_user(host), "only").json()
        page = client.get(
            f"/api/game-nights/{event['event_id']}/chat/",
            params={**as_user(host), "since_id": last["message_id"]},
        ).json()
        assert page["messages"] == []

    def test_unknown_since_id_is_404(self, client):
        host, event, guest = _setup(client)
        resp = client.get(
            f"/api/game-nights/{event['event_id']}/chat/", params={**as_user(host), "since_id": "nope"},
        )
        assert resp.status_code == 404

    def test_blank_message_rejected(self, client):
        host, event, guest = _setup(client)
        assert _post(client, event, as_user(host), "   ").status_code == 422

    def test_too_long_message_rejected(self, client):
        host, event, guest = _setup(client)
        assert _post(client, event, as_user(host), "x" * 2001).status_code == 422

    def test_outsider_cannot_read(self, client):
        host, event, guest = _setup(client)
        outsider = create_test_user(client, name="Outsider")
        resp = client.get(f"/api/game-nights/{event['event_id']}/chat/", params=as_user(outsider))
        assert resp.status_code == 401

    def test_late_commit_with_earlier_stamp_still_delivered(self, client, db):
        host, event, guest = _setup(client)
        later = _post(client, event, as_user(host), "stamped later, stored first").json()
        anchor = db.query(ChatMessage).filter(ChatMessage.message_id == later["message_id"]).one()

        # a concurrent post stamped before the anchor that commits after it
        db.add(ChatMessage(
            event_id=event["event_id"],
            author_id=guest["guest_id"],
            author_name="Gus",
            content="stamped earlier, stored second",
            created_at=anchor.created_at - timedelta(milliseconds=5),
        ))
        db.commit()

        page = client.get(
            f"/api/game-nights/{event['event_id']}/chat/",
            params={**as_token(guest), "since_id": later["message_id"]},
        ).json()
        assert [m["content"] for m in page["messages"]] == ["stamped earlier, stored second"]

        full = client.get(f"/api/game-nights/{event['event_id']}/chat/", params=as_user(host)).json()
        assert [m["content"] for m in full["messages"]] == [
            "stamped earlier, stored second", "stamped later, stored first",
        ]
