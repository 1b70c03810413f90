"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18

Creates all tables for the game night planner:
users, game_nights, guests, lineup_entries, votes, moments,
chat_messages, chaos_sessions, event_mutations.
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Enum columns store member names, matching SQLAlchemy's Enum(PyEnum) default
game_night_status = sa.Enum("planning", "locked_in", "in_progress", "completed", "cancelled", name="gamenightstatus")
vibe = sa.Enum("chill", "competitive", "chaos", "party", "cozy", name="vibe")
guest_status = sa.Enum("pending", "going", "maybe", "out", name="gueststatus")
guest_role = sa.Enum("host", "guest", name="guestrole")
lineup_status = sa.Enum("queued", "playing", "completed", name="lineupstatus")
moment_type = sa.Enum("quote", "chaos", "highlight", name="momenttype")
action_type = sa.Enum("create", "update", "status_change", "house_rules", name="actiontype")


def upgrade() -> None:
    # --- users ---
    op.create_table(
        "users",
        sa.Column("user_id", sa.String(36), primary_key=True),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=True, unique=True),
        sa.Column("avatar_url", sa.String(500), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- game_nights ---
    op.create_table(
        "game_nights",
        sa.Column("event_id", sa.String(36), primary_key=True),
        sa.Column("host_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("date", sa.Date, nullable=False),
        sa.Column("start_time", sa.Time, nullable=True),
        sa.Column("end_time", sa.Time, nullable=True),
        sa.Column("timezone", sa.String(50), nullable=False, server_default="UTC"),
        sa.Column("location", sa.String(500), nullable=True),
        sa.Column("vibe", vibe, nullable=False),
        sa.Column("theme", sa.String(200), nullable=True),
        sa.Column("house_rules", sa.Text, nullable=True),
        sa.Column("max_guests", sa.Integer, nullable=True),
        sa.Column("status", game_night_status, nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- guests ---
    op.create_table(
        "guests",
        sa.Column("guest_id", sa.String(36), primary_key=True),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("game_nights.event_id"), nullable=False),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=True),
        sa.Column("guest_name", sa.String(100), nullable=True),
        sa.Column("guest_email", sa.String(255), nullable=True),
        sa.Column("status", guest_status, nullable=False),
        sa.Column("role", guest_role, nullable=False),
        sa.Column("bringing", sa.String(200), nullable=True),
        sa.Column("invite_token", sa.String(64), nullable=False, unique=True),
        sa.Column("invite_sent_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("invite_method", sa.String(20), nullable=True),
        sa.Column("responded_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("event_id", "user_id", name="uq_guest_event_user"),
        sa.UniqueConstraint("event_id", "guest_email", name="uq_guest_event_email"),
    )
    op.create_index("ix_guests_event_id", "guests", ["event_id"])

    # --- lineup_entries ---
    op.create_table(
        "lineup_entries",
        sa.Column("entry_id", sa.String(36), primary_key=True),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("game_nights.event_id"), nullable=False),
        sa.Column("game_ref", sa.String(100), nullable=True),
        sa.Column("game_title", sa.String(200), nullable=True),
        sa.Column("custom_name", sa.String(200), nullable=True),
        sa.Column("status", lineup_status, nullable=False),
        sa.Column("play_order", sa.Integer, nullable=False, server_default="0"),
        sa.Column("estimated_minutes", sa.Integer, nullable=True),
        sa.Column("winner_name", sa.String(100), nullable=True),
        sa.Column("chaos_level", sa.SmallInteger, nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_lineup_entries_event_id", "lineup_entries", ["event_id"])

    # --- votes ---
    op.create_table(
        "votes",
        sa.Column("vote_id", sa.String(36), primary_key=True),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("game_nights.event_id"), nullable=False),
        sa.Column(
            "entry_id", sa.String(36),
            sa.ForeignKey("lineup_entries.entry_id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("guest_id", sa.String(36), sa.ForeignKey("guests.guest_id"), nullable=False),
        sa.Column("value", sa.SmallInteger, nullable=False, server_default="0"),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("entry_id", "guest_id", name="uq_vote_entry_guest"),
        sa.CheckConstraint("value IN (-1, 0, 1)", name="ck_vote_value"),
    )
    op.create_index("ix_votes_event_id", "votes", ["event_id"])

    # --- moments ---
    op.create_table(
        "moments",
        sa.Column("moment_id", sa.String(36), primary_key=True),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("game_nights.event_id"), nullable=False),
        sa.Column("type", moment_type, nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("created_by_id", sa.String(36), sa.ForeignKey("guests.guest_id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_moments_event_id", "moments", ["event_id"])

    # --- chat_messages ---
    op.create_table(
        "chat_messages",
        sa.Column("seq", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("message_id", sa.String(36), nullable=False, unique=True),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("game_nights.event_id"), nullable=False),
        sa.Column("author_id", sa.String(36), sa.ForeignKey("guests.guest_id"), nullable=False),
        sa.Column("author_name", sa.String(100), nullable=False),
        sa.Column("author_avatar", sa.String(500), nullable=True),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("is_edited", sa.Boolean, nullable=False, server_default=sa.false()),
        sqlite_autoincrement=True,
    )
    op.create_index(
        "ix_chat_messages_event_order", "chat_messages", ["event_id", "created_at", "message_id"]
    )
    op.create_index("ix_chat_messages_event_seq", "chat_messages", ["event_id", "seq"])

    # --- chaos_sessions ---
    op.create_table(
        "chaos_sessions",
        sa.Column("session_id", sa.String(36), primary_key=True),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("game_nights.event_id"), nullable=False, unique=True),
        sa.Column("room_code", sa.String(6), nullable=False, unique=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- event_mutations ---
    op.create_table(
        "event_mutations",
        sa.Column("mutation_id", sa.String(36), primary_key=True),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("game_nights.event_id"), nullable=False),
        sa.Column("actor_user_id", sa.String(36), sa.ForeignKey("users.user_id"), nullable=False),
        sa.Column("action_type", action_type, nullable=False),
        sa.Column("before_snapshot", sa.JSON, nullable=True),
        sa.Column("after_snapshot", sa.JSON, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("event_mutations")
    op.drop_table("chaos_sessions")
    op.drop_table("chat_messages")
    op.drop_table("moments")
    op.drop_table("votes")
    op.drop_table("lineup_entries")
    op.drop_table("guests")
    op.drop_table("game_nights")
    op.drop_table("users")
    bind = op.get_bind()
    for enum_type in (action_type, moment_type, lineup_status, guest_role, guest_status, vibe, game_night_status):
        enum_type.drop(bind, checkfirst=True)
