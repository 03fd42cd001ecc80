"""Initial schema for Parley

Revision ID: 20261018_000000
Revises: None
Create Date: 2026-10-18 00:00:00.000000

This is the initial migration that creates all tables of the Parley
messaging service:
- users and contacts
- one-to-one chats
- groups and group members
- messages, message reactions and read receipts

Revision format: YYYYMMDD_HHMMSS_description

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20261018_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# SQLAlchemy persists enum member names
GROUP_ROLE = sa.Enum("MEMBER", "ADMIN", name="grouprole")
MESSAGE_TYPE = sa.Enum("TEXT", "IMAGE", "VIDEO", "AUDIO", "DOCUMENT", "LOCATION", name="messagetype")


def upgrade() -> None:
    """Create all tables."""

    op.create_table(
        "users",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("profile_picture_url", sa.String(1024), nullable=True),
        sa.Column("status", sa.String(255), nullable=True),
        sa.Column("is_online", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("last_seen", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "contacts",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("contact_user_id", sa.String(64), nullable=False),
        sa.Column("display_name", sa.String(100), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["contact_user_id"], ["users.id"]),
        sa.UniqueConstraint("user_id", "contact_user_id", name="uq_contacts_user_contact"),
        sa.Index("ix_contacts_user_id", "user_id"),
    )

    op.create_table(
        "chats",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("user1_id", sa.String(64), nullable=False),
        sa.Column("user2_id", sa.String(64), nullable=False),
        sa.Column("last_message_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user1_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["user2_id"], ["users.id"]),
        sa.UniqueConstraint("user1_id", "user2_id", name="uq_chats_user_pair"),
        sa.Index("ix_chats_user1_id", "user1_id"),
        sa.Index("ix_chats_user2_id", "user2_id"),
        sa.Index("ix_chats_last_message_at", "last_message_at"),
    )

    op.create_table(
        "chat_groups",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("profile_picture_url", sa.String(1024), nullable=True),
        sa.Column("created_by_id", sa.String(64), nullable=False),
        sa.Column("last_message_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["created_by_id"], ["users.id"]),
        sa.Index("ix_chat_groups_last_message_at", "last_message_at"),
    )

    op.create_table(
        "group_members",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("group_id", sa.String(64), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("role", GROUP_ROLE, nullable=False),
        sa.Column("joined_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["group_id"], ["chat_groups.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.UniqueConstraint("group_id", "user_id", name="uq_group_members_group_user"),
        sa.Index("ix_group_members_group_id", "group_id"),
        sa.Index("ix_group_members_user_id", "user_id"),
    )

    op.create_table(
        "messages",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("chat_id", sa.String(64), nullable=True),
        sa.Column("group_id", sa.String(64), nullable=True),
        sa.Column("sender_id", sa.String(64), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("type", MESSAGE_TYPE, nullable=False),
        sa.Column("media_url", sa.String(1024), nullable=True),
        sa.Column("media_type", sa.String(255), nullable=True),
        sa.Column("media_file_name", sa.String(255), nullable=True),
        sa.Column("media_size", sa.BigInteger(), nullable=True),
        sa.Column("reply_to_message_id", sa.String(64), nullable=True),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["chat_id"], ["chats.id"]),
        sa.ForeignKeyConstraint(["group_id"], ["chat_groups.id"]),
        sa.ForeignKeyConstraint(["sender_id"], ["users.id"]),
        sa.Index("ix_messages_chat_id", "chat_id"),
        sa.Index("ix_messages_group_id", "group_id"),
        sa.Index("ix_messages_sender_id", "sender_id"),
        sa.Index("ix_messages_created_at", "created_at"),
    )

    op.create_table(
        "message_reactions",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("message_id", sa.String(64), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("emoji", sa.String(32), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["message_id"], ["messages.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.UniqueConstraint("message_id", "user_id", "emoji", name="uq_message_reactions_message_user_emoji"),
        sa.Index("ix_message_reactions_message_id", "message_id"),
    )

    op.create_table(
        "message_reads",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("message_id", sa.String(64), nullable=False),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("read_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["message_id"], ["messages.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.UniqueConstraint("message_id", "user_id", name="uq_message_reads_message_user"),
        sa.Index("ix_message_reads_message_id", "message_id"),
        sa.Index("ix_message_reads_user_id", "user_id"),
    )


def downgrade() -> None:
    """Drop all tables created in upgrade."""
    op.drop_table("message_reads")
    op.drop_table("message_reactions")
    op.drop_table("messages")
    op.drop_table("group_members")
    op.drop_table("chat_groups")
    op.drop_table("chats")
    op.drop_table("contacts")
    op.drop_table("users")

    # Drop the enum types
    op.execute("DROP TYPE IF EXISTS messagetype")
    op.execute("DROP TYPE IF EXISTS grouprole")
