"""
Repository bundle for dependency injection.

This module provides a convenience bundle of all repository instances
for easy dependency injection in services and application components.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from .chats import ChatRepository
from .groups import GroupMemberRepository, GroupRepository
from .messages import MessageReactionRepository, MessageReadRepository, MessageRepository
from .users import ContactRepository, UserRepository


@dataclass(frozen=True)
class SqlRepoBundle:
    """Convenience bundle of all SQL repositories sharing one session."""

    users: UserRepository
    contacts: ContactRepository
    chats: ChatRepository
    groups: GroupRepository
    group_members: GroupMemberRepository
    messages: MessageRepository
    reactions: MessageReactionRepository
    reads: MessageReadRepository


def build_sql_repos_from_session(*, session: AsyncSession) -> SqlRepoBundle:
    """Build a SqlRepoBundle from an existing session.

    Args:
        session: Existing async session

    Returns:
        Bundle containing all repository instances
    """
    return SqlRepoBundle(
        users=UserRepository(session),
        contacts=ContactRepository(session),
        chats=ChatRepository(session),
        groups=GroupRepository(session),
        group_members=GroupMemberRepository(session),
        messages=MessageRepository(session),
        reactions=MessageReactionRepository(session),
        reads=MessageReadRepository(session),
    )
