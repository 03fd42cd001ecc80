"""
Repository layer.

Each repository wraps the CRUD calls and domain queries for one entity on
top of a shared async session.
"""

from .base import BaseRepository, QueryBuilder
from .bundle import SqlRepoBundle, build_sql_repos_from_session
from .chats import ChatRepository
from .groups import GroupMemberRepository, GroupRepository
from .messages import MessageReactionRepository, MessageReadRepository, MessageRepository
from .users import ContactRepository, UserRepository

__all__ = [
    "BaseRepository",
    "ChatRepository",
    "ContactRepository",
    "GroupMemberRepository",
    "GroupRepository",
    "MessageReactionRepository",
    "MessageReadRepository",
    "MessageRepository",
    "QueryBuilder",
    "SqlRepoBundle",
    "UserRepository",
    "build_sql_repos_from_session",
]
