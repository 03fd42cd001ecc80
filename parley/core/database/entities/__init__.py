"""
Database entity models.

This package contains all database entity models organized by business domain
and table relationships.

Modules:
- users: Registered users and contact lists
- chats: One-to-one chats
- groups: Group conversations and memberships
- messages: Messages, reactions and read receipts
"""

from . import chats, groups, messages, users
from .chats import Chat
from .groups import Group, GroupMember, GroupRole
from .messages import Message, MessageReaction, MessageRead, MessageType
from .users import Contact, User

__all__ = [
    "Chat",
    "Contact",
    "Group",
    "GroupMember",
    "GroupRole",
    "Message",
    "MessageReaction",
    "MessageRead",
    "MessageType",
    "User",
    "chats",
    "groups",
    "messages",
    "users",
]
