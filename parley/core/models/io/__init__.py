"""
I/O models for API requests and responses.

This package contains Pydantic-based I/O schemas that define the contract
between API endpoints, hub frames and clients. These models are separate
from database entities to allow independent evolution of API contracts.

Modules:
- auth: Register/login requests and token responses
- users: User profile models
- chats: One-to-one chat listings
- groups: Group and membership models
- messages: Message and reaction models
"""

from .auth import AuthResponse, LoginRequest, RegisterRequest
from .chats import ChatRead
from .groups import GroupCreate, GroupMemberRead, GroupMembersAdd, GroupRead, GroupRoleUpdate
from .messages import MessageCreate, MessageRead, ReactionCreate, ReactionRead
from .users import UserProfileUpdate, UserRead, UserStatusUpdate

__all__ = [
    "AuthResponse",
    "ChatRead",
    "GroupCreate",
    "GroupMemberRead",
    "GroupMembersAdd",
    "GroupRead",
    "GroupRoleUpdate",
    "LoginRequest",
    "MessageCreate",
    "MessageRead",
    "ReactionCreate",
    "ReactionRead",
    "RegisterRequest",
    "UserProfileUpdate",
    "UserRead",
    "UserStatusUpdate",
]
