"""
Service Dependencies.

Provides request-scoped service instances and the authenticated caller for
API endpoints.
"""

from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from parley.core.database import get_session
from parley.core.database.repositories import SqlRepoBundle, build_sql_repos_from_session
from parley.core.errors import AuthenticationError
from parley.core.security import decode_access_token
from parley.server.core.config import get_settings
from parley.server.hub.notifier import HubNotifier, get_hub_notifier

from .auth import AuthService
from .chats import ChatService
from .contacts import ContactService
from .groups import GroupService
from .media import MediaService
from .messages import MessageService
from .users import UserService

bearer_scheme = HTTPBearer(auto_error=False, description="JWT issued by /auth/register or /auth/login")


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """Resolve the caller from the ``Authorization: Bearer`` header.

    Raises:
        AuthenticationError: If the header is missing or the token is invalid.
    """
    if credentials is None:
        raise AuthenticationError("Missing bearer token")
    return decode_access_token(credentials.credentials).user_id


def get_repos(session: Annotated[AsyncSession, Depends(get_session)]) -> SqlRepoBundle:
    return build_sql_repos_from_session(session=session)


CurrentUserIdDep = Annotated[str, Depends(get_current_user_id)]
ReposDep = Annotated[SqlRepoBundle, Depends(get_repos)]
NotifierDep = Annotated[HubNotifier, Depends(get_hub_notifier)]


def get_auth_service(repos: ReposDep) -> AuthService:
    return AuthService(repos, get_settings().jwt)


def get_user_service(repos: ReposDep) -> UserService:
    return UserService(repos)


def get_contact_service(repos: ReposDep) -> ContactService:
    return ContactService(repos)


def get_chat_service(repos: ReposDep) -> ChatService:
    return ChatService(repos)


def get_group_service(repos: ReposDep) -> GroupService:
    return GroupService(repos)


def get_message_service(repos: ReposDep) -> MessageService:
    return MessageService(repos)


def get_media_service(messages: Annotated[MessageService, Depends(get_message_service)]) -> MediaService:
    return MediaService(messages, get_settings().media)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
ContactServiceDep = Annotated[ContactService, Depends(get_contact_service)]
ChatServiceDep = Annotated[ChatService, Depends(get_chat_service)]
GroupServiceDep = Annotated[GroupService, Depends(get_group_service)]
MessageServiceDep = Annotated[MessageService, Depends(get_message_service)]
MediaServiceDep = Annotated[MediaService, Depends(get_media_service)]
