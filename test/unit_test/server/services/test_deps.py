"""Unit tests for the FastAPI dependency providers."""

from unittest.mock import AsyncMock

import pytest
from fastapi.security import HTTPAuthorizationCredentials

from parley.core.database.repositories import SqlRepoBundle
from parley.core.errors import AuthenticationError
from parley.core.security import create_access_token
from parley.server.services.deps import (
    get_auth_service,
    get_chat_service,
    get_contact_service,
    get_current_user_id,
    get_group_service,
    get_media_service,
    get_message_service,
    get_repos,
    get_user_service,
)
from parley.server.services.media import MediaService
from parley.server.services.messages import MessageService

pytestmark = pytest.mark.asyncio


async def test_current_user_from_bearer_token():
    token = create_access_token("user-7", "alice")

    user_id = await get_current_user_id(HTTPAuthorizationCredentials(scheme="Bearer", credentials=token))

    assert user_id == "user-7"


async def test_current_user_requires_credentials():
    with pytest.raises(AuthenticationError, match="Missing bearer token"):
        await get_current_user_id(None)


async def test_current_user_rejects_bad_token():
    with pytest.raises(AuthenticationError):
        await get_current_user_id(HTTPAuthorizationCredentials(scheme="Bearer", credentials="garbage"))


async def test_service_providers_share_the_bundle():
    repos = get_repos(AsyncMock())

    assert isinstance(repos, SqlRepoBundle)
    for provider in (get_auth_service, get_user_service, get_contact_service, get_chat_service, get_group_service):
        assert provider(repos).repos is repos

    messages = get_message_service(repos)
    media = get_media_service(messages)
    assert isinstance(messages, MessageService)
    assert isinstance(media, MediaService)
    assert media.messages is messages
