"""Version 1 of the HTTP API, mounted under ``/api/v1``."""

from fastapi import APIRouter

from . import auth, chats, groups, media, messages, users

api_router = APIRouter()
api_router.include_router(auth.router, prefix="/auth")
api_router.include_router(users.router, prefix="/users")
api_router.include_router(chats.router, prefix="/chats")
api_router.include_router(groups.router, prefix="/groups")
api_router.include_router(messages.router, prefix="/messages")
api_router.include_router(media.router, prefix="/media")
