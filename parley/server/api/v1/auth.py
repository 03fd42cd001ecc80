"""
Authentication Endpoints.

Account registration and login. These are the only API routes that do not
require a bearer token.
"""

from __future__ import annotations

from fastapi import APIRouter, status

from parley.core.logging_config import get_logger
from parley.core.models.io import AuthResponse, LoginRequest, RegisterRequest
from parley.server.services.deps import AuthServiceDep

logger = get_logger(__name__)

router = APIRouter(tags=["auth"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register Account",
    description="Create a new account and receive an access token for it.",
    response_description="The access token and the created user.",
    responses={
        201: {"description": "Account created"},
        409: {"description": "Email or username already in use"},
        422: {"description": "Invalid registration data"},
    },
)
async def register(request: RegisterRequest, service: AuthServiceDep) -> AuthResponse:
    """
    Register a new account.

    - **username**: Unique public handle, 3 to 50 characters.
    - **email**: Unique login email.
    - **password**: At least 6 characters.
    """
    return await service.register(request)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Log In",
    description="Exchange email and password for an access token. The user is marked online.",
    response_description="The access token and the logged-in user.",
    responses={
        200: {"description": "Credentials accepted"},
        401: {"description": "Unknown email or wrong password"},
    },
)
async def login(request: LoginRequest, service: AuthServiceDep) -> AuthResponse:
    """
    Log in with email and password.

    - **email**: Login email.
    - **password**: Account password.
    """
    return await service.login(request)
