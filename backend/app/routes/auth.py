"""
Travel Journal Backend — Account Route Handlers
=================================================

What:  POST /create-account, POST /login, GET /get-user.
How:   Parse the body, delegate to CredentialService, issue a token with
       TokenService, wrap the result in the response envelope.

Registration signs the new user in immediately: the response carries a
token exactly like a login does.
"""

import logging

from fastapi import APIRouter

from app.dependencies import CredentialServiceDep, CurrentUserId, TokenServiceDep
from app.exceptions import AuthError, NotFoundError
from app.schemas.common import ErrorResponse
from app.schemas.user import (
    AuthResponse,
    CreateAccountRequest,
    LoginRequest,
    UserPublic,
    UserResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Account"])


@router.post(
    "/create-account",
    status_code=201,
    response_model=AuthResponse,
    responses={
        400: {"description": "Missing fields or email already registered", "model": ErrorResponse},
    },
    summary="Register a new user",
)
async def create_account(
    body: CreateAccountRequest,
    credentials: CredentialServiceDep,
    tokens: TokenServiceDep,
) -> AuthResponse:
    profile = await credentials.register(
        full_name=body.full_name,
        email=body.email,
        password=body.password,
    )
    return AuthResponse(
        message="Registration Successful",
        user=UserPublic(full_name=profile.full_name, email=profile.email),
        access_token=tokens.issue(profile.id),
    )


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={
        400: {"description": "Email or password missing", "model": ErrorResponse},
        401: {"description": "Wrong password", "model": ErrorResponse},
        404: {"description": "No user with that email", "model": ErrorResponse},
    },
    summary="Authenticate and receive a session token",
)
async def login(
    body: LoginRequest,
    credentials: CredentialServiceDep,
    tokens: TokenServiceDep,
) -> AuthResponse:
    user = await credentials.verify(email=body.email, password=body.password)
    return AuthResponse(
        message="Login Successful",
        user=UserPublic(full_name=user.full_name, email=user.email),
        access_token=tokens.issue(user.id),
    )


@router.get(
    "/get-user",
    response_model=UserResponse,
    responses={401: {"description": "Not authenticated", "model": ErrorResponse}},
    summary="Fetch the caller's profile",
)
async def get_user(
    owner_id: CurrentUserId,
    credentials: CredentialServiceDep,
) -> UserResponse:
    try:
        profile = await credentials.get_by_id(owner_id)
    except NotFoundError:
        # Valid signature, but the account behind it is gone
        raise AuthError("User no longer exists")
    return UserResponse(user=profile)
