"""
Travel Journal Backend — Request Pipeline Dependencies
========================================================

What:  FastAPI dependencies that assemble each request's pipeline.
Why:   Authentication runs as its own stage in front of the route, and each
       service receives its collaborators explicitly, so any stage can be
       swapped via app.dependency_overrides in tests.

Pipeline for a protected route:
    Authorization header
        → bearer_scheme            (extract "Bearer <token>", or None)
        → get_current_user_id      (TokenService.validate → owner UUID, or AuthError)
        → get_travel_blog_service  (TravelBlogService(session, assets))
        → route handler            (validate body, delegate, wrap envelope)

Usage:
    @router.get("/get-all-blogs")
    async def list_blogs(
        owner_id: CurrentUserId,
        blogs: TravelBlogServiceDep,
    ): ...
"""

import uuid
from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.exceptions import AuthError
from app.services.asset_service import AssetService, asset_service
from app.services.credential_service import CredentialService
from app.services.token_service import TokenService, token_service
from app.services.travel_blog_service import TravelBlogService

# auto_error=False: a missing header must become our AuthError envelope
bearer_scheme = HTTPBearer(auto_error=False)


def get_token_service() -> TokenService:
    return token_service


def get_asset_service() -> AssetService:
    return asset_service


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> uuid.UUID:
    """
    Authentication stage: resolve the bearer token to the caller's user id.

    Raises:
        AuthError: header missing, not a Bearer scheme, or token invalid
    """
    if credentials is None:
        raise AuthError("Authentication required")
    return tokens.validate(credentials.credentials)


def get_credential_service(
    db: AsyncSession = Depends(get_db_session),
) -> CredentialService:
    return CredentialService(db)


def get_travel_blog_service(
    db: AsyncSession = Depends(get_db_session),
    assets: AssetService = Depends(get_asset_service),
) -> TravelBlogService:
    return TravelBlogService(db, assets)


# Type aliases for route signatures
CurrentUserId = Annotated[uuid.UUID, Depends(get_current_user_id)]
TokenServiceDep = Annotated[TokenService, Depends(get_token_service)]
AssetServiceDep = Annotated[AssetService, Depends(get_asset_service)]
CredentialServiceDep = Annotated[CredentialService, Depends(get_credential_service)]
TravelBlogServiceDep = Annotated[TravelBlogService, Depends(get_travel_blog_service)]
