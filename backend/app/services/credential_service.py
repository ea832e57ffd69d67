"""
Travel Journal Backend — Credential Service
=============================================

What:  Registration, password verification, and profile lookup for users.
Why:   Keeps the password hash inside one module; everything it returns to
       routes is either a UserProfile or (for token issuance only) the ORM row.
How:   passlib CryptContext for salted one-way hashing; an AsyncSession passed
       in by the caller for storage.
Who:   Constructed per request by app.dependencies.get_credential_service.

Hashing:
    pbkdf2_sha256 with a random per-hash salt. The stored string carries the
    scheme, rounds and salt, so verify() needs nothing else and the scheme
    can be rotated through the CryptContext later.
"""

import logging
import uuid
from typing import Optional

from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import AuthError, ConflictError, DatabaseError, NotFoundError, ValidationError
from app.models.user import User
from app.schemas.user import UserProfile

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


class CredentialService:
    """
    Owns user records.

    Responsibilities:
        - register(): create a user with a hashed password
        - verify(): check an email/password pair at login
        - get_by_id(): profile lookup for an authenticated caller
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def register(
        self,
        full_name: Optional[str],
        email: Optional[str],
        password: Optional[str],
    ) -> UserProfile:
        """
        Create a new account.

        Raises:
            ValidationError: any of the three fields missing or empty
            ConflictError: email already registered
            DatabaseError: the store failed
        """
        if not full_name or not email or not password:
            raise ValidationError("All fields are required")

        try:
            existing = await self._find_by_email(email)
            if existing is not None:
                raise ConflictError("User already exists", context={"email": email})

            user = User(
                full_name=full_name,
                email=email,
                password_hash=hash_password(password),
            )
            self.session.add(user)
            await self.session.flush()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same email
            await self.session.rollback()
            raise ConflictError("User already exists", context={"email": email})
        except SQLAlchemyError as e:
            logger.error("Database error registering user: %s", e, exc_info=True)
            raise DatabaseError(
                message="Could not create the account. Please try again.",
                context={"error_type": type(e).__name__},
            ) from e

        logger.info("Registered user %s", user.id)
        return UserProfile.model_validate(user)

    async def verify(self, email: Optional[str], password: Optional[str]) -> User:
        """
        Check credentials and return the full user record for token issuance.

        Raises:
            ValidationError: email or password missing
            NotFoundError: no user with that email
            AuthError: password does not match
        """
        if not email or not password:
            raise ValidationError("Email and Password are required")

        try:
            user = await self._find_by_email(email)
        except SQLAlchemyError as e:
            logger.error("Database error during login: %s", e, exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__}) from e

        if user is None:
            raise NotFoundError(resource="user", message="User not found")

        if not verify_password(password, user.password_hash):
            logger.info("Failed login for user %s", user.id)
            raise AuthError("Invalid Credentials")

        return user

    async def get_by_id(self, user_id: uuid.UUID) -> UserProfile:
        """
        Raises:
            NotFoundError: no such user
        """
        try:
            user = await self.session.get(User, user_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching user %s: %s", user_id, e)
            raise DatabaseError(context={"user_id": str(user_id)}) from e

        if user is None:
            raise NotFoundError(resource="user", resource_id=str(user_id))
        return UserProfile.model_validate(user)

    async def _find_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()
