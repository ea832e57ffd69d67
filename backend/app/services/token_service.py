"""
Travel Journal Backend — Session Token Service
================================================

What:  Issues and validates signed, time-limited session tokens.
Why:   Sessions are stateless: the token alone proves which user is calling,
       so no session table is needed.
How:   PyJWT, HS256, claims {sub: <user id>, iat, exp}. Expiry is 72 hours
       after issuance by default.
Who:   Issued by the /create-account and /login routes; validated by the
       get_current_user_id dependency in front of every protected route.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from app.config import settings
from app.exceptions import AuthError, ServerError

logger = logging.getLogger(__name__)


class TokenService:
    """
    Stateless JWT issuer/validator bound to one signing secret.

    Every validation failure (missing, malformed, expired, bad signature,
    bad subject) surfaces as the same AuthError type; the reason is only
    logged at DEBUG.
    """

    def __init__(
        self,
        secret: str,
        ttl: timedelta = timedelta(hours=72),
        algorithm: str = "HS256",
    ):
        self.secret = secret
        self.ttl = ttl
        self.algorithm = algorithm

    def issue(self, user_id: uuid.UUID, issued_at: Optional[datetime] = None) -> str:
        """
        Create a token for `user_id`.

        Args:
            user_id: Owner id embedded as the `sub` claim.
            issued_at: Override the issuance time (defaults to now, UTC).
        """
        self._require_secret()
        now = issued_at or datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "iat": now,
            "exp": now + self.ttl,
        }
        try:
            return jwt.encode(payload, self.secret, algorithm=self.algorithm)
        except jwt.InvalidKeyError as e:
            raise self._key_error(e) from e

    def _require_secret(self) -> None:
        if not self.secret:
            raise self._key_error(jwt.InvalidKeyError("ACCESS_TOKEN_SECRET is empty"))

    @staticmethod
    def _key_error(exc: Exception) -> ServerError:
        # A missing or unusable ACCESS_TOKEN_SECRET is an operator problem, not the caller's
        logger.error("Token signing key rejected: %s", exc)
        return ServerError(
            message="Authentication is not configured on the server.",
            context={"error_type": type(exc).__name__},
        )

    def validate(self, token: Optional[str]) -> uuid.UUID:
        """
        Verify signature and expiry and return the embedded user id.

        Raises:
            AuthError: on any problem with the token.
            ServerError: the signing secret is missing or unusable.
        """
        if not token:
            raise AuthError("Authentication required")
        self._require_secret()

        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat", "sub"]},
            )
        except jwt.InvalidKeyError as e:
            raise self._key_error(e) from e
        except jwt.ExpiredSignatureError:
            logger.debug("Rejected expired token")
            raise AuthError("Session has expired. Please log in again.")
        except jwt.InvalidTokenError as e:
            logger.debug("Rejected invalid token: %s", e)
            raise AuthError("Invalid authentication token")

        try:
            return uuid.UUID(claims["sub"])
        except (TypeError, ValueError):
            logger.debug("Rejected token with malformed subject")
            raise AuthError("Invalid authentication token")


# ── Singleton Instance ────────────────────────────────────────────────────
token_service = TokenService(
    secret=settings.access_token_secret,
    ttl=timedelta(hours=settings.access_token_ttl_hours),
    algorithm=settings.jwt_algorithm,
)
