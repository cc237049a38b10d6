"""JWT authentication provider implementation.

Tokens are issued by the FitXcel auth service and signed with a shared
secret. Payload structure:
    {
        "id": "user-id",
        "email": "user@example.com",
        "exp": 1234567890
    }

A standard ``sub`` claim is accepted in place of ``id``.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt

from core.config import settings
from domain.entities.profile import MAX_USER_ID_LENGTH
from infrastructure.auth.provider import TokenUser

logger = logging.getLogger(__name__)


class JWTAuthProvider:
    """JWT-based authentication provider (shared-secret signatures)."""

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate a JWT token and extract user info.

        Args:
            token: The JWT to validate

        Returns:
            TokenUser if valid, None if invalid or expired
        """
        return self.decode_user(token)

    def decode_user(self, token: str) -> Optional[TokenUser]:
        """Synchronous token check, usable where no event loop is awaited."""
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"verify_aud": False},
            )
        except ExpiredSignatureError:
            logger.info("Rejected expired token")
            return None
        except JWTError:
            return None

        user_id = payload.get("sub") or payload.get("id")
        if not user_id:
            return None
        user_id = str(user_id)
        if len(user_id) > MAX_USER_ID_LENGTH:
            logger.info("Rejected token with oversized user id")
            return None

        return TokenUser(id=user_id, email=payload.get("email"))

    def create_token(self, user: TokenUser) -> str:
        """
        Create a JWT token for a user (used for tests and local tooling).

        Args:
            user: The user to create a token for

        Returns:
            The generated JWT string
        """
        expire = datetime.utcnow() + timedelta(minutes=self._expire_minutes)

        payload: dict = {
            "sub": user.id,
            "id": user.id,
            "email": user.email,
            "exp": expire,
        }

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
