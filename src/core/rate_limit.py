"""Rate limiting configuration using slowapi."""

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from core.config import settings
from core.exceptions import ErrorCode
from infrastructure.auth.jwt_provider import JWTAuthProvider

_token_reader = JWTAuthProvider()


def rate_limit_key(request: Request) -> str:
    """Bucket authenticated calls per user, everything else per client address.

    Several phones behind one carrier NAT share an address, so the user is
    the better identity when the token verifies. Unverified tokens fall back
    to the address so a client cannot mint fresh buckets.
    """
    authorization = request.headers.get("Authorization", "")
    if authorization.lower().startswith("bearer "):
        user = _token_reader.decode_user(authorization[7:].strip())
        if user is not None:
            return f"user:{user.id}"
    return get_remote_address(request)


limiter = Limiter(
    key_func=rate_limit_key,
    enabled=settings.rate_limit_enabled,
)


async def rate_limit_exceeded_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle rate limit exceeded errors."""
    detail = exc.detail if isinstance(exc, RateLimitExceeded) else str(exc)
    return JSONResponse(
        status_code=429,
        content={
            "error_code": ErrorCode.RATE_LIMIT_EXCEEDED.value,
            "message": f"Rate limit exceeded: {detail}",
            "details": {
                "retry_after": str(detail),
            },
        },
    )
