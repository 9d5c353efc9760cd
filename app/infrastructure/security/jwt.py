"""JWT verification for the identity collaborator.

Tokens are issued by the bank's identity service; create_access_token exists
for operators and tests. Claims: sub (employee code), fullname, role, dept,
branch_code, exp.
"""

from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import JWTError, jwt

from app.core.config import get_settings


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """Create a JWT access token with the given claims.

    Args:
        data: Claims to encode (sub, fullname, role, dept, branch_code).
        expires_delta: Optional TTL; else uses settings.access_token_expire_minutes.

    Returns:
        Encoded JWT string.

    Raises:
        ValueError: If SECRET_KEY is not configured.
    """
    settings = get_settings()
    secret = settings.secret_key.get_secret_value()
    if not secret:
        raise ValueError("SECRET_KEY is not configured")
    to_encode = data.copy()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    to_encode["exp"] = datetime.now(UTC) + expires_delta
    encoded = jwt.encode(to_encode, secret, algorithm=settings.algorithm)
    return cast(str, encoded)


def verify_token(token: str) -> dict[str, Any]:
    """Verify and decode a JWT. Returns the payload.

    Enforces presence of exp and sub. Fails closed when no secret is set.

    Raises:
        ValueError: If token is invalid, expired, missing required claims,
            or SECRET_KEY is not configured.
    """
    settings = get_settings()
    secret = settings.secret_key.get_secret_value()
    if not secret:
        raise ValueError("SECRET_KEY is not configured")
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[settings.algorithm],
            options={"require_exp": True, "require_sub": True},
        )
    except JWTError as e:
        raise ValueError(f"Invalid token: {e!s}") from e
    if not payload.get("sub"):
        raise ValueError("Token missing required claim: sub")
    return payload
