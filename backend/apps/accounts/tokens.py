"""
Session token service.

Issues and validates the HMAC-signed JWTs handed out after a successful
OTP verification. Tokens are stateless: nothing is persisted, and every
protected request re-validates signature and expiry.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

import jwt

from apps.accounts.exceptions import SessionTokenExpiredError, SessionTokenInvalidError
from apps.core.config import AuthConfig, get_auth_config
from apps.core.logging import get_logger

if TYPE_CHECKING:
    from apps.accounts.models import User

logger = get_logger(__name__)

SESSION_TOKEN_TYPE = "session"


@dataclass(frozen=True)
class SessionClaims:
    """Validated contents of a session token."""

    user_id: int
    phone: str
    issued_at: datetime
    expires_at: datetime


def issue_session_token(user: "User", config: AuthConfig | None = None) -> str:
    """
    Create a signed session token bound to a user.

    Args:
        user: The resolved identity
        config: Auth configuration (defaults to the process-wide config)

    Returns:
        Encoded JWT string
    """
    config = config or get_auth_config()
    now = datetime.now(timezone.utc)

    payload: dict[str, Any] = {
        "sub": str(user.pk),
        "user_id": user.pk,
        "phone": user.phone,
        "type": SESSION_TOKEN_TYPE,
        "iat": now,
        "exp": now + config.token_ttl,
    }

    token = jwt.encode(payload, config.jwt_secret, algorithm=config.jwt_algorithm)

    logger.info("session_token_issued", user_id=user.pk)

    return token


def decode_session_token(token: str, config: AuthConfig | None = None) -> SessionClaims:
    """
    Validate a session token and return its claims.

    Raises:
        SessionTokenExpiredError: If the token is past its expiry
        SessionTokenInvalidError: If the signature, structure or type is wrong
    """
    config = config or get_auth_config()

    try:
        payload = jwt.decode(
            token,
            config.jwt_secret,
            algorithms=[config.jwt_algorithm],
            options={"require": ["exp", "iat", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        logger.info("session_token_expired")
        raise SessionTokenExpiredError("Session token has expired.") from None
    except jwt.InvalidTokenError as e:
        logger.warning("session_token_invalid", error=str(e))
        raise SessionTokenInvalidError("Invalid session token.") from None

    if payload.get("type") != SESSION_TOKEN_TYPE:
        raise SessionTokenInvalidError("Invalid token type.")

    try:
        user_id = int(payload["user_id"])
    except (KeyError, TypeError, ValueError):
        raise SessionTokenInvalidError("Invalid session token.") from None

    return SessionClaims(
        user_id=user_id,
        phone=str(payload.get("phone", "")),
        issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )
