"""
Bearer token handling at the identity boundary.

The identity provider issues HS256 tokens signed with the shared
SECRET_KEY. The only claim the bookstore relies on is "sub", which must
be the user's login; "type" must be "access".

issue_token() lets tooling (seed script, tests) act as the provider.
"""

import logging
from datetime import UTC, datetime, timedelta
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt

from bookstore.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

ALGORITHM = "HS256"
ACCESS_TOKEN_TYPE = "access"


def issue_token(login: str, expires_delta: Optional[timedelta] = None) -> str:
    """Sign an access token whose subject is the given login."""
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    claims = {
        "sub": login,
        "type": ACCESS_TOKEN_TYPE,
        "iat": datetime.now(UTC),
        "exp": datetime.now(UTC) + lifetime,
    }
    return jwt.encode(claims, settings.secret_key, algorithm=ALGORITHM)


def decode_token(token: str) -> Optional[dict]:
    """
    Verify signature and expiry.

    Returns:
        The claims, or None when the token can't be trusted
    """
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        logger.info("Rejected expired bearer token")
    except JWTError as e:
        logger.warning(f"Rejected bearer token: {e}")
    return None


def login_from_token(token: str) -> Optional[str]:
    """The login a valid access token speaks for, or None."""
    claims = decode_token(token)
    if claims is None:
        return None

    if claims.get("type") != ACCESS_TOKEN_TYPE:
        logger.warning(f"Rejected token of type {claims.get('type')!r}")
        return None

    login = claims.get("sub")
    if not isinstance(login, str) or not login:
        logger.warning("Rejected token without a subject login")
        return None

    return login
