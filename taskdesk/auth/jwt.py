"""Bearer token issue and verification for taskdesk principals."""

import logging
import os
import jwt
from datetime import datetime, timedelta
from typing import Optional, Dict
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me-in-production")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRATION_HOURS = int(os.getenv("JWT_EXPIRATION_HOURS", "24"))

# Claims a token must carry to identify a principal
REQUIRED_CLAIMS = ["sub", "exp"]


def create_access_token(user_id: str, expires_in: Optional[timedelta] = None) -> str:
    """Issue a signed token whose subject is the principal id."""
    issued_at = datetime.utcnow()
    lifetime = expires_in if expires_in is not None else timedelta(hours=JWT_EXPIRATION_HOURS)
    claims = {"sub": user_id, "iat": issued_at, "exp": issued_at + lifetime}
    return jwt.encode(claims, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[Dict]:
    """Verify signature, expiry and required claims.

    Returns None for any rejected token; the reason is only logged, so
    callers cannot tell an expired token from a forged one.
    """
    try:
        return jwt.decode(
            token,
            JWT_SECRET_KEY,
            algorithms=[JWT_ALGORITHM],
            options={"require": REQUIRED_CLAIMS},
        )
    except jwt.ExpiredSignatureError:
        logger.debug("Rejected token: expired")
    except jwt.MissingRequiredClaimError as e:
        logger.debug(f"Rejected token: missing claim {e.claim}")
    except jwt.InvalidTokenError as e:
        logger.debug(f"Rejected token: {type(e).__name__}: {e}")
    return None


def get_user_id_from_token(token: str) -> Optional[str]:
    payload = decode_access_token(token)
    return payload["sub"] if payload else None
