"""
auth/tokens.py -- JWT issuing/verification and password hashing.

Security design decisions:
  JWT: python-jose with HS256. Tokens carry {userId, iat, exp} and are signed
       with the configured SECRET_KEY. decode_access_token() raises
       InvalidToken on any failure -- the auth dependency turns that into a 401.

  Passwords: bcrypt directly (no passlib wrapper). The work factor comes from
       Settings.bcrypt_rounds (default 10). bcrypt only looks at the first 72
       bytes of a password; the API layer rejects longer inputs so nothing is
       silently truncated.

  SECRET_KEY: passed in by the caller (api/main.py keeps the Settings instance
       on app.state). Nothing here reads configuration on its own.

Layer rule: no imports from api/ or crm/.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt

logger = logging.getLogger("clientdesk.auth")

ALGORITHM = "HS256"
DEFAULT_EXPIRE_SECONDS = 3600
DEFAULT_BCRYPT_ROUNDS = 10

# bcrypt ignores everything past this many bytes of input.
MAX_PASSWORD_BYTES = 72


class InvalidToken(Exception):
    """Raised when a bearer token is malformed, tampered with, or expired."""


# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------


def hash_password(plain: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    """Return a bcrypt hash of the given plaintext password with a fresh salt."""
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash.

    bcrypt.checkpw compares in constant time. A malformed stored hash raises
    ValueError, which propagates: that is a data fault, not a wrong password.
    """
    return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))


# ---------------------------------------------------------------------------
# JWT encode / decode
# ---------------------------------------------------------------------------


def create_access_token(
    user_id: int,
    secret_key: str,
    expire_seconds: int = DEFAULT_EXPIRE_SECONDS,
    now: datetime | None = None,
) -> str:
    """Encode a signed JWT identifying user_id.

    Args:
        user_id:        Numeric user ID stored in the DB.
        secret_key:     HMAC signing key (Settings.secret_key).
        expire_seconds: Lifetime of the token from issuance.
        now:            Issuance time. Defaults to the current UTC time;
                        tests pass a past value to mint expired tokens.
    """
    issued_at = now or datetime.now(timezone.utc)
    expire = issued_at + timedelta(seconds=expire_seconds)
    payload = {
        "userId": user_id,
        "iat": int(issued_at.timestamp()),
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(payload, secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str, secret_key: str) -> int:
    """Verify a JWT and return the userId it carries.

    Raises InvalidToken if the signature does not match, the token is
    malformed or expired, or the payload has no integer userId.
    """
    try:
        payload = jwt.decode(token, secret_key, algorithms=[ALGORITHM])
    except JWTError as exc:
        raise InvalidToken(str(exc)) from exc
    user_id = payload.get("userId")
    # bool is an int subclass; a forged {"userId": true} must not pass.
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        raise InvalidToken("token payload has no integer userId")
    return user_id
