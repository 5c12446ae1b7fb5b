from __future__ import annotations

import time
from typing import Any

from jose import JWTError, jwt

ALGORITHM = "HS256"


class TokenError(ValueError):
    pass


def mint_token(*, user_id: str, secret: str, ttl_seconds: int) -> str:
    now = int(time.time())
    claims: dict[str, Any] = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + int(ttl_seconds),
    }
    return jwt.encode(claims, secret, algorithm=ALGORITHM)


def verify_token(token: str, *, secret: str) -> str:
    """Return the `sub` claim of a valid, unexpired token."""
    if not token:
        raise TokenError("missing token")
    try:
        # jwt.decode verifies exp.
        claims = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except JWTError as e:
        raise TokenError(str(e)) from e

    sub = str(claims.get("sub") or "")
    if not sub:
        raise TokenError("missing sub")
    return sub
