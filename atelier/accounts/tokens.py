"""
Bearer tokens — HS256 JWTs carrying the user id in a `uid` claim.
"""

from datetime import datetime, timedelta, UTC

import jwt
from kungfu import Result, Ok, Error

from atelier._types import UserId
from atelier.errors import Errors, ShopError

ALGORITHM = "HS256"


class TokenIssuer:
    def __init__(self, secret: str, ttl: timedelta = timedelta(days=30)) -> None:
        self._secret = secret
        self._ttl = ttl

    def issue(self, user_id: UserId) -> str:
        now = datetime.now(UTC)
        return jwt.encode(
            {"uid": user_id, "iat": now, "exp": now + self._ttl},
            self._secret,
            algorithm=ALGORITHM,
        )

    def verify(self, token: str) -> Result[UserId, ShopError]:
        try:
            claims = jwt.decode(token, self._secret, algorithms=[ALGORITHM])
        except jwt.PyJWTError:
            return Error(Errors.unauthorized())

        uid = claims.get("uid")
        if not isinstance(uid, str) or not uid:
            return Error(Errors.unauthorized())
        return Ok(uid)


__all__ = ("TokenIssuer", "ALGORITHM")
