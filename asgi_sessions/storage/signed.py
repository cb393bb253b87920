"""Stateless session storage: the session data travels inside the cookie.

The key handed back to the middleware *is* the session: a JWS compact token
whose ``data`` claim holds the session mapping. With ``encryption_key`` set the
JWS is additionally wrapped in a Fernet token so the client cannot read it.
Nothing is kept server-side, so ``delete`` has nothing to do.
"""

from __future__ import annotations

import logging
import secrets
from typing import Any

import jwt
from cryptography.fernet import Fernet, InvalidToken

logger = logging.getLogger(__name__)

DEFAULT_KEY_BYTES = 128


class SignedCookieStorage:
    """Session storage backed by a signed (optionally encrypted) token.

    Args:
        key: Signing key. A random process-local key is generated when omitted,
            which invalidates every outstanding cookie on restart.
        algorithm: Any algorithm PyJWT supports (``HS256``, ``RS256``, ...).
        verify_key: Verification key for asymmetric algorithms. Defaults to
            ``key``.
        encryption_key: Fernet key. When set, tokens are signed then encrypted.
    """

    def __init__(
        self,
        key: str | bytes | Any | None = None,
        algorithm: str = "HS256",
        *,
        verify_key: str | bytes | Any | None = None,
        encryption_key: str | bytes | None = None,
    ) -> None:
        self._key = key if key is not None else secrets.token_bytes(DEFAULT_KEY_BYTES)
        self._verify_key = verify_key if verify_key is not None else self._key
        self._algorithm = algorithm
        self._fernet = Fernet(encryption_key) if encryption_key else None

    def sign(self, data: dict[str, Any]) -> str:
        token = jwt.encode({"data": data}, self._key, algorithm=self._algorithm)
        if self._fernet is not None:
            token = self._fernet.encrypt(token.encode()).decode()
        return token

    def unsign(self, token: str) -> dict[str, Any]:
        """Verify ``token`` and return its session data.

        Raises ``jwt.InvalidTokenError`` or ``cryptography.fernet.InvalidToken``.
        """
        if self._fernet is not None:
            token = self._fernet.decrypt(token.encode()).decode()
        payload = jwt.decode(token, self._verify_key, algorithms=[self._algorithm])
        data = payload.get("data")
        if not isinstance(data, dict):
            raise jwt.InvalidTokenError("Token has no session data")
        return data

    async def resolve(self, key: str | None) -> tuple[str, dict[str, Any]]:
        if key is None:
            return self.sign({}), {}
        try:
            return key, self.unsign(key)
        except (jwt.InvalidTokenError, InvalidToken) as e:
            logger.debug("Rejected session token: %s", e)
            return self.sign({}), {}

    async def write(self, key: str, data: dict[str, Any]) -> str:
        return self.sign(data)

    async def delete(self, key: str) -> str:
        return key
