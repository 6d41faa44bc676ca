from __future__ import annotations

import hmac
from typing import Protocol

_BEARER_PREFIX = "bearer "


class UnauthorizedError(Exception):
    """Missing or invalid credentials for a protected operation."""


class TokenVerifier(Protocol):
    def verify(self, token: str | None) -> bool: ...


class StaticTokenVerifier:
    """Compares against a single configured token. An empty token denies everything."""

    def __init__(self, expected: str) -> None:
        self._expected = expected

    def verify(self, token: str | None) -> bool:
        if not self._expected or not token:
            return False
        return hmac.compare_digest(token.encode(), self._expected.encode())


def extract_bearer_token(authorization: str | None) -> str | None:
    """Pull the token out of an ``Authorization: Bearer <token>`` header value."""
    if not authorization or not authorization.lower().startswith(_BEARER_PREFIX):
        return None
    token = authorization[len(_BEARER_PREFIX):].strip()
    return token or None
