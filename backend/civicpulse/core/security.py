"""Security helpers for password hashing and session token signing."""
from __future__ import annotations

from typing import Any

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from passlib.context import CryptContext


class PasswordHasher:
    """Hash and verify user passwords using salted bcrypt."""

    def __init__(self, rounds: int = 12) -> None:
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, hashed: str) -> bool:
        return self._context.verify(password, hashed)

    def dummy_verify(self) -> None:
        """Spend the same time as a real verification when there is no hash to check."""
        self._context.dummy_verify()


class TokenSigner:
    """Sign and unsign bearer session payloads."""

    def __init__(self, secret_key: str, max_age_seconds: int | None = None, salt: str = "civicpulse-session") -> None:
        self._serializer = URLSafeTimedSerializer(secret_key, salt=salt)
        self._max_age = max_age_seconds

    def dumps(self, data: dict[str, Any]) -> str:
        return self._serializer.dumps(data)

    def loads(self, token: str) -> dict[str, Any]:
        try:
            payload = self._serializer.loads(token, max_age=self._max_age)
        except SignatureExpired as exc:
            raise ValueError("Session token has expired") from exc
        except BadSignature as exc:
            raise ValueError("Invalid session token") from exc
        if not isinstance(payload, dict):
            raise ValueError("Invalid session token")
        return payload

    def issue(self, user_id: int) -> str:
        return self.dumps({"id": user_id})
