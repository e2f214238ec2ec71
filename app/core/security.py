"""Password hashing and JWT issuance/verification for account identity."""

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

# bcrypt only considers the first 72 bytes of the password.
BCRYPT_MAX_BYTES = 72
DEFAULT_BCRYPT_ROUNDS = 12


class TokenError(Exception):
    """Raised when a token cannot be issued or does not verify."""


class PasswordHasher:
    """Salted one-way password hashing with bcrypt. Holds no mutable state."""

    def __init__(self, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> None:
        self.rounds = rounds

    def hash(self, plain_password: str) -> str:
        """Hash a plain-text password for storage. The digest embeds cost and salt."""
        pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
        return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, plain_password: str, hashed: str) -> bool:
        """Verify a plain password against a stored hash. Malformed hashes never match."""
        pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
        try:
            return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
        except (ValueError, TypeError, AttributeError):
            return False


class TokenCodec:
    """
    Issue and verify signed access tokens bound to a user id.

    expire_minutes=None issues tokens without an exp claim; such tokens stay
    valid until the secret is rotated.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expire_minutes: int | None = None,
    ) -> None:
        self._secret = secret
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def _require_secret(self) -> str:
        if not self._secret or not self._secret.strip():
            raise TokenError("Token secret is not configured")
        return self._secret

    def issue(self, user_id: str) -> str:
        """Create a JWT with sub (user id), iat and, when configured, exp."""
        secret = self._require_secret()
        now = datetime.now(UTC)
        payload: dict[str, Any] = {"sub": str(user_id), "iat": now}
        if self.expire_minutes is not None:
            payload["exp"] = now + timedelta(minutes=self.expire_minutes)
        return jwt.encode(payload, secret, algorithm=self.algorithm)

    def verify(self, token: str) -> str:
        """
        Validate the token signature (and exp when present); return the user id.
        Raises TokenError on any failure.
        """
        secret = self._require_secret()
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[self.algorithm],
                options={"require": ["sub"]},
            )
        except jwt.PyJWTError as exc:
            raise TokenError("Invalid or expired token") from exc
        sub = payload.get("sub")
        if not isinstance(sub, str) or not sub:
            raise TokenError("Invalid token payload")
        return sub
