"""
Supabase access-token verification.

Supabase signs session JWTs with the project's JWT secret (HS256) and sets
``aud`` to ``authenticated`` for signed-in users. Verifying locally avoids a
round-trip to the auth server on every request.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt


@dataclass
class TokenPayload:
    """Verified access-token claims."""

    sub: str  # Subject (auth.users.id)
    exp: datetime  # Expiration time
    iat: datetime  # Issued at
    email: str | None = None
    role: str | None = None
    session_id: str | None = None


class TokenService:
    """Verifies (and, for local tooling, issues) Supabase-compatible JWTs."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        audience: str = "authenticated",
        access_token_expire_minutes: int = 60,
    ):
        """
        Initialize the token service.

        Args:
            secret_key: Supabase project JWT secret
            algorithm: JWT algorithm (default: HS256)
            audience: Required ``aud`` claim
            access_token_expire_minutes: Lifetime of tokens issued by ``create_access_token``
        """
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._audience = audience
        self._access_token_expire_minutes = access_token_expire_minutes

    def create_access_token(
        self,
        user_id: str,
        email: str | None = None,
        role: str = "authenticated",
        expires_delta: timedelta | None = None,
    ) -> str:
        """
        Create an access token shaped like the ones Supabase Auth issues.

        Used by tests and local scripts; production tokens come from Supabase.
        """
        now = datetime.now(UTC)
        expire = now + (expires_delta or timedelta(minutes=self._access_token_expire_minutes))

        payload = {
            "sub": user_id,
            "aud": self._audience,
            "exp": expire,
            "iat": now,
            "role": role,
        }
        if email:
            payload["email"] = email

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def verify_access_token(self, token: str) -> TokenPayload | None:
        """
        Decode and validate an access token.

        Args:
            token: Bearer token from the Authorization header

        Returns:
            TokenPayload if valid, None if invalid, expired or for another audience
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                audience=self._audience,
            )
        except JWTError:
            return None

        if not payload.get("sub") or "exp" not in payload:
            return None

        return TokenPayload(
            sub=payload["sub"],
            exp=datetime.fromtimestamp(payload["exp"], tz=UTC),
            iat=datetime.fromtimestamp(payload.get("iat", 0), tz=UTC),
            email=payload.get("email"),
            role=payload.get("role"),
            session_id=payload.get("session_id"),
        )
