"""Signed, short-lived registration session tokens."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from registration_gate.core.errors import UnauthorizedError
from registration_gate.core.settings import settings

TOKEN_TYPE = "registration"


@dataclass(frozen=True)
class RegistrationIdentity:
    """Identity proven by a dual-channel verification."""

    email: str
    mobile: str
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class IssuedToken:
    token: str
    expires_at: datetime


class RegistrationTokenService:
    """Mint and check the bearer credential that gates draft and submit calls.

    Tokens are stateless JWTs; they cannot be revoked and die only by expiry.
    """

    def __init__(
        self,
        secret_key: str | None = None,
        *,
        algorithm: str | None = None,
        ttl: timedelta | None = None,
    ) -> None:
        self._secret_key = secret_key or settings.secret_key
        self._algorithm = algorithm or settings.jwt_algorithm
        self._ttl = ttl or timedelta(minutes=settings.registration_token_expire_minutes)

    def mint(self, email: str, mobile: str, *, now: datetime | None = None) -> IssuedToken:
        """Sign a token asserting ownership of (email, mobile)."""
        issued_at = (now or datetime.now(UTC)).replace(microsecond=0)
        expires_at = issued_at + self._ttl
        claims: dict[str, object] = {
            "typ": TOKEN_TYPE,
            "email": email,
            "mobile": mobile,
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        token: str = jwt.encode(claims, self._secret_key, algorithm=self._algorithm)
        return IssuedToken(token=token, expires_at=expires_at)

    def authorize(self, token: str | None) -> RegistrationIdentity:
        """Return the identity embedded in a valid token.

        Raises:
            UnauthorizedError: If the token is missing, malformed, signed with
                another key or algorithm, of another type, or expired.
        """
        if not token:
            raise UnauthorizedError("Unauthorized: No registration token")
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"require_exp": True, "require_iat": True},
            )
        except JWTError as err:
            raise UnauthorizedError() from err

        email = payload.get("email")
        mobile = payload.get("mobile")
        if payload.get("typ") != TOKEN_TYPE or not isinstance(email, str) or not isinstance(mobile, str):
            raise UnauthorizedError()
        if not email or not mobile:
            raise UnauthorizedError()

        return RegistrationIdentity(
            email=email,
            mobile=mobile,
            issued_at=datetime.fromtimestamp(int(payload["iat"]), UTC),
            expires_at=datetime.fromtimestamp(int(payload["exp"]), UTC),
        )


def get_token_service() -> RegistrationTokenService:
    """Return a token service bound to the application settings."""
    return RegistrationTokenService()
