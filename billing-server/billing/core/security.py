"""Bearer token verification and principal resolution."""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from billing.core.config import Settings, get_settings
from billing.core.exceptions import UnauthorizedError

security = HTTPBearer(auto_error=False)


@dataclass(slots=True, frozen=True)
class Principal:
    principal_id: str


class IdentityVerifier:
    """Verifies identity tokens issued by the auth provider."""

    def __init__(self, secret_key: str, algorithm: str = "HS256") -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm

    @classmethod
    def from_settings(cls, settings: Settings) -> "IdentityVerifier":
        return cls(settings.secret_key, settings.algorithm)

    def verify(self, token: str) -> Principal:
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except JWTError as exc:
            raise UnauthorizedError("Invalid token") from exc

        principal_id = payload.get("sub")
        if not principal_id:
            raise UnauthorizedError("Invalid token")
        return Principal(principal_id=str(principal_id))

    def issue(self, principal_id: str, expires_delta: timedelta) -> str:
        payload = {
            "sub": principal_id,
            "exp": datetime.now(timezone.utc) + expires_delta,
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)


def create_access_token(principal_id: str, expires_delta: Optional[timedelta] = None, settings: Optional[Settings] = None) -> str:
    settings = settings or get_settings()
    expire_delta = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    return IdentityVerifier.from_settings(settings).issue(principal_id, expire_delta)


def get_identity_verifier(settings: Settings = Depends(get_settings)) -> IdentityVerifier:
    return IdentityVerifier.from_settings(settings)


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
) -> Principal:
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError()
    return verifier.verify(credentials.credentials)
