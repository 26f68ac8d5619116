"""Data records used by the token service."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class RefreshToken:
    """A stored refresh token, identified by its UUID."""

    id: str
    user_id: str
    token_hash: str
    user_ip: str
    user_agent: str
    expires_at: datetime
    created_at: datetime = field(default_factory=_utcnow)
    revoked: bool = False


@dataclass(frozen=True)
class AccessTokenClaims:
    """Application claims carried by an access token."""

    user_id: str
    ip: str
    token_id: str


@dataclass(frozen=True)
class TokenPair:
    """Access and refresh tokens handed to a client."""

    access_token: str
    refresh_token: str
    expires_in: int

    def to_dict(self) -> dict[str, str | int]:
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "expires_in": self.expires_in,
        }


@dataclass(frozen=True)
class UserData:
    """Basic information about a user."""

    id: str
    email: str