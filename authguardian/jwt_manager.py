"""Creation and verification of access and refresh tokens."""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
from datetime import datetime, timedelta, timezone

import jwt

from .errors import RefreshTokenInvalidError, TokenExpiredError, TokenInvalidError
from .models import AccessTokenClaims
from .passwords import DEFAULT_ROUNDS, check_password_hash, hash_password

_CLAIM_NAMES = ("user_id", "ip", "token_id")


class JWTManager:
    """Signs JWT access tokens and produces HMAC-bound refresh tokens."""

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        access_expiry_hours: int,
        refresh_expiry_days: int,
        signing_method: str,
        bcrypt_rounds: int = DEFAULT_ROUNDS,
    ) -> None:
        self._access_secret = access_secret
        self._refresh_secret = refresh_secret
        self.access_expiry = timedelta(hours=access_expiry_hours)
        self.refresh_expiry = timedelta(days=refresh_expiry_days)
        self.signing_method = signing_method
        self.bcrypt_rounds = bcrypt_rounds

    def generate_access_token(self, claims: AccessTokenClaims) -> tuple[str, datetime]:
        """Return a signed access token and the moment it expires."""
        now = datetime.now(timezone.utc)
        expires_at = now + self.access_expiry
        payload = {
            "user_id": claims.user_id,
            "ip": claims.ip,
            "token_id": claims.token_id,
            "exp": int(expires_at.timestamp()),
            "iat": int(now.timestamp()),
        }
        try:
            signed = jwt.encode(payload, self._access_secret, algorithm=self.signing_method)
        except (NotImplementedError, jwt.InvalidKeyError) as exc:
            raise ValueError(f"unsupported signing method: {self.signing_method!r}") from exc
        return signed, expires_at

    def generate_refresh_token(self, token_id: str) -> tuple[str, str]:
        """Return the refresh token string and the bcrypt hash to store."""
        token_string = base64.b64encode(_to_bytes(token_id)).decode("ascii")
        return token_string, hash_password(self._refresh_digest(token_id), self.bcrypt_rounds)

    def verify_access_token(self, token_string: str) -> AccessTokenClaims:
        """Check an access token's signature and expiry and return its claims."""
        try:
            payload = jwt.decode(
                token_string, self._access_secret, algorithms=[self.signing_method]
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpiredError() from exc
        except jwt.InvalidTokenError as exc:
            raise TokenInvalidError(f"невалидный токен: {exc}") from exc

        values = {}
        for name in _CLAIM_NAMES:
            value = payload.get(name)
            if not isinstance(value, str):
                raise TokenInvalidError(f"ошибка в данных токена: отсутствует {name}")
            values[name] = value
        return AccessTokenClaims(**values)

    def refresh_token_expiry(self) -> datetime:
        """Return the expiry moment for a refresh token issued now."""
        return datetime.now(timezone.utc) + self.refresh_expiry

    def verify_refresh_token(self, refresh_token: str, stored_hash: str) -> bool:
        """Tell whether a refresh token matches the stored bcrypt hash."""
        token_id = self.get_refresh_token_uuid(refresh_token)
        return check_password_hash(self._refresh_digest(token_id), stored_hash)

    def get_refresh_token_uuid(self, token_string: str) -> str:
        """Extract the token UUID from a refresh token string."""
        try:
            raw = base64.b64decode(token_string, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise RefreshTokenInvalidError("невозможно декодировать refresh token") from exc
        return raw.decode("utf-8", errors="surrogateescape")

    def _refresh_digest(self, token_id: str) -> str:
        mac = hmac.new(
            self._refresh_secret.encode("utf-8"), _to_bytes(token_id), hashlib.sha256
        ).digest()
        return base64.b64encode(mac).decode("ascii")


def _to_bytes(text: str) -> bytes:
    return text.encode("utf-8", errors="surrogateescape")