"""Issuing, rotating and revoking token pairs."""

from __future__ import annotations

import logging
import threading
import time
import uuid
from datetime import datetime, timezone

from .errors import AuthError, IPAddressChangedError, RefreshTokenInvalidError, UserNotFoundError
from .jwt_manager import JWTManager
from .models import AccessTokenClaims, RefreshToken, TokenPair
from .repository import TokenRepository

logger = logging.getLogger(__name__)


class TokenService:
    """Business rules around access and refresh tokens."""

    def __init__(self, token_repo: TokenRepository, jwt_manager: JWTManager, email_service) -> None:
        self._repo = token_repo
        self._jwt = jwt_manager
        self._email = email_service

    def generate_token_pair(self, user_id: str, user_ip: str, user_agent: str) -> TokenPair:
        """Issue a fresh access/refresh pair bound to the client's IP address."""
        try:
            user = self._repo.get_user_by_id(user_id)
        except Exception:
            logger.exception("failed to look up user %s", user_id)
            raise
        if user is None:
            raise UserNotFoundError()

        token_id = str(uuid.uuid4())
        try:
            refresh_token, refresh_hash = self._jwt.generate_refresh_token(token_id)
        except Exception:
            logger.exception("failed to generate refresh token")
            raise

        stored = RefreshToken(
            id=token_id,
            user_id=user_id,
            token_hash=refresh_hash,
            user_ip=user_ip,
            user_agent=user_agent,
            expires_at=self._jwt.refresh_token_expiry(),
            created_at=datetime.now(timezone.utc),
            revoked=False,
        )
        try:
            self._repo.store_refresh_token(stored)
        except Exception:
            logger.exception("failed to store refresh token")
            raise

        try:
            access_token, expires_at = self._jwt.generate_access_token(
                AccessTokenClaims(user_id=user_id, ip=user_ip, token_id=stored.id)
            )
        except Exception:
            logger.exception("failed to generate access token")
            raise

        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=int(expires_at.timestamp()) - int(time.time()),
        )

    def refresh_tokens(self, refresh_token: str, user_ip: str, user_agent: str) -> TokenPair:
        """Rotate a refresh token into a new pair.

        A request from an IP address other than the one the token was issued
        to revokes the token, alerts the user and raises IPAddressChangedError.
        """
        stored = self._validated_token(refresh_token)

        if stored.user_ip != user_ip:
            try:
                user = self._repo.get_user_by_id(stored.user_id)
            except Exception:
                user = None
            if user is not None:
                threading.Thread(
                    target=self._send_alert,
                    args=(user.email, stored.user_ip, user_ip),
                    daemon=True,
                ).start()
            try:
                self._repo.revoke_refresh_token(stored.id)
            except Exception:
                logger.exception("failed to revoke refresh token %s", stored.id)
            raise IPAddressChangedError()

        self._repo.revoke_refresh_token(stored.id)
        return self.generate_token_pair(stored.user_id, user_ip, user_agent)

    def revoke_token(self, refresh_token: str) -> None:
        """Revoke the given refresh token."""
        stored = self._validated_token(refresh_token)
        self._repo.revoke_refresh_token(stored.id)

    def revoke_all_user_tokens(self, user_id: str) -> None:
        self._repo.revoke_all_user_tokens(user_id)

    def verify_access_token(self, access_token: str) -> AccessTokenClaims:
        return self._jwt.verify_access_token(access_token)

    def cleanup_expired_tokens(self) -> None:
        """Delete refresh tokens that have already expired."""
        self._repo.cleanup_expired_tokens(datetime.now(timezone.utc))

    def _validated_token(self, refresh_token: str) -> RefreshToken:
        try:
            token_uuid = self._jwt.get_refresh_token_uuid(refresh_token)
        except AuthError as exc:
            raise RefreshTokenInvalidError() from exc

        stored = self._repo.get_refresh_token(token_uuid)
        if stored is None:
            raise RefreshTokenInvalidError()

        try:
            valid = self._jwt.verify_refresh_token(refresh_token, stored.token_hash)
        except (AuthError, ValueError) as exc:
            raise RefreshTokenInvalidError() from exc
        if not valid:
            raise RefreshTokenInvalidError()
        return stored

    def _send_alert(self, email: str, old_ip: str, new_ip: str) -> None:
        try:
            self._email.send_ip_change_alert(email, old_ip, new_ip)
        except Exception:
            logger.exception("failed to send IP change alert to %s", email)