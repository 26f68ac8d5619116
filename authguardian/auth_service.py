"""Request-level authentication operations."""

from __future__ import annotations

from .errors import InvalidRequestError
from .models import TokenPair
from .token_service import TokenService


class AuthService:
    """Validates requests before handing them to the token service."""

    def __init__(self, token_service: TokenService) -> None:
        self._tokens = token_service

    def get_tokens(self, user_id: str, user_ip: str, user_agent: str) -> TokenPair:
        if not user_id:
            raise InvalidRequestError()
        return self._tokens.generate_token_pair(user_id, user_ip, user_agent)

    def refresh_tokens(self, refresh_token: str, user_ip: str, user_agent: str) -> TokenPair:
        if not refresh_token:
            raise InvalidRequestError()
        return self._tokens.refresh_tokens(refresh_token, user_ip, user_agent)

    def logout(self, refresh_token: str) -> None:
        if not refresh_token:
            raise InvalidRequestError()
        self._tokens.revoke_token(refresh_token)