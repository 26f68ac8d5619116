"""Flask decorator that guards views with a bearer access token."""

from __future__ import annotations

import functools
from http import HTTPStatus

from flask import g, jsonify, request

from .errors import convert_to_api_error
from .token_service import TokenService


def _reject(status: int, message: str):
    return jsonify({"error": message}), status


class AuthMiddleware:
    """Checks the Authorization header and the client IP before a view runs."""

    def __init__(self, token_service: TokenService) -> None:
        self._tokens = token_service

    def require_auth(self, view):
        """Wrap ``view`` so it only runs for a valid access token from its own IP.

        On success ``flask.g.user_id`` and ``flask.g.token_id`` are set.
        """

        @functools.wraps(view)
        def guarded(*args, **kwargs):
            header = request.headers.get("Authorization", "")
            if not header:
                return _reject(HTTPStatus.UNAUTHORIZED, "authorization header is required")
            parts = header.split(" ")
            if len(parts) != 2 or parts[0] != "Bearer":
                return _reject(HTTPStatus.UNAUTHORIZED, "invalid authorization header format")
            try:
                claims = self._tokens.verify_access_token(parts[1])
            except Exception as exc:
                api_error = convert_to_api_error(exc)
                return _reject(api_error.status_code, str(api_error))
            if claims.ip != request.remote_addr:
                return _reject(HTTPStatus.UNAUTHORIZED, "IP address mismatch")
            g.user_id = claims.user_id
            g.token_id = claims.token_id
            return view(*args, **kwargs)

        return guarded