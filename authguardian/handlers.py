"""HTTP endpoints for issuing, refreshing and revoking tokens."""

from __future__ import annotations

import logging
from http import HTTPStatus

from flask import Blueprint, Flask, jsonify, request

from .auth_service import AuthService
from .errors import AuthError, convert_to_api_error

logger = logging.getLogger(__name__)


def _error_response(err: Exception):
    if not isinstance(err, AuthError):
        logger.exception("unexpected error while handling %s", request.path, exc_info=err)
    api_error = convert_to_api_error(err)
    return jsonify({"error": str(api_error)}), api_error.status_code


def _refresh_token_from_body() -> str:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return ""
    value = body.get("refresh_token")
    return value if isinstance(value, str) else ""


def _missing_refresh_token():
    return jsonify({"error": "refresh_token is required"}), HTTPStatus.BAD_REQUEST


class AuthHandler:
    """Flask views for the authentication API."""

    def __init__(self, auth_service: AuthService) -> None:
        self._auth = auth_service

    def get_tokens(self):
        user_id = request.args.get("user_id", "")
        if not user_id:
            return jsonify({"error": "user_id is required"}), HTTPStatus.BAD_REQUEST
        try:
            pair = self._auth.get_tokens(
                user_id, request.remote_addr or "", request.headers.get("User-Agent", "")
            )
        except Exception as exc:
            return _error_response(exc)
        return jsonify(pair.to_dict()), HTTPStatus.OK

    def refresh_tokens(self):
        refresh_token = _refresh_token_from_body()
        if not refresh_token:
            return _missing_refresh_token()
        try:
            pair = self._auth.refresh_tokens(
                refresh_token, request.remote_addr or "", request.headers.get("User-Agent", "")
            )
        except Exception as exc:
            return _error_response(exc)
        return jsonify(pair.to_dict()), HTTPStatus.OK

    def logout(self):
        refresh_token = _refresh_token_from_body()
        if not refresh_token:
            return _missing_refresh_token()
        try:
            self._auth.logout(refresh_token)
        except Exception as exc:
            return _error_response(exc)
        return "", HTTPStatus.NO_CONTENT

    def register_routes(self, app: Flask) -> None:
        """Mount the endpoints under /api/v1/auth."""
        blueprint = Blueprint("auth", __name__, url_prefix="/api/v1/auth")
        blueprint.add_url_rule("/token", "token", self.get_tokens, methods=["GET"])
        blueprint.add_url_rule("/refresh", "refresh", self.refresh_tokens, methods=["POST"])
        blueprint.add_url_rule("/logout", "logout", self.logout, methods=["POST"])
        app.register_blueprint(blueprint)