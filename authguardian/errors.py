"""Domain errors and their mapping onto HTTP API errors."""

from __future__ import annotations

from http import HTTPStatus


class AuthError(Exception):
    """Base class for every error raised by the authentication service."""

    default_message = "ошибка авторизации"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return self.args[0]


class InvalidRequestError(AuthError):
    default_message = "неверный запрос"


class UnauthorizedError(AuthError):
    default_message = "неавторизованный доступ"


class TokenExpiredError(AuthError):
    default_message = "токен истек"


class TokenInvalidError(AuthError):
    default_message = "невалидный токен"


class UserNotFoundError(AuthError):
    default_message = "пользователь не найден"


class InternalServerError(AuthError):
    default_message = "внутренняя ошибка сервера"


class RefreshTokenInvalidError(AuthError):
    default_message = "невалидный refresh токен"


class IPAddressChangedError(AuthError):
    default_message = "изменился IP-адрес"


class APIError(Exception):
    """An error paired with the HTTP status code it should be reported with."""

    def __init__(self, status_code: int, error: BaseException) -> None:
        super().__init__(status_code, error)
        self.status_code = int(status_code)
        self.error = error

    def __str__(self) -> str:
        return str(self.error)


_STATUS_BY_ERROR: tuple[tuple[tuple[type[AuthError], ...], HTTPStatus], ...] = (
    ((InvalidRequestError,), HTTPStatus.BAD_REQUEST),
    (
        (UnauthorizedError, TokenExpiredError, TokenInvalidError, RefreshTokenInvalidError),
        HTTPStatus.UNAUTHORIZED,
    ),
    ((UserNotFoundError,), HTTPStatus.NOT_FOUND),
    ((IPAddressChangedError,), HTTPStatus.FORBIDDEN),
)


def convert_to_api_error(err: BaseException) -> APIError:
    """Map an error to an APIError; unknown errors become a generic 500."""
    for error_types, status in _STATUS_BY_ERROR:
        if isinstance(err, error_types):
            return APIError(status, err)
    return APIError(HTTPStatus.INTERNAL_SERVER_ERROR, InternalServerError())