# authguardian

An HTTP authentication service built on Flask and SQLAlchemy. It issues a
pair of tokens for a user:

- a short-lived **access token**, a signed JWT that carries the user id, the
  client IP address and the id of the refresh token it was issued with;
- a long-lived **refresh token**, the base64 form of a UUID. Only a bcrypt
  hash of the token's HMAC is kept in the database.

A refresh token can be used once: refreshing revokes it and issues a new
pair. Using it from a different IP address than the one it was issued to
revokes it, triggers a security alert for the user and fails the request
with 403.

## Running the server

The `authguardian` command reads its settings from a dotenv file (`.env` in
the current directory unless `--config` names another). Non-empty values in
the environment take precedence over the file.

```
SERVER_PORT=8080
SERVER_READ_TIMEOUT=10
SERVER_WRITE_TIMEOUT=10

DB_HOST=localhost
DB_PORT=5432
DB_USER=user
DB_PASSWORD=password
DB_NAME=authguardian
DB_SSLMODE=disable

JWT_ACCESS_SECRET=secret
JWT_ACCESS_EXPIRY_HOURS=1
JWT_REFRESH_SECRET=secret
JWT_REFRESH_EXPIRY_DAYS=30
JWT_SIGNING_METHOD=HS512

SMTP_HOST=localhost
SMTP_PORT=25
SMTP_USER=user
SMTP_PASSWORD=password
FROM_EMAIL=noreply@example.com
```

`JWT_SIGNING_METHOD` is any algorithm name PyJWT accepts for a shared secret,
such as `HS256` or `HS512`. Then start the service:

```
authguardian
authguardian --config path/to/settings.env
authguardian --database-url sqlite:///tokens.db
```

`--database-url` replaces the PostgreSQL URL built from the `DB_*` settings
with any URL SQLAlchemy understands. The command checks that it can connect
(exiting with status 1 if not, or if the configuration file cannot be read),
creates the `refresh_tokens` table if needed, and serves on all interfaces
at `SERVER_PORT` until it receives SIGINT or SIGTERM.

## HTTP API

| Method | Path | Input | Success |
| ------ | ---- | ----- | ------- |
| GET | `/api/v1/auth/token` | query `user_id` | 200, token pair |
| POST | `/api/v1/auth/refresh` | JSON `{"refresh_token": ...}` | 200, new token pair |
| POST | `/api/v1/auth/logout` | JSON `{"refresh_token": ...}` | 204 |
| GET | `/api/v1/protected/profile` | header `Authorization: Bearer token` | 200, `message` and `user_id` |

A token pair looks like:

```json
{"access_token": "...", "refresh_token": "...", "expires_in": 3600}
```

`expires_in` is the number of seconds the access token stays valid.

Errors come back as `{"error": "<message>"}`. A missing `user_id` or
`refresh_token` answers 400. Other failures are mapped by
`authguardian.errors.convert_to_api_error`:

| Error | Status |
| ----- | ------ |
| `InvalidRequestError` | 400 |
| `UnauthorizedError`, `TokenExpiredError`, `TokenInvalidError`, `RefreshTokenInvalidError` | 401 |
| `UserNotFoundError` | 404 |
| `IPAddressChangedError` | 403 |
| anything else | 500, reported as an internal server error |

The protected route also answers 401 when the `Authorization` header is
missing, is not of the form `Bearer <token>`, or the access token was issued
to a different IP address than the one making the request.

## Using it as a library

The application can be built around any SQLAlchemy engine:

```python
from sqlalchemy import create_engine

from authguardian.app import create_app
from authguardian.config import load_config

cfg = load_config(".env")
engine = create_engine(cfg.database.url())
app = create_app(cfg, engine)
```

The pieces can also be used on their own:

```python
from authguardian.jwt_manager import JWTManager
from authguardian.models import AccessTokenClaims

manager = JWTManager("secret", "secret", 1, 30, "HS256", 4)

token_string, expires_at = manager.generate_access_token(
    AccessTokenClaims(user_id="42", ip="127.0.0.1", token_id="some-id")
)
claims = manager.verify_access_token(token_string)

refresh_token, stored_hash = manager.generate_refresh_token("some-id")
assert manager.get_refresh_token_uuid(refresh_token) == "some-id"
assert manager.verify_refresh_token(refresh_token, stored_hash)
```

The last argument of `JWTManager` is the bcrypt cost; it defaults to 14,
which is slow on purpose.

- `authguardian.repository.SqlTokenRepository` stores refresh tokens;
  `TokenRepository` is the protocol the services expect of a store.
- `authguardian.token_service.TokenService` issues, rotates and revokes
  token pairs, and its `cleanup_expired_tokens()` deletes expired ones.
- `authguardian.auth_service.AuthService` rejects empty input before calling
  the token service.
- `authguardian.middleware.AuthMiddleware.require_auth` decorates a Flask
  view; on success it sets `flask.g.user_id` and `flask.g.token_id`.
- `authguardian.handlers.AuthHandler.register_routes` mounts the
  `/api/v1/auth` endpoints on a Flask app.

Failures are raised as subclasses of `authguardian.errors.AuthError`.

## What it does not do

- There is no user store. Every user id is accepted and resolves to the
  stand-in address `user@example.com`.
- The IP-change alert is not e-mailed: `EmailService.send_ip_change_alert`
  prints the message to standard output. `EmailService.send_email` can
  deliver over SMTP, but nothing in the service calls it.
- Expired tokens are only removed when `cleanup_expired_tokens()` is called;
  nothing schedules it.
- `SERVER_READ_TIMEOUT` and `SERVER_WRITE_TIMEOUT` are read into the
  configuration but not applied; the command runs Flask's built-in server.
- The schema is created with `CREATE TABLE IF NOT EXISTS`; there are no
  migrations.
- No PostgreSQL driver is installed with the package; install one that
  SQLAlchemy can use, or pass another database with `--database-url`.