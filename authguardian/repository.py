"""Storage of refresh tokens."""

from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Protocol

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    MetaData,
    String,
    Table,
    and_,
    delete,
    insert,
    select,
    update,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.types import TypeDecorator

from .models import RefreshToken, UserData

logger = logging.getLogger(__name__)


class TokenRepository(Protocol):
    """What the token service needs from a refresh-token store."""

    def store_refresh_token(self, token: RefreshToken) -> None: ...

    def get_refresh_token(self, token_id: str) -> RefreshToken | None: ...

    def revoke_refresh_token(self, token_id: str) -> None: ...

    def revoke_all_user_tokens(self, user_id: str) -> None: ...

    def cleanup_expired_tokens(self, before: datetime) -> None: ...

    def get_user_by_id(self, user_id: str) -> UserData | None: ...

    def get_refresh_tokens_by_user_id(self, user_id: str) -> list[RefreshToken]: ...

    def get_refresh_token_by_uuid(self, token_uuid: str) -> RefreshToken | None: ...


class _UTCDateTime(TypeDecorator):
    """Stores datetimes as naive UTC and returns them timezone-aware."""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


_metadata = MetaData()

_refresh_tokens = Table(
    "refresh_tokens",
    _metadata,
    Column("id", String(36), primary_key=True),
    Column("user_id", String, nullable=False, index=True),
    Column("token_hash", String, nullable=False),
    Column("user_ip", String, nullable=False),
    Column("user_agent", String),
    Column("expires_at", _UTCDateTime, nullable=False),
    Column("created_at", _UTCDateTime, nullable=False),
    Column("revoked", Boolean, nullable=False, default=False),
)


class SqlTokenRepository:
    """Refresh-token store backed by an SQLAlchemy engine."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def create_schema(self) -> None:
        """Create the refresh token table if it does not exist."""
        _metadata.create_all(self._engine)

    def store_refresh_token(self, token: RefreshToken) -> None:
        try:
            with self._engine.begin() as conn:
                conn.execute(insert(_refresh_tokens).values(**asdict(token)))
        except SQLAlchemyError:
            logger.exception("failed to store refresh token %s for user %s", token.id, token.user_id)
            raise

    def get_refresh_token(self, token_id: str) -> RefreshToken | None:
        """Return the active token with this id, or None."""
        query = (
            select(_refresh_tokens)
            .where(and_(_refresh_tokens.c.id == token_id, *self._active()))
            .limit(1)
        )
        with self._engine.connect() as conn:
            row = conn.execute(query).first()
        return None if row is None else RefreshToken(**row._mapping)

    def revoke_refresh_token(self, token_id: str) -> None:
        with self._engine.begin() as conn:
            conn.execute(
                update(_refresh_tokens)
                .where(_refresh_tokens.c.id == token_id)
                .values(revoked=True)
            )

    def revoke_all_user_tokens(self, user_id: str) -> None:
        with self._engine.begin() as conn:
            conn.execute(
                update(_refresh_tokens)
                .where(
                    _refresh_tokens.c.user_id == user_id,
                    _refresh_tokens.c.revoked.is_(False),
                )
                .values(revoked=True)
            )

    def cleanup_expired_tokens(self, before: datetime) -> None:
        """Delete every token that expired before ``before``."""
        with self._engine.begin() as conn:
            conn.execute(delete(_refresh_tokens).where(_refresh_tokens.c.expires_at < before))

    def get_user_by_id(self, user_id: str) -> UserData | None:
        # There is no user table yet; every id resolves to a stand-in address.
        return UserData(id=user_id, email="user@example.com")

    def get_refresh_tokens_by_user_id(self, user_id: str) -> list[RefreshToken]:
        """Return the user's active tokens."""
        query = select(_refresh_tokens).where(
            _refresh_tokens.c.user_id == user_id, *self._active()
        )
        with self._engine.connect() as conn:
            return [RefreshToken(**row._mapping) for row in conn.execute(query)]

    def get_refresh_token_by_uuid(self, token_uuid: str) -> RefreshToken | None:
        query = select(_refresh_tokens).where(
            _refresh_tokens.c.id == token_uuid, *self._active()
        )
        with self._engine.connect() as conn:
            row = conn.execute(query).first()
        return None if row is None else RefreshToken(**row._mapping)

    @staticmethod
    def _active():
        return (
            _refresh_tokens.c.revoked.is_(False),
            _refresh_tokens.c.expires_at > datetime.now(timezone.utc),
        )