"""Application configuration read from a dotenv file and the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import timedelta
from urllib.parse import quote

from dotenv import dotenv_values


@dataclass
class ServerConfig:
    port: str = ""
    read_timeout: timedelta = field(default_factory=timedelta)
    write_timeout: timedelta = field(default_factory=timedelta)


@dataclass
class DatabaseConfig:
    host: str = ""
    port: str = ""
    user: str = ""
    password: str = ""
    db_name: str = ""
    ssl_mode: str = ""

    def url(self) -> str:
        """Return a PostgreSQL connection URL for these settings."""
        credentials = f"{quote(self.user, safe='')}:{quote(self.password, safe='')}"
        return (
            f"postgresql://{credentials}@{self.host}:{self.port}/{self.db_name}"
            f"?sslmode={self.ssl_mode}"
        )


@dataclass
class JWTConfig:
    access_secret: str = ""
    access_expiry_hours: int = 0
    refresh_secret: str = ""
    refresh_expiry_days: int = 0
    signing_method: str = ""


@dataclass
class EmailConfig:
    smtp_host: str = ""
    smtp_port: str = ""
    smtp_user: str = ""
    smtp_password: str = ""
    from_email: str = ""


@dataclass
class Config:
    server: ServerConfig = field(default_factory=ServerConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    jwt: JWTConfig = field(default_factory=JWTConfig)
    email: EmailConfig = field(default_factory=EmailConfig)


def _to_int(value: str) -> int:
    try:
        return int(value.strip())
    except ValueError:
        return 0


def _to_seconds(value: str) -> timedelta:
    try:
        return timedelta(seconds=float(value.strip()))
    except ValueError:
        return timedelta(0)


def load_config(path: str | os.PathLike[str] = ".env") -> Config:
    """Read settings from the dotenv file at ``path``; environment variables win.

    Raises OSError when the file cannot be read.
    """
    with open(path, encoding="utf-8") as stream:
        file_values = dotenv_values(stream=stream)

    def get(key: str) -> str:
        from_env = os.environ.get(key)
        if from_env:
            return from_env
        return file_values.get(key) or ""

    return Config(
        server=ServerConfig(
            port=get("SERVER_PORT"),
            read_timeout=_to_seconds(get("SERVER_READ_TIMEOUT")),
            write_timeout=_to_seconds(get("SERVER_WRITE_TIMEOUT")),
        ),
        database=DatabaseConfig(
            host=get("DB_HOST"),
            port=get("DB_PORT"),
            user=get("DB_USER"),
            password=get("DB_PASSWORD"),
            db_name=get("DB_NAME"),
            ssl_mode=get("DB_SSLMODE"),
        ),
        jwt=JWTConfig(
            access_secret=get("JWT_ACCESS_SECRET"),
            access_expiry_hours=_to_int(get("JWT_ACCESS_EXPIRY_HOURS")),
            refresh_secret=get("JWT_REFRESH_SECRET"),
            refresh_expiry_days=_to_int(get("JWT_REFRESH_EXPIRY_DAYS")),
            signing_method=get("JWT_SIGNING_METHOD"),
        ),
        email=EmailConfig(
            smtp_host=get("SMTP_HOST"),
            smtp_port=get("SMTP_PORT"),
            smtp_user=get("SMTP_USER"),
            smtp_password=get("SMTP_PASSWORD"),
            from_email=get("FROM_EMAIL"),
        ),
    )