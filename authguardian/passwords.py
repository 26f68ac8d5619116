"""Bcrypt hashing helpers."""

from __future__ import annotations

import bcrypt

DEFAULT_ROUNDS = 14


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Return the bcrypt hash of ``password`` at the given cost."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("ascii")


def check_password_hash(password: str, hashed: str) -> bool:
    """Tell whether ``password`` matches the bcrypt hash ``hashed``."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False