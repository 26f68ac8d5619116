"""Flask service issuing JWT access tokens and IP-bound, single-use refresh tokens."""

__version__ = "0.1.0"