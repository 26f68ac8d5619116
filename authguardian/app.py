"""Application assembly and the server entry point."""

from __future__ import annotations

import argparse
import logging
import signal

from dotenv import load_dotenv
from flask import Flask, g, jsonify
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from .auth_service import AuthService
from .config import Config, load_config
from .email_service import EmailService
from .handlers import AuthHandler
from .jwt_manager import JWTManager
from .middleware import AuthMiddleware
from .repository import SqlTokenRepository
from .token_service import TokenService

logger = logging.getLogger(__name__)

PROFILE_MESSAGE = "это защишеный роут, вхоть только с токеном"


def create_app(cfg: Config, engine: Engine) -> Flask:
    """Wire the services together and return the Flask application."""
    repo = SqlTokenRepository(engine)
    try:
        repo.create_schema()
        logger.info("database schema is up to date")
    except SQLAlchemyError:
        logger.warning("failed to create database schema", exc_info=True)

    jwt_manager = JWTManager(
        cfg.jwt.access_secret,
        cfg.jwt.refresh_secret,
        cfg.jwt.access_expiry_hours,
        cfg.jwt.refresh_expiry_days,
        cfg.jwt.signing_method,
    )
    email_service = EmailService(
        cfg.email.smtp_host,
        cfg.email.smtp_port,
        cfg.email.smtp_user,
        cfg.email.smtp_password,
        cfg.email.from_email,
    )
    token_service = TokenService(repo, jwt_manager, email_service)
    auth_service = AuthService(token_service)

    app = Flask(__name__)
    AuthHandler(auth_service).register_routes(app)
    middleware = AuthMiddleware(token_service)

    @app.get("/api/v1/protected/profile")
    @middleware.require_auth
    def profile():
        return jsonify({"message": PROFILE_MESSAGE, "user_id": g.user_id})

    return app


def _raise_interrupt(signum, frame):
    raise KeyboardInterrupt


def main(argv=None) -> None:
    """Load configuration, connect to the database and serve the API."""
    parser = argparse.ArgumentParser(prog="authguardian", description="Token authentication service.")
    parser.add_argument("--config", default=".env", help="path of the dotenv configuration file")
    parser.add_argument("--database-url", default=None, help="override the database URL")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")

    if not load_dotenv(args.config):
        logger.info("no dotenv file found, using defaults")

    try:
        cfg = load_config(args.config)
    except OSError as exc:
        logger.critical("failed to load configuration: %s", exc)
        raise SystemExit(1) from exc

    engine = create_engine(args.database_url or cfg.database.url())
    try:
        try:
            with engine.connect():
                pass
        except SQLAlchemyError as exc:
            logger.critical("failed to connect to the database: %s", exc)
            raise SystemExit(1) from exc
        logger.info("connected to the database")

        app = create_app(cfg, engine)
        port = int(cfg.server.port) if cfg.server.port else 0
        signal.signal(signal.SIGTERM, _raise_interrupt)
        logger.info("server listening on port :%s", cfg.server.port)
        try:
            app.run(host="0.0.0.0", port=port, use_reloader=False)
        except KeyboardInterrupt:
            logger.info("shutting down")
    finally:
        engine.dispose()
    logger.info("server stopped")