import pytest
from sqlalchemy import create_engine

from authguardian.auth_service import AuthService
from authguardian.email_service import EmailService
from authguardian.errors import InvalidRequestError, RefreshTokenInvalidError
from authguardian.jwt_manager import JWTManager
from authguardian.repository import SqlTokenRepository
from authguardian.token_service import TokenService


@pytest.fixture
def service(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'tokens.db'}")
    repo = SqlTokenRepository(engine)
    repo.create_schema()
    manager = JWTManager("secret", "secret", 1, 7, "HS256", 4)
    email = EmailService("", "", "", "", "")
    yield AuthService(TokenService(repo, manager, email)), manager
    engine.dispose()


def test_get_tokens_requires_user_id(service):
    auth, _ = service
    with pytest.raises(InvalidRequestError):
        auth.get_tokens("", "10.0.0.1", "agent")


def test_get_tokens_issues_pair_for_user(service):
    auth, manager = service
    pair = auth.get_tokens("user-1", "10.0.0.1", "agent")
    claims = manager.verify_access_token(pair.access_token)
    assert claims.user_id == "user-1"
    assert claims.ip == "10.0.0.1"


def test_refresh_requires_token(service):
    auth, _ = service
    with pytest.raises(InvalidRequestError):
        auth.refresh_tokens("", "10.0.0.1", "agent")


def test_refresh_returns_new_pair(service):
    auth, manager = service
    first = auth.get_tokens("user-1", "10.0.0.1", "agent")
    second = auth.refresh_tokens(first.refresh_token, "10.0.0.1", "agent")
    assert second.refresh_token != first.refresh_token
    assert manager.verify_access_token(second.access_token).user_id == "user-1"


def test_logout_requires_token(service):
    auth, _ = service
    with pytest.raises(InvalidRequestError):
        auth.logout("")


def test_logout_invalidates_refresh_token(service):
    auth, _ = service
    pair = auth.get_tokens("user-1", "10.0.0.1", "agent")
    auth.logout(pair.refresh_token)
    with pytest.raises(RefreshTokenInvalidError):
        auth.refresh_tokens(pair.refresh_token, "10.0.0.1", "agent")