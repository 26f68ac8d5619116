import base64
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from authguardian.errors import RefreshTokenInvalidError, TokenExpiredError, TokenInvalidError
from authguardian.jwt_manager import JWTManager
from authguardian.models import AccessTokenClaims

CLAIMS = AccessTokenClaims(user_id="user-1", ip="127.0.0.1", token_id="id-1")


def make_manager(access_secret="secret", refresh_secret="secret", hours=1, days=30, method="HS256"):
    return JWTManager(access_secret, refresh_secret, hours, days, method, bcrypt_rounds=4)


@pytest.fixture
def manager():
    return make_manager()


def test_access_token_round_trip(manager):
    signed, _ = manager.generate_access_token(CLAIMS)
    assert manager.verify_access_token(signed) == CLAIMS


def test_access_token_expiry_and_payload(manager):
    before = datetime.now(timezone.utc)
    signed, expires_at = manager.generate_access_token(CLAIMS)
    assert abs((expires_at - before) - timedelta(hours=1)) < timedelta(seconds=5)
    payload = jwt.decode(signed, "secret", algorithms=["HS256"])
    assert set(payload) == {"user_id", "ip", "token_id", "exp", "iat"}
    assert payload["exp"] == int(expires_at.timestamp())
    assert payload["iat"] <= payload["exp"]


def test_expired_access_token_is_rejected():
    expired = make_manager(hours=-1)
    signed, _ = expired.generate_access_token(CLAIMS)
    with pytest.raises(TokenExpiredError):
        expired.verify_access_token(signed)


def test_access_token_with_other_secret_is_rejected(manager):
    signed, _ = make_manager(access_secret="placeholder").generate_access_token(CLAIMS)
    with pytest.raises(TokenInvalidError):
        manager.verify_access_token(signed)


def test_access_token_with_other_algorithm_is_rejected(manager):
    signed, _ = make_manager(method="HS512").generate_access_token(CLAIMS)
    with pytest.raises(TokenInvalidError):
        manager.verify_access_token(signed)


def test_garbage_access_token_is_rejected(manager):
    with pytest.raises(TokenInvalidError):
        manager.verify_access_token("not.a.jwt")


@pytest.mark.parametrize("missing", ["user_id", "ip", "token_id"])
def test_missing_claim_is_rejected(manager, missing):
    payload = {"user_id": "user-1", "ip": "127.0.0.1", "token_id": "id-1"}
    del payload[missing]
    signed = jwt.encode(payload, "secret", algorithm="HS256")
    with pytest.raises(TokenInvalidError, match=missing):
        manager.verify_access_token(signed)


def test_non_string_claim_is_rejected(manager):
    signed = jwt.encode(
        {"user_id": 5, "ip": "127.0.0.1", "token_id": "id-1"}, "secret", algorithm="HS256"
    )
    with pytest.raises(TokenInvalidError):
        manager.verify_access_token(signed)


def test_unsupported_signing_method():
    with pytest.raises(ValueError):
        make_manager(method="XX999").generate_access_token(CLAIMS)


def test_refresh_token_round_trip(manager):
    token_string, hashed = manager.generate_refresh_token("id-1")
    assert base64.b64decode(token_string) == b"id-1"
    assert manager.get_refresh_token_uuid(token_string) == "id-1"
    assert manager.verify_refresh_token(token_string, hashed) is True
    assert hashed.startswith("$2b$04$")


def test_refresh_token_bound_to_secret_and_id(manager):
    token_string, hashed = manager.generate_refresh_token("id-1")
    other_string, _ = manager.generate_refresh_token("id-2")
    assert make_manager(refresh_secret="placeholder").verify_refresh_token(token_string, hashed) is False
    assert manager.verify_refresh_token(other_string, hashed) is False


def test_undecodable_refresh_token(manager):
    _, hashed = manager.generate_refresh_token("id-1")
    with pytest.raises(RefreshTokenInvalidError):
        manager.get_refresh_token_uuid("%%%not base64")
    with pytest.raises(RefreshTokenInvalidError):
        manager.verify_refresh_token("abc", hashed)


def test_refresh_token_expiry(manager):
    before = datetime.now(timezone.utc)
    expiry = manager.refresh_token_expiry()
    assert abs((expiry - before) - timedelta(days=30)) < timedelta(seconds=5)