import dataclasses
from datetime import datetime, timedelta, timezone

import pytest

from authguardian.models import AccessTokenClaims, RefreshToken, TokenPair, UserData


def test_token_pair_to_dict_uses_wire_names():
    pair = TokenPair(access_token="token", refresh_token="placeholder", expires_in=3600)
    assert pair.to_dict() == {
        "access_token": "token",
        "refresh_token": "placeholder",
        "expires_in": 3600,
    }


def test_refresh_token_defaults():
    before = datetime.now(timezone.utc)
    expires = before + timedelta(days=1)
    record = RefreshToken("id-1", "user-1", "hash", "10.0.0.1", "agent", expires)
    after = datetime.now(timezone.utc)
    assert record.revoked is False
    assert before <= record.created_at <= after
    assert record.expires_at == expires


def test_claims_are_immutable_values():
    claims = AccessTokenClaims("user-1", "10.0.0.1", "id-1")
    assert claims == AccessTokenClaims(user_id="user-1", ip="10.0.0.1", token_id="id-1")
    with pytest.raises(dataclasses.FrozenInstanceError):
        claims.ip = "10.0.0.2"


def test_user_data_equality():
    user = UserData(id="user-1", email="user@example.com")
    assert user == UserData("user-1", "user@example.com")
    assert user != UserData("user-2", "user@example.com")