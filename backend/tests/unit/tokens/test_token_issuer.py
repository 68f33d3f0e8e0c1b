from datetime import UTC, datetime, timedelta

import pytest
from authgate.services._shared.errors import EntropyUnavailableError, InvalidTokenError
from authgate.services._shared.ports import DecodedToken, StubTokenCodec
from authgate.services.tokens.issuer import DeviceInfo, TokenIssuer
from authgate.services.tokens.settings import TokenSettings
from freezegun import freeze_time


@pytest.fixture()
def codec():
    return StubTokenCodec()


@pytest.fixture()
def issuer(codec):
    return TokenIssuer(codec, TokenSettings(nonce_bytes=16))


def test_access_token_carries_identity_claims(issuer, codec):
    token = issuer.issue_access_token(
        user_id=7, display_name="Ada", email="ada@example.com", device_id=3
    )
    decoded = codec.decode(token)
    assert decoded.token_type == "access"
    assert decoded.payload == {
        "user_id": 7,
        "name": "Ada",
        "email": "ada@example.com",
        "device_id": 3,
    }


def test_access_token_uses_access_ttl(codec):
    issuer = TokenIssuer(codec, TokenSettings(access_ttl=timedelta(minutes=16)))
    with freeze_time("2024-01-01 00:00:00"):
        token = issuer.issue_access_token(user_id=1, display_name="A", email=None, device_id=1)
    expected = datetime(2024, 1, 1, 0, 16, tzinfo=UTC)
    assert codec.decode(token).expires_at == expected


def test_refresh_token_binds_device_and_carries_nonce(issuer, codec):
    token = issuer.issue_refresh_token(
        device=DeviceInfo(name="Pixel 8", signature="sig-1"), device_id=4, user_id=7
    )
    decoded = codec.decode(token)
    assert decoded.token_type == "refresh"
    assert decoded.payload["user_id"] == 7
    assert decoded.payload["device_id"] == 4
    assert decoded.payload["device_name"] == "Pixel 8"
    assert decoded.payload["device_signature"] == "sig-1"
    nonce = decoded.payload["nonce"]
    assert len(nonce) == 32  # 16 bytes, hex encoded
    assert nonce == nonce.upper()


def test_refresh_tokens_minted_together_differ(issuer):
    device = DeviceInfo(name="Pixel 8")
    with freeze_time("2024-01-01"):
        first = issuer.issue_refresh_token(device=device, device_id=1, user_id=1)
        second = issuer.issue_refresh_token(device=device, device_id=1, user_id=1)
    assert first != second


def test_reissue_keeps_binding_and_renews_expiry(issuer, codec):
    with freeze_time("2024-01-01"):
        original = issuer.issue_refresh_token(
            device=DeviceInfo(name="Laptop", signature="abc"), device_id=9, user_id=2
        )
    with freeze_time("2024-01-27"):
        renewed = issuer.reissue_refresh_token(codec.decode(original))

    old, new = codec.decode(original), codec.decode(renewed)
    assert new.payload["device_id"] == old.payload["device_id"] == 9
    assert new.payload["user_id"] == old.payload["user_id"] == 2
    assert new.payload["device_name"] == "Laptop"
    assert new.payload["nonce"] != old.payload["nonce"]
    assert new.expires_at > old.expires_at


def test_reissue_rejects_payload_without_binding(issuer):
    decoded = DecodedToken(
        payload={"device_name": "x"},
        expires_at=datetime.now(UTC) + timedelta(days=1),
        token_type="refresh",
    )
    with pytest.raises(InvalidTokenError):
        issuer.reissue_refresh_token(decoded)


def test_failing_entropy_source_raises_entropy_unavailable(codec):
    def broken(_: int) -> bytes:
        raise OSError("no randomness")

    issuer = TokenIssuer(codec, entropy=broken)
    with pytest.raises(EntropyUnavailableError):
        issuer.issue_refresh_token(device=DeviceInfo(name="x"), device_id=1, user_id=1)
    assert codec.minted == []
