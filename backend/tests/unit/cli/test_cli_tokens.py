from datetime import UTC, datetime, timedelta

from authgate.infra import providers
from authgate.services.tokens.issuer import DeviceInfo
from freezegun import freeze_time


def test_inspect_prints_lifecycle_state(cli_runner):
    issuer = providers.token_issuer()
    token = issuer.issue_refresh_token(device=DeviceInfo(name="Pixel"), device_id=3, user_id=1)

    result = cli_runner.invoke(args=["tokens", "inspect", token])

    assert result.exit_code == 0, result.output
    assert "type:       refresh" in result.output
    assert "expired:    false" in result.output
    assert "renew:      false" in result.output
    assert '"device_id": 3' in result.output
    assert token not in result.output


def test_inspect_shows_expired_tokens(cli_runner):
    with freeze_time(datetime.now(UTC) - timedelta(days=2)):
        token = providers.token_issuer().issue_access_token(
            user_id=1, display_name="Ada", email=None, device_id=3
        )

    result = cli_runner.invoke(args=["tokens", "inspect", token])

    assert result.exit_code == 0, result.output
    assert "expired:    true" in result.output
    assert "renew:" not in result.output


def test_inspect_rejects_garbage(cli_runner):
    result = cli_runner.invoke(args=["tokens", "inspect", "garbage"])
    assert result.exit_code != 0
    assert "Invalid token" in result.output
