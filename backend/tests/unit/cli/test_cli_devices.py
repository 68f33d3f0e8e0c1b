from authgate.infra.sql.sqlalchemy_device_registry import SQLAlchemyDeviceRegistry
from tests.factories.credentials import CredentialsFactory
from tests.factories.device import DeviceFactory


def test_list_devices(cli_runner):
    creds = CredentialsFactory()
    DeviceFactory(credentials=creds, name="Pixel")
    DeviceFactory(credentials=creds, name="Laptop")

    result = cli_runner.invoke(args=["devices", "list", "--user-id", str(creds.user_id)])

    assert result.exit_code == 0, result.output
    assert "Pixel" in result.output
    assert "Laptop" in result.output


def test_list_devices_empty(cli_runner):
    result = cli_runner.invoke(args=["devices", "list", "--user-id", "424242"])
    assert result.exit_code == 0
    assert "(no devices)" in result.output


def test_revoke_device(cli_runner):
    device = DeviceFactory()
    device_id = device.id

    result = cli_runner.invoke(args=["devices", "revoke", str(device_id)])

    assert result.exit_code == 0, result.output
    assert SQLAlchemyDeviceRegistry().find_by_id(device_id) is None


def test_revoke_unknown_device(cli_runner):
    result = cli_runner.invoke(args=["devices", "revoke", "424242"])
    assert result.exit_code != 0
    assert "not found" in result.output
