from authgate.infra.sql.sqlalchemy_device_registry import SQLAlchemyDeviceRegistry
from authgate.models.device import Device
from tests.factories.credentials import CredentialsFactory
from tests.factories.device import DeviceFactory


def test_deleted_ids_are_never_reused(session):
    creds = CredentialsFactory()
    registry = SQLAlchemyDeviceRegistry()
    first = registry.create_or_replace(
        name="Phone", signature="", user_id=creds.user_id, credentials_id=creds.id
    )
    registry.delete(first.device_id)
    second = registry.create_or_replace(
        name="Phone", signature="", user_id=creds.user_id, credentials_id=creds.id
    )
    assert second.device_id > first.device_id


def test_replacement_is_committed_as_one_row(session):
    creds = CredentialsFactory()
    registry = SQLAlchemyDeviceRegistry()
    registry.create_or_replace(
        name="Desk", signature="a", user_id=creds.user_id, credentials_id=creds.id
    )
    latest = registry.create_or_replace(
        name="Desk", signature="b", user_id=creds.user_id, credentials_id=creds.id
    )
    rows = session.query(Device).filter_by(user_id=creds.user_id, name="Desk").all()
    assert [row.id for row in rows] == [latest.device_id]
    assert rows[0].signature == "b"


def test_update_tokens_persists_on_row(session):
    device = DeviceFactory()
    registry = SQLAlchemyDeviceRegistry()
    registry.update_tokens(device.id, access_token="acc", refresh_token="ref")
    session.expire_all()
    row = session.get(Device, device.id)
    assert (row.access_token, row.refresh_token) == ("acc", "ref")


def test_deleting_user_removes_devices(session):
    device = DeviceFactory()
    user = device.user
    device_id = device.id
    session.delete(user)
    session.flush()
    assert SQLAlchemyDeviceRegistry().find_by_id(device_id) is None
