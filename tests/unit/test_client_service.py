import pytest

from product_ethics.db import models
from product_ethics.services.client_service import ClientService
from product_ethics.utils.crypto import sha256_hex


def test_create_client_anonymous(db):
    service = ClientService(db)
    client, device_id = service.create_client()
    assert client.verified is False
    assert client.role == "user"
    assert client.username is None and client.password_hashed is None
    assert client.trust_level == pytest.approx(0.5)

    device = db.query(models.ClientDevice).filter_by(client_id=client.id).one()
    assert device.id_hashed == sha256_hex(device_id)
    assert device.id_hashed != device_id
    assert service.get_by_device_id(device_id).id == client.id
    assert service.get_by_id(client.id).id == client.id


def test_create_client_with_credentials(db):
    service = ClientService(db)
    client, _ = service.create_client(device_type="android", username="alice", password="s3cret")
    assert client.password_hashed and client.password_hashed != "s3cret"
    assert service.get_by_username_and_password("alice", "s3cret").id == client.id
    assert service.get_by_username_and_password("alice", "wrong") is None
    assert service.get_by_username_and_password("bob", "s3cret") is None

    with pytest.raises(ValueError, match="already taken"):
        service.create_client(username="alice", password="other")


@pytest.mark.parametrize("username,password", [("alice", None), (None, "pw"), ("", "pw")])
def test_create_client_requires_username_and_password_together(db, username, password):
    with pytest.raises(ValueError):
        ClientService(db).create_client(username=username, password=password)


def test_create_client_rejects_unknown_device_type(db):
    with pytest.raises(ValueError):
        ClientService(db).create_client(device_type="blackberry")


def test_create_device(db, make_client):
    service = ClientService(db)
    client = make_client()
    device_id = service.create_device(client, "ios")
    assert service.get_by_device_id(device_id).id == client.id
    assert service.get_by_device_id("unknown-device") is None
    with pytest.raises(PermissionError):
        service.create_device(make_client(banned=True))


def test_disabled_device_does_not_resolve(db):
    service = ClientService(db)
    client, device_id = service.create_client()
    device = db.query(models.ClientDevice).filter_by(client_id=client.id).one()
    device.enabled = False
    db.commit()
    assert service.get_by_device_id(device_id) is None


def test_admin_moderation(db, make_client):
    service = ClientService(db)
    admin = make_client(role="admin")
    target = make_client()
    assert service.set_banned(admin, target, True).banned is True
    assert service.set_banned(admin, target, False).banned is False
    assert service.set_enabled(admin, target, False).enabled is False
    with pytest.raises(PermissionError):
        service.set_banned(make_client(), target, True)
