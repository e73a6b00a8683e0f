import uuid

import pytest

from product_ethics.db import models
from product_ethics.services.sms_verification_service import (
    STATUS_FAILED,
    STATUS_SENT,
    STATUS_VERIFIED,
    SmsVerificationService,
)
from product_ethics.utils.crypto import hash_of_hashes, sha256_hex

MOBILE = "+4512345678"
PASSWORD = "pass1234"


class RecordingSender:
    def __init__(self, ok: bool = True):
        self.ok = ok
        self.sent = []

    def send_sms_challenge(self, mobile_number, sms_challenge):
        self.sent.append((mobile_number, sms_challenge))
        return self.ok


def _service(db, sender=None):
    sender = sender or RecordingSender()
    return SmsVerificationService(db, sms_sender=sender), sender


def test_request_and_verify(db, make_client):
    service, sender = _service(db)
    client = make_client(verified=False)

    verification = service.request_sms_challenge(client.id, MOBILE, PASSWORD)
    assert verification.status == STATUS_SENT
    assert verification.mobile_number_hash == sha256_hex(MOBILE)
    assert verification.client_challenge
    assert verification.sms_handle
    mobile, challenge = sender.sent[-1]
    assert mobile == MOBILE and len(challenge) == 5
    assert verification.sms_challenge_hash == sha256_hex(challenge)

    db.refresh(client)
    assert client.mobile_number_hash_password_hash_hashed == hash_of_hashes(MOBILE, PASSWORD)
    assert client.verified is False
    assert db.query(models.MobileNumber).filter_by(mobile_number_hash=sha256_hex(MOBILE)).count() == 1

    verified = service.verify_sms_challenge(MOBILE, PASSWORD, challenge, verification.client_challenge)
    assert verified.id == client.id
    assert verified.verified is True
    db.refresh(verification)
    assert verification.status == STATUS_VERIFIED


def test_verify_rejects_wrong_challenges(db, make_client):
    service, sender = _service(db)
    client = make_client(verified=False)
    verification = service.request_sms_challenge(client.id, MOBILE, PASSWORD)
    _, challenge = sender.sent[-1]
    wrong = "00000" if challenge != "00000" else "11111"

    with pytest.raises(ValueError, match="SMS challenge does not match"):
        service.verify_sms_challenge(MOBILE, PASSWORD, wrong, verification.client_challenge)
    with pytest.raises(ValueError, match="client challenge does not match"):
        service.verify_sms_challenge(MOBILE, PASSWORD, challenge, "not-the-client-challenge")
    with pytest.raises(ValueError, match="Client not found"):
        service.verify_sms_challenge(MOBILE, "wrong-password", challenge, verification.client_challenge)

    service.verify_sms_challenge(MOBILE, PASSWORD, challenge, verification.client_challenge)
    # Status is now verified, so the same challenge cannot be replayed
    with pytest.raises(ValueError, match="wrong status"):
        service.verify_sms_challenge(MOBILE, PASSWORD, challenge, verification.client_challenge)


@pytest.mark.parametrize("mobile,password", [("", PASSWORD), (MOBILE, ""), (MOBILE, None)])
def test_request_requires_fields(db, make_client, mobile, password):
    service, _ = _service(db)
    with pytest.raises(ValueError, match="must be provided"):
        service.request_sms_challenge(make_client().id, mobile, password)


def test_request_for_unknown_client(db):
    service, _ = _service(db)
    with pytest.raises(ValueError, match="does not exist"):
        service.request_sms_challenge(uuid.uuid4(), MOBILE, PASSWORD)


def test_known_mobile_requires_matching_password(db, make_client):
    service, _ = _service(db)
    owner = make_client(verified=False)
    service.request_sms_challenge(owner.id, MOBILE, PASSWORD)

    # Same client, same credentials: re-issues a challenge
    again = service.request_sms_challenge(owner.id, MOBILE, PASSWORD)
    assert again.status == STATUS_SENT

    with pytest.raises(ValueError, match="another password"):
        service.request_sms_challenge(owner.id, MOBILE, "different")
    with pytest.raises(ValueError, match="another password"):
        service.request_sms_challenge(make_client().id, MOBILE, PASSWORD)


def test_client_cannot_register_second_mobile(db, make_client):
    service, _ = _service(db)
    client = make_client(verified=False)
    service.request_sms_challenge(client.id, MOBILE, PASSWORD)
    with pytest.raises(ValueError, match="another mobile number"):
        service.request_sms_challenge(client.id, "+4587654321", PASSWORD)


def test_recovery(db, make_client):
    service, sender = _service(db)
    client = make_client(verified=False)
    first = service.request_sms_challenge(client.id, MOBILE, PASSWORD)
    _, challenge = sender.sent[-1]
    service.verify_sms_challenge(MOBILE, PASSWORD, challenge, first.client_challenge)

    recovery = service.request_recovery_sms_challenge(MOBILE, PASSWORD)
    assert recovery.status == STATUS_SENT
    assert recovery.client_challenge != first.client_challenge
    db.refresh(client)
    assert client.verified is False

    _, new_challenge = sender.sent[-1]
    recovered = service.verify_sms_challenge(MOBILE, PASSWORD, new_challenge, recovery.client_challenge)
    assert recovered.id == client.id and recovered.verified is True

    with pytest.raises(ValueError, match="Can only recover"):
        service.request_recovery_sms_challenge(MOBILE, "")
    with pytest.raises(ValueError, match="Client not found"):
        service.request_recovery_sms_challenge(MOBILE, "wrong")


def test_failed_delivery_marks_verification_failed(db, make_client):
    service, _ = _service(db, RecordingSender(ok=False))
    verification = service.request_sms_challenge(make_client(verified=False).id, MOBILE, PASSWORD)
    assert verification.status == STATUS_FAILED
