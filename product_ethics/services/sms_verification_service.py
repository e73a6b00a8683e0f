"""
SMS Verification Service

Verifies a client's mobile number with two challenges: a numeric SMS challenge
sent to the phone (stored only as a hash) and a client challenge returned to
the requesting device. Both must be presented back to complete verification.

Mobile numbers and passwords are never stored in plain text. The client keeps
``sha256(sha256(mobile) + sha256(password))`` which is also how a client is
found again when recovering an account on a new device.
"""

import logging
import os
import uuid
from typing import Optional

from sqlalchemy.orm import Session

from product_ethics.db import models
from product_ethics.db.repositories import clients as client_repo
from product_ethics.db.unit_of_work import transactional
from product_ethics.services.security import assert_client_valid
from product_ethics.utils import crypto
from product_ethics.utils.settings import get_trust_settings

logger = logging.getLogger(__name__)

STATUS_UNKNOWN = "unknown"
STATUS_PENDING = "pending"
STATUS_SENT = "sent"
STATUS_FAILED = "failed"
STATUS_VERIFIED = "verified"


class SmsServiceConfig:
    """Configuration for SMS delivery from environment variables."""

    def __init__(self):
        self.sender_name = os.getenv('SMS_SENDER_NAME', 'ProductEthics')
        self.message_template = os.getenv('SMS_MESSAGE_TEMPLATE', 'Your verification code is {challenge}')


class LoggingSmsSender:
    """Default SMS sender: writes the message to the log instead of a gateway."""

    def __init__(self, config: Optional[SmsServiceConfig] = None):
        self.config = config or SmsServiceConfig()

    def send_sms_challenge(self, mobile_number: str, sms_challenge: str) -> bool:
        message = self.config.message_template.format(challenge=sms_challenge)
        logger.info("SMS from %s to %s: %s", self.config.sender_name, mobile_number, message)
        return True


def _require(value, message: str) -> None:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError(message)


class SmsVerificationService:
    """Service class for SMS verification of clients."""

    def __init__(self, db: Session, sms_sender=None):
        self.db = db
        self.sms_sender = sms_sender or LoggingSmsSender()

    @transactional
    def request_sms_challenge(self, client_id: uuid.UUID, mobile_number: str, password: str) -> models.SmsVerification:
        """Send a new SMS challenge for ``mobile_number`` on behalf of a client.

        The returned verification carries the client challenge that the caller
        hands back to the device.
        """
        _require(client_id, "Client id must be provided")
        _require(mobile_number, "Mobile number must be provided")
        _require(password, "Password must be provided")

        client = client_repo.get_client(self.db, client_id)
        if client is None:
            raise ValueError(f"Client with id {client_id} does not exist")
        assert_client_valid(client)

        mobile_number_hash = crypto.sha256_hex(mobile_number)
        pair_hash = crypto.hash_of_hashes(mobile_number, password)
        verification = client_repo.get_sms_verification(self.db, mobile_number_hash)

        if client_repo.get_mobile_number(self.db, mobile_number_hash) is not None:
            logger.info("Requesting SMS challenge for known mobile number")
            if client.mobile_number_hash_password_hash_hashed != pair_hash:
                raise ValueError("Mobile number already verified with another password than the one provided")
            if verification is None:
                verification = client_repo.create_sms_verification(self.db, mobile_number_hash)
        else:
            logger.info("Requesting SMS challenge for new mobile number")
            if client.mobile_number_hash_password_hash_hashed is not None:
                raise ValueError(f"Client with id {client.id} is already registered with another mobile number")
            if verification is not None:
                raise ValueError("SMS verification already exists for a mobile number that was never registered")
            client_repo.create_mobile_number(self.db, mobile_number_hash)
            verification = client_repo.create_sms_verification(self.db, mobile_number_hash)

        client_repo.update_client(
            self.db,
            client,
            mobile_number_hash_password_hash_hashed=pair_hash,
            verified=False,
        )
        return self._send_challenge(verification, mobile_number)

    @transactional
    def request_recovery_sms_challenge(self, mobile_number: str, password: str) -> models.SmsVerification:
        """Re-issue a challenge for the client registered with this mobile number and password."""
        _require(mobile_number, "Mobile number must be provided")
        _require(password, "Can only recover clients with a password")

        client = client_repo.get_client_by_mobile_number_hash_password_hash(
            self.db, crypto.hash_of_hashes(mobile_number, password)
        )
        if client is None:
            raise ValueError("Client not found for given mobile number and password")
        return self.request_sms_challenge(client.id, mobile_number, password)

    @transactional
    def verify_sms_challenge(self, mobile_number: str, password: str, sms_challenge: str, client_challenge: str) -> models.Client:
        _require(mobile_number, "Mobile number must be provided")
        _require(password, "Password must be provided")
        _require(sms_challenge, "SMS challenge must be provided")
        _require(client_challenge, "Client challenge must be provided")

        client = client_repo.get_client_by_mobile_number_hash_password_hash(
            self.db, crypto.hash_of_hashes(mobile_number, password)
        )
        if client is None:
            raise ValueError("Client not found for given mobile number and password")

        verification = client_repo.get_sms_verification(self.db, crypto.sha256_hex(mobile_number))
        if verification is None:
            raise ValueError("SMS verification not found for mobile number")
        if verification.status != STATUS_SENT:
            raise ValueError(f"SMS verification has wrong status. Expected '{STATUS_SENT}' but was '{verification.status}'")
        if verification.sms_challenge_hash != crypto.sha256_hex(sms_challenge):
            raise ValueError("Provided SMS challenge does not match sent challenge")
        if verification.client_challenge != client_challenge:
            raise ValueError("Provided client challenge does not match sent challenge")

        client_repo.update_sms_verification(self.db, verification, status=STATUS_VERIFIED)
        client = client_repo.update_client(self.db, client, verified=True)
        logger.info("SMS challenge verified for client %s", client.id)
        return client

    def _send_challenge(self, verification: models.SmsVerification, mobile_number: str) -> models.SmsVerification:
        sms_challenge = crypto.generate_sms_challenge(get_trust_settings().sms_challenge_digits)
        verification = client_repo.update_sms_verification(
            self.db,
            verification,
            sms_challenge_hash=crypto.sha256_hex(sms_challenge),
            client_challenge=crypto.generate_uuid(),
            sms_handle=crypto.generate_sms_handle(),
            status=STATUS_PENDING,
        )

        if self.sms_sender.send_sms_challenge(mobile_number, sms_challenge):
            status = STATUS_SENT
        else:
            logger.warning("Failed to send SMS challenge for verification %s", verification.id)
            status = STATUS_FAILED
        return client_repo.update_sms_verification(self.db, verification, status=status)
