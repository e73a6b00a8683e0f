"""
Client repository functions.

Implements persistence for clients, their devices, mobile numbers and SMS
verifications.
"""
from __future__ import annotations

import uuid
from typing import Optional
from sqlalchemy.orm import Session

from product_ethics.db import models


def create_client(
    db: Session,
    *,
    username: Optional[str] = None,
    password_hashed: Optional[str] = None,
    trust_level: float,
    role: str = 'user',
):
    db_client = models.Client(
        username=username,
        password_hashed=password_hashed,
        trust_level=trust_level,
        role=role,
        verified=False,
    )
    db.add(db_client)
    db.flush()
    db.refresh(db_client)
    return db_client


def get_client(db: Session, client_id: uuid.UUID):
    return db.query(models.Client).filter(models.Client.id == client_id).first()


def get_client_by_username(db: Session, username: str):
    return db.query(models.Client).filter(models.Client.username == username).first()


def get_client_by_mobile_number_hash_password_hash(db: Session, hashed: str):
    return (
        db.query(models.Client)
        .filter(models.Client.mobile_number_hash_password_hash_hashed == hashed)
        .first()
    )


def update_client(db: Session, client: models.Client, **fields):
    for key, value in fields.items():
        setattr(client, key, value)
    db.flush()
    db.refresh(client)
    return client


def create_client_device(db: Session, client_id: uuid.UUID, id_hashed: str, device_type: str = 'unknown'):
    db_device = models.ClientDevice(client_id=client_id, id_hashed=id_hashed, type=device_type, enabled=True)
    db.add(db_device)
    db.flush()
    db.refresh(db_device)
    return db_device


def get_client_device_by_id_hashed(db: Session, id_hashed: str):
    return (
        db.query(models.ClientDevice)
        .filter(models.ClientDevice.id_hashed == id_hashed, models.ClientDevice.enabled.is_(True))
        .first()
    )


def get_mobile_number(db: Session, mobile_number_hash: str):
    return db.query(models.MobileNumber).filter(models.MobileNumber.mobile_number_hash == mobile_number_hash).first()


def create_mobile_number(db: Session, mobile_number_hash: str):
    db_mobile = models.MobileNumber(mobile_number_hash=mobile_number_hash)
    db.add(db_mobile)
    db.flush()
    db.refresh(db_mobile)
    return db_mobile


def get_sms_verification(db: Session, mobile_number_hash: str):
    return (
        db.query(models.SmsVerification)
        .filter(models.SmsVerification.mobile_number_hash == mobile_number_hash)
        .first()
    )


def create_sms_verification(db: Session, mobile_number_hash: str):
    db_verification = models.SmsVerification(mobile_number_hash=mobile_number_hash, status='unknown')
    db.add(db_verification)
    db.flush()
    db.refresh(db_verification)
    return db_verification


def update_sms_verification(db: Session, verification: models.SmsVerification, **fields):
    for key, value in fields.items():
        setattr(verification, key, value)
    db.flush()
    db.refresh(verification)
    return verification
