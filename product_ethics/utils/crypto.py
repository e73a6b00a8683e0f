"""
Hashing and random value helpers for clients and SMS verification.

Responsibilities:
- SHA-256 hex digests for device ids, mobile numbers and challenges
- The mobile/password "hash of hashes" used to look clients up on recovery
- Random SMS challenges and handles
- Password hashing with Argon2id
"""
from __future__ import annotations

import base64
import hashlib
import secrets
import uuid

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from argon2.low_level import Type

_argon2 = PasswordHasher(time_cost=2, memory_cost=102400, parallelism=8, hash_len=32, type=Type.ID)


def generate_uuid() -> str:
    return str(uuid.uuid4())


def sha256_hex(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def hash_of_hashes(first: str, second: str) -> str:
    """Return sha256(sha256(first) + sha256(second))."""
    return sha256_hex(sha256_hex(first) + sha256_hex(second))


def generate_sms_challenge(digits: int = 5) -> str:
    """Return a random numeric challenge of exactly ``digits`` digits."""
    lower = 10 ** (digits - 1)
    return str(lower + secrets.randbelow(9 * lower))


def generate_sms_handle() -> str:
    """Return a base64 handle built from 16 random bytes."""
    return base64.b64encode(secrets.token_bytes(16)).decode("ascii")


def hash_password(password: str) -> str:
    return _argon2.hash(password)


def verify_password(password: str, encoded_hash: str | None) -> bool:
    if not password or not encoded_hash:
        return False
    try:
        return _argon2.verify(encoded_hash, password)
    except (VerificationError, InvalidHashError):
        return False
