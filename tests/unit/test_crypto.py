import base64
import hashlib

from product_ethics.utils.crypto import (
    generate_sms_challenge,
    generate_sms_handle,
    generate_uuid,
    hash_of_hashes,
    hash_password,
    sha256_hex,
    verify_password,
)


def test_sha256_hex_and_hash_of_hashes():
    assert sha256_hex("abc") == hashlib.sha256(b"abc").hexdigest()
    expected = sha256_hex(sha256_hex("12345678") + sha256_hex("pw"))
    assert hash_of_hashes("12345678", "pw") == expected
    # Order matters
    assert hash_of_hashes("pw", "12345678") != expected


def test_sms_challenge_has_requested_digits():
    for _ in range(50):
        challenge = generate_sms_challenge()
        assert len(challenge) == 5 and challenge.isdigit() and challenge[0] != "0"
    assert len(generate_sms_challenge(6)) == 6


def test_sms_handle_is_16_random_bytes():
    handle = generate_sms_handle()
    assert len(base64.b64decode(handle)) == 16
    assert handle != generate_sms_handle()


def test_generate_uuid_unique():
    assert generate_uuid() != generate_uuid()


def test_password_hash_and_verify():
    h = hash_password("topsecret")
    assert h.startswith("$argon2id$")
    assert verify_password("topsecret", h) is True
    assert verify_password("wrong", h) is False
    assert verify_password("topsecret", None) is False
    assert verify_password("", h) is False
    assert verify_password("topsecret", "not-a-hash") is False
