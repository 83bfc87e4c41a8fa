"""
Tests for key hashing, masking and generation.
"""

from app.core.security import (
    generate_user_key_secret,
    hash_for_lookup,
    hash_secret,
    mask_for_display,
    verify_secret,
)


def test_lookup_hash_is_deterministic_hex():
    digest = hash_for_lookup("alice-key-1")
    assert digest == hash_for_lookup("alice-key-1")
    assert len(digest) == 64
    assert int(digest, 16) >= 0
    assert digest != hash_for_lookup("alice-key-2")


def test_lookup_hash_known_value():
    assert hash_for_lookup("abc") == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"


def test_mask_keeps_last_four_characters():
    masked = mask_for_display("abcdef1234")
    assert masked == "******1234"
    assert len(masked) == len("abcdef1234")


def test_mask_short_and_empty_values():
    assert mask_for_display("") == ""
    assert mask_for_display("abc") == "abc"
    assert mask_for_display("abcd") == "abcd"
    assert mask_for_display("abcde") == "*bcde"


def test_generated_key_format():
    key = generate_user_key_secret()
    assert key.startswith("uk_live_")
    assert len(key) > len("uk_live_") + 40
    assert key != generate_user_key_secret()


def test_hash_and_verify_secret():
    hashed = hash_secret("s3cret")
    assert hashed != "s3cret"
    assert hashed.startswith("$2")
    assert verify_secret("s3cret", hashed) is True
    assert verify_secret("wrong", hashed) is False


def test_hash_is_salted():
    assert hash_secret("same") != hash_secret("same")


def test_verify_against_unreadable_hash_is_false():
    assert verify_secret("s3cret", "not-a-bcrypt-hash") is False
