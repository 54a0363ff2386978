"""Tests for password hashing and validation."""

import pytest

from casedesk.auth.password import (
    PasswordStrengthError,
    check_needs_rehash,
    hash_password,
    validate_password_strength,
    verify_password,
)


class TestHashing:
    def test_hash_is_argon2id(self):
        assert hash_password("secret123").startswith("$argon2id$")

    def test_verify_correct(self):
        assert verify_password("secret123", hash_password("secret123")) is True

    def test_verify_wrong(self):
        assert verify_password("wrong-one", hash_password("secret123")) is False

    def test_verify_garbage_hash(self):
        assert verify_password("secret123", "not-a-hash") is False

    def test_fresh_hash_needs_no_rehash(self):
        assert check_needs_rehash(hash_password("secret123")) is False


class TestStrength:
    def test_accepts_min_length(self):
        validate_password_strength("abcdef")

    @pytest.mark.parametrize("password", ["", "      ", "abc"])
    def test_rejects_blank_or_short(self, password):
        with pytest.raises(PasswordStrengthError):
            validate_password_strength(password)

    def test_rejects_too_long(self):
        with pytest.raises(PasswordStrengthError, match="exceed"):
            validate_password_strength("a" * 129)
