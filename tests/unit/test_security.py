"""Unit tests for security utilities (password hashing, JWT tokens, reset codes)."""

from datetime import timedelta
from uuid import uuid4

import pytest
from jose import JWTError

from budgetapp.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    generate_otp,
    get_user_id_from_token,
    hash_otp,
    hash_password,
    verify_otp,
    verify_password,
)


class TestPasswordHashing:
    """Test password hashing functions."""

    def test_hash_password(self):
        """Test that password is hashed with Argon2."""
        password = "MySecurePassword123!"
        hashed = hash_password(password)

        assert hashed != password
        assert hashed.startswith("$argon2")

    def test_verify_password(self):
        hashed = hash_password("MySecurePassword123!")

        assert verify_password("MySecurePassword123!", hashed) is True
        assert verify_password("WrongPassword456!", hashed) is False

    def test_hash_same_password_different_hashes(self):
        """Test that hashing same password twice produces different hashes (salt)."""
        hash1 = hash_password("secret1")
        hash2 = hash_password("secret1")

        assert hash1 != hash2
        assert verify_password("secret1", hash1) is True
        assert verify_password("secret1", hash2) is True


class TestJWTTokens:
    """Test JWT token creation and validation."""

    def test_create_access_token(self):
        user_id = uuid4()
        payload = decode_token(create_access_token(user_id))

        assert payload["sub"] == str(user_id)
        assert payload["type"] == "access"
        assert "exp" in payload

    def test_create_refresh_token(self):
        user_id = uuid4()
        payload = decode_token(create_refresh_token(user_id))

        assert payload["sub"] == str(user_id)
        assert payload["type"] == "refresh"

    def test_expired_token_rejected(self):
        """A token whose expiry is in the past does not decode."""
        token = create_access_token(uuid4(), expires_delta=timedelta(seconds=-10))

        with pytest.raises(JWTError):
            decode_token(token)

    def test_decode_tampered_token(self):
        token = create_access_token(uuid4())
        tampered_token = token[:-5] + "XXXXX"

        with pytest.raises(JWTError):
            decode_token(tampered_token)

    def test_get_user_id_from_token(self):
        user_id = uuid4()
        assert get_user_id_from_token(create_access_token(user_id)) == user_id

    def test_expected_type_enforced(self):
        """Refresh tokens cannot be used where access tokens are expected and vice versa."""
        user_id = uuid4()

        assert get_user_id_from_token(create_access_token(user_id), "access") == user_id
        assert get_user_id_from_token(create_refresh_token(user_id), "refresh") == user_id
        with pytest.raises(JWTError):
            get_user_id_from_token(create_refresh_token(user_id), expected_type="access")
        with pytest.raises(JWTError):
            get_user_id_from_token(create_access_token(user_id), expected_type="refresh")

    def test_get_user_id_from_invalid_token(self):
        with pytest.raises(JWTError):
            get_user_id_from_token("invalid.token.string")


class TestResetCodes:
    """Test one-time reset code helpers."""

    def test_generate_otp_is_six_digits(self):
        for _ in range(50):
            code = generate_otp()
            assert len(code) == 6
            assert code.isdigit()
            assert code[0] != "0"

    def test_hash_otp_is_sha256_hex(self):
        digest = hash_otp("123456")
        assert len(digest) == 64
        assert digest != "123456"
        assert hash_otp("123456") == digest

    def test_verify_otp(self):
        digest = hash_otp("123456")
        assert verify_otp("123456", digest) is True
        assert verify_otp("654321", digest) is False
