#!/usr/bin/env python3
"""
Unit Tests for Security Utilities
Tests for braincache/core/security.py
"""

from datetime import timedelta

import pytest

from braincache.core.exceptions import AuthenticationException
from braincache.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    get_password_hash,
    verify_access_token,
    verify_password,
    verify_refresh_token,
)


class TestPasswordHashing:
    """Test password hashing and verification"""

    def test_hash_differs_from_password(self):
        """Test password hashing returns a hash"""
        hashed = get_password_hash("test_password_123")
        assert isinstance(hashed, str)
        assert hashed != "test_password_123"

    def test_salted_hashes_both_verify(self):
        """Test bcrypt salts each hash but both verify"""
        hash1 = get_password_hash("test_password_123")
        hash2 = get_password_hash("test_password_123")
        assert hash1 != hash2
        assert verify_password("test_password_123", hash1)
        assert verify_password("test_password_123", hash2)

    def test_wrong_password_rejected(self):
        hashed = get_password_hash("test_password_123")
        assert verify_password("wrong_password_456", hashed) is False


class TestTokens:
    """Test JWT creation and verification"""

    def test_access_token_round_trip(self):
        """Test access token carries subject and type"""
        token = create_access_token({"sub": "user-1"})
        payload = verify_access_token(token)
        assert payload["sub"] == "user-1"
        assert payload["type"] == "access"

    def test_refresh_token_is_not_an_access_token(self):
        """Test a refresh token cannot be used as access token"""
        token = create_refresh_token({"sub": "user-1"})
        assert verify_refresh_token(token)["type"] == "refresh"
        with pytest.raises(AuthenticationException):
            verify_access_token(token)

    def test_expired_token_rejected(self):
        token = create_access_token({"sub": "user-1"}, expires_delta=timedelta(seconds=-1))
        with pytest.raises(AuthenticationException):
            decode_token(token)

    def test_garbage_token_rejected(self):
        with pytest.raises(AuthenticationException) as exc_info:
            decode_token("not.a.token")
        assert exc_info.value.message == "Invalid token"
