"""Tests for OTP and reset token generation."""

import re
from datetime import datetime, timedelta
from unittest.mock import patch

from authgate.services.codes import generate_otp, generate_reset_token, is_expired


def test_otp_is_six_digits():
    for _ in range(50):
        otp = generate_otp()
        assert re.fullmatch(r"\d{6}", otp)


def test_otp_keeps_leading_zeros():
    with patch("authgate.services.codes.secrets.randbelow", return_value=42):
        assert generate_otp() == "000042"


def test_reset_token_is_64_hex_chars():
    token = generate_reset_token()
    assert re.fullmatch(r"[0-9a-f]{64}", token)
    assert generate_reset_token() != token


def test_is_expired():
    now = datetime(2024, 1, 1, 12, 0, 0)
    assert is_expired(None, now)
    assert is_expired(now - timedelta(seconds=1), now)
    assert not is_expired(now + timedelta(minutes=5), now)
