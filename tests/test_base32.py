"""Tests for Base32 secret decoding and provisioning."""

import base64

import pytest

from otp_codec.base32 import BASE32_ALPHABET, decode_base32, random_base32
from otp_codec.errors import InvalidArgument


def test_decode_full_blocks():
    """Test decoding a secret made of full 8-character blocks."""
    assert decode_base32("GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ") == b"12345678901234567890"


def test_decode_matches_standard_library():
    """Test that decoding agrees with base64.b32decode."""
    secret = "JBSWY3DPEHPK3PXPJBSWY3DPEHPK3PXP"
    assert decode_base32(secret) == base64.b32decode(secret)


@pytest.mark.parametrize(
    "secret,expected",
    [
        ("GE======", b"1"),
        ("GEZA====", b"12"),
        ("GEZDG===", b"123"),
        ("GEZDGNA=", b"1234"),
        ("GEZDGNBV", b"12345"),
    ],
)
def test_decode_padded_tail(secret, expected):
    """Test that a padded final block yields only its whole bytes."""
    assert decode_base32(secret) == expected


def test_decode_stops_after_short_block():
    """Blocks after a padded block are ignored."""
    assert decode_base32("GEZA====GEZDGNBV") == b"12"


def test_decode_stops_at_invalid_character():
    """Test that a non-alphabet character ends decoding."""
    assert decode_base32("GEZD1NBV") == b"12"


def test_decode_empty():
    """Test that an empty secret decodes to no bytes."""
    assert decode_base32("") == b""


def test_decode_rejects_partial_block_when_strict():
    """Test that strict decoding rejects a partial block."""
    with pytest.raises(InvalidArgument, match="multiple of 8"):
        decode_base32("GEZDGNBVGY3")


def test_decode_leading_blocks_when_not_strict():
    """Test that lenient decoding keeps only the leading full blocks."""
    assert decode_base32("GEZDGNBVGY3", strict=False) == b"12345"


def test_decode_rejects_non_string():
    """Test that byte strings are rejected."""
    with pytest.raises(InvalidArgument):
        decode_base32(b"GEZDGNBV")


def test_random_base32():
    """Test that generated secrets use the alphabet and decode to 160 bits."""
    secret = random_base32()

    assert len(secret) == 32
    assert set(secret) <= set(BASE32_ALPHABET)
    assert len(decode_base32(secret)) == 20


def test_random_base32_custom_length():
    """Test generating a secret of a custom length."""
    assert len(random_base32(16)) == 16


@pytest.mark.parametrize("length", [0, 8, 20])
def test_random_base32_rejects_bad_length(length):
    """Test that short or partial-block lengths are rejected."""
    with pytest.raises(InvalidArgument):
        random_base32(length)


def test_random_base32_rejects_short_alphabet():
    """Test that an alphabet without 32 symbols is rejected."""
    with pytest.raises(InvalidArgument, match="32 symbols"):
        random_base32(32, chars="ABC")
