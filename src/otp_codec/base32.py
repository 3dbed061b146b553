"""Base32 secret decoding and random secret provisioning."""

import secrets
from typing import Optional, Sequence

from otp_codec.errors import InvalidArgument


BASE32_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
BLOCK_CHARS = 8
BLOCK_BYTES = 5

# Bit shift of each symbol inside its block, negative values spill into the next octet
_SHIFTS = tuple(3 - (5 * position) % 8 for position in range(BLOCK_CHARS))


def _symbol_value(char: str) -> Optional[int]:
    if "A" <= char <= "Z":
        return ord(char) - ord("A")
    if "2" <= char <= "7":
        return 26 + ord(char) - ord("2")
    return None


def _decode_block(block: str) -> bytes:
    """
    Decode one block of up to 8 symbols.

    Decoding stops at the first character outside the alphabet (padding
    included), and only the octets fully covered by the symbols read so
    far are returned.
    """
    octets = bytearray(BLOCK_BYTES)
    symbols = 0
    for position, char in enumerate(block):
        value = _symbol_value(char)
        if value is None:
            break
        octet = (position * 5) // 8
        shift = _SHIFTS[position]
        if shift >= 0:
            octets[octet] |= (value << shift) & 0xFF
        else:
            octets[octet] |= value >> -shift
            octets[octet + 1] |= (value << (8 + shift)) & 0xFF
        symbols += 1
    return bytes(octets[: (symbols * 5) // 8])


def decode_base32(secret: str, strict: bool = True) -> bytes:
    """
    Decode a Base32 secret into raw key bytes.

    Args:
        secret: Uppercase Base32 text (A-Z, 2-7), optionally '=' padded.
        strict: Reject secrets whose length is not a multiple of 8. When
            False, only the leading full blocks are decoded.

    Returns:
        The decoded key bytes. Decoding ends at the first block that yields
        fewer than 5 bytes.

    Raises:
        InvalidArgument: If the secret is not a string, or if strict and its
            length is not a multiple of 8.
    """
    if not isinstance(secret, str):
        raise InvalidArgument("Base32 secret must be a string")
    if strict and len(secret) % BLOCK_CHARS != 0:
        raise InvalidArgument(
            f"Base32 secret length must be a multiple of {BLOCK_CHARS}, got {len(secret)}"
        )

    full_length = len(secret) - len(secret) % BLOCK_CHARS
    decoded = bytearray()
    for start in range(0, full_length, BLOCK_CHARS):
        chunk = _decode_block(secret[start : start + BLOCK_CHARS])
        decoded += chunk
        if len(chunk) < BLOCK_BYTES:
            break
    return bytes(decoded)


def random_base32(length: int = 32, chars: Sequence[str] = BASE32_ALPHABET) -> str:
    """
    Generate a random Base32 secret for provisioning.

    Args:
        length: Number of symbols, a multiple of 8 and at least 16.
        chars: The 32-symbol alphabet to draw from.

    Returns:
        The generated secret.

    Raises:
        InvalidArgument: If the length or alphabet is unusable.
    """
    if length < 16 or length % BLOCK_CHARS != 0:
        raise InvalidArgument("Secret length must be a multiple of 8 and at least 16 (80 bits)")
    if len(chars) != 32:
        raise InvalidArgument("Base32 alphabet must contain exactly 32 symbols")
    return "".join(secrets.choice(chars) for _ in range(length))
