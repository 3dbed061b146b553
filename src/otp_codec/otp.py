"""Shared OTP configuration and the RFC 4226 code generation pipeline."""

import hmac
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Optional, Union

from otp_codec.base32 import BLOCK_CHARS, decode_base32
from otp_codec.errors import InvalidArgument, InvalidConfig
from otp_codec.hashing import DigestSpec, KeyedHash, resolve_hash


DEFAULT_DIGITS = 6
MAX_DIGITS = 9
# offset (max 15) + 4 bytes must stay inside the digest
MIN_DIGEST_BYTES = 20
MAX_COUNTER = 0xFFFFFFFF


class OTPMethod(Enum):
    OTP = "otp"
    HOTP = "hotp"
    TOTP = "totp"


def _check_digits(digits: Any) -> int:
    if isinstance(digits, bool) or not isinstance(digits, int):
        raise InvalidConfig(f"digits must be an integer, got {digits!r}")
    if not 0 < digits <= MAX_DIGITS:
        raise InvalidConfig(f"digits must be between 1 and {MAX_DIGITS}, got {digits}")
    return digits


def truncate(digest: bytes, digits: int = DEFAULT_DIGITS) -> int:
    """
    Apply RFC 4226 dynamic truncation to a digest.

    Args:
        digest: The keyed-hash output, at least 20 bytes long.
        digits: Number of decimal digits to keep.

    Returns:
        The 31-bit truncated value reduced modulo 10**digits.

    Raises:
        InvalidConfig: If the digest is too short for every possible offset,
            or digits is out of range.
    """
    _check_digits(digits)
    if len(digest) < MIN_DIGEST_BYTES:
        raise InvalidConfig(
            f"digest is {len(digest)} bytes, dynamic truncation needs at least {MIN_DIGEST_BYTES}"
        )

    offset = digest[-1] & 0x0F
    binary = (
        ((digest[offset] & 0x7F) << 24)
        | ((digest[offset + 1] & 0xFF) << 16)
        | ((digest[offset + 2] & 0xFF) << 8)
        | (digest[offset + 3] & 0xFF)
    )
    return binary % (10**digits)


def format_code(code: int, digits: int = DEFAULT_DIGITS) -> str:
    """Render a code as decimal text, zero-padded to exactly ``digits`` characters."""
    return f"{code:0{digits}d}"


def normalize_candidate(candidate: Union[str, int], digits: int) -> str:
    """
    Bring a candidate code into the same textual form as generated codes.

    Integers are zero-padded to ``digits`` so that codes with leading zeros
    compare equal; text is compared as given.
    """
    if isinstance(candidate, bool):
        raise InvalidArgument("candidate code must be text or an integer")
    if isinstance(candidate, int):
        return format_code(candidate, digits)
    if isinstance(candidate, str):
        return candidate
    raise InvalidArgument(f"candidate code must be text or an integer, got {type(candidate).__name__}")


@dataclass(frozen=True)
class OTP:
    """
    Base OTP configuration: a Base32 secret, a keyed hash and a code length.

    Instances are immutable and can be shared between threads as long as
    the keyed-hash capability is itself thread-safe.
    """

    secret: str = field(repr=False)
    digits: int = DEFAULT_DIGITS
    digest: DigestSpec = None
    digest_bits: Optional[int] = None

    method: ClassVar[OTPMethod] = OTPMethod.OTP

    def __post_init__(self) -> None:
        _check_digits(self.digits)

        capability: KeyedHash = resolve_hash(self.digest, self.digest_bits)
        if capability.digest_size < MIN_DIGEST_BYTES:
            raise InvalidConfig(
                f"{capability.name} produces {capability.digest_size} bytes, "
                f"dynamic truncation needs at least {MIN_DIGEST_BYTES}"
            )
        object.__setattr__(self, "digest", capability)
        object.__setattr__(self, "digest_bits", capability.digest_bits)

        if not isinstance(self.secret, str):
            raise InvalidArgument("secret must be a Base32 string")
        if not self.secret:
            raise InvalidArgument("secret must not be empty")
        if len(self.secret) % BLOCK_CHARS != 0:
            raise InvalidArgument(
                f"secret length must be a multiple of {BLOCK_CHARS}, got {len(self.secret)}"
            )

    def byte_secret(self) -> bytes:
        return decode_base32(self.secret)

    @staticmethod
    def int_to_bytestring(i: int, padding: int = 8) -> bytes:
        """
        Encode a counter as the big-endian byte string fed to the HMAC.

        Args:
            i: Non-negative counter that fits in 32 bits.
            padding: Output length in bytes.

        Raises:
            InvalidArgument: If the counter is negative, too large or not an integer.
        """
        if isinstance(i, bool) or not isinstance(i, int):
            raise InvalidArgument(f"counter must be an integer, got {i!r}")
        if i < 0:
            raise InvalidArgument("counter must be a non-negative integer")
        if i > MAX_COUNTER:
            raise InvalidArgument(f"counter {i} does not fit in 32 bits")
        return i.to_bytes(padding, byteorder="big")

    def generate_int(self, counter: int) -> int:
        """
        Run the pipeline for one counter value and return the numeric code.

        Raises:
            InvalidArgument: If the counter is invalid.
            GenerationFailed: If the keyed hash fails or returns a bad digest.
        """
        message = self.int_to_bytestring(counter)
        digest = self.digest(self.byte_secret(), message)
        return truncate(digest, self.digits)

    def generate_otp(self, counter: int) -> str:
        """
        Generate the zero-padded code for a counter value.

        Args:
            counter: The HMAC counter; either an explicit HOTP counter or the
                time step computed from a timestamp.

        Returns:
            The code as exactly ``digits`` decimal characters.
        """
        return format_code(self.generate_int(counter), self.digits)

    def matches(self, counter: int, candidate: Union[str, int]) -> bool:
        """
        Compare a candidate with the code for a raw counter value.

        The comparison is textual: integer candidates are zero-padded to
        ``digits`` first, so ``1234`` matches ``"001234"``.
        """
        expected = self.generate_otp(counter)
        given = normalize_candidate(candidate, self.digits)
        return hmac.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))
