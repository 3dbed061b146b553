"""HOTP and TOTP one-time password generation and verification."""

from otp_codec.base32 import decode_base32, random_base32
from otp_codec.errors import (
    GenerationFailed,
    HashCapabilityFailed,
    InvalidArgument,
    InvalidConfig,
    OTPError,
)
from otp_codec.hashing import FunctionHash, HashAlgorithm, HmacHash, KeyedHash
from otp_codec.hotp import HOTP, generate_hotp
from otp_codec.otp import OTP, OTPMethod, format_code, truncate
from otp_codec.totp import TOTP

__all__ = [
    "HOTP",
    "OTP",
    "TOTP",
    "FunctionHash",
    "GenerationFailed",
    "HashAlgorithm",
    "HashCapabilityFailed",
    "HmacHash",
    "InvalidArgument",
    "InvalidConfig",
    "KeyedHash",
    "OTPError",
    "OTPMethod",
    "decode_base32",
    "format_code",
    "generate_hotp",
    "random_base32",
    "truncate",
]
