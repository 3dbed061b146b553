"""Exception hierarchy for OTP generation and verification."""


class OTPError(Exception):
    """Base class for every error raised by otp_codec."""


class InvalidArgument(OTPError, ValueError):
    """A call received a malformed secret, counter, time or window."""


class InvalidConfig(OTPError, ValueError):
    """An OTP configuration cannot produce valid codes."""


class GenerationFailed(OTPError, RuntimeError):
    """The codec pipeline could not produce a code."""


class HashCapabilityFailed(GenerationFailed):
    """The injected keyed-hash function failed or returned no digest."""
