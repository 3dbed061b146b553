"""RFC 4226 HOTP (HMAC-based One-Time Password) implementation."""

from dataclasses import dataclass
from typing import ClassVar, Union

from otp_codec.errors import InvalidArgument
from otp_codec.hashing import DigestSpec
from otp_codec.otp import DEFAULT_DIGITS, OTP, OTPMethod


@dataclass(frozen=True)
class HOTP(OTP):
    """
    Counter-based OTP.

    ``initial_count`` is added to every counter passed to :meth:`at`,
    :meth:`compare` and :meth:`verify`.
    """

    initial_count: int = 0

    method: ClassVar[OTPMethod] = OTPMethod.HOTP

    def __post_init__(self) -> None:
        super().__post_init__()
        if isinstance(self.initial_count, bool) or not isinstance(self.initial_count, int):
            raise InvalidArgument(f"initial_count must be an integer, got {self.initial_count!r}")
        if self.initial_count < 0:
            raise InvalidArgument("initial_count must not be negative")

    def at(self, count: int) -> str:
        """
        Generate the code for the given counter.

        Args:
            count: The moving counter value.

        Returns:
            A zero-padded HOTP code string.
        """
        return self.generate_otp(self.initial_count + count)

    generate = at

    def compare(self, counter: int, candidate: Union[str, int]) -> bool:
        """Check a candidate code, text or integer, against the code for ``counter``."""
        return self.matches(self.initial_count + counter, candidate)

    def verify(self, otp: Union[str, int], counter: int) -> bool:
        """Verify ``otp`` against the code for ``counter``."""
        return self.compare(counter, otp)


def generate_hotp(
    secret: str,
    counter: int,
    digits: int = DEFAULT_DIGITS,
    digest: DigestSpec = None,
) -> str:
    """
    Generate an HOTP code using RFC 4226.

    Args:
        secret: The HOTP secret, Base32 encoded.
        counter: The moving counter value (incremented after each use).
        digits: Number of digits in the output code (default: 6).
        digest: Keyed-hash capability or algorithm name (default: HMAC-SHA1).

    Returns:
        A zero-padded HOTP code string.

    Raises:
        InvalidArgument: If the secret or counter is malformed.
        InvalidConfig: If digits or digest are unusable.
    """
    return HOTP(secret, digits=digits, digest=digest).at(counter)
