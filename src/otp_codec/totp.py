"""RFC 6238 TOTP (Time-based One-Time Password) implementation."""

import datetime
import logging
import time
from dataclasses import dataclass
from typing import ClassVar, Optional, Union

from otp_codec.errors import InvalidArgument, InvalidConfig
from otp_codec.otp import MAX_COUNTER, OTP, OTPMethod


logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 30

TimeInput = Union[int, float, datetime.datetime]


def _unix_seconds(for_time: TimeInput) -> Union[int, float]:
    if isinstance(for_time, datetime.datetime):
        # naive datetimes are interpreted as local time
        seconds: Union[int, float] = for_time.timestamp()
    elif isinstance(for_time, bool) or not isinstance(for_time, (int, float)):
        raise InvalidArgument(f"time must be Unix seconds or a datetime, got {for_time!r}")
    else:
        seconds = for_time
    if seconds < 0:
        raise InvalidArgument("time must not be before the Unix epoch")
    return seconds


def _check_window(valid_window: int) -> int:
    if isinstance(valid_window, bool) or not isinstance(valid_window, int):
        raise InvalidArgument(f"valid_window must be an integer, got {valid_window!r}")
    if valid_window < 0:
        raise InvalidArgument(f"valid_window must not be negative, got {valid_window}")
    return valid_window


@dataclass(frozen=True)
class TOTP(OTP):
    """
    Time-based OTP: the HOTP counter is the number of ``interval`` second
    steps elapsed since the Unix epoch.
    """

    interval: int = DEFAULT_INTERVAL

    method: ClassVar[OTPMethod] = OTPMethod.TOTP

    def __post_init__(self) -> None:
        super().__post_init__()
        if isinstance(self.interval, bool) or not isinstance(self.interval, int):
            raise InvalidConfig(f"interval must be an integer number of seconds, got {self.interval!r}")
        if self.interval <= 0:
            raise InvalidConfig(f"interval must be positive, got {self.interval}")

    def timecode(self, for_time: TimeInput) -> int:
        """
        Return the time step containing ``for_time``.

        Args:
            for_time: Unix seconds or a datetime.

        Raises:
            InvalidArgument: If the time is negative or of an unsupported type.
            InvalidConfig: If the interval is not positive.
        """
        if self.interval <= 0:
            raise InvalidConfig(f"interval must be positive, got {self.interval}")
        return int(_unix_seconds(for_time) // self.interval)

    def at(self, for_time: TimeInput, counter_offset: int = 0) -> str:
        """
        Generate the code for the time step of ``for_time`` shifted by
        ``counter_offset`` steps.
        """
        return self.generate_otp(self.timecode(for_time) + counter_offset)

    def now(self) -> str:
        """Generate the code for the current time."""
        return self.at(time.time())

    def compare(
        self,
        otp: Union[str, int],
        counter_offset: int = 0,
        for_time: Optional[TimeInput] = None,
    ) -> bool:
        """
        Compare ``otp`` with the code of a single time step.

        Integer candidates are zero-padded before comparing.
        """
        if for_time is None:
            for_time = time.time()
        counter = self.timecode(for_time) + counter_offset
        return self.matches(counter, otp)

    def verify(
        self,
        otp: Union[str, int],
        for_time: Optional[TimeInput] = None,
        valid_window: int = 0,
    ) -> bool:
        """
        Verify an OTP against the current time or ``for_time``.

        With ``valid_window`` > 0 the time steps ``-valid_window`` through
        ``valid_window - 1`` around ``for_time`` are accepted. Steps that
        would fall outside the 32-bit counter range are skipped.

        Args:
            otp: The code to check, as text or an integer.
            for_time: Time to check against, defaults to now.
            valid_window: Number of steps of clock drift to tolerate.

        Returns:
            True if a step in the window produces ``otp``.

        Raises:
            InvalidArgument: If valid_window is negative or not an integer.
        """
        _check_window(valid_window)
        if for_time is None:
            for_time = time.time()

        if valid_window == 0:
            return self.compare(otp, 0, for_time)

        base = self.timecode(for_time)
        for offset in range(-valid_window, valid_window):
            if not 0 <= base + offset <= MAX_COUNTER:
                continue
            if self.compare(otp, offset, for_time):
                logger.debug("OTP matched at step offset %d", offset)
                return True
        return False

    def valid_until(self, for_time: TimeInput, valid_window: int = 0) -> Union[int, float]:
        """
        Return the Unix time ``valid_window`` intervals after ``for_time``.
        """
        _check_window(valid_window)
        return _unix_seconds(for_time) + self.interval * valid_window
