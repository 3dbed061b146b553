"""Command-line interface for otp-codec."""

import argparse
import logging
import os
import sys
from typing import List, Optional

from otp_codec.base32 import random_base32
from otp_codec.errors import OTPError
from otp_codec.hotp import HOTP
from otp_codec.otp import DEFAULT_DIGITS, MAX_DIGITS
from otp_codec.totp import DEFAULT_INTERVAL, TOTP


SECRET_ENV = "OTP_SECRET"

logger = logging.getLogger(__name__)


def _secret(args: argparse.Namespace) -> str:
    secret = args.secret or os.environ.get(SECRET_ENV)
    if not secret:
        raise OTPError(f"No secret given; pass --secret or set {SECRET_ENV}")
    return secret


def secret_command(args: argparse.Namespace) -> int:
    """Handle the secret command."""
    try:
        print(random_base32(args.length))
        return 0
    except OTPError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1


def hotp_command(args: argparse.Namespace) -> int:
    """Handle the hotp command."""
    try:
        hotp = HOTP(_secret(args), digits=args.digits, digest=args.algorithm)
        print(hotp.at(args.counter))
        return 0
    except OTPError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1


def totp_command(args: argparse.Namespace) -> int:
    """Handle the totp command."""
    try:
        totp = TOTP(
            _secret(args),
            digits=args.digits,
            digest=args.algorithm,
            interval=args.interval,
        )
        code = totp.now() if args.time is None else totp.at(args.time)
        print(code)
        return 0
    except OTPError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1


def verify_command(args: argparse.Namespace) -> int:
    """Handle the verify command."""
    try:
        if args.counter is not None:
            otp = HOTP(_secret(args), digits=args.digits, digest=args.algorithm)
            valid = otp.verify(args.code, args.counter)
        else:
            otp = TOTP(
                _secret(args),
                digits=args.digits,
                digest=args.algorithm,
                interval=args.interval,
            )
            valid = otp.verify(args.code, for_time=args.time, valid_window=args.window)
    except OTPError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1

    logger.debug("%s verification of %s: %s", otp.method.value, args.code, valid)
    if valid:
        print("✓ Code is valid")
        return 0
    print("✗ Code is not valid", file=sys.stderr)
    return 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    # Options shared by every generating command
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--secret",
        "-s",
        default=None,
        help=f"Base32 secret (default: ${SECRET_ENV})",
    )
    common.add_argument(
        "--digits",
        "-d",
        type=int,
        default=DEFAULT_DIGITS,
        choices=range(1, MAX_DIGITS + 1),
        metavar="{1..9}",
        help=f"Number of digits in the code (default: {DEFAULT_DIGITS})",
    )
    common.add_argument(
        "--algorithm",
        "-a",
        default="SHA1",
        choices=["SHA1", "SHA256", "SHA512"],
        help="HMAC hash algorithm (default: SHA1)",
    )

    parser = argparse.ArgumentParser(
        description="HOTP/TOTP one-time password generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Secret command
    secret_parser = subparsers.add_parser(
        "secret",
        aliases=["new"],
        help="Generate a random Base32 secret",
    )
    secret_parser.add_argument(
        "--length",
        "-l",
        type=int,
        default=32,
        help="Number of Base32 characters (default: 32)",
    )

    # HOTP command
    hotp_parser = subparsers.add_parser(
        "hotp",
        parents=[common],
        help="Generate the HOTP code for a counter",
    )
    hotp_parser.add_argument(
        "--counter",
        "-c",
        type=int,
        required=True,
        help="HOTP counter value",
    )

    # TOTP command
    totp_parser = subparsers.add_parser(
        "totp",
        aliases=["now"],
        parents=[common],
        help="Generate the TOTP code for now or a given time",
    )
    totp_parser.add_argument(
        "--time",
        "-t",
        type=int,
        default=None,
        help="Unix time in seconds (default: now)",
    )
    totp_parser.add_argument(
        "--interval",
        "-i",
        type=int,
        default=DEFAULT_INTERVAL,
        help=f"Seconds per time step (default: {DEFAULT_INTERVAL})",
    )

    # Verify command
    verify_parser = subparsers.add_parser(
        "verify",
        aliases=["check"],
        parents=[common],
        help="Verify a HOTP (--counter) or TOTP code",
    )
    verify_parser.add_argument("code", help="The code to verify")
    verify_parser.add_argument(
        "--counter",
        "-c",
        type=int,
        default=None,
        help="Verify as HOTP against this counter",
    )
    verify_parser.add_argument(
        "--time",
        "-t",
        type=int,
        default=None,
        help="Unix time in seconds (default: now)",
    )
    verify_parser.add_argument(
        "--interval",
        "-i",
        type=int,
        default=DEFAULT_INTERVAL,
        help=f"Seconds per time step (default: {DEFAULT_INTERVAL})",
    )
    verify_parser.add_argument(
        "--window",
        "-w",
        type=int,
        default=1,
        help="TOTP time steps of clock drift to accept (default: 1)",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 1

    if args.command in ("secret", "new"):
        return secret_command(args)
    elif args.command == "hotp":
        return hotp_command(args)
    elif args.command in ("totp", "now"):
        return totp_command(args)
    elif args.command in ("verify", "check"):
        return verify_command(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
