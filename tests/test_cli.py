"""Tests for the command-line interface."""

from unittest.mock import patch

import pytest

from otp_codec import cli
from otp_codec.base32 import BASE32_ALPHABET


SECRET = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"


@pytest.fixture(autouse=True)
def no_env_secret(monkeypatch):
    monkeypatch.delenv(cli.SECRET_ENV, raising=False)


def test_secret_command(capsys):
    """Test that the secret command prints a random Base32 secret."""
    assert cli.main(["secret"]) == 0

    secret = capsys.readouterr().out.strip()
    assert len(secret) == 32
    assert set(secret) <= set(BASE32_ALPHABET)


def test_secret_command_bad_length(capsys):
    """Test that an invalid secret length exits with an error."""
    assert cli.main(["secret", "--length", "10"]) == 1
    assert "✗" in capsys.readouterr().err


def test_hotp_command(capsys):
    """Test printing the HOTP code for a counter."""
    assert cli.main(["hotp", "--secret", SECRET, "--counter", "1"]) == 0
    assert capsys.readouterr().out.strip() == "287082"


def test_hotp_command_reads_secret_from_environment(capsys, monkeypatch):
    """Test that the secret falls back to the environment."""
    monkeypatch.setenv(cli.SECRET_ENV, SECRET)

    assert cli.main(["hotp", "-c", "0", "-d", "8"]) == 0
    assert capsys.readouterr().out.strip() == "84755224"


def test_hotp_command_without_secret(capsys):
    """Test that a missing secret exits with an error."""
    assert cli.main(["hotp", "--counter", "0"]) == 1
    assert "No secret given" in capsys.readouterr().err


def test_hotp_command_invalid_secret(capsys):
    """Test that a malformed secret exits with an error."""
    assert cli.main(["hotp", "--secret", "ABC", "--counter", "0"]) == 1
    assert "multiple of 8" in capsys.readouterr().err


def test_totp_command_at_time(capsys):
    """Test printing the TOTP code for an explicit time."""
    assert cli.main(["totp", "-s", SECRET, "-d", "8", "--time", "59"]) == 0
    assert capsys.readouterr().out.strip() == "94287082"


def test_totp_command_now(capsys):
    """Test printing the TOTP code for the current time."""
    with patch("otp_codec.totp.time.time", return_value=1111111109):
        assert cli.main(["now", "-s", SECRET, "-d", "8"]) == 0
    assert capsys.readouterr().out.strip() == "07081804"


def test_verify_totp(capsys):
    """Test verifying a TOTP code inside the default window."""
    assert cli.main(["verify", "94287082", "-s", SECRET, "-d", "8", "-t", "89"]) == 0
    assert "valid" in capsys.readouterr().out


def test_verify_totp_outside_window(capsys):
    """Test that a code outside the window is reported invalid."""
    args = ["verify", "94287082", "-s", SECRET, "-d", "8", "-t", "89", "--window", "0"]
    assert cli.main(args) == 1
    assert "not valid" in capsys.readouterr().err


def test_verify_hotp(capsys):
    """Test verifying a HOTP code against a counter."""
    assert cli.main(["check", "755224", "-s", SECRET, "--counter", "0"]) == 0
    assert cli.main(["check", "755224", "-s", SECRET, "--counter", "1"]) == 1


def test_verify_negative_window(capsys):
    """Test that a negative window exits with an error."""
    args = ["verify", "755224", "-s", SECRET, "--time", "0", "--window", "-1"]
    assert cli.main(args) == 1
    assert "valid_window" in capsys.readouterr().err


def test_no_command(capsys):
    """Test that running without a command prints help and fails."""
    assert cli.main([]) == 1
