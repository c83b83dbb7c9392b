import itertools

import pytest

from totp_core import parse
from totp_core.otp_cli import main, mask_secret, watch

from .conftest import EXAMPLE_URI, RFC_URI_SHA1


class TestCliCommands:
    def test_no_command_prints_help_hint(self, capsys):
        assert main([]) == 0
        assert "No command specified" in capsys.readouterr().out

    def test_parse_masks_secret(self, capsys):
        assert main(["parse", EXAMPLE_URI]) == 0
        out = capsys.readouterr().out
        assert "issuer:    Example" in out
        assert "account:   alice@example.com" in out
        assert "JBSW************" in out
        assert "JBSWY3DPEHPK3PXP" not in out

    def test_parse_reveal(self, capsys):
        assert main(["parse", EXAMPLE_URI, "--reveal"]) == 0
        assert "JBSWY3DPEHPK3PXP" in capsys.readouterr().out

    def test_code_at_fixed_time(self, capsys):
        assert main(["code", RFC_URI_SHA1, "--at", "59"]) == 0
        out = capsys.readouterr().out
        assert out.startswith("94287082")
        assert "(valid ~ 1s)" in out

    def test_parse_error_exit_status(self, capsys):
        assert main(["code", "otpauth://hotp/Foo:bar?secret=JBSWY3DPEHPK3PXP"]) == 1
        assert "[!] UnsupportedType" in capsys.readouterr().err

    def test_missing_secret_exit_status(self, capsys):
        assert main(["parse", "otpauth://totp/Foo:bar?issuer=Foo"]) == 1
        assert "MissingSecret" in capsys.readouterr().err

    def test_negative_time_exit_status(self, capsys):
        assert main(["code", RFC_URI_SHA1, "--at", "-5"]) == 1
        assert "negative" in capsys.readouterr().err

    def test_uri_round_trip(self, capsys):
        argv = ["uri", "--issuer", "My Co", "--account", "alice@example.com",
                "--secret", "JBSWY3DPEHPK3PXP", "--digits", "8", "--algorithm", "SHA256"]
        assert main(argv) == 0
        uri = capsys.readouterr().out.strip()
        c = parse(uri)
        assert (c.issuer, c.account_name, c.digits, c.algorithm.value) == ("My Co", "alice@example.com", 8, "SHA256")

    def test_uri_generates_secret(self, capsys):
        assert main(["uri", "--issuer", "A", "--account", "b"]) == 0
        c = parse(capsys.readouterr().out.strip())
        assert len(c.secret) == 32

    def test_uri_with_qr(self, capsys):
        assert main(["uri", "--issuer", "A", "--account", "b", "--secret", "JBSWY3DPEHPK3PXP", "--qr"]) == 0
        out = capsys.readouterr().out
        assert out.startswith("otpauth://totp/A:b?")
        assert len(out.splitlines()) > 10

    def test_uri_invalid_digits(self, capsys):
        assert main(["uri", "--issuer", "A", "--account", "b", "--digits", "10"]) == 1
        assert "InvalidDigits" in capsys.readouterr().err


def test_mask_secret():
    assert mask_secret("JBSWY3DP") == "JBSW****"
    assert mask_secret("AB") == "AB"


class TestWatch:
    def test_prints_on_change_and_counts_down_otherwise(self, capsys):
        credentials = [parse(RFC_URI_SHA1), parse(EXAMPLE_URI)]
        clock = iter([59, 60, 61]).__next__
        sleeps = []

        watch(credentials, interval=1.0, clock=clock, sleep=sleeps.append, max_ticks=3)

        out = capsys.readouterr().out
        assert out.count("RFC:test") == 2           # t=59 and the new step at t=60
        assert out.count("Example:alice@example.com") == 2
        assert "94287082" in out
        assert "29s left" in out                    # t=61, nothing changed
        assert sleeps == [1.0, 1.0, 1.0]

    def test_expiring_marker(self, capsys):
        clock = itertools.repeat(55).__next__
        watch([parse(RFC_URI_SHA1)], clock=clock, sleep=lambda s: None, max_ticks=2)
        assert "!!  5s left" in capsys.readouterr().out

    def test_stops_on_keyboard_interrupt(self, capsys):
        def interrupt(seconds):
            raise KeyboardInterrupt

        with pytest.raises(KeyboardInterrupt):
            watch([parse(EXAMPLE_URI)], clock=lambda: 59, sleep=interrupt)

    def test_command_says_bye(self, capsys, monkeypatch):
        def interrupt(*args, **kwargs):
            raise KeyboardInterrupt

        monkeypatch.setattr("totp_core.otp_cli.watch", interrupt)
        assert main(["watch", EXAMPLE_URI]) == 0
        assert "Bye." in capsys.readouterr().out
