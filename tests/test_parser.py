"""Tests for qr.parser."""

import pytest

from core.config import Algorithm, Encoding
from core.secret import generate_secret
from core.totp import totp_generate
from qr.parser import OTPAuthURI, build_otpauth_uri, parse_otpauth_uri


# ── Valid TOTP URIs ───────────────────────────────────────────────────────────

def test_parse_basic_totp() -> None:
    uri = "otpauth://totp/Example%3Aalice%40example.com?secret=JBSWY3DPEHPK3PXP&issuer=Example"
    result = parse_otpauth_uri(uri)
    assert result.otp_type == "totp"
    assert result.account_name == "alice@example.com"
    assert result.issuer == "Example"
    assert result.secret == "JBSWY3DPEHPK3PXP"
    assert result.algorithm == Algorithm.SHA1
    assert result.digits == 6
    assert result.period == 30


def test_parse_totp_with_sha256() -> None:
    uri = (
        "otpauth://totp/Issuer%3Auser?secret=JBSWY3DPEHPK3PXP"
        "&algorithm=SHA256&digits=8&period=60"
    )
    result = parse_otpauth_uri(uri)
    assert result.algorithm == Algorithm.SHA256
    assert result.digits == 8
    assert result.period == 60


def test_parse_totp_no_issuer_in_uri() -> None:
    uri = "otpauth://totp/myaccount?secret=JBSWY3DPEHPK3PXP"
    result = parse_otpauth_uri(uri)
    assert result.account_name == "myaccount"
    assert result.issuer == ""


def test_parse_totp_issuer_from_label() -> None:
    uri = "otpauth://totp/GitHub%3Ajohn?secret=JBSWY3DPEHPK3PXP"
    result = parse_otpauth_uri(uri)
    assert result.issuer == "GitHub"
    assert result.account_name == "john"


def test_parse_strips_secret_padding() -> None:
    result = parse_otpauth_uri("otpauth://totp/acc?secret=mfrgg%3D%3D%3D")
    assert result.secret == "MFRGG"


# ── Valid HOTP URIs ───────────────────────────────────────────────────────────

def test_parse_hotp() -> None:
    uri = "otpauth://hotp/Example%3Aeve?secret=JBSWY3DPEHPK3PXP&counter=5"
    result = parse_otpauth_uri(uri)
    assert result.otp_type == "hotp"
    assert result.counter == 5


# ── Error cases ───────────────────────────────────────────────────────────────

def test_parse_wrong_scheme() -> None:
    with pytest.raises(ValueError, match="scheme"):
        parse_otpauth_uri("http://totp/acc?secret=ABC")


def test_parse_unknown_type() -> None:
    with pytest.raises(ValueError, match="OTP type"):
        parse_otpauth_uri("otpauth://steam/acc?secret=JBSWY3DPEHPK3PXP")


def test_parse_missing_secret() -> None:
    with pytest.raises(ValueError, match="secret"):
        parse_otpauth_uri("otpauth://totp/acc")


def test_parse_invalid_secret() -> None:
    with pytest.raises(ValueError, match="base32"):
        parse_otpauth_uri("otpauth://totp/acc?secret=not-base32!")


def test_parse_invalid_algorithm() -> None:
    with pytest.raises(ValueError, match="algorithm"):
        parse_otpauth_uri("otpauth://totp/acc?secret=JBSWY3DPEHPK3PXP&algorithm=MD5")


def test_parse_invalid_digits() -> None:
    with pytest.raises(ValueError):
        parse_otpauth_uri("otpauth://totp/acc?secret=JBSWY3DPEHPK3PXP&digits=5")


def test_parse_hotp_missing_counter() -> None:
    with pytest.raises(ValueError, match="counter"):
        parse_otpauth_uri("otpauth://hotp/acc?secret=JBSWY3DPEHPK3PXP")


def test_parse_hotp_negative_counter() -> None:
    with pytest.raises(ValueError, match="non-negative"):
        parse_otpauth_uri("otpauth://hotp/acc?secret=JBSWY3DPEHPK3PXP&counter=-1")


# ── Builder ───────────────────────────────────────────────────────────────────

def test_build_roundtrip() -> None:
    uri = build_otpauth_uri(
        otp_type="totp",
        account_name="alice@example.com",
        secret="JBSWY3DPEHPK3PXP",
        issuer="Example",
        digits=6,
        period=30,
    )
    parsed = parse_otpauth_uri(uri)
    assert parsed.account_name == "alice@example.com"
    assert parsed.issuer == "Example"
    assert parsed.digits == 6
    assert parsed.period == 30


def test_build_hotp_uri() -> None:
    uri = build_otpauth_uri(
        otp_type="hotp",
        account_name="bob",
        secret="JBSWY3DPEHPK3PXP",
        counter=10,
    )
    assert uri.startswith("otpauth://hotp/")
    assert "counter=10" in uri


def test_build_algorithm_is_uppercase() -> None:
    uri = build_otpauth_uri("totp", "bob", "JBSWY3DPEHPK3PXP", algorithm="sha512")
    assert "algorithm=SHA512" in uri


def test_build_unknown_type() -> None:
    with pytest.raises(ValueError, match="OTP type"):
        build_otpauth_uri("steam", "bob", "JBSWY3DPEHPK3PXP")


# ── Engine configuration ──────────────────────────────────────────────────────

def test_config_from_uri() -> None:
    result = parse_otpauth_uri(
        "otpauth://totp/acc?secret=JBSWY3DPEHPK3PXP&algorithm=SHA256&digits=8&period=60"
    )
    config = result.config()
    assert config.encoding is Encoding.BASE32
    assert config.algorithm is Algorithm.SHA256
    assert config.digits == 8
    assert config.step == 60


def test_generated_secret_survives_uri() -> None:
    bundle = generate_secret(length=20)
    parsed: OTPAuthURI = parse_otpauth_uri(
        build_otpauth_uri("totp", "alice", bundle.base32, issuer="Example")
    )
    config = parsed.config()
    code = totp_generate(
        parsed.secret,
        time=59,
        step=config.step,
        digits=config.digits,
        encoding=config.encoding,
        algorithm=config.algorithm,
    )
    assert code == totp_generate(bundle.ascii, time=59)


# ── Builder validation ────────────────────────────────────────────────────────

def test_build_rejects_digits_the_parser_rejects() -> None:
    with pytest.raises(ValueError, match="Digits"):
        build_otpauth_uri("totp", "bob", "JBSWY3DPEHPK3PXP", digits=7)


@pytest.mark.parametrize("period", [0, 301])
def test_build_rejects_period_the_parser_rejects(period: int) -> None:
    with pytest.raises(ValueError, match="Period"):
        build_otpauth_uri("totp", "bob", "JBSWY3DPEHPK3PXP", period=period)


def test_build_hotp_ignores_period() -> None:
    uri = build_otpauth_uri("hotp", "bob", "JBSWY3DPEHPK3PXP", period=0, counter=3)
    assert parse_otpauth_uri(uri).counter == 3


def test_build_rejects_negative_counter() -> None:
    with pytest.raises(ValueError, match="non-negative"):
        build_otpauth_uri("hotp", "bob", "JBSWY3DPEHPK3PXP", counter=-1)


def test_build_rejects_invalid_secret() -> None:
    with pytest.raises(ValueError, match="base32"):
        build_otpauth_uri("totp", "bob", "not-base32!")


@pytest.mark.parametrize("digits", [6, 8])
@pytest.mark.parametrize("period", [1, 30, 300])
def test_built_uri_always_parses(digits: int, period: int) -> None:
    uri = build_otpauth_uri("totp", "bob", "jbswy3dpehpk3pxp", digits=digits, period=period)
    parsed = parse_otpauth_uri(uri)
    assert (parsed.digits, parsed.period, parsed.secret) == (digits, period, "JBSWY3DPEHPK3PXP")
