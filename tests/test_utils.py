"""Tests for core.utils."""

import pytest

from core.config import Encoding
from core.errors import InvalidSecretEncoding, UnsupportedEncoding
from core.utils import (
    decode_secret,
    encode_base32,
    encode_secret,
    format_otp,
    normalize_secret,
    sanitise_label,
)

RAW = b"12345678901234567890"


# ── Secret decoding ───────────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "encoding,secret",
    [
        (Encoding.ASCII, "12345678901234567890"),
        (Encoding.HEX, "3132333435363738393031323334353637383930"),
        (Encoding.HEX, "3132333435363738393031323334353637383930".upper()),
        (Encoding.BASE32, "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"),
        (Encoding.BASE32, "gezd gnbv gy3t qojq gezd gnbv gy3t qojq"),
        (Encoding.BASE64, "MTIzNDU2Nzg5MDEyMzQ1Njc4OTA="),
    ],
)
def test_decode_secret(encoding: Encoding, secret: str) -> None:
    assert decode_secret(secret, encoding) == RAW


def test_decode_secret_defaults_to_ascii() -> None:
    assert decode_secret("abc") == b"abc"


def test_decode_base32_without_padding() -> None:
    # RFC 4648 §10: BASE32("foobar") = "MZXW6YTBOI======"
    assert decode_secret("MZXW6YTBOI", "base32") == b"foobar"
    assert decode_secret("mzxw6ytboi======", "base32") == b"foobar"


@pytest.mark.parametrize(
    "encoding,secret",
    [
        ("ascii", "café"),
        ("hex", "zz"),
        ("hex", "abc"),
        ("base32", "!!!NOTBASE32!!!"),
        ("base32", "AB=CD"),
        ("base64", "!!!!"),
        ("base64", "MTIz NDU2"),
    ],
)
def test_decode_secret_invalid_raises(encoding: str, secret: str) -> None:
    with pytest.raises(InvalidSecretEncoding):
        decode_secret(secret, encoding)


def test_decode_secret_unknown_encoding() -> None:
    with pytest.raises(UnsupportedEncoding):
        decode_secret("abc", "utf8")


@pytest.mark.parametrize("encoding", list(Encoding))
def test_encode_decode_secret(encoding: Encoding) -> None:
    assert decode_secret(encode_secret(RAW, encoding), encoding) == RAW


# ── Base32 ────────────────────────────────────────────────────────────────────

def test_normalize_secret_strips_spaces() -> None:
    assert normalize_secret("JBSW Y3DP") == "JBSWY3DP"  # no padding needed here (len=8)


def test_normalize_secret_adds_padding() -> None:
    assert normalize_secret("jbswy3dpehpk3px") == "JBSWY3DPEHPK3PX="


def test_normalize_secret_keeps_existing_padding() -> None:
    assert normalize_secret("MFRGG===") == "MFRGG==="


def test_encode_base32_strips_padding() -> None:
    assert encode_base32(b"abc") == "MFRGG"


# ── Labels / display ──────────────────────────────────────────────────────────

def test_sanitise_label_removes_control_chars() -> None:
    assert sanitise_label(" alice\x00@example.com\n") == "alice@example.com"


def test_format_otp_6_digits() -> None:
    assert format_otp("123456") == "123 456"


def test_format_otp_8_digits() -> None:
    assert format_otp("12345678") == "123 456 78"
