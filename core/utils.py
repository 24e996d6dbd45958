"""
Utility helpers: secret codecs, label sanitising and display formatting.
"""

import base64
import binascii
import re
import unicodedata
from typing import Union

from core.config import Encoding, parse_encoding
from core.errors import InvalidSecretEncoding


# ── Base32 ────────────────────────────────────────────────────────────────────

def normalize_secret(secret: str) -> str:
    """
    Normalise a base32 secret: strip spaces, uppercase, add padding.

    Args:
        secret: Raw user-supplied secret string.

    Returns:
        Uppercase base32 string with correct padding.

    Raises:
        InvalidSecretEncoding: If the string contains invalid base32 characters.
    """
    secret = secret.strip().upper().replace(" ", "").replace("-", "")
    # Base32 alphabet: A-Z and 2-7
    if not re.fullmatch(r"[A-Z2-7]+=*", secret):
        raise InvalidSecretEncoding("Secret contains invalid base32 characters.")
    # Pad to multiple of 8
    secret = secret.rstrip("=")
    pad = (8 - len(secret) % 8) % 8
    return secret + "=" * pad


def encode_base32(raw: bytes) -> str:
    """Encode raw bytes as a base32 string (no padding)."""
    return base64.b32encode(raw).decode("ascii").rstrip("=")


# ── Secret decoding ───────────────────────────────────────────────────────────

def decode_secret(secret: str, encoding: Union[str, Encoding] = Encoding.ASCII) -> bytes:
    """
    Decode a secret supplied as text in *encoding* to raw key bytes.

    Args:
        secret:   Secret text.
        encoding: One of ascii / hex / base32 / base64.

    Returns:
        Raw bytes.

    Raises:
        UnsupportedEncoding:   If *encoding* is not recognised.
        InvalidSecretEncoding: If *secret* is malformed for *encoding*.
    """
    encoding = parse_encoding(encoding)
    try:
        if encoding is Encoding.ASCII:
            return secret.encode("ascii")
        if encoding is Encoding.HEX:
            return bytes.fromhex(secret)
        if encoding is Encoding.BASE32:
            return base64.b32decode(normalize_secret(secret), casefold=True)
        return base64.b64decode(secret, validate=True)
    except InvalidSecretEncoding:
        raise
    except (UnicodeError, binascii.Error, ValueError) as exc:
        raise InvalidSecretEncoding(
            f"Invalid {encoding.value} secret: {exc}"
        ) from exc


def encode_secret(raw: bytes, encoding: Union[str, Encoding]) -> str:
    """
    Render raw bytes as text in *encoding*.

    Hex is lowercase, base32 has its padding stripped, base64 keeps it.
    """
    encoding = parse_encoding(encoding)
    if encoding is Encoding.ASCII:
        return raw.decode("ascii")
    if encoding is Encoding.HEX:
        return raw.hex()
    if encoding is Encoding.BASE32:
        return encode_base32(raw)
    return base64.b64encode(raw).decode("ascii")


# ── URI helpers ───────────────────────────────────────────────────────────────

def sanitise_label(text: str) -> str:
    """Remove control characters and limit label length."""
    text = unicodedata.normalize("NFC", text)
    text = "".join(ch for ch in text if unicodedata.category(ch)[0] != "C")
    return text[:128].strip()


# ── Display ───────────────────────────────────────────────────────────────────

def format_otp(code: str, group: int = 3) -> str:
    """
    Format an OTP code with spaces for readability.

    Example::

        >>> format_otp("123456")
        '123 456'

    Args:
        code:  Digit string.
        group: Digit grouping size.

    Returns:
        Spaced OTP string.
    """
    return " ".join(code[i : i + group] for i in range(0, len(code), group))


# ── Validation ────────────────────────────────────────────────────────────────

def validate_digits(digits: int) -> None:
    if digits not in (6, 8):
        raise ValueError("Digits must be 6 or 8.")


def validate_period(period: int) -> None:
    if period < 1 or period > 300:
        raise ValueError("Period must be between 1 and 300 seconds.")
