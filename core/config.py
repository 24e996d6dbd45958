"""
Algorithms, encodings and defaults shared by the HOTP / TOTP engines.
"""

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Union

from core.errors import (
    InvalidDigits,
    InvalidStep,
    InvalidWindow,
    UnsupportedAlgorithm,
    UnsupportedEncoding,
)

# ── Constants ────────────────────────────────────────────────────────────────

DEFAULT_DIGITS = 6
DEFAULT_STEP = 30           # seconds per TOTP time step
DEFAULT_WINDOW = 0
DEFAULT_SECRET_LENGTH = 12  # characters, not bytes
MAX_WINDOW = 1000           # each window step costs one HMAC
MIN_DIGITS = 1
MAX_DIGITS = 10             # 10**10 already exceeds the 31-bit truncated value


class Algorithm(str, Enum):
    """Supported HMAC algorithms."""

    SHA1 = "sha1"
    SHA256 = "sha256"
    SHA512 = "sha512"


class Encoding(str, Enum):
    """Text encodings a secret may be supplied in."""

    ASCII = "ascii"
    HEX = "hex"
    BASE32 = "base32"
    BASE64 = "base64"


def parse_algorithm(value: Union[str, Algorithm]) -> Algorithm:
    """Return the :class:`Algorithm` for *value* (case-insensitive)."""
    if isinstance(value, Algorithm):
        return value
    try:
        return Algorithm(str(value).strip().lower())
    except ValueError:
        raise UnsupportedAlgorithm(
            f"Unsupported algorithm '{value}'. Supported: sha1, sha256, sha512."
        ) from None


def parse_encoding(value: Union[str, Encoding]) -> Encoding:
    """Return the :class:`Encoding` for *value* (case-insensitive)."""
    if isinstance(value, Encoding):
        return value
    try:
        return Encoding(str(value).strip().lower())
    except ValueError:
        raise UnsupportedEncoding(
            f"Unsupported encoding '{value}'. Supported: ascii, hex, base32, base64."
        ) from None


@dataclass(frozen=True)
class OTPConfig:
    """
    Fully resolved, validated OTP options.

    Every field has a default; string values for ``algorithm`` and
    ``encoding`` are coerced to their enums. Validation happens once, on
    construction, so the engines never see an inconsistent configuration.
    """

    digits: int = DEFAULT_DIGITS
    encoding: Encoding = Encoding.ASCII
    algorithm: Algorithm = Algorithm.SHA1
    step: int = DEFAULT_STEP
    window: int = DEFAULT_WINDOW

    def __post_init__(self) -> None:
        # frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "algorithm", parse_algorithm(self.algorithm))
        object.__setattr__(self, "encoding", parse_encoding(self.encoding))

        if isinstance(self.digits, bool) or not isinstance(self.digits, int):
            raise InvalidDigits(f"Digits must be an integer, got {self.digits!r}.")
        if not MIN_DIGITS <= self.digits <= MAX_DIGITS:
            raise InvalidDigits(
                f"Digits must be between {MIN_DIGITS} and {MAX_DIGITS}, got {self.digits}."
            )
        if self.step <= 0:
            raise InvalidStep(f"Step must be a positive number of seconds, got {self.step}.")
        if self.window < 0:
            raise InvalidWindow(f"Window must be non-negative, got {self.window}.")

    def replace(self, **changes) -> "OTPConfig":
        """Return a copy with *changes* applied (and validated)."""
        return dataclasses.replace(self, **changes)
