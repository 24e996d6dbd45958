"""
HOTP (HMAC-based One-Time Password) implementation following RFC 4226.
"""

import logging
import struct
from dataclasses import dataclass
from typing import Optional, Union

from core import crypto
from core.config import (
    DEFAULT_DIGITS,
    DEFAULT_WINDOW,
    MAX_WINDOW,
    Algorithm,
    Encoding,
    OTPConfig,
)
from core.errors import InvalidCounter, TruncationRangeError, WindowTooLarge
from core.utils import decode_secret

logger = logging.getLogger(__name__)

_MAX_COUNTER = 2**64 - 1


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of a verification: ``delta`` is set only when ``valid``."""

    valid: bool
    delta: Optional[int] = None

    def __bool__(self) -> bool:
        return self.valid


# ── RFC 4226 building blocks ──────────────────────────────────────────────────

def encode_counter(counter: int) -> bytes:
    """
    Encode *counter* as the 8-byte big-endian moving factor.

    Raises:
        InvalidCounter: If *counter* is not an integer in [0, 2**64).
    """
    if isinstance(counter, bool) or not isinstance(counter, int):
        raise InvalidCounter(f"Counter must be an integer, got {counter!r}.")
    if not 0 <= counter <= _MAX_COUNTER:
        raise InvalidCounter(f"Counter {counter} does not fit in 8 unsigned bytes.")
    return struct.pack(">Q", counter)


def dynamic_truncate(digest: bytes) -> int:
    """
    Extract a 31-bit integer from an HMAC digest (RFC 4226 §5.3).

    The low nibble of the last byte selects the offset of four bytes which
    are read big-endian with the most significant bit cleared.

    Raises:
        TruncationRangeError: If the digest is shorter than offset + 4.
    """
    if not digest:
        raise TruncationRangeError("Cannot truncate an empty digest.")
    offset = digest[-1] & 0x0F
    if offset + 4 > len(digest):
        raise TruncationRangeError(
            f"Truncation offset {offset} out of range for a {len(digest)}-byte digest."
        )
    return struct.unpack(">I", digest[offset : offset + 4])[0] & 0x7FFFFFFF


def format_code(value: int, digits: int = DEFAULT_DIGITS) -> str:
    """Render ``value mod 10**digits`` zero-padded to exactly *digits* characters."""
    return str(value % 10**digits).zfill(digits)


def _code_at(key: bytes, counter: int, config: OTPConfig) -> str:
    digest = crypto.hmac_digest(key, encode_counter(counter), config.algorithm)
    return format_code(dynamic_truncate(digest), config.digits)


# ── Public API ────────────────────────────────────────────────────────────────

def hotp_generate(
    secret: str,
    counter: int,
    digits: int = DEFAULT_DIGITS,
    encoding: Union[str, Encoding] = Encoding.ASCII,
    algorithm: Union[str, Algorithm] = Algorithm.SHA1,
) -> str:
    """
    Generate an HOTP code.

    Args:
        secret:    Shared secret text.
        counter:   Moving factor (non-negative, fits in 8 bytes).
        digits:    Code width (default 6).
        encoding:  How *secret* is encoded: ascii, hex, base32 or base64.
        algorithm: HMAC algorithm: sha1, sha256 or sha512.

    Returns:
        Zero-padded code string of exactly *digits* characters.
    """
    config = OTPConfig(digits=digits, encoding=encoding, algorithm=algorithm)
    key = decode_secret(secret, config.encoding)
    return _code_at(key, counter, config)


def hotp_verify(
    secret: str,
    counter: int,
    code: Union[str, int],
    window: int = DEFAULT_WINDOW,
    digits: int = DEFAULT_DIGITS,
    encoding: Union[str, Encoding] = Encoding.ASCII,
    algorithm: Union[str, Algorithm] = Algorithm.SHA1,
    max_window: int = MAX_WINDOW,
) -> VerificationResult:
    """
    Verify an HOTP code with a forward look-ahead window.

    Counters ``counter`` .. ``counter + window`` are tried in order; the first
    match wins and its offset from *counter* is reported as ``delta``.

    Args:
        secret:     Shared secret text.
        counter:    Expected counter.
        code:       Submitted code.
        window:     Look-ahead steps for resynchronisation (default 0).
        digits:     Code width.
        encoding:   Secret encoding.
        algorithm:  HMAC algorithm.
        max_window: Ceiling for *window*; each step costs one HMAC.

    Returns:
        :class:`VerificationResult`.

    Raises:
        WindowTooLarge: If *window* exceeds *max_window*.
    """
    config = OTPConfig(
        digits=digits, encoding=encoding, algorithm=algorithm, window=window
    )
    if window > max_window:
        raise WindowTooLarge(f"Window {window} exceeds the maximum of {max_window}.")

    key = decode_secret(secret, config.encoding)
    # Reject the whole search range before spending any HMACs
    encode_counter(counter)
    encode_counter(counter + window)
    submitted = str(code).strip()

    for c in range(counter, counter + window + 1):
        if crypto.constant_time_compare(submitted, _code_at(key, c, config)):
            logger.debug("HOTP match at counter %d (delta %d).", c, c - counter)
            return VerificationResult(valid=True, delta=c - counter)

    logger.debug("HOTP verification failed for counter %d, window %d.", counter, window)
    return VerificationResult(valid=False)
