"""
Cryptographic primitives for the OTP engines.

HMAC            : cryptography's HMAC over SHA-1 / SHA-256 / SHA-512
Randomness      : the ``secrets`` CSPRNG
"""

import hmac
import secrets
import string
from typing import Union

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives import hmac as crypto_hmac

from core.config import Algorithm, parse_algorithm

# ── Constants ────────────────────────────────────────────────────────────────

SECRET_ALPHABET = string.ascii_letters + string.digits

DIGEST_SIZES = {
    Algorithm.SHA1: 20,
    Algorithm.SHA256: 32,
    Algorithm.SHA512: 64,
}

_HASHES = {
    Algorithm.SHA1: hashes.SHA1,
    Algorithm.SHA256: hashes.SHA256,
    Algorithm.SHA512: hashes.SHA512,
}


# ── HMAC ──────────────────────────────────────────────────────────────────────

def hmac_digest(
    key: bytes,
    message: bytes,
    algorithm: Union[str, Algorithm] = Algorithm.SHA1,
) -> bytes:
    """
    Compute HMAC(*key*, *message*) with *algorithm*.

    Args:
        key:       Raw secret bytes.
        message:   Message bytes (the 8-byte moving factor for HOTP).
        algorithm: sha1 (default), sha256 or sha512.

    Returns:
        Digest bytes: 20, 32 or 64 long depending on *algorithm*.

    Raises:
        UnsupportedAlgorithm: If *algorithm* is not recognised.
    """
    algorithm = parse_algorithm(algorithm)
    h = crypto_hmac.HMAC(key, _HASHES[algorithm]())
    h.update(message)
    return h.finalize()


# ── Randomness ────────────────────────────────────────────────────────────────

def random_string(length: int) -> str:
    """Return *length* random ASCII letters and digits."""
    return "".join(secrets.choice(SECRET_ALPHABET) for _ in range(length))


def constant_time_compare(a: str, b: str) -> bool:
    """Return True if *a* == *b* in constant time (timing-safe)."""
    return hmac.compare_digest(a.encode(), b.encode())
