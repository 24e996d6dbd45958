"""
Random secret generation.

A generated secret is a string of random ASCII letters and digits, exposed in
the four encodings the engines accept so it can be handed to whichever client
needs it (authenticator apps usually want base32).
"""

from dataclasses import asdict, dataclass
from typing import Dict, Union

from core import crypto
from core.config import DEFAULT_SECRET_LENGTH, Encoding, parse_encoding
from core.utils import decode_secret, encode_secret


@dataclass(frozen=True)
class SecretBundle:
    """One secret in four parallel encodings."""

    ascii: str
    hex: str      # lowercase
    base32: str   # RFC 4648 alphabet, padding stripped
    base64: str   # RFC 4648 alphabet, padding kept

    def as_dict(self) -> Dict[str, str]:
        return asdict(self)

    def to_bytes(self, encoding: Union[str, Encoding] = Encoding.ASCII) -> bytes:
        """Decode the field for *encoding* back to the raw secret bytes."""
        encoding = parse_encoding(encoding)
        return decode_secret(getattr(self, encoding.value), encoding)


def generate_secret(length: int = DEFAULT_SECRET_LENGTH) -> SecretBundle:
    """
    Generate a random secret of *length* characters.

    Raises:
        ValueError: If *length* is not positive.
    """
    if length < 1:
        raise ValueError(f"Secret length must be positive, got {length}.")
    raw = crypto.random_string(length).encode("ascii")
    return SecretBundle(
        ascii=encode_secret(raw, Encoding.ASCII),
        hex=encode_secret(raw, Encoding.HEX),
        base32=encode_secret(raw, Encoding.BASE32),
        base64=encode_secret(raw, Encoding.BASE64),
    )
