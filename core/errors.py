"""
Error types raised by the OTP layer.

Every error is a :class:`ValueError` subclass: they are all local, deterministic
validation failures. A code that simply does not match is *not* an error, see
:class:`core.hotp.VerificationResult`.
"""


class OTPError(ValueError):
    """Base class for all OTP validation errors."""


class InvalidSecretEncoding(OTPError):
    """The secret text cannot be decoded under the declared encoding."""


class UnsupportedEncoding(OTPError):
    """The declared secret encoding is not one of ascii/hex/base32/base64."""


class UnsupportedAlgorithm(OTPError):
    """The HMAC algorithm is not one of sha1/sha256/sha512."""


class InvalidCounter(OTPError):
    """The counter is negative or does not fit in 8 bytes."""


class InvalidStep(OTPError):
    """The TOTP time step is not a positive number of seconds."""


class InvalidDigits(OTPError):
    """The requested code width is outside 1-10."""


class TruncationRangeError(OTPError):
    """The digest is too short for the dynamic truncation offset."""


class InvalidWindow(OTPError):
    """The verification window is negative."""


class WindowTooLarge(InvalidWindow):
    """The verification window exceeds the configured ceiling."""
