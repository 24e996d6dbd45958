"""
TOTP (Time-based One-Time Password) implementation following RFC 6238.

Produces codes identical to Google Authenticator for base32 secrets.
"""

import logging
import time as _time
from typing import Optional, Union

from core import hotp
from core.config import (
    DEFAULT_DIGITS,
    DEFAULT_STEP,
    DEFAULT_WINDOW,
    MAX_WINDOW,
    Algorithm,
    Encoding,
    OTPConfig,
)
from core.errors import InvalidCounter, InvalidStep, WindowTooLarge

logger = logging.getLogger(__name__)


def counter_from_time(time: Optional[float] = None, step: float = DEFAULT_STEP) -> int:
    """
    Derive the TOTP counter ``floor(time / step)``.

    Args:
        time: Unix timestamp in seconds (uses ``time.time()`` if None).
        step: Seconds per time step, must be positive.

    Raises:
        InvalidStep: If *step* is not positive.
    """
    if step <= 0:
        raise InvalidStep(f"Step must be a positive number of seconds, got {step}.")
    t = time if time is not None else _time.time()
    return int(t // step)


def remaining_seconds(step: int = DEFAULT_STEP, time: Optional[float] = None) -> int:
    """Return seconds until the current TOTP step expires."""
    if step <= 0:
        raise InvalidStep(f"Step must be a positive number of seconds, got {step}.")
    t = time if time is not None else _time.time()
    return step - (int(t) % step)


def totp_generate(
    secret: str,
    time: Optional[float] = None,
    step: int = DEFAULT_STEP,
    digits: int = DEFAULT_DIGITS,
    encoding: Union[str, Encoding] = Encoding.ASCII,
    algorithm: Union[str, Algorithm] = Algorithm.SHA1,
) -> str:
    """
    Generate a TOTP code.

    Args:
        secret:    Shared secret text.
        time:      Override Unix timestamp (uses ``time.time()`` if None).
        step:      Time step in seconds (default 30).
        digits:    Number of digits in the OTP (default 6).
        encoding:  Secret encoding.
        algorithm: HMAC algorithm (default sha1 for Google Authenticator).

    Returns:
        OTP string, zero-padded to ``digits`` characters.
    """
    config = OTPConfig(digits=digits, encoding=encoding, algorithm=algorithm, step=step)
    counter = counter_from_time(time, config.step)
    return hotp.hotp_generate(
        secret,
        counter,
        digits=config.digits,
        encoding=config.encoding,
        algorithm=config.algorithm,
    )


def totp_verify(
    secret: str,
    code: Union[str, int],
    window: int = DEFAULT_WINDOW,
    time: Optional[float] = None,
    step: int = DEFAULT_STEP,
    digits: int = DEFAULT_DIGITS,
    encoding: Union[str, Encoding] = Encoding.ASCII,
    algorithm: Union[str, Algorithm] = Algorithm.SHA1,
) -> hotp.VerificationResult:
    """
    Validate a TOTP code within ±``window`` time steps.

    The two-sided window is turned into a forward HOTP search starting
    ``window`` steps before the current step and spanning ``2 * window``
    steps. The returned delta is re-centred on the current step, so a code
    from the previous step reports ``-1``.

    Args:
        secret:    Shared secret text.
        code:      Submitted code.
        window:    Allowed skew in steps on each side (default 0).
        time:      Override Unix timestamp.
        step:      Time step in seconds.
        digits:    Expected number of digits.
        encoding:  Secret encoding.
        algorithm: HMAC algorithm.

    Returns:
        :class:`core.hotp.VerificationResult`.
    """
    config = OTPConfig(
        digits=digits, encoding=encoding, algorithm=algorithm, step=step, window=window
    )
    if window > MAX_WINDOW:
        raise WindowTooLarge(f"Window {window} exceeds the maximum of {MAX_WINDOW}.")

    current = counter_from_time(time, config.step)
    if current < 0:
        raise InvalidCounter(f"Time {time} maps to negative step {current}.")
    start = current - window
    span = window * 2
    if start < 0:
        # Nothing exists before counter 0; shrink the search from the left
        span += start
        start = 0

    result = hotp.hotp_verify(
        secret,
        start,
        code,
        window=span,
        digits=config.digits,
        encoding=config.encoding,
        algorithm=config.algorithm,
        max_window=2 * MAX_WINDOW,
    )
    if not result.valid or result.delta is None:
        logger.debug("TOTP verification failed at step %d, window %d.", current, window)
        return hotp.VerificationResult(valid=False)

    delta = result.delta + start - current
    logger.debug("TOTP match at step %d (delta %d).", current + delta, delta)
    return hotp.VerificationResult(valid=True, delta=delta)
