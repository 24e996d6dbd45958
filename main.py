"""
otpkit – command-line entry point.

Usage
-----
    python main.py secret --length 20
    python main.py hotp SECRET --counter 1
    python main.py totp SECRET --encoding base32
    python main.py verify-totp SECRET 287082 --time 59 --window 1
    python main.py totp "otpauth://totp/Example:alice?secret=JBSWY3DPEHPK3PXP"

Or, if installed as a package:
    otpkit ...
"""

import argparse
import logging
import sys
from typing import List, Optional, Tuple

from core.config import (
    DEFAULT_DIGITS,
    DEFAULT_SECRET_LENGTH,
    DEFAULT_STEP,
    DEFAULT_WINDOW,
    Algorithm,
    Encoding,
    OTPConfig,
)
from core.hotp import VerificationResult, hotp_generate, hotp_verify
from core.secret import generate_secret
from core.totp import remaining_seconds, totp_generate, totp_verify
from core.utils import format_otp
from qr.parser import build_otpauth_uri, parse_otpauth_uri

logger = logging.getLogger("otpkit")

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_ERROR = 2


# ── Logging setup ─────────────────────────────────────────────────────────────

def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    # Keep anything near key material quiet
    logging.getLogger("core.crypto").setLevel(logging.WARNING)


# ── Command handlers ──────────────────────────────────────────────────────────

def cmd_secret(args: argparse.Namespace) -> int:
    bundle = generate_secret(length=args.length)
    for name, value in bundle.as_dict().items():
        print(f"{name:<7} {value}")
    return EXIT_OK


def _resolve(args: argparse.Namespace) -> Tuple[str, OTPConfig, Optional[int]]:
    """
    Return the secret, engine config and counter for a code command.

    The secret argument may be an otpauth:// URI, in which case its secret,
    digits, algorithm and period are used; ``--counter`` still overrides the
    URI counter.
    """
    counter = getattr(args, "counter", None)
    if args.secret.startswith("otpauth://"):
        uri = parse_otpauth_uri(args.secret)
        if counter is None and uri.otp_type == "hotp":
            counter = uri.counter
        return uri.secret, uri.config(), counter
    config = OTPConfig(
        digits=args.digits,
        encoding=args.encoding,
        algorithm=args.algorithm,
        step=getattr(args, "step", DEFAULT_STEP),
    )
    return args.secret, config, counter


def _require_counter(counter: Optional[int]) -> int:
    if counter is None:
        raise ValueError("--counter is required unless the secret is an otpauth://hotp URI.")
    return counter


def cmd_hotp(args: argparse.Namespace) -> int:
    secret, config, counter = _resolve(args)
    code = hotp_generate(
        secret,
        _require_counter(counter),
        digits=config.digits,
        encoding=config.encoding,
        algorithm=config.algorithm,
    )
    print(format_otp(code) if args.pretty else code)
    return EXIT_OK


def cmd_totp(args: argparse.Namespace) -> int:
    secret, config, _ = _resolve(args)
    code = totp_generate(
        secret,
        time=args.time,
        step=config.step,
        digits=config.digits,
        encoding=config.encoding,
        algorithm=config.algorithm,
    )
    print(format_otp(code) if args.pretty else code)
    logger.info("Code valid for another %ds.", remaining_seconds(config.step, args.time))
    return EXIT_OK


def _report(result: VerificationResult) -> int:
    if result.valid:
        print(f"valid (delta {result.delta:+d})")
        return EXIT_OK
    print("invalid")
    return EXIT_INVALID


def cmd_verify_hotp(args: argparse.Namespace) -> int:
    secret, config, counter = _resolve(args)
    return _report(
        hotp_verify(
            secret,
            _require_counter(counter),
            args.code,
            window=args.window,
            digits=config.digits,
            encoding=config.encoding,
            algorithm=config.algorithm,
        )
    )


def cmd_verify_totp(args: argparse.Namespace) -> int:
    secret, config, _ = _resolve(args)
    return _report(
        totp_verify(
            secret,
            args.code,
            window=args.window,
            time=args.time,
            step=config.step,
            digits=config.digits,
            encoding=config.encoding,
            algorithm=config.algorithm,
        )
    )


def cmd_uri(args: argparse.Namespace) -> int:
    print(
        build_otpauth_uri(
            args.type,
            args.account,
            args.secret,
            issuer=args.issuer,
            algorithm=args.algorithm,
            digits=args.digits,
            period=args.step,
            counter=args.counter,
        )
    )
    return EXIT_OK


# ── Parser ────────────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="otpkit", description="HOTP / TOTP one-time passcodes.")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    options = argparse.ArgumentParser(add_help=False)
    options.add_argument("--digits", type=int, default=DEFAULT_DIGITS)
    options.add_argument(
        "--algorithm", choices=[a.value for a in Algorithm], default=Algorithm.SHA1.value
    )

    codec = argparse.ArgumentParser(add_help=False)
    codec.add_argument(
        "--encoding", choices=[e.value for e in Encoding], default=Encoding.ASCII.value
    )
    codec.add_argument("--pretty", action="store_true", help="group digits with spaces")

    timing = argparse.ArgumentParser(add_help=False)
    timing.add_argument("--time", type=float, default=None, help="Unix seconds (default: now)")
    timing.add_argument("--step", type=int, default=DEFAULT_STEP)

    p = sub.add_parser("secret", help="generate a random secret")
    p.add_argument("--length", type=int, default=DEFAULT_SECRET_LENGTH)
    p.set_defaults(func=cmd_secret)

    p = sub.add_parser("hotp", parents=[options, codec], help="generate an HOTP code")
    p.add_argument("secret", help="secret text or otpauth:// URI")
    p.add_argument("--counter", type=int, default=None)
    p.set_defaults(func=cmd_hotp)

    p = sub.add_parser("totp", parents=[options, codec, timing], help="generate a TOTP code")
    p.add_argument("secret", help="secret text or otpauth:// URI")
    p.set_defaults(func=cmd_totp)

    p = sub.add_parser("verify-hotp", parents=[options, codec], help="verify an HOTP code")
    p.add_argument("secret", help="secret text or otpauth:// URI")
    p.add_argument("code")
    p.add_argument("--counter", type=int, default=None)
    p.add_argument("--window", type=int, default=DEFAULT_WINDOW)
    p.set_defaults(func=cmd_verify_hotp)

    p = sub.add_parser("verify-totp", parents=[options, codec, timing], help="verify a TOTP code")
    p.add_argument("secret", help="secret text or otpauth:// URI")
    p.add_argument("code")
    p.add_argument("--window", type=int, default=DEFAULT_WINDOW)
    p.set_defaults(func=cmd_verify_totp)

    p = sub.add_parser("uri", parents=[options], help="print an otpauth:// URI")
    p.add_argument("secret", help="base32 secret")
    p.add_argument("--account", required=True)
    p.add_argument("--issuer", default="")
    p.add_argument("--type", choices=["totp", "hotp"], default="totp")
    p.add_argument("--step", type=int, default=DEFAULT_STEP)
    p.add_argument("--counter", type=int, default=0)
    p.set_defaults(func=cmd_uri)

    return parser


# ── Main ──────────────────────────────────────────────────────────────────────

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _setup_logging(args.verbose)
    try:
        return args.func(args)
    except ValueError as exc:
        # OTPError and the URI validators both raise ValueError
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
