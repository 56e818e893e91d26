"""
Command-line interface.

    license-tool keys      generate a signing key pair
    license-tool generate  issue a new license
    license-tool verify    verify a license for a device
    license-tool info      show license information
    license-tool renew     extend a license
"""
import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import List, Optional

from core.domain.exceptions import DomainException, LicenseInvalidError
from core.domain.value_objects import LicenseLevel
from core.infrastructure.event_handlers import register_event_handlers
from core.infrastructure.events import InMemoryEventBus
from LicenseTool import __version__
from LicenseTool.settings.base import LicenseSettings
from LicenseTool.settings.logging import configure_logging
from licenses.application.services.license_manager import LicenseManager
from signing.infrastructure.schemes import SCHEMES

logger = logging.getLogger(__name__)

DEFAULT_LICENSE_FILE = "license.dat"
DEFAULT_DAYS = 365
TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

EXIT_OK = 0
EXIT_FAILURE = 1


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all sub-commands."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "-c",
        "--config-dir",
        type=Path,
        help="Directory holding private.pem and public.pem",
    )
    common.add_argument(
        "--scheme",
        choices=sorted(SCHEMES),
        help="Signature scheme (default: rsa)",
    )
    common.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log at DEBUG level",
    )

    parser = argparse.ArgumentParser(
        prog="license-tool",
        description="Generate, verify and manage signed software licenses.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    keys = subparsers.add_parser("keys", parents=[common], help="Generate a key pair")
    keys.set_defaults(handler=cmd_keys)

    generate = subparsers.add_parser("generate", parents=[common], help="Generate a new license")
    generate.add_argument("-u", "--user", required=True, help="User name")
    generate.add_argument("-d", "--device-id", required=True, help="Device ID")
    generate.add_argument(
        "-l",
        "--level",
        default=LicenseLevel.BASIC.value,
        choices=[level.value for level in LicenseLevel],
        help="License level (default: basic)",
    )
    generate.add_argument(
        "-t", "--days", type=int, default=DEFAULT_DAYS, help="Validity in days (default: 365)"
    )
    generate.add_argument(
        "-F",
        "--feature",
        dest="features",
        action="append",
        default=[],
        help="Feature name; may be repeated",
    )
    generate.add_argument(
        "-o", "--output", type=Path, default=Path(DEFAULT_LICENSE_FILE), help="Output file"
    )
    generate.set_defaults(handler=cmd_generate)

    verify = subparsers.add_parser("verify", parents=[common], help="Verify a license")
    verify.add_argument("-d", "--device-id", required=True, help="Device ID")
    verify.add_argument(
        "-f", "--file", type=Path, default=Path(DEFAULT_LICENSE_FILE), help="License file"
    )
    verify.set_defaults(handler=cmd_verify)

    info = subparsers.add_parser("info", parents=[common], help="Show license information")
    info.add_argument(
        "-f", "--file", type=Path, default=Path(DEFAULT_LICENSE_FILE), help="License file"
    )
    info.set_defaults(handler=cmd_info)

    renew = subparsers.add_parser("renew", parents=[common], help="Renew a license")
    renew.add_argument(
        "-f", "--file", type=Path, default=Path(DEFAULT_LICENSE_FILE), help="License file"
    )
    renew.add_argument(
        "-t", "--days", type=int, default=DEFAULT_DAYS, help="Days to add (default: 365)"
    )
    renew.set_defaults(handler=cmd_renew)

    return parser


def build_settings(args: argparse.Namespace) -> LicenseSettings:
    """Environment settings with command-line overrides applied."""
    settings = LicenseSettings.from_env()
    overrides = {}
    if args.config_dir:
        overrides["config_dir"] = args.config_dir
    if args.scheme:
        overrides["signature_scheme"] = args.scheme
    if args.verbose:
        overrides["log_level"] = "DEBUG"
    return dataclasses.replace(settings, **overrides) if overrides else settings


def build_manager(settings: LicenseSettings) -> LicenseManager:
    """License manager wired with the audit log handler."""
    event_bus = InMemoryEventBus()
    register_event_handlers(event_bus)
    return LicenseManager(settings, event_bus=event_bus)


def cmd_keys(manager: LicenseManager, args: argparse.Namespace) -> int:
    manager.generate_keys()
    print("Key pair generated:")
    print(f"  private key: {manager.settings.private_key_path}")
    print(f"  public key:  {manager.settings.public_key_path}")
    return EXIT_OK


def cmd_generate(manager: LicenseManager, args: argparse.Namespace) -> int:
    license = manager.generate_license(
        user_name=args.user,
        device_id=args.device_id,
        level=args.level,
        valid_days=args.days,
        features=args.features,
    )
    manager.save_license(license, args.output)
    print(f"License generated: {args.output}")
    return EXIT_OK


def cmd_verify(manager: LicenseManager, args: argparse.Namespace) -> int:
    license = manager.load_license(args.file)
    try:
        result = manager.verify_license(license, args.device_id)
    except LicenseInvalidError as e:
        print(f"License is not valid: {e.reason.value}", file=sys.stderr)
        return EXIT_FAILURE
    print("License is valid")
    if result.days_remaining > 0:
        print(f"Days remaining: {result.days_remaining}")
    return EXIT_OK


def cmd_info(manager: LicenseManager, args: argparse.Namespace) -> int:
    info = manager.get_license_info(manager.load_license(args.file))
    print("License information:")
    print(f"  ID:        {info.id}")
    print(f"  User:      {info.user_name}")
    print(f"  Device ID: {info.device_id}")
    print(f"  Level:     {info.level}")
    print(f"  Issued:    {info.issued_at.strftime(TIME_FORMAT)}")
    print(f"  Expires:   {info.expires_at.strftime(TIME_FORMAT)}")
    if info.features:
        print(f"  Features:  {', '.join(info.features)}")
    if info.is_expired:
        print("  Status:    expired")
    else:
        print(f"  Status:    valid ({info.days_remaining} days remaining)")
    return EXIT_OK


def cmd_renew(manager: LicenseManager, args: argparse.Namespace) -> int:
    license = manager.load_license(args.file)
    renewed = manager.renew_license(license, args.days)
    manager.save_license(renewed, args.file)
    print(f"License renewed by {args.days} days")
    print(f"New expiry: {renewed.expires_at.strftime(TIME_FORMAT)}")
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the command line tool.

    Args:
        argv: Arguments without the program name (defaults to sys.argv)

    Returns:
        Process exit status
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = build_settings(args)
    except ValueError as e:
        parser.error(str(e))
    configure_logging(settings.environment, settings.log_level)

    try:
        manager = build_manager(settings)
        return args.handler(manager, args)
    except DomainException as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"{e.code}: {e.message}", file=sys.stderr)
        return EXIT_FAILURE
    except ValueError as e:
        print(f"Invalid argument: {e}", file=sys.stderr)
        return EXIT_FAILURE
