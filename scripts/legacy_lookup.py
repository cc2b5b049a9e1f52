"""Probe a legacy user API the way the provider does.

This module serves as a CLI wrapper around rest_provider services.
"""
from __future__ import annotations
import argparse
import getpass
import json
import os
import sys
from pathlib import Path

SCRIPT_DIR = Path(__file__).parent
PROJECT_ROOT = SCRIPT_DIR.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from rest_provider.config.settings import ProviderConfig, load_properties, URI_PROPERTY
from rest_provider.core.exceptions import RestUserProviderError
from rest_provider.core.user_service import create_user_service


def _resolve_password(args: argparse.Namespace) -> str:
    if args.password:
        return args.password
    from_env = os.environ.get("LEGACY_CHECK_PASSWORD")
    if from_env:
        return from_env
    return getpass.getpass(f"Password for {args.username}: ")


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Legacy user API lookup helper")
    parser.add_argument("--uri", default=os.environ.get("LEGACY_URI"),
                        help="Legacy users endpoint, e.g. https://legacy.example.com/api/users")
    sub = parser.add_subparsers(dest="cmd")

    fu = sub.add_parser("find-user")
    target = fu.add_mutually_exclusive_group(required=True)
    target.add_argument("--username")
    target.add_argument("--email")

    cp = sub.add_parser("check-password")
    cp.add_argument("--username", required=True)
    cp.add_argument("--password", help="Falls back to LEGACY_CHECK_PASSWORD, then a prompt")

    args = parser.parse_args()

    if not args.cmd:
        parser.print_help()
        return

    if not args.uri:
        parser.error("Missing legacy API URI (--uri or LEGACY_URI)")

    properties = load_properties()
    properties[URI_PROPERTY] = args.uri
    try:
        config = ProviderConfig.from_properties(properties)
    except ValueError as e:
        parser.error(str(e))
    print(f"[lookup] uri={config.uri}; auth={config.auth_mode}", file=sys.stderr)

    service = create_user_service(config)

    try:
        if args.cmd == "find-user":
            if args.username:
                user = service.find_by_username(args.username)
            else:
                user = service.find_by_email(args.email)
            if user is None:
                print("[lookup] User not found", file=sys.stderr)
                sys.exit(1)
            print(json.dumps(user.to_dict(), indent=2, ensure_ascii=False))
        elif args.cmd == "check-password":
            valid = service.is_password_valid(args.username, _resolve_password(args))
            print("valid" if valid else "invalid")
            if not valid:
                sys.exit(1)
        else:
            parser.print_help()
    except RestUserProviderError as e:
        print(f"[lookup] Error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
