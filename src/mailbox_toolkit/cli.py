"""Command line interface for the Mailbox Toolkit.

Usage:
    mailbox-toolkit buildings
    mailbox-toolkit residents BUILDING_ID
    mailbox-toolkit generate BUILDING_ID --type labels --output out/

Sign-in uses --email and the MAILBOX_PASSWORD environment variable (or a
prompt). --offline-demo runs against built-in sample residents.
"""

from __future__ import annotations

import argparse
import asyncio
import getpass
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

from mailbox_toolkit import __version__, messages
from mailbox_toolkit.backend import DEMO_EMAIL, DEMO_PASSWORD, Backend, create_backend
from mailbox_toolkit.config import AppConfig, ConfigError, load_config
from mailbox_toolkit.controller import (
    GenerateRequest,
    generate_all,
    generate_document,
)
from mailbox_toolkit.core.errors import MailboxToolkitError
from mailbox_toolkit.documents import DocumentType
from mailbox_toolkit.ordering import ordered_apartment_entries

logger = logging.getLogger(__name__)

PASSWORD_ENV = "MAILBOX_PASSWORD"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool = False) -> None:
    """Log to stderr; INFO when verbose, WARNING otherwise."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mailbox-toolkit",
        description="Resident directories and mailbox labels",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", type=Path, help="JSON config file")
    parser.add_argument("--email", help="Administrator email for sign-in")
    parser.add_argument(
        "--offline-demo",
        action="store_true",
        help="Use built-in sample residents instead of the configured source",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show progress logs")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("buildings", help="List buildings")

    residents = sub.add_parser("residents", help="List residents by apartment")
    residents.add_argument("building_id", type=int)

    generate = sub.add_parser("generate", help="Generate PDF documents")
    generate.add_argument("building_id", type=int)
    generate.add_argument(
        "--type",
        "-t",
        dest="doc_type",
        choices=[t.value for t in DocumentType] + ["all"],
        default="all",
        help="Document to generate (default: all)",
    )
    generate.add_argument("--output", "-o", type=Path, help="Output directory")
    generate.add_argument("--labels-per-page", type=int, help="Labels per sheet")
    generate.add_argument("--no-footer", action="store_true", help="Omit page footer")

    return parser


async def _sign_in(backend: Backend, args: argparse.Namespace) -> bool:
    if backend.auth.is_authenticated:
        return True
    if backend.demo:
        email, password = DEMO_EMAIL, DEMO_PASSWORD
    else:
        email = args.email or input("Netfang: ")
        password = os.environ.get(PASSWORD_ENV) or getpass.getpass("Lykilorð: ")
    user = await backend.auth.login(email, password)
    if user is None:
        print(messages.LOGIN_FAILED, file=sys.stderr)
        return False
    return True


async def _cmd_buildings(backend: Backend) -> int:
    for building in await backend.store.fetch_buildings():
        print(f"{building.id}\t{building.title}")
    return 0


async def _cmd_residents(backend: Backend, config: AppConfig, building_id: int) -> int:
    residents = await backend.store.fetch_residents(building_id)
    entries = ordered_apartment_entries(residents, config.locale)
    if not entries:
        print(messages.EMPTY_RESIDENTS)
        return 0
    for entry in entries:
        print(messages.LABEL_HEADING.format(number=entry.apartment_number))
        for resident in entry.residents:
            priority = "-" if resident.priority is None else resident.priority
            print(f"  {resident.name} ({priority})")
    return 0


async def _cmd_generate(backend: Backend, config: AppConfig, args: argparse.Namespace) -> int:
    request = GenerateRequest(
        building_id=args.building_id,
        doc_type=DocumentType.MAILBOX_LABELS if args.doc_type == "all" else args.doc_type,
        output_dir=args.output or config.output_dir,
        labels_per_page=args.labels_per_page or config.labels_per_page,
        locale=config.locale,
        show_footer=not args.no_footer,
    )
    if args.doc_type == "all":
        results = await generate_all(request, store=backend.store, auth=backend.auth)
    else:
        results = [await generate_document(request, store=backend.store, auth=backend.auth)]

    for result in results:
        print(f"{result.path} ({result.page_count} bls.)")
        for warning in result.warnings:
            print(f"  {warning}", file=sys.stderr)
    return 0


async def _run(args: argparse.Namespace, config: AppConfig) -> int:
    backend = create_backend(config, offline_demo=args.offline_demo)
    if not await _sign_in(backend, args):
        return 1
    try:
        if args.command == "buildings":
            return await _cmd_buildings(backend)
        if args.command == "residents":
            return await _cmd_residents(backend, config, args.building_id)
        return await _cmd_generate(backend, config, args)
    finally:
        if backend.auth.is_authenticated and not backend.demo:
            await backend.auth.logout()


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = load_config(args.config)
        return asyncio.run(_run(args, config))
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 2
    except MailboxToolkitError as e:
        logger.debug("Command failed", exc_info=True)
        print(messages.user_message(e), file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
