from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from storesync.app import load_drafts, sync_drafts
from storesync.config import ConfigurationError, configure_logging, get_sync_options
from storesync.domain.model import ResourceKind

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from storesync.config import SyncOptions

log = logging.getLogger(__name__)

SYNCABLE_KINDS = (
    ResourceKind.CATEGORY,
    ResourceKind.PRODUCT,
    ResourceKind.CHANNEL,
    ResourceKind.INVENTORY_ENTRY,
)


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {number}")
    return number


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Synchronise drafts with a record store")
    parser.add_argument(
        "kind",
        type=ResourceKind,
        choices=SYNCABLE_KINDS,
        help="Resource kind of the drafts",
    )
    parser.add_argument("drafts", type=Path, help="JSON file holding an array of drafts")
    parser.add_argument(
        "--store",
        choices=("http", "sqlite"),
        default="http",
        help="Record store to synchronise against (default: %(default)s)",
    )
    parser.add_argument(
        "--batch-size",
        type=_positive_int,
        help="Number of drafts per batch (defaults to config)",
    )
    parser.add_argument(
        "--max-concurrency",
        type=_positive_int,
        help="Drafts processed concurrently within a batch (defaults to config)",
    )
    parser.add_argument(
        "--allow-uuid-keys",
        action="store_true",
        help="Accept UUID-shaped reference keys",
    )
    for name in ("locales", "set-entries", "collection-entries", "properties"):
        parser.add_argument(
            f"--keep-other-{name}",
            action="store_true",
            help=f"Keep {name.replace('-', ' ')} of existing records missing from the drafts",
        )
    return parser.parse_args(list(argv))


def _build_options(args: argparse.Namespace) -> SyncOptions:
    options = get_sync_options()
    overrides: dict[str, object] = {}
    if args.batch_size is not None:
        overrides["batch_size"] = args.batch_size
    if args.max_concurrency is not None:
        overrides["max_concurrency"] = args.max_concurrency
    if args.allow_uuid_keys:
        overrides["allow_uuid_keys"] = True
    for name in ("locales", "set_entries", "collection_entries", "properties"):
        if getattr(args, f"keep_other_{name}"):
            overrides[f"remove_other_{name}"] = False
    return dataclasses.replace(options, **overrides)  # pyright: ignore[reportArgumentType]


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    try:
        options = _build_options(parsed_args)
        drafts = load_drafts(parsed_args.kind, parsed_args.drafts)
    except (ConfigurationError, OSError, ValueError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        statistics = sync_drafts(
            parsed_args.kind, drafts, options=options, store_name=parsed_args.store
        )
    except ConfigurationError:
        log.exception("Configuration error")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during sync")
        sys.exit(1)

    print(statistics.report_message)  # noqa: T201
    if statistics.failed:
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
