from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from upnshift.adapters.csvfile import DEFAULT_KEY_COLUMN
from upnshift.app import run_suffix_migration
from upnshift.config import ConfigurationError, configure_logging
from upnshift.domain.eligibility import RestoreParameters, UpdateParameters

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from upnshift.domain.eligibility import RunParameters

log = logging.getLogger(__name__)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("batch", type=Path, help="CSV file listing the accounts to process")
    parser.add_argument(
        "--key-column",
        type=str,
        default=DEFAULT_KEY_COLUMN,
        help="CSV column holding the account key (default: %(default)s)",
    )
    parser.add_argument(
        "--ledger-dir",
        type=Path,
        help="Directory for the audit ledger (defaults to UPNSHIFT_LEDGER_DIR or the data dir)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Evaluate and ledger every account without writing to the directory",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Migrate user principal name suffixes")
    subparsers = parser.add_subparsers(dest="command", required=True)

    update = subparsers.add_parser("update", help="Rewrite principal names from a source attribute")
    _add_common_arguments(update)
    update.add_argument(
        "--source-attribute",
        type=str,
        required=True,
        help="Attribute holding the desired principal name",
    )
    update.add_argument(
        "--backup-attribute",
        type=str,
        required=True,
        help="Attribute that receives the current principal name",
    )
    update.add_argument(
        "--subdomain",
        type=str,
        help="Token prepended to the source suffix, e.g. 'eu' for eu.contoso.com",
    )
    update.add_argument(
        "--exclude-suffix",
        dest="excluded_suffixes",
        action="append",
        default=[],
        help="Leave accounts whose current suffix matches (repeatable, comma separated)",
    )

    restore = subparsers.add_parser("restore", help="Put back principal names saved by update")
    _add_common_arguments(restore)
    restore.add_argument(
        "--restore-attribute",
        type=str,
        required=True,
        help="Attribute holding the saved principal name",
    )

    return parser.parse_args(list(argv))


def _split_suffixes(values: Sequence[str]) -> frozenset[str]:
    return frozenset(
        part.strip() for value in values for part in value.split(",") if part.strip()
    )


def _build_parameters(args: argparse.Namespace) -> RunParameters:
    if args.command == "update":
        return UpdateParameters(
            source_attribute=args.source_attribute,
            backup_attribute=args.backup_attribute,
            subdomain=args.subdomain,
            excluded_suffixes=_split_suffixes(args.excluded_suffixes),
        )
    if args.command == "restore":
        return RestoreParameters(restore_attribute=args.restore_attribute)
    raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
    try:
        params = _build_parameters(parsed_args)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        run_suffix_migration(
            batch_path=parsed_args.batch,
            params=params,
            key_column=parsed_args.key_column,
            ledger_dir=parsed_args.ledger_dir,
            dry_run=parsed_args.dry_run,
        )
    except (ConfigurationError, ValueError):
        log.exception("Configuration error")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
