import argparse
import logging
import os
import sys
from importlib.metadata import PackageNotFoundError, version

from errors import RecordParseError
from ledger_engine import LedgerEngine
from report_writer import write_accounts

try:
    __version__ = version("ledger-replay")
except PackageNotFoundError:
    # Running from a source checkout without an install.
    __version__ = "0+unknown"

LOG_LEVEL_ENV = "LEDGER_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"


def log_level_from_env() -> int:
    level_name = os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        return logging.WARNING
    return level


def configure_logging() -> None:
    logging.basicConfig(
        level=log_level_from_env(),
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ledger-replay",
        description="Replay a CSV file of transactions and print final client balances.",
    )
    parser.add_argument("file", help="CSV file to parse")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging()

    engine = LedgerEngine()
    try:
        accounts = engine.process_file(args.file)
    except OSError as e:
        print(f"error: cannot read {args.file}: {e}", file=sys.stderr)
        return 1
    except RecordParseError as e:
        print(f"error: {args.file}: {e}", file=sys.stderr)
        return 1

    write_accounts(accounts, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
