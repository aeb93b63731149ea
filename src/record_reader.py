import csv
import logging
import re
from decimal import Decimal
from typing import Dict, Iterator, List, Optional

from errors import RecordParseError
from models import Transaction, TransactionType, MAX_CLIENT_ID, MAX_TRANSACTION_ID

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("type", "client", "tx")
AMOUNT_COLUMN = "amount"

ID_PATTERN = re.compile(r"[0-9]+")
AMOUNT_PATTERN = re.compile(r"-?[0-9]+(\.[0-9]+)?")


def read_transactions(filepath: str) -> Iterator[Transaction]:
    """
    Read a transactions CSV file, yielding records in file order.

    The first row is the header. Any malformed row raises RecordParseError,
    which aborts the whole run; an empty file yields nothing.
    """
    with open(filepath, "r", encoding="utf-8", newline="") as f:
        reader = csv.reader(f)
        try:
            header = next(reader, None)
            if header is None:
                return
            columns = _parse_header(header, reader.line_num)

            for row in reader:
                if not row:
                    continue
                yield parse_row(row, columns, reader.line_num)
        except (csv.Error, UnicodeDecodeError) as e:
            raise RecordParseError(str(e), reader.line_num) from e


def _parse_header(header: List[str], line_number: int) -> Dict[str, int]:
    columns = {name.strip(): index for index, name in enumerate(header)}
    if len(columns) != len(header):
        raise RecordParseError("duplicate column names in header", line_number)
    missing = [name for name in REQUIRED_COLUMNS if name not in columns]
    if missing:
        raise RecordParseError(f"missing column(s) in header: {', '.join(missing)}", line_number)
    logger.debug(f"Header columns: {columns}")
    return columns


def parse_row(row: List[str], columns: Dict[str, int], line_number: Optional[int] = None) -> Transaction:
    """Parse one CSV row into a Transaction, given the header's column positions."""
    if len(row) != len(columns):
        raise RecordParseError(f"expected {len(columns)} fields, found {len(row)}", line_number)

    normalized = {name: row[index].strip() for name, index in columns.items()}

    transaction_type_str = normalized["type"]
    try:
        transaction_type = TransactionType(transaction_type_str)
    except ValueError:
        raise RecordParseError(f"unknown transaction type {transaction_type_str!r}", line_number) from None

    client_id = _parse_id(normalized["client"], "client", MAX_CLIENT_ID, line_number)
    transaction_id = _parse_id(normalized["tx"], "tx", MAX_TRANSACTION_ID, line_number)

    amount = None
    amount_str = normalized.get(AMOUNT_COLUMN, "")
    if amount_str:
        amount = _parse_amount(amount_str, line_number)

    return Transaction(
        transaction_type=transaction_type,
        client_id=client_id,
        transaction_id=transaction_id,
        amount=amount,
    )


def _parse_id(value: str, field: str, maximum: int, line_number: Optional[int]) -> int:
    if not ID_PATTERN.fullmatch(value):
        raise RecordParseError(f"invalid {field} {value!r}", line_number)
    parsed = int(value)
    if not 0 <= parsed <= maximum:
        raise RecordParseError(f"{field} {parsed} out of range 0..{maximum}", line_number)
    return parsed


def _parse_amount(value: str, line_number: Optional[int]) -> Decimal:
    if not AMOUNT_PATTERN.fullmatch(value):
        raise RecordParseError(f"invalid amount {value!r}", line_number)
    return Decimal(value)
