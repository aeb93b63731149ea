from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Dict, TextIO

from models import ClientAccount

HEADER = "client,available,held,total,locked"
PRECISION = Decimal("0.0001")


def format_amount(value: Decimal) -> str:
    """Round to 4 decimal places, drop trailing zeros but keep at least one fractional digit."""
    with localcontext() as ctx:
        # Room for every integer digit plus the 4 fractional ones.
        ctx.prec = max(ctx.prec, value.adjusted() + 6)
        rounded = value.quantize(PRECISION, rounding=ROUND_HALF_UP)
        if rounded.is_zero():
            rounded = abs(rounded)
        text = f"{rounded.normalize():f}"
    if "." not in text:
        text += ".0"
    return text


def format_account(account: ClientAccount) -> str:
    return (
        f"{account.client_id},"
        f"{format_amount(account.available)},"
        f"{format_amount(account.held)},"
        f"{format_amount(account.total)},"
        f"{str(account.locked).lower()}"
    )


def write_accounts(accounts: Dict[int, ClientAccount], stream: TextIO) -> None:
    """Write the account summary. Nothing at all is written when there are no accounts."""
    if not accounts:
        return

    print(HEADER, file=stream)
    for client_id in sorted(accounts.keys()):
        print(format_account(accounts[client_id]), file=stream)
