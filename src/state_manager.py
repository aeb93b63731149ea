from typing import Dict, Optional

from models import ClientAccount, LedgerEntry


class StateManager:
    """
    Holds the replay state: client accounts and the deposit ledger used for dispute lookups.
    Both tables live only for the duration of a single replay.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        self._entries: Dict[int, LedgerEntry] = {}

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def store_entry(self, transaction_id: int, entry: LedgerEntry) -> None:
        """Store a ledger entry for future dispute lookups."""
        self._entries[transaction_id] = entry

    def get_entry(self, transaction_id: int) -> Optional[LedgerEntry]:
        """Retrieve stored ledger entry by transaction ID."""
        return self._entries.get(transaction_id)

    def has_entry(self, transaction_id: int) -> bool:
        return transaction_id in self._entries

    def get_all_accounts(self) -> Dict[int, ClientAccount]:
        """Return all accounts (for final output)."""
        return dict(self._accounts)
