import logging
from typing import Optional

from models import Transaction, TransactionType, ClientAccount, LedgerEntry, ProcessingResult
from state_manager import StateManager

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies transactions to replay state one at a time.
    Never raises for business-rule violations: a record that breaks a rule is
    reported as IGNORED and leaves the state untouched.
    """

    def __init__(self, state: StateManager):
        self._state = state

    def process_transaction(self, transaction: Transaction) -> ProcessingResult:
        """
        Process a single transaction.

        Returns:
            APPLIED: Balances and/or ledger entries were updated
            IGNORED: The record broke a rule (bad amount, duplicate tx, insufficient
                     funds, unknown tx, wrong dispute state, locked account)
        """
        account = self._state.get_or_create_account(transaction.client_id)

        if account.locked:
            logger.info(f"{transaction}: account {account.client_id} is locked, ignoring")
            return ProcessingResult.IGNORED

        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                return self._handle_deposit(account, transaction)
            case TransactionType.WITHDRAWAL:
                return self._handle_withdrawal(account, transaction)
            case TransactionType.DISPUTE:
                return self._handle_dispute(account, transaction)
            case TransactionType.RESOLVE:
                return self._handle_resolve(account, transaction)
            case TransactionType.CHARGEBACK:
                return self._handle_chargeback(account, transaction)
            case _:
                return ProcessingResult.IGNORED

    def _handle_deposit(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        if transaction.amount is None or transaction.amount <= 0:
            logger.warning(f"Deposit tx {transaction.transaction_id}: invalid amount {transaction.amount}")
            return ProcessingResult.IGNORED

        if self._state.has_entry(transaction.transaction_id):
            logger.info(f"Deposit tx {transaction.transaction_id}: duplicate transaction id, ignoring")
            return ProcessingResult.IGNORED

        account.credit(transaction.amount)
        self._state.store_entry(
            transaction.transaction_id,
            LedgerEntry(client_id=transaction.client_id, amount=transaction.amount),
        )
        return ProcessingResult.APPLIED

    def _handle_withdrawal(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        if transaction.amount is None or transaction.amount <= 0:
            logger.warning(f"Withdrawal tx {transaction.transaction_id}: invalid amount {transaction.amount}")
            return ProcessingResult.IGNORED

        if account.available < transaction.amount:
            logger.info(
                f"Withdrawal tx {transaction.transaction_id}: insufficient funds "
                f"(available {account.available}, requested {transaction.amount})"
            )
            return ProcessingResult.IGNORED

        # Withdrawals are not disputable, so no ledger entry is kept.
        account.debit(transaction.amount)
        return ProcessingResult.APPLIED

    def _find_entry(self, transaction: Transaction) -> Optional[LedgerEntry]:
        """Look up the deposit a dispute, resolve or chargeback refers to, for this client only."""
        action = transaction.transaction_type.value.capitalize()
        entry = self._state.get_entry(transaction.transaction_id)

        if entry is None:
            logger.info(f"{action} for tx {transaction.transaction_id}: transaction not found")
            return None

        if entry.client_id != transaction.client_id:
            logger.warning(
                f"{action} for tx {transaction.transaction_id}: client mismatch "
                f"(expected {entry.client_id}, got {transaction.client_id})"
            )
            return None

        return entry

    def _handle_dispute(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        entry = self._find_entry(transaction)
        if entry is None:
            return ProcessingResult.IGNORED

        if entry.disputed:
            logger.info(f"Dispute for tx {transaction.transaction_id}: transaction already disputed")
            return ProcessingResult.IGNORED

        if account.available < entry.amount:
            logger.info(
                f"Dispute for tx {transaction.transaction_id}: insufficient available funds "
                f"to hold {entry.amount} (available {account.available})"
            )
            return ProcessingResult.IGNORED

        account.hold(entry.amount)
        entry.disputed = True
        return ProcessingResult.APPLIED

    def _handle_resolve(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        entry = self._find_entry(transaction)
        if entry is None:
            return ProcessingResult.IGNORED

        if not entry.disputed:
            logger.info(f"Resolve for tx {transaction.transaction_id}: transaction is not disputed")
            return ProcessingResult.IGNORED

        if account.held < entry.amount:
            logger.info(f"Resolve for tx {transaction.transaction_id}: held funds below {entry.amount}")
            return ProcessingResult.IGNORED

        account.release_hold(entry.amount)
        entry.disputed = False
        return ProcessingResult.APPLIED

    def _handle_chargeback(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        entry = self._find_entry(transaction)
        if entry is None:
            return ProcessingResult.IGNORED

        if not entry.disputed:
            logger.info(f"Chargeback for tx {transaction.transaction_id}: transaction is not disputed")
            return ProcessingResult.IGNORED

        if account.held < entry.amount:
            logger.info(f"Chargeback for tx {transaction.transaction_id}: held funds below {entry.amount}")
            return ProcessingResult.IGNORED

        # The entry stays flagged as disputed; the lock stops anything further.
        account.remove_held(entry.amount)
        account.lock()
        return ProcessingResult.APPLIED
