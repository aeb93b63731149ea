import logging
from typing import Dict, Iterable

from models import ClientAccount, ProcessingStats, Transaction
from record_reader import read_transactions
from state_manager import StateManager
from transaction_processor import TransactionProcessor

logger = logging.getLogger(__name__)


class LedgerEngine:
    """
    Replays transactions against client accounts in a single sequential pass.
    Records are applied strictly in input order; nothing is reordered or retried.
    """

    def __init__(self):
        self._state = StateManager()
        self._processor = TransactionProcessor(self._state)
        self._stats = ProcessingStats()

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        logger.info(f"Replaying transactions from {filepath}")
        return self.replay(read_transactions(filepath))

    def replay(self, transactions: Iterable[Transaction]) -> Dict[int, ClientAccount]:
        """Apply each transaction in order and return the final account states."""
        for transaction in transactions:
            result = self._processor.process_transaction(transaction)
            self._stats.record(result)
            logger.debug(f"{transaction}: {result.value}")

        logger.info(f"Processed: {self._stats.processed}, Ignored: {self._stats.ignored}")
        return self._state.get_all_accounts()
