import sys
import os
from decimal import Decimal

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from ledger_engine import LedgerEngine


def tx_id_for(client_id, n):
    return client_id * 100 + n


class TestLedgerEngineLargeScale:
    def test_1000_accounts_interleaved(self, tmp_path):
        """1000 clients whose deposits and withdrawals are interleaved round by round."""
        num_clients = 1000
        rows = ["type, client, tx, amount"]
        tx_id = 1

        # Per client: +100 +200 -50 +300 -1000 (overdraft, ignored) -100 = 450
        rounds = [
            ("deposit", "100"),
            ("deposit", "200"),
            ("withdrawal", "50"),
            ("deposit", "300"),
            ("withdrawal", "1000"),
            ("withdrawal", "100"),
        ]
        for kind, amount in rounds:
            for client_id in range(1, num_clients + 1):
                rows.append(f"{kind}, {client_id}, {tx_id}, {amount}")
                tx_id += 1

        csv_file = tmp_path / "large_test.csv"
        csv_file.write_text('\n'.join(rows))

        engine = LedgerEngine()
        accounts = engine.process_file(str(csv_file))

        assert len(accounts) == num_clients
        assert engine.stats.applied == num_clients * 5
        assert engine.stats.ignored == num_clients

        expected_balance = Decimal("450")
        for client_id in range(1, num_clients + 1):
            assert accounts[client_id].available == expected_balance, \
                f"Client {client_id}: expected {expected_balance}, got {accounts[client_id].available}"
            assert accounts[client_id].total == expected_balance
            assert accounts[client_id].held == Decimal("0")
            assert accounts[client_id].locked is False

    def test_dispute_workflows_across_60_accounts(self, tmp_path):
        rows = ["type, client, tx, amount"]

        def deposits(clients, amounts):
            for client_id in clients:
                for n, amount in enumerate(amounts, start=1):
                    rows.append(f"deposit, {client_id}, {tx_id_for(client_id, n)}, {amount}")

        def reference(kind, clients, n, by=None):
            for client_id in clients:
                actor = client_id if by is None else by(client_id)
                rows.append(f"{kind}, {actor}, {tx_id_for(client_id, n)},")

        # 1-10: deposits only -> 500
        deposits(range(1, 11), ["100", "150", "250"])

        # 11-20: dispute then resolve -> 500, nothing held
        deposits(range(11, 21), ["100", "150", "250"])
        reference("dispute", range(11, 21), 1)
        reference("resolve", range(11, 21), 1)

        # 21-30: dispute then chargeback, then a late deposit -> 400, locked
        deposits(range(21, 31), ["100", "150", "250"])
        reference("dispute", range(21, 31), 1)
        reference("chargeback", range(21, 31), 1)
        for client_id in range(21, 31):
            rows.append(f"deposit, {client_id}, {tx_id_for(client_id, 9)}, 1000")

        # 31-40: dispute on a deposit still covered by available funds
        deposits(range(31, 41), ["150", "250"])
        for client_id in range(31, 41):
            rows.append(f"withdrawal, {client_id}, {tx_id_for(client_id, 3)}, 100")
        reference("dispute", range(31, 41), 1)

        # 41-50: most funds withdrawn, so the dispute cannot hold the deposit
        deposits(range(41, 51), ["100"])
        for client_id in range(41, 51):
            rows.append(f"withdrawal, {client_id}, {tx_id_for(client_id, 2)}, 90")
        reference("dispute", range(41, 51), 1)

        # 51-60: another client tries to dispute and charge back their deposits
        deposits(range(51, 61), ["100"])
        reference("dispute", range(51, 61), 1, by=lambda c: c + 100)
        reference("chargeback", range(51, 61), 1, by=lambda c: c + 100)

        csv_file = tmp_path / "disputes_test.csv"
        csv_file.write_text('\n'.join(rows))

        accounts = LedgerEngine().process_file(str(csv_file))

        for client_id in range(1, 21):
            assert accounts[client_id].available == Decimal("500"), f"Client {client_id}"
            assert accounts[client_id].held == Decimal("0")
            assert accounts[client_id].locked is False

        for client_id in range(21, 31):
            assert accounts[client_id].available == Decimal("400"), f"Client {client_id}"
            assert accounts[client_id].held == Decimal("0")
            assert accounts[client_id].total == Decimal("400")
            assert accounts[client_id].locked is True

        for client_id in range(31, 41):
            assert accounts[client_id].available == Decimal("150"), f"Client {client_id}"
            assert accounts[client_id].held == Decimal("150")
            assert accounts[client_id].total == Decimal("300")
            assert accounts[client_id].locked is False

        for client_id in range(41, 51):
            assert accounts[client_id].available == Decimal("10"), f"Client {client_id}"
            assert accounts[client_id].held == Decimal("0")

        for client_id in range(51, 61):
            assert accounts[client_id].available == Decimal("100"), f"Client {client_id}"
            assert accounts[client_id].held == Decimal("0")
            assert accounts[client_id].locked is False
            assert accounts[client_id + 100].total == Decimal("0")
            assert accounts[client_id + 100].locked is False
