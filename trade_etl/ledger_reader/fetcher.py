"""
Ledger transaction fetcher: ledger range to (transaction, header) records.

Iterates the inclusive range in ascending sequence order, opening one reader
per ledger and draining it before the next is opened. Output order is
ledger-then-application order, which downstream ID assignment relies on.
Any provider error fails the whole call; no partial list is returned.
"""

from __future__ import annotations

from trade_etl.config import get_settings
from trade_etl.ledger_reader.backend import LedgerBackend, RpcLedgerBackend
from trade_etl.ledger_reader.models import TransactionRecord
from trade_etl.trade_logging import bind_ledger, get_logger

logger = get_logger(__name__)


class BoundedCollector:
    """
    Accumulates records up to a limit fixed at construction.

    A negative limit means unbounded. Callers ask ``full`` instead of
    comparing counts themselves.
    """

    def __init__(self, limit: int) -> None:
        self.limit = limit
        self._items: list[TransactionRecord] = []

    @property
    def full(self) -> bool:
        return self.limit >= 0 and len(self._items) >= self.limit

    def add(self, record: TransactionRecord) -> None:
        if self.full:
            raise OverflowError(f"collector is full (limit={self.limit})")
        self._items.append(record)

    @property
    def items(self) -> list[TransactionRecord]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)


def get_transactions(
    start: int,
    end: int,
    limit: int,
    *,
    backend: LedgerBackend,
) -> list[TransactionRecord]:
    """
    Return the transactions of ledgers ``start..end`` (inclusive), at most ``limit``.

    A negative limit reads every transaction in the range. Raises ProviderError
    if any reader cannot be opened or read; readers are always closed.
    """
    if start > end:
        raise ValueError(f"start ledger {start} is after end ledger {end}")

    collector = BoundedCollector(limit)
    for sequence in range(start, end + 1):
        if collector.full:
            break
        log = bind_ledger(sequence)
        read_count = 0
        with backend.transaction_reader(sequence) as reader:
            header = reader.header
            while not collector.full:
                try:
                    tx = reader.read()
                except EOFError:
                    break
                collector.add(TransactionRecord(transaction=tx, ledger=header))
                read_count += 1
        log.debug("ledger_read", transaction_count=read_count)

    logger.info(
        "transactions_fetched",
        start_ledger=start,
        end_ledger=end,
        limit=limit,
        transaction_count=len(collector),
    )
    return collector.items


def get_transactions_for_network(
    start: int,
    end: int,
    limit: int,
    *,
    network: str | None = None,
) -> list[TransactionRecord]:
    """Resolve the network's RPC settings, then fetch as get_transactions does."""
    settings = get_settings(network)
    with RpcLedgerBackend(
        settings.rpc_url,
        start,
        end,
        network_passphrase=settings.network_passphrase,
        request_timeout_sec=settings.rpc_timeout_sec,
        page_size=settings.rpc_page_size,
    ) as backend:
        return get_transactions(start, end, limit, backend=backend)
