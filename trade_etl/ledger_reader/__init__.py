"""
Stellar ledger reader package.

Opens bounded ledger backends, reads each ledger's header and transactions
in application order, and hands (transaction, ledger header) records to the
trade transform.
"""

from trade_etl.ledger_reader.backend import (
    LedgerBackend,
    RpcLedgerBackend,
    StaticLedgerBackend,
    TransactionReader,
)
from trade_etl.ledger_reader.fetcher import (
    BoundedCollector,
    get_transactions,
    get_transactions_for_network,
)
from trade_etl.ledger_reader.models import LedgerHeader, LedgerTransaction, TransactionRecord

__all__ = [
    "BoundedCollector",
    "LedgerBackend",
    "LedgerHeader",
    "LedgerTransaction",
    "RpcLedgerBackend",
    "StaticLedgerBackend",
    "TransactionReader",
    "TransactionRecord",
    "get_transactions",
    "get_transactions_for_network",
]
