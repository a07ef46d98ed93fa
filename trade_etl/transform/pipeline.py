"""
Ledger trade transform: fetched records to trade rows.

Walks records in fetch order, skips failed transactions, assigns each
operation its TOID and extracts trades from every trade-producing operation.
Decode problems are logged loudly and re-raised.
"""

from __future__ import annotations

from typing import Iterable

from trade_etl.core.exceptions import DecodeShapeError, UnknownOfferVariantError
from trade_etl.core.toid import toid
from trade_etl.ledger_reader.models import TransactionRecord
from trade_etl.ledger_reader.xdr_json import operation_type
from trade_etl.trade_logging import get_logger
from trade_etl.transform.results import TRADE_OPERATION_TYPES
from trade_etl.transform.trade import TradeOutput, extract_trades

logger = get_logger(__name__)


def transform_trades(records: Iterable[TransactionRecord]) -> list[TradeOutput]:
    """Return the trades of all records, ordered by ledger, transaction, operation, claim."""
    trades: list[TradeOutput] = []
    failed_count = 0
    for record in records:
        tx = record.transaction
        if not tx.successful:
            failed_count += 1
            logger.debug(
                "transaction_failed_skipped",
                ledger_sequence=record.ledger.sequence,
                transaction_hash=tx.hash,
            )
            continue
        for operation_index, operation in enumerate(tx.operations):
            try:
                if operation_type(operation) not in TRADE_OPERATION_TYPES:
                    continue
                operation_id = toid(record.ledger.sequence, tx.index, operation_index)
                trades.extend(
                    extract_trades(operation_index, operation_id, record, record.ledger.closed_at)
                )
            except (UnknownOfferVariantError, DecodeShapeError) as e:
                if e.operation_index is None:
                    e.operation_index = operation_index
                if e.ledger_sequence is None:
                    e.ledger_sequence = record.ledger.sequence
                logger.error(
                    "trade_decode_failed",
                    transaction_hash=tx.hash,
                    error=str(e),
                    **e.context(),
                )
                raise

    logger.info("trades_transformed", trade_count=len(trades), failed_transactions=failed_count)
    return trades
