"""
Trade extraction: one offer or path-payment operation to trade records.

Each claimed offer of a successful operation becomes one TradeOutput. The
base side is the offer that was resting on the book (its seller, the asset it
sold); the counter side is the transaction's source account and the asset it
gave up. Prices are kept as the unreduced fraction counter / base.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any

from trade_etl.core.exceptions import (
    NoResultsError,
    TradeEtlError,
    TransactionFailedError,
    ValidationError,
)
from trade_etl.core.toid import OfferIdType, encode_offer_id
from trade_etl.ledger_reader.models import LedgerTransaction, TransactionRecord
from trade_etl.ledger_reader.xdr_json import operation_type as get_operation_type
from trade_etl.trade_logging import get_logger
from trade_etl.transform.claims import ClaimedOffer
from trade_etl.transform.results import decode_claimed_offers

logger = get_logger(__name__)


@dataclass(frozen=True)
class TradeOutput:
    """
    One trade: a single claimed offer within an operation.

    Schema is stable and sink-agnostic; ``to_dict`` gives the JSON row.
    """

    order: int
    """Claim position within the operation (0-based)."""
    ledger_closed_at: datetime
    offer_id: int
    base_account_address: str
    base_asset_type: str
    base_asset_code: str
    base_asset_issuer: str
    base_amount: int
    counter_account_address: str
    counter_asset_type: str
    counter_asset_code: str
    counter_asset_issuer: str
    counter_amount: int
    base_is_seller: bool
    """Always True: the base side is the resting offer's seller."""
    price_n: int
    price_d: int
    base_offer_id: int
    counter_offer_id: int
    """Offer left on the book, or a TOID-tagged ID synthesized from the operation."""
    history_operation_id: int

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable dict (timestamps as ISO 8601)."""
        out = asdict(self)
        out["ledger_closed_at"] = self.ledger_closed_at.isoformat()
        return out


def _validate_claim(claim: ClaimedOffer, operation_index: int) -> None:
    if claim.offer_id < 0:
        raise ValidationError(
            f"Offer ID is negative ({claim.offer_id}) for operation at index {operation_index}",
            operation_index=operation_index,
        )
    if claim.amount_sold < 0:
        raise ValidationError(
            f"Amount sold is negative ({claim.amount_sold}) for operation at index {operation_index}",
            operation_index=operation_index,
        )
    if claim.amount_bought < 0:
        raise ValidationError(
            f"Amount bought is negative ({claim.amount_bought}) for operation at index {operation_index}",
            operation_index=operation_index,
        )
    if claim.amount_sold == 0 and claim.amount_bought == 0:
        raise ValidationError(
            f"Both base and counter amount are 0 for operation at index {operation_index}",
            operation_index=operation_index,
        )


def extract_trades(
    operation_index: int,
    operation_id: int,
    transaction: LedgerTransaction | TransactionRecord,
    ledger_closed_at: datetime,
) -> list[TradeOutput]:
    """
    Return one TradeOutput per offer claimed by the operation at ``operation_index``.

    ``operation_id`` is the operation's TOID; trades carry it +1 to stay in
    sync with the ingest history IDs. Raises NoResultsError,
    TransactionFailedError, the decoder's errors, or ValidationError; a bad
    claim fails the whole operation. An operation index outside the envelope
    raises IndexError.
    """
    ledger_sequence = None
    if isinstance(transaction, TransactionRecord):
        ledger_sequence = transaction.ledger.sequence
        transaction = transaction.transaction

    try:
        return _extract(operation_index, operation_id, transaction, ledger_closed_at)
    except TradeEtlError as e:
        if e.ledger_sequence is None:
            e.ledger_sequence = ledger_sequence
        raise


def _extract(
    operation_index: int,
    operation_id: int,
    transaction: LedgerTransaction,
    ledger_closed_at: datetime,
) -> list[TradeOutput]:
    operation_results = transaction.operation_results()
    if operation_results is None:
        raise NoResultsError(
            "Could not get any results from this transaction",
            operation_index=operation_index,
        )

    if not transaction.successful:
        raise TransactionFailedError(
            "Transaction failed; no trades",
            operation_index=operation_index,
        )

    operations = transaction.operations
    if not 0 <= operation_index < len(operations):
        raise IndexError(
            f"operation index {operation_index} out of range for {len(operations)} operations"
        )
    op_type = get_operation_type(operations[operation_index])

    # operation id is +1 incremented to stay in sync with ingest package
    history_operation_id = operation_id + 1
    claimed_offers, counter_offer = decode_claimed_offers(
        operation_results, operation_index, op_type
    )

    if counter_offer is not None:
        counter_offer_id = counter_offer.offer_id
    else:
        counter_offer_id = encode_offer_id(operation_id, OfferIdType.TOID)

    counter_account_address = transaction.source_account
    trades: list[TradeOutput] = []
    for order, claim in enumerate(claimed_offers):
        try:
            _validate_claim(claim, operation_index)
        except ValidationError as e:
            e.operation_type = str(op_type)
            raise

        base_type, base_code, base_issuer = claim.asset_sold.extract()
        counter_type, counter_code, counter_issuer = claim.asset_bought.extract()

        trades.append(
            TradeOutput(
                order=order,
                ledger_closed_at=ledger_closed_at,
                offer_id=claim.offer_id,
                base_account_address=claim.seller_id.address,
                base_asset_type=base_type,
                base_asset_code=base_code,
                base_asset_issuer=base_issuer,
                base_amount=claim.amount_sold,
                counter_account_address=counter_account_address,
                counter_asset_type=counter_type,
                counter_asset_code=counter_code,
                counter_asset_issuer=counter_issuer,
                counter_amount=claim.amount_bought,
                base_is_seller=True,
                # Final price should be buy / sell
                price_n=claim.amount_bought,
                price_d=claim.amount_sold,
                base_offer_id=claim.offer_id,
                counter_offer_id=counter_offer_id,
                history_operation_id=history_operation_id,
            )
        )

    logger.debug(
        "trades_extracted",
        transaction_hash=transaction.hash,
        operation_index=operation_index,
        operation_type=str(op_type),
        trade_count=len(trades),
    )
    return trades
