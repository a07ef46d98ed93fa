"""
Operation result decoder: operation results to claimed offers.

Dispatches on operation type to the result arm that type produces, requires
the success payload, and returns the normalized claimed offers plus the offer
left on the book (manage-offer operations only).

The table below is closed: operation types missing from it never produce
trades and are rejected with UnsupportedOperationError.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, NamedTuple, Sequence

from trade_etl.core.exceptions import (
    DecodeShapeError,
    OperationOutOfRangeError,
    TradeEtlError,
    UnsupportedOperationError,
)
from trade_etl.ledger_reader.xdr_json import (
    AccountId,
    Asset,
    OperationType,
    int64,
    require_field,
    union_arm,
)
from trade_etl.trade_logging import get_logger
from trade_etl.transform.claims import ClaimedOffer, normalize_claims

logger = get_logger(__name__)

SUCCESS_ARM = "success"

# KNOWN ISSUE: stellar-core has set the manage_sell_offer arm on results of
# create_passive_sell_offer operations. Both arms occur in history, depending on
# protocol era, and both carry a ManageSellOfferResult. Drop the second entry
# only if every affected ledger has been reprocessed upstream.
PASSIVE_SELL_OFFER_RESULT_ARMS = (
    OperationType.CREATE_PASSIVE_SELL_OFFER.value,
    OperationType.MANAGE_SELL_OFFER.value,
)


@dataclass(frozen=True)
class CounterOffer:
    """The offer an operation left on the book (XDR OfferEntry)."""

    seller_id: AccountId
    offer_id: int
    selling: Asset
    buying: Asset
    amount: int
    price_n: int
    price_d: int

    @classmethod
    def from_json(cls, entry: Any) -> "CounterOffer":
        price = require_field(entry, "price", "OfferEntry")
        return cls(
            seller_id=AccountId.from_address(require_field(entry, "seller_id", "OfferEntry")),
            offer_id=int64(require_field(entry, "offer_id", "OfferEntry")),
            selling=Asset.from_json(require_field(entry, "selling", "OfferEntry")),
            buying=Asset.from_json(require_field(entry, "buying", "OfferEntry")),
            amount=int64(require_field(entry, "amount", "OfferEntry")),
            price_n=int64(require_field(price, "n", "Price")),
            price_d=int64(require_field(price, "d", "Price")),
        )


class DecodedClaims(NamedTuple):
    claimed_offers: list[ClaimedOffer]
    counter_offer: CounterOffer | None


def _manage_offer_success(success: Any) -> DecodedClaims:
    claims = normalize_claims(require_field(success, "offers_claimed", "ManageOfferSuccessResult"))
    effect, entry = union_arm(
        require_field(success, "offer", "ManageOfferSuccessResult"),
        "ManageOfferSuccessResultOffer",
    )
    counter = CounterOffer.from_json(entry) if effect in ("created", "updated") else None
    return DecodedClaims(claims, counter)


def _path_payment_success(success: Any) -> DecodedClaims:
    claims = normalize_claims(require_field(success, "offers", "PathPaymentSuccess"))
    return DecodedClaims(claims, None)


@dataclass(frozen=True)
class _ResultShape:
    result_name: str
    success_name: str
    arms: tuple[str, ...]  # accepted OperationResultTr arms, in priority order
    decode_success: Callable[[Any], DecodedClaims]


RESULT_SHAPES: dict[OperationType, _ResultShape] = {
    OperationType.MANAGE_BUY_OFFER: _ResultShape(
        "ManageBuyOfferResult",
        "ManageOfferSuccess",
        (OperationType.MANAGE_BUY_OFFER.value,),
        _manage_offer_success,
    ),
    OperationType.MANAGE_SELL_OFFER: _ResultShape(
        "ManageSellOfferResult",
        "ManageOfferSuccess",
        (OperationType.MANAGE_SELL_OFFER.value,),
        _manage_offer_success,
    ),
    OperationType.CREATE_PASSIVE_SELL_OFFER: _ResultShape(
        "CreatePassiveSellOfferResult",
        "ManageOfferSuccess",
        PASSIVE_SELL_OFFER_RESULT_ARMS,
        _manage_offer_success,
    ),
    OperationType.PATH_PAYMENT_STRICT_SEND: _ResultShape(
        "PathPaymentStrictSendResult",
        "PathPaymentStrictSendSuccess",
        (OperationType.PATH_PAYMENT_STRICT_SEND.value,),
        _path_payment_success,
    ),
    OperationType.PATH_PAYMENT_STRICT_RECEIVE: _ResultShape(
        "PathPaymentStrictReceiveResult",
        "PathPaymentStrictReceiveSuccess",
        (OperationType.PATH_PAYMENT_STRICT_RECEIVE.value,),
        _path_payment_success,
    ),
}

TRADE_OPERATION_TYPES = frozenset(RESULT_SHAPES)


def _operation_tr(results: Sequence[Any], operation_index: int) -> tuple[str, Any]:
    if not 0 <= operation_index < len(results):
        raise OperationOutOfRangeError(
            f"Operation index of {operation_index} is out of bounds in result slice (len = {len(results)})",
            operation_index=operation_index,
        )
    code, tr = union_arm(results[operation_index], "OperationResult")
    if code != "op_inner" or tr is None:
        raise DecodeShapeError(
            f"Could not get result Tr for operation at index {operation_index} (code {code!r})",
            operation_index=operation_index,
        )
    return union_arm(tr, "OperationResultTr")


def decode_claimed_offers(
    results: Sequence[Any],
    operation_index: int,
    operation_type: OperationType,
) -> DecodedClaims:
    """
    Return ``(claimed_offers, counter_offer)`` for the operation at ``operation_index``.

    Raises OperationOutOfRangeError, DecodeShapeError, UnknownOfferVariantError,
    or UnsupportedOperationError; every error names the operation index.
    """
    shape = RESULT_SHAPES.get(operation_type)
    if shape is None:
        raise UnsupportedOperationError(
            f"Operation of type {operation_type} at index {operation_index} does not result in trades",
            operation_index=operation_index,
            operation_type=operation_type,
        )

    try:
        tr_arm, tr_body = _operation_tr(results, operation_index)
        if tr_arm not in shape.arms:
            raise DecodeShapeError(
                f"Could not get {shape.result_name} for operation at index {operation_index} "
                f"(result arm {tr_arm!r})"
            )
        if tr_arm != shape.arms[0]:
            logger.debug(
                "operation_result_arm_fallback",
                operation_index=operation_index,
                operation_type=str(operation_type),
                result_arm=tr_arm,
            )
        code, success = union_arm(tr_body, shape.result_name)
        if code != SUCCESS_ARM or success is None:
            raise DecodeShapeError(
                f"Could not get {shape.success_name} for operation at index {operation_index} "
                f"(code {code!r})"
            )
        return shape.decode_success(success)
    except TradeEtlError as e:
        if e.operation_index is None:
            e.operation_index = operation_index
        if e.operation_type is None:
            e.operation_type = str(operation_type)
        raise
