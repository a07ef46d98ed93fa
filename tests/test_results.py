"""
Tests for operation result decoding (results.decode_claimed_offers).

Includes the passive-offer result mis-tagging seen in historical ledgers.
"""

from __future__ import annotations

import pytest

from ledger_fixtures import (
    SOURCE,
    manage_offer_result,
    offer_entry,
    order_book_atom,
    path_payment_result,
    v0_atom,
)
from trade_etl.core.exceptions import (
    DecodeShapeError,
    OperationOutOfRangeError,
    UnknownOfferVariantError,
    UnsupportedOperationError,
)
from trade_etl.ledger_reader.xdr_json import OperationType
from trade_etl.transform.results import (
    TRADE_OPERATION_TYPES,
    CounterOffer,
    decode_claimed_offers,
)


def test_manage_sell_offer_with_counter_offer():
    results = [manage_offer_result("manage_sell_offer", [order_book_atom(1), order_book_atom(2)], offer_entry(99))]
    claims, counter = decode_claimed_offers(results, 0, OperationType.MANAGE_SELL_OFFER)
    assert [c.offer_id for c in claims] == [1, 2]
    assert isinstance(counter, CounterOffer)
    assert counter.offer_id == 99
    assert counter.seller_id.address == SOURCE
    assert (counter.price_n, counter.price_d) == (1, 2)


def test_manage_buy_offer_fully_filled_has_no_counter_offer():
    results = [manage_offer_result("manage_buy_offer", [order_book_atom(1)])]
    claims, counter = decode_claimed_offers(results, 0, OperationType.MANAGE_BUY_OFFER)
    assert len(claims) == 1
    assert counter is None


def test_updated_offer_is_counter_offer():
    result = manage_offer_result("manage_sell_offer", [order_book_atom(1)])
    result["op_inner"]["manage_sell_offer"]["success"]["offer"] = {"updated": offer_entry(7)}
    _, counter = decode_claimed_offers([result], 0, OperationType.MANAGE_SELL_OFFER)
    assert counter.offer_id == 7


@pytest.mark.parametrize("arm", ["create_passive_sell_offer", "manage_sell_offer"])
def test_passive_sell_offer_accepts_both_result_arms(arm):
    results = [manage_offer_result(arm, [order_book_atom(4)], offer_entry(8))]
    claims, counter = decode_claimed_offers(results, 0, OperationType.CREATE_PASSIVE_SELL_OFFER)
    assert [c.offer_id for c in claims] == [4]
    assert counter.offer_id == 8


def test_passive_sell_offer_mis_tagged_matches_correctly_tagged():
    claims = [order_book_atom(4), v0_atom(5)]
    tagged = decode_claimed_offers(
        [manage_offer_result("create_passive_sell_offer", claims, offer_entry(8))],
        0,
        OperationType.CREATE_PASSIVE_SELL_OFFER,
    )
    mis_tagged = decode_claimed_offers(
        [manage_offer_result("manage_sell_offer", claims, offer_entry(8))],
        0,
        OperationType.CREATE_PASSIVE_SELL_OFFER,
    )
    assert tagged == mis_tagged


def test_passive_sell_offer_rejects_other_arms():
    results = [manage_offer_result("manage_buy_offer", [order_book_atom(4)])]
    with pytest.raises(DecodeShapeError):
        decode_claimed_offers(results, 0, OperationType.CREATE_PASSIVE_SELL_OFFER)


def test_manage_sell_offer_does_not_accept_passive_arm():
    results = [manage_offer_result("create_passive_sell_offer", [order_book_atom(4)])]
    with pytest.raises(DecodeShapeError):
        decode_claimed_offers(results, 0, OperationType.MANAGE_SELL_OFFER)


@pytest.mark.parametrize(
    "op_type",
    [OperationType.PATH_PAYMENT_STRICT_SEND, OperationType.PATH_PAYMENT_STRICT_RECEIVE],
)
def test_path_payments_have_claims_and_no_counter_offer(op_type):
    results = [path_payment_result(op_type.value, [order_book_atom(1), v0_atom(2), order_book_atom(3)])]
    claims, counter = decode_claimed_offers(results, 0, op_type)
    assert [c.offer_id for c in claims] == [1, 2, 3]
    assert counter is None


def test_dispatch_uses_operation_index():
    results = [
        path_payment_result("path_payment_strict_send", [order_book_atom(1)]),
        manage_offer_result("manage_buy_offer", [order_book_atom(2)]),
    ]
    claims, _ = decode_claimed_offers(results, 1, OperationType.MANAGE_BUY_OFFER)
    assert [c.offer_id for c in claims] == [2]


def test_unsupported_operation_type():
    results = [{"op_inner": {"payment": "success"}}]
    with pytest.raises(UnsupportedOperationError) as exc_info:
        decode_claimed_offers(results, 0, OperationType.PAYMENT)
    assert exc_info.value.operation_index == 0
    assert exc_info.value.operation_type == "payment"


def test_trade_operation_types():
    assert TRADE_OPERATION_TYPES == {
        OperationType.MANAGE_BUY_OFFER,
        OperationType.MANAGE_SELL_OFFER,
        OperationType.CREATE_PASSIVE_SELL_OFFER,
        OperationType.PATH_PAYMENT_STRICT_SEND,
        OperationType.PATH_PAYMENT_STRICT_RECEIVE,
    }


def test_operation_index_out_of_range():
    results = [manage_offer_result("manage_sell_offer", [order_book_atom(1)])]
    with pytest.raises(OperationOutOfRangeError) as exc_info:
        decode_claimed_offers(results, 1, OperationType.MANAGE_SELL_OFFER)
    assert exc_info.value.operation_index == 1


def test_result_without_inner_tr():
    with pytest.raises(DecodeShapeError, match="index 0"):
        decode_claimed_offers(["op_no_account"], 0, OperationType.MANAGE_SELL_OFFER)


def test_wrong_result_arm_names_expected_shape():
    results = [path_payment_result("path_payment_strict_receive", [])]
    with pytest.raises(DecodeShapeError, match="PathPaymentStrictSendResult"):
        decode_claimed_offers(results, 0, OperationType.PATH_PAYMENT_STRICT_SEND)


def test_failure_code_is_not_success():
    results = [{"op_inner": {"manage_sell_offer": "underfunded"}}]
    with pytest.raises(DecodeShapeError, match="ManageOfferSuccess"):
        decode_claimed_offers(results, 0, OperationType.MANAGE_SELL_OFFER)


def test_path_payment_no_issuer_is_not_success():
    results = [{"op_inner": {"path_payment_strict_receive": {"no_issuer": "native"}}}]
    with pytest.raises(DecodeShapeError):
        decode_claimed_offers(results, 0, OperationType.PATH_PAYMENT_STRICT_RECEIVE)


def test_unknown_claim_variant_carries_operation_context():
    results = [
        manage_offer_result("manage_sell_offer", []),
        manage_offer_result("manage_sell_offer", [{"liquidity_pool": {}}]),
    ]
    with pytest.raises(UnknownOfferVariantError) as exc_info:
        decode_claimed_offers(results, 1, OperationType.MANAGE_SELL_OFFER)
    assert exc_info.value.operation_index == 1
    assert exc_info.value.operation_type == "manage_sell_offer"
