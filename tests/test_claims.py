"""
Tests for claimed-offer normalization (claims.normalize_claims).

Covers both historical ClaimAtom encodings and rejection of unknown tags.
"""

from __future__ import annotations

import pytest

from ledger_fixtures import ISSUER, SELLER, SELLER_KEY, credit4, credit12, native, order_book_atom, v0_atom
from trade_etl.core.exceptions import DecodeShapeError, UnknownOfferVariantError
from trade_etl.ledger_reader.xdr_json import AccountId, Asset
from trade_etl.transform.claims import ClaimedOffer, normalize_claim, normalize_claims


def test_order_book_atom_copied_directly():
    claim = normalize_claim(order_book_atom(offer_id=42, amount_sold=7, amount_bought=9))
    assert claim == ClaimedOffer(
        seller_id=AccountId(SELLER_KEY),
        offer_id=42,
        asset_sold=Asset("credit_alphanum4", "USD", ISSUER),
        amount_sold=7,
        asset_bought=Asset.native(),
        amount_bought=9,
    )
    assert claim.seller_id.address == SELLER


def test_v0_atom_rebuilds_typed_seller():
    claim = normalize_claim(v0_atom(offer_id=42))
    assert isinstance(claim.seller_id, AccountId)
    assert claim.seller_id.address == SELLER


def test_v0_and_order_book_with_same_fields_are_identical():
    kwargs = dict(asset_sold=credit12("LONGERCODE"), asset_bought=native())
    from_v0 = normalize_claim(v0_atom(5, 100, 300, **kwargs))
    from_order_book = normalize_claim(order_book_atom(5, 100, 300, **kwargs))
    assert from_v0 == from_order_book


def test_normalize_claims_preserves_order():
    atoms = [
        order_book_atom(offer_id=3),
        v0_atom(offer_id=1),
        order_book_atom(offer_id=2),
    ]
    assert [c.offer_id for c in normalize_claims(atoms)] == [3, 1, 2]


def test_normalize_claims_empty():
    assert normalize_claims([]) == []


def test_liquidity_pool_atom_is_unknown_variant():
    atom = {
        "liquidity_pool": {
            "liquidity_pool_id": "00" * 32,
            "asset_sold": native(),
            "amount_sold": "1",
            "asset_bought": credit4("USD"),
            "amount_bought": "1",
        }
    }
    with pytest.raises(UnknownOfferVariantError):
        normalize_claims([order_book_atom(), atom])


def test_unknown_tag_is_unknown_variant():
    with pytest.raises(UnknownOfferVariantError):
        normalize_claim({"v9": {}})


def test_missing_field_is_decode_shape_error():
    atom = order_book_atom()
    del atom["order_book"]["amount_sold"]
    with pytest.raises(DecodeShapeError):
        normalize_claim(atom)


def test_malformed_seller_key_is_decode_shape_error():
    atom = v0_atom()
    atom["v0"]["seller_ed25519"] = "abcd"
    with pytest.raises(DecodeShapeError):
        normalize_claim(atom)


def test_asset_code_trailing_nulls_stripped():
    claim = normalize_claim(order_book_atom(asset_sold=credit4("EU\x00\x00")))
    assert claim.asset_sold.extract() == ("credit_alphanum4", "EU", ISSUER)
