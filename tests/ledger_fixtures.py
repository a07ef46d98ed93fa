"""
Builders for XDR-JSON ledger payloads used across tests.

Shapes follow Stellar RPC's xdrFormat=json rendering: single-key objects for
union arms, bare strings for void arms, int64 values as strings.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from trade_etl.core.strkey import encode_ed25519_public_key
from trade_etl.ledger_reader.models import LedgerHeader, LedgerTransaction, TransactionRecord

SELLER_KEY = bytes([1]) * 32
SOURCE_KEY = bytes([2]) * 32
ISSUER_KEY = bytes([3]) * 32

SELLER = encode_ed25519_public_key(SELLER_KEY)
SOURCE = encode_ed25519_public_key(SOURCE_KEY)
ISSUER = encode_ed25519_public_key(ISSUER_KEY)

CLOSED_AT = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def native() -> str:
    return "native"


def credit4(code: str, issuer: str = ISSUER) -> dict[str, Any]:
    return {"credit_alphanum4": {"asset_code": code, "issuer": issuer}}


def credit12(code: str, issuer: str = ISSUER) -> dict[str, Any]:
    return {"credit_alphanum12": {"asset_code": code, "issuer": issuer}}


def order_book_atom(
    offer_id: int = 11,
    amount_sold: int = 500,
    amount_bought: int = 1000,
    *,
    seller: str = SELLER,
    asset_sold: Any = None,
    asset_bought: Any = None,
) -> dict[str, Any]:
    return {
        "order_book": {
            "seller_id": seller,
            "offer_id": str(offer_id),
            "asset_sold": asset_sold if asset_sold is not None else credit4("USD"),
            "amount_sold": str(amount_sold),
            "asset_bought": asset_bought if asset_bought is not None else native(),
            "amount_bought": str(amount_bought),
        }
    }


def v0_atom(
    offer_id: int = 11,
    amount_sold: int = 500,
    amount_bought: int = 1000,
    *,
    seller_key: bytes = SELLER_KEY,
    asset_sold: Any = None,
    asset_bought: Any = None,
) -> dict[str, Any]:
    return {
        "v0": {
            "seller_ed25519": seller_key.hex(),
            "offer_id": offer_id,
            "asset_sold": asset_sold if asset_sold is not None else credit4("USD"),
            "amount_sold": amount_sold,
            "asset_bought": asset_bought if asset_bought is not None else native(),
            "amount_bought": amount_bought,
        }
    }


def offer_entry(offer_id: int = 99, *, seller: str = SOURCE) -> dict[str, Any]:
    return {
        "seller_id": seller,
        "offer_id": str(offer_id),
        "selling": native(),
        "buying": credit4("USD"),
        "amount": "250",
        "price": {"n": 1, "d": 2},
        "flags": 0,
        "ext": "v0",
    }


def manage_offer_result(arm: str, claims: list[Any], offer: dict[str, Any] | None = None) -> dict[str, Any]:
    offer_union: Any = {"created": offer} if offer is not None else "deleted"
    return {"op_inner": {arm: {"success": {"offers_claimed": claims, "offer": offer_union}}}}


def path_payment_result(arm: str, claims: list[Any]) -> dict[str, Any]:
    last = {"destination": SOURCE, "asset": native(), "amount": "10"}
    return {"op_inner": {arm: {"success": {"offers": claims, "last": last}}}}


def operation(arm: str, body: Any = None) -> dict[str, Any]:
    return {"source_account": None, "body": {arm: body if body is not None else {}}}


def envelope(operations: list[dict[str, Any]], source: str = SOURCE) -> dict[str, Any]:
    return {
        "tx": {
            "tx": {
                "source_account": source,
                "fee": 100,
                "seq_num": "1",
                "cond": "none",
                "memo": "none",
                "operations": operations,
                "ext": "v0",
            },
            "signatures": [],
        }
    }


def fee_bump_envelope(operations: list[dict[str, Any]], source: str = SOURCE) -> dict[str, Any]:
    inner = envelope(operations, source)["tx"]
    return {
        "tx_fee_bump": {
            "tx": {
                "fee_source": ISSUER,
                "fee": "400",
                "inner_tx": {"tx": inner},
                "ext": "v0",
            },
            "signatures": [],
        }
    }


def tx_result(op_results: list[Any], *, success: bool = True) -> dict[str, Any]:
    arm = "tx_success" if success else "tx_failed"
    return {"fee_charged": "100", "result": {arm: op_results}, "ext": "v0"}


def fee_bump_result(op_results: list[Any], *, success: bool = True) -> dict[str, Any]:
    outer = "tx_fee_bump_inner_success" if success else "tx_fee_bump_inner_failed"
    inner = tx_result(op_results, success=success)
    return {
        "fee_charged": "200",
        "result": {outer: {"transaction_hash": "ab" * 32, "result": inner}},
        "ext": "v0",
    }


def ledger_tx(
    index: int,
    operations: list[dict[str, Any]],
    op_results: list[Any],
    *,
    success: bool = True,
    source: str = SOURCE,
    tx_hash: str | None = None,
) -> LedgerTransaction:
    return LedgerTransaction(
        index=index,
        hash=tx_hash or f"{index:064x}",
        envelope=envelope(operations, source),
        result=tx_result(op_results, success=success),
    )


def header(sequence: int, closed_at: datetime = CLOSED_AT) -> LedgerHeader:
    return LedgerHeader(sequence=sequence, hash=f"{sequence:064x}", closed_at=closed_at)


def record(tx: LedgerTransaction, sequence: int = 100) -> TransactionRecord:
    return TransactionRecord(transaction=tx, ledger=header(sequence))
