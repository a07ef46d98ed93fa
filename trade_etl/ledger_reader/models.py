"""
Data models for ledger reader output.

Responsibilities:
- Define frozen dataclasses for ledger headers and transactions as served by
  the ledger data provider.
- Expose the structural accessors the trade transform needs: operation list,
  source account, operation results, and the success flag.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from trade_etl.core import strkey
from trade_etl.core.exceptions import DecodeShapeError
from trade_etl.ledger_reader.xdr_json import AccountId, require_field, union_arm

# TransactionResultResult arms that carry an operation result list
_RESULTS_ARMS = ("tx_success", "tx_failed")
_FEE_BUMP_ARMS = ("tx_fee_bump_inner_success", "tx_fee_bump_inner_failed")
_SUCCESS_ARMS = ("tx_success", "tx_fee_bump_inner_success")


@dataclass(frozen=True)
class LedgerHeader:
    """
    Header fields of one closed ledger.

    Mirrors the getLedgers RPC item; read once per ledger by the fetcher and
    shared by every transaction in that ledger.
    """

    sequence: int
    hash: str
    closed_at: datetime  # timezone-aware UTC
    header_json: dict[str, Any] | None = None

    @classmethod
    def from_rpc_item(cls, item: dict[str, Any]) -> "LedgerHeader":
        """Build from a single getLedgers result item."""
        return cls(
            sequence=int(item["sequence"]),
            hash=item["hash"],
            closed_at=datetime.fromtimestamp(int(item["ledgerCloseTime"]), tz=timezone.utc),
            header_json=item.get("headerJson"),
        )


@dataclass(frozen=True)
class LedgerTransaction:
    """
    One applied transaction: envelope and result in XDR-JSON form.

    ``index`` is the 1-based application order inside the ledger, the same
    number the TOID scheme uses for the transaction part.
    """

    index: int
    hash: str
    envelope: dict[str, Any]
    result: dict[str, Any]

    @classmethod
    def from_rpc_item(cls, item: dict[str, Any]) -> "LedgerTransaction":
        """Build from a single getTransactions result item (xdrFormat=json)."""
        return cls(
            index=int(item["applicationOrder"]),
            hash=item["txHash"],
            envelope=item["envelopeJson"],
            result=item["resultJson"],
        )

    def _transaction_body(self) -> tuple[str, dict[str, Any]]:
        """Return ``(envelope_arm, tx)`` for the transaction that carries the operations."""
        arm, body = union_arm(self.envelope, "TransactionEnvelope")
        if arm in ("tx_v0", "tx"):
            return arm, require_field(body, "tx", arm)
        if arm == "tx_fee_bump":
            fee_bump = require_field(body, "tx", arm)
            inner_arm, inner = union_arm(
                require_field(fee_bump, "inner_tx", "FeeBumpTransaction"),
                "FeeBumpTransactionInnerTx",
            )
            if inner_arm != "tx":
                raise DecodeShapeError(f"Unknown fee bump inner transaction {inner_arm!r}")
            return inner_arm, require_field(inner, "tx", inner_arm)
        raise DecodeShapeError(f"Unknown envelope type {arm!r}")

    @property
    def operations(self) -> list[dict[str, Any]]:
        _, tx = self._transaction_body()
        return list(require_field(tx, "operations", "Transaction") or [])

    @property
    def source_account(self) -> str:
        """Source account address; muxed accounts resolve to their ``G...`` account."""
        arm, tx = self._transaction_body()
        if arm == "tx_v0":
            raw = require_field(tx, "source_account_ed25519", "TransactionV0")
            return AccountId.from_ed25519_hex(raw).address
        address = require_field(tx, "source_account", "Transaction")
        try:
            return strkey.account_address(address)
        except ValueError as e:
            raise DecodeShapeError(f"Invalid source account {address!r}: {e}") from e

    def _result_union(self) -> tuple[str, Any]:
        arm, body = union_arm(
            require_field(self.result, "result", "TransactionResult"),
            "TransactionResultResult",
        )
        if arm in _FEE_BUMP_ARMS:
            inner = require_field(
                require_field(body, "result", "InnerTransactionResultPair"),
                "result",
                "InnerTransactionResult",
            )
            return union_arm(inner, "InnerTransactionResultResult")
        return arm, body

    def operation_results(self) -> list[Any] | None:
        """Return the per-operation results, or None when the result code carries none."""
        arm, body = self._result_union()
        if arm in _RESULTS_ARMS and isinstance(body, list):
            return body
        return None

    @property
    def successful(self) -> bool:
        arm, _ = union_arm(
            require_field(self.result, "result", "TransactionResult"),
            "TransactionResultResult",
        )
        return arm in _SUCCESS_ARMS


@dataclass(frozen=True)
class TransactionRecord:
    """A transaction paired with the header of the ledger it was applied in."""

    transaction: LedgerTransaction
    ledger: LedgerHeader
