"""
Application-level exceptions.

Responsibilities:
- Define the error taxonomy for ledger reading and trade extraction.
- Carry enough context (operation index, operation type, ledger sequence)
  to diagnose a failure without re-decoding the transaction.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "TradeEtlError",
    "ProviderError",
    "TransactionFailedError",
    "NoResultsError",
    "OperationOutOfRangeError",
    "UnsupportedOperationError",
    "UnknownOfferVariantError",
    "DecodeShapeError",
    "ValidationError",
]


class TradeEtlError(Exception):
    """Base class for all trade ETL errors.

    Attributes
    ----------
    operation_index : int | None
        Position of the operation inside its transaction, when known.
    operation_type : str | None
        Operation type name (e.g. ``manage_sell_offer``), when known.
    ledger_sequence : int | None
        Ledger the failing transaction belongs to, when known.
    """

    def __init__(
        self,
        message: str,
        *,
        operation_index: int | None = None,
        operation_type: Any = None,
        ledger_sequence: int | None = None,
    ) -> None:
        super().__init__(message)
        self.operation_index = operation_index
        self.operation_type = str(operation_type) if operation_type is not None else None
        self.ledger_sequence = ledger_sequence

    def context(self) -> dict[str, Any]:
        """Return the non-empty context fields, suitable for structured logging."""
        out: dict[str, Any] = {}
        if self.operation_index is not None:
            out["operation_index"] = self.operation_index
        if self.operation_type is not None:
            out["operation_type"] = self.operation_type
        if self.ledger_sequence is not None:
            out["ledger_sequence"] = self.ledger_sequence
        return out


class ProviderError(TradeEtlError):
    """Raised when the ledger backend or a transaction reader cannot be opened or read."""
    pass


class TransactionFailedError(TradeEtlError):
    """Raised when a transaction did not succeed on-ledger; it produces no trades."""
    pass


class NoResultsError(TradeEtlError):
    """Raised when a transaction's operation result list cannot be obtained."""
    pass


class OperationOutOfRangeError(TradeEtlError):
    """Raised when an operation index is outside the transaction's result list."""
    pass


class UnsupportedOperationError(TradeEtlError):
    """Raised for operation types that never produce trades."""
    pass


class UnknownOfferVariantError(TradeEtlError):
    """Raised when a claimed-offer entry carries an unrecognized version tag."""
    pass


class DecodeShapeError(TradeEtlError):
    """Raised when a result payload does not have the shape its operation type requires."""
    pass


class ValidationError(TradeEtlError):
    """Raised when claimed-offer data breaks an invariant (negative or all-zero amounts)."""
    pass
