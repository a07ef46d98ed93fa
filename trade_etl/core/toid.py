"""
Total-order IDs (TOIDs) for ledger history objects.

A TOID packs (ledger sequence, transaction order, operation order) into one
signed 64-bit integer so that history IDs sort in ledger-application order:

    bits 63..32  ledger sequence
    bits 31..12  transaction application order (1-based)
    bits 11..0   operation order

Offer IDs share the int64 space with synthesized IDs; the top two bits tag
which kind an offer ID is.
"""

from __future__ import annotations

from enum import IntEnum

LEDGER_MASK = (1 << 32) - 1
TRANSACTION_MASK = (1 << 20) - 1
OPERATION_MASK = (1 << 12) - 1

LEDGER_SHIFT = 32
TRANSACTION_SHIFT = 12
OPERATION_SHIFT = 0

OFFER_ID_TYPE_SHIFT = 62
OFFER_ID_TYPE_MASK = 0xC000000000000000


class OfferIdType(IntEnum):
    """Origin of an offer ID: assigned by the ledger, or synthesized from a TOID."""

    CORE = 0
    TOID = 1


def toid(ledger_sequence: int, transaction_order: int, operation_order: int) -> int:
    """Pack a ledger position into a TOID; raise ValueError when a part overflows its field."""
    if not 0 <= ledger_sequence <= (1 << 31) - 1:
        raise ValueError(f"ledger sequence {ledger_sequence} out of range")
    if not 0 <= transaction_order <= TRANSACTION_MASK:
        raise ValueError(f"transaction order {transaction_order} exceeds {TRANSACTION_MASK}")
    if not 0 <= operation_order <= OPERATION_MASK:
        raise ValueError(f"operation order {operation_order} exceeds {OPERATION_MASK}")
    return (
        (ledger_sequence << LEDGER_SHIFT)
        | (transaction_order << TRANSACTION_SHIFT)
        | (operation_order << OPERATION_SHIFT)
    )


def parse_toid(value: int) -> tuple[int, int, int]:
    """Return ``(ledger_sequence, transaction_order, operation_order)`` for a TOID."""
    if value < 0:
        raise ValueError(f"TOID must be non-negative, got {value}")
    return (
        (value >> LEDGER_SHIFT) & LEDGER_MASK,
        (value >> TRANSACTION_SHIFT) & TRANSACTION_MASK,
        (value >> OPERATION_SHIFT) & OPERATION_MASK,
    )


def encode_offer_id(value: int, id_type: OfferIdType) -> int:
    """Tag an ID with its offer-ID type in the top two bits."""
    if value < 0 or value & OFFER_ID_TYPE_MASK:
        raise ValueError(f"invalid offer ID {value}")
    return value | (int(id_type) << OFFER_ID_TYPE_SHIFT)


def decode_offer_id(encoded: int) -> tuple[int, OfferIdType]:
    """Reverse encode_offer_id: return the bare ID and its type."""
    if encoded < 0:
        raise ValueError(f"encoded offer ID must be non-negative, got {encoded}")
    id_type = OfferIdType((encoded & OFFER_ID_TYPE_MASK) >> OFFER_ID_TYPE_SHIFT)
    return encoded & ~OFFER_ID_TYPE_MASK, id_type
