"""
Claimed-offer normalizer: every ClaimAtom variant to one canonical shape.

Protocols 17 and 18 changed the claimed-offer structure: older results carry
``v0`` atoms whose seller is a bare ed25519 key, newer ones carry
``order_book`` atoms with a typed seller account. Both collapse into
ClaimedOffer. Liquidity-pool atoms and any future tag are rejected.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable

from trade_etl.core.exceptions import UnknownOfferVariantError
from trade_etl.ledger_reader.xdr_json import AccountId, Asset, int64, require_field, union_arm

CLAIM_ATOM_TYPE_V0 = "v0"
CLAIM_ATOM_TYPE_ORDER_BOOK = "order_book"


@dataclass(frozen=True)
class ClaimedOffer:
    """A resting offer matched during an operation, in canonical form."""

    seller_id: AccountId
    offer_id: int
    asset_sold: Asset
    amount_sold: int
    asset_bought: Asset
    amount_bought: int


def _claim_fields(body: Any, type_name: str) -> dict[str, Any]:
    return {
        "offer_id": int64(require_field(body, "offer_id", type_name)),
        "asset_sold": Asset.from_json(require_field(body, "asset_sold", type_name)),
        "amount_sold": int64(require_field(body, "amount_sold", type_name)),
        "asset_bought": Asset.from_json(require_field(body, "asset_bought", type_name)),
        "amount_bought": int64(require_field(body, "amount_bought", type_name)),
    }


def _from_v0(body: Any) -> ClaimedOffer:
    seller = AccountId.from_ed25519_hex(require_field(body, "seller_ed25519", "ClaimOfferAtomV0"))
    return ClaimedOffer(seller_id=seller, **_claim_fields(body, "ClaimOfferAtomV0"))


def _from_order_book(body: Any) -> ClaimedOffer:
    seller = AccountId.from_address(require_field(body, "seller_id", "ClaimOfferAtom"))
    return ClaimedOffer(seller_id=seller, **_claim_fields(body, "ClaimOfferAtom"))


# Known variants in priority order. New protocol variants are added here.
CLAIM_VARIANTS: tuple[tuple[str, Callable[[Any], ClaimedOffer]], ...] = (
    (CLAIM_ATOM_TYPE_V0, _from_v0),
    (CLAIM_ATOM_TYPE_ORDER_BOOK, _from_order_book),
)


def normalize_claim(atom: Any) -> ClaimedOffer:
    """Normalize one ClaimAtom; raise UnknownOfferVariantError for unknown tags."""
    arm, body = union_arm(atom, "ClaimAtom")
    for tag, decode in CLAIM_VARIANTS:
        if arm == tag:
            return decode(body)
    raise UnknownOfferVariantError(f"Could not parse the ClaimAtomType {arm!r}")


def normalize_claims(atoms: Iterable[Any]) -> list[ClaimedOffer]:
    """Normalize ClaimAtoms, preserving claim order."""
    return [normalize_claim(atom) for atom in atoms]
