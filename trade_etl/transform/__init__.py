"""
Trade transform package.

Normalizes claimed offers, decodes operation results, and builds trade
records from successful offer and path-payment operations.
"""

from trade_etl.transform.claims import ClaimedOffer, normalize_claims
from trade_etl.transform.pipeline import transform_trades
from trade_etl.transform.results import (
    TRADE_OPERATION_TYPES,
    CounterOffer,
    decode_claimed_offers,
)
from trade_etl.transform.trade import TradeOutput, extract_trades

__all__ = [
    "ClaimedOffer",
    "CounterOffer",
    "TRADE_OPERATION_TYPES",
    "TradeOutput",
    "decode_claimed_offers",
    "extract_trades",
    "normalize_claims",
    "transform_trades",
]
