"""
Trade ETL: trade extraction from Stellar ledger history.

Reads a contiguous range of finalized ledgers from a ledger data provider,
decodes offer-management and path-payment operation results, and emits
normalized trade records for analytical storage. Modular layout with clear
separation between ledger reading, result decoding, and trade transform.
"""

__version__ = "0.1.0"
