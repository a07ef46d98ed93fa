"""
Structured logging for Trade ETL.

JSON logs with timestamp, event_type, ledger_sequence, operation_index.
Use get_logger() in all modules for aggregation-friendly output.
"""

from trade_etl.trade_logging.logger import bind_ledger, get_logger

__all__ = ["bind_ledger", "get_logger"]
