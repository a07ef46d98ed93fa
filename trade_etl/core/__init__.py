"""
Core utilities: exceptions, identifier schemes and address encoding.

Shared by the ledger reader, the result decoder, and the trade transform.
"""
