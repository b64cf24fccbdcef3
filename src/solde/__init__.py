"""
Solde - Solana wallet balance fetcher with offline cache.

Periodically fetches wallet balances from a Solana RPC node and keeps
the latest value per wallet in a local SQLite database.
"""

__version__ = "0.1.0"
