"""
Blockchain infrastructure.
"""

from solde.infrastructure.blockchain.solana_balance_client import (
    SolanaBalanceClient,
    decode_address,
)

__all__ = ["SolanaBalanceClient", "decode_address"]
