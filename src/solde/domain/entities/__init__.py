"""
Domain entities.
"""

from solde.domain.entities.cached_balance import (
    LAMPORTS_PER_SOL,
    MAX_LAMPORTS,
    CachedBalance,
)

__all__ = [
    "CachedBalance",
    "LAMPORTS_PER_SOL",
    "MAX_LAMPORTS",
]
