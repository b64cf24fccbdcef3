"""
Repository implementations.
"""

from solde.infrastructure.persistence.repositories.balance_repository import (
    BalanceRepository,
)

__all__ = ["BalanceRepository"]
