"""
Repository interfaces.
"""

from solde.domain.repositories.i_balance_repository import IBalanceRepository

__all__ = ["IBalanceRepository"]
