"""
Application services.
"""

from solde.application.services.balance_service import BalanceService, TickResult

__all__ = ["BalanceService", "TickResult"]
