"""
Persistence infrastructure.
"""

from solde.infrastructure.persistence.database import Database
from solde.infrastructure.persistence.models import BalanceModel, Base

__all__ = ["Base", "BalanceModel", "Database"]
