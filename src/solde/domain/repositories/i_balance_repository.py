"""
Balance repository interface.
"""

from abc import ABC, abstractmethod
from typing import Optional

from solde.domain.entities.cached_balance import CachedBalance


class IBalanceRepository(ABC):
    """Interface for cached balance persistence operations."""

    @abstractmethod
    async def initialize_schema(self) -> None:
        """
        Create balances table if it does not exist.

        Raises:
            StorageFailureError: If storage layer fails
        """

    @abstractmethod
    async def upsert(self, record: CachedBalance) -> None:
        """
        Insert or fully replace record for its wallet address.

        Args:
            record: CachedBalance entity to store

        Raises:
            StorageFailureError: If storage layer fails
        """

    @abstractmethod
    async def lookup(self, address: str) -> Optional[CachedBalance]:
        """
        Get cached balance by wallet address.

        Args:
            address: Wallet address

        Returns:
            CachedBalance entity if found, None otherwise

        Raises:
            StorageFailureError: If storage layer fails
        """
