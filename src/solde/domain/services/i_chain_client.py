"""
Chain client interface.
"""

from abc import ABC, abstractmethod

from solde.domain.entities.cached_balance import CachedBalance


class IChainClient(ABC):
    """Interface for reading wallet balances from a blockchain node."""

    @abstractmethod
    async def fetch_remote_balance(self, address: str) -> CachedBalance:
        """
        Fetch current balance for address from the node.

        Args:
            address: Base58 wallet address

        Returns:
            CachedBalance stamped with local fetch time

        Raises:
            InvalidAddressError: If address cannot be decoded
            NetworkFailureError: If RPC call fails
        """

    @abstractmethod
    async def close(self) -> None:
        """Release transport resources."""
