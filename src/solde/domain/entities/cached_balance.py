"""
CachedBalance entity - last known balance of one wallet.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal

from solders.pubkey import Pubkey

LAMPORTS_PER_SOL = 1_000_000_000
MAX_LAMPORTS = 2**64 - 1


@dataclass
class CachedBalance:
    """
    Most recent balance fetched for a wallet address.

    Business rules:
    - One record per wallet address (last write wins)
    - Lamports fit in an unsigned 64-bit integer
    - Timestamp is the local wall-clock time of the fetch, in UTC
    """

    wallet_address: str
    lamports: int
    last_updated: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    def __post_init__(self):
        """Validate balance data after initialization."""
        if not self.wallet_address:
            raise ValueError("Wallet address is required")

        if isinstance(self.lamports, bool) or not isinstance(self.lamports, int):
            raise ValueError(f"Lamports must be an integer, got {self.lamports!r}")

        if self.lamports < 0 or self.lamports > MAX_LAMPORTS:
            raise ValueError(f"Lamports out of u64 range: {self.lamports}")

        if self.last_updated.tzinfo is None:
            self.last_updated = self.last_updated.replace(tzinfo=timezone.utc)

    @classmethod
    def now(cls, wallet_address: str, lamports: int) -> "CachedBalance":
        """Create record stamped with the current UTC time."""
        return cls(
            wallet_address=wallet_address,
            lamports=lamports,
            last_updated=datetime.now(timezone.utc),
        )

    @classmethod
    def from_iso(
        cls,
        wallet_address: str,
        lamports: int,
        last_updated_iso: str,
    ) -> "CachedBalance":
        """
        Rebuild record from its persisted form.

        Args:
            wallet_address: Base58 wallet address
            lamports: Balance in lamports
            last_updated_iso: ISO-8601 timestamp string

        Returns:
            CachedBalance entity

        Raises:
            ValueError: If timestamp cannot be parsed
        """
        return cls(
            wallet_address=wallet_address,
            lamports=lamports,
            last_updated=datetime.fromisoformat(last_updated_iso),
        )

    @property
    def last_updated_iso(self) -> str:
        """ISO-8601 timestamp used for storage."""
        return self.last_updated.isoformat()

    @property
    def sol(self) -> Decimal:
        """Balance in whole SOL."""
        return Decimal(self.lamports) / Decimal(LAMPORTS_PER_SOL)

    def pubkey(self) -> Pubkey:
        """
        Parse wallet address into a Solana public key.

        Raises:
            ValueError: If address is not a valid base58 public key
        """
        return Pubkey.from_string(self.wallet_address)

    def to_dict(self) -> dict:
        """Convert entity to dictionary representation."""
        return {
            "wallet_address": self.wallet_address,
            "lamports": self.lamports,
            "sol": str(self.sol),
            "last_updated": self.last_updated_iso,
        }
