"""
Balance repository implementation.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.exc import SQLAlchemyError

from solde.domain.entities.cached_balance import CachedBalance
from solde.domain.exceptions import StorageFailureError
from solde.domain.repositories.i_balance_repository import IBalanceRepository
from solde.infrastructure.persistence.database import Database
from solde.infrastructure.persistence.models import BalanceModel


class BalanceRepository(IBalanceRepository):
    """
    SQLAlchemy implementation of balance repository.

    Each operation opens its own session, so every call is an
    independent single-statement transaction.
    """

    def __init__(self, database: Database):
        """
        Initialize repository with database manager.

        Args:
            database: Connected Database instance
        """
        self.database = database

    async def initialize_schema(self) -> None:
        """Create balances table if absent."""
        try:
            await self.database.create_tables()
        except (SQLAlchemyError, OSError) as e:
            raise StorageFailureError(
                f"Failed to initialize schema: {e}",
                details={"operation": "initialize_schema"},
            ) from e

    async def upsert(self, record: CachedBalance) -> None:
        """
        Insert or replace balance for wallet address.

        Args:
            record: CachedBalance entity to store

        Raises:
            StorageFailureError: If write fails
        """
        values = {
            "wallet_address": record.wallet_address,
            "lamports": record.lamports,
            "last_updated": record.last_updated_iso,
        }
        stmt = insert(BalanceModel).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[BalanceModel.wallet_address],
            set_={
                "lamports": stmt.excluded.lamports,
                "last_updated": stmt.excluded.last_updated,
            },
        )

        try:
            async with self.database.session() as session:
                await session.execute(stmt)
        except (SQLAlchemyError, OverflowError, OSError) as e:
            raise StorageFailureError(
                f"Failed to save balance for {record.wallet_address}: {e}",
                details={
                    "operation": "upsert",
                    "wallet_address": record.wallet_address,
                },
            ) from e

    async def lookup(self, address: str) -> Optional[CachedBalance]:
        """
        Get cached balance by wallet address.

        Args:
            address: Wallet address

        Returns:
            CachedBalance entity if found, None otherwise

        Raises:
            StorageFailureError: If read fails or stored row is corrupt
        """
        stmt = select(BalanceModel).where(BalanceModel.wallet_address == address)

        try:
            async with self.database.session() as session:
                result = await session.execute(stmt)
                model = result.scalar_one_or_none()
        except (SQLAlchemyError, OSError) as e:
            raise StorageFailureError(
                f"Failed to read balance for {address}: {e}",
                details={"operation": "lookup", "wallet_address": address},
            ) from e

        if model is None:
            return None

        try:
            return self._to_entity(model)
        except ValueError as e:
            raise StorageFailureError(
                f"Corrupt cached balance for {address}: {e}",
                details={"operation": "lookup", "wallet_address": address},
            ) from e

    def _to_entity(self, model: BalanceModel) -> CachedBalance:
        """Convert database model to domain entity."""
        return CachedBalance.from_iso(
            wallet_address=model.wallet_address,
            lamports=model.lamports,
            last_updated_iso=model.last_updated,
        )
