"""
Dependency Injection Container for Solde.

Builds the database, chain client, repository and balance service, and
owns their lifecycle. Handles are passed explicitly, nothing is global.
"""

from pathlib import Path
from typing import Optional

from solde.application.services.balance_service import BalanceService
from solde.config.settings import Settings, get_settings
from solde.domain.repositories.i_balance_repository import IBalanceRepository
from solde.domain.services.i_chain_client import IChainClient
from solde.infrastructure.blockchain.solana_balance_client import (
    SolanaBalanceClient,
)
from solde.infrastructure.monitoring.system_reporter import SystemReporter
from solde.infrastructure.persistence.database import Database
from solde.infrastructure.persistence.repositories.balance_repository import (
    BalanceRepository,
)


class Container:
    """
    DI container holding shared handles.

    Usage:
        container = Container(settings)
        await container.initialize()
        balance = await container.balance_service.fetch_and_cache(address)
        await container.shutdown()
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        reporter: Optional[SystemReporter] = None,
        chain_client: Optional[IChainClient] = None,
    ):
        """
        Initialize container.

        Args:
            settings: Optional Settings (defaults to global settings)
            reporter: Optional SystemReporter shared by all services
            chain_client: Optional chain client override (for testing)
        """
        self.settings = settings or get_settings()
        self.reporter = reporter or SystemReporter(
            name="solde",
            log_dir=self.settings.LOG_DIR,
            level=self.settings.LOG_LEVEL,
        )
        self._chain_client = chain_client
        self._database: Optional[Database] = None
        self._repository: Optional[IBalanceRepository] = None
        self._balance_service: Optional[BalanceService] = None
        self._initialized = False

    async def initialize(self) -> None:
        """Connect database, create schema and build services."""
        if self._initialized:
            return

        self.reporter.info(
            f"Opening balance cache at {self.settings.database_path}",
            context="Container",
        )
        self._database = Database(
            database_url=self.settings.database_url,
            echo=self.settings.DATABASE_ECHO,
        )
        await self._database.connect()

        self._repository = BalanceRepository(self._database)
        await self._repository.initialize_schema()

        if self._chain_client is None:
            self._chain_client = SolanaBalanceClient(
                rpc_url=self.settings.SOLANA_RPC_URL,
                timeout=self.settings.RPC_TIMEOUT,
                commitment=self.settings.SOLANA_COMMITMENT,
            )

        self._balance_service = BalanceService(
            chain_client=self._chain_client,
            repository=self._repository,
            reporter=self.reporter,
        )

        self._initialized = True
        self.reporter.info(
            f"Balance service ready (rpc={self.settings.SOLANA_RPC_URL})",
            context="Container",
        )

    async def shutdown(self) -> None:
        """Close RPC client and database connections."""
        if self._chain_client is not None:
            await self._chain_client.close()
            self._chain_client = None

        if self._database is not None:
            await self._database.disconnect()
            self._database = None

        self._repository = None
        self._balance_service = None
        self._initialized = False
        self.reporter.info("Container shut down", context="Container")

    def _require(self, value, name: str):
        if value is None:
            raise RuntimeError(f"{name} not available. Call initialize() first.")
        return value

    @property
    def database(self) -> Database:
        """Connected database manager."""
        return self._require(self._database, "Database")

    @property
    def chain_client(self) -> IChainClient:
        """Chain client handle."""
        return self._require(self._chain_client, "Chain client")

    @property
    def repository(self) -> IBalanceRepository:
        """Balance repository."""
        return self._require(self._repository, "Repository")

    @property
    def balance_service(self) -> BalanceService:
        """Balance service."""
        return self._require(self._balance_service, "Balance service")


async def init_balance_service(
    rpc_url: str,
    db_path: str,
    settings: Optional[Settings] = None,
) -> Container:
    """
    Bootstrap a ready-to-use container for one RPC URL and DB file.

    Args:
        rpc_url: Solana RPC node URL (e.g. https://api.mainnet-beta.solana.com)
        db_path: Path to SQLite database file (parent dirs are created)
        settings: Optional base settings to copy other values from

    Returns:
        Initialized Container
    """
    path = Path(db_path).expanduser().resolve()
    base = settings or get_settings()
    overrides = {
        "SOLANA_RPC_URL": rpc_url,
        "DATA_DIR": str(path.parent),
        "DATABASE_FILE": path.name,
    }
    container = Container(settings=base.model_copy(update=overrides))
    await container.initialize()
    return container
