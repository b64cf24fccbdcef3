"""
Test fixtures and configuration.
"""

from typing import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from helpers.factories import DEVNET_WALLET, WSOL_MINT

from solde.application.services.balance_service import BalanceService
from solde.config.settings import Settings
from solde.domain.services.i_chain_client import IChainClient
from solde.infrastructure.monitoring.system_reporter import SystemReporter
from solde.infrastructure.persistence.database import Database
from solde.infrastructure.persistence.repositories.balance_repository import (
    BalanceRepository,
)


@pytest.fixture
def test_wallet_address() -> str:
    """Provide test wallet address."""
    return DEVNET_WALLET


@pytest.fixture
def another_wallet_address() -> str:
    """Provide another test wallet address."""
    return WSOL_MINT


@pytest.fixture
def reporter() -> SystemReporter:
    """Quiet reporter for tests."""
    reporter = SystemReporter(name="solde.tests", level="WARNING", verbose=1)
    yield reporter
    reporter.close()


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings pointing at a temporary data directory."""
    return Settings(
        ENV="test",
        DATA_DIR=str(tmp_path),
        DATABASE_FILE="balances.db",
        SOLANA_RPC_URL="http://127.0.0.1:8899",
        RPC_TIMEOUT=2.0,
        LOG_LEVEL="WARNING",
        LOG_DIR=None,
    )


@pytest_asyncio.fixture
async def test_db(tmp_path) -> AsyncGenerator[Database, None]:
    """
    Create SQLite test database.

    Each test gets a fresh file under tmp_path.
    """
    db = Database(database_url=f"sqlite+aiosqlite:///{tmp_path / 'balances.db'}")
    await db.connect()

    yield db

    await db.disconnect()


@pytest_asyncio.fixture
async def repository(test_db: Database) -> BalanceRepository:
    """Balance repository with schema initialized."""
    repo = BalanceRepository(test_db)
    await repo.initialize_schema()
    return repo


@pytest.fixture
def chain_client() -> AsyncMock:
    """Chain client double."""
    return AsyncMock(spec=IChainClient)


@pytest.fixture
def balance_service(chain_client, repository, reporter) -> BalanceService:
    """Balance service over real SQLite and a mocked chain client."""
    return BalanceService(
        chain_client=chain_client,
        repository=repository,
        reporter=reporter,
    )
