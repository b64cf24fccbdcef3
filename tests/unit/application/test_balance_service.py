"""
Unit tests for BalanceService.

Chain client and repository are mocked to exercise the fallback policy
and the periodic loop.

Usage:
    pytest tests/unit/application/test_balance_service.py
"""

import asyncio
from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from helpers.factories import DEVNET_WALLET, WSOL_MINT, make_balance

from solde.application.services.balance_service import BalanceService
from solde.domain.exceptions import (
    InvalidAddressError,
    NetworkFailureError,
    StorageFailureError,
)
from solde.domain.repositories.i_balance_repository import IBalanceRepository
from solde.domain.services.i_chain_client import IChainClient


@pytest.fixture
def mock_chain() -> AsyncMock:
    return AsyncMock(spec=IChainClient)


@pytest.fixture
def mock_repository() -> AsyncMock:
    repo = AsyncMock(spec=IBalanceRepository)
    repo.lookup.return_value = None
    return repo


@pytest.fixture
def service(mock_chain, mock_repository, reporter) -> BalanceService:
    return BalanceService(
        chain_client=mock_chain,
        repository=mock_repository,
        reporter=reporter,
    )


class TestFetchAndCache:
    """Unit tests for BalanceService.fetch_and_cache."""

    # ================================================================
    # Success path
    # ================================================================

    async def test_success_caches_fresh_record(
        self, service, mock_chain, mock_repository
    ):
        """Test fresh balance is stored and returned."""
        fresh = make_balance(DEVNET_WALLET, 2_000_000_000)
        mock_chain.fetch_remote_balance.return_value = fresh

        result = await service.fetch_and_cache(DEVNET_WALLET)

        assert result is fresh
        mock_repository.upsert.assert_awaited_once_with(fresh)
        mock_repository.lookup.assert_not_awaited()

    async def test_write_failure_propagates(
        self, service, mock_chain, mock_repository
    ):
        """Test fresh balance that cannot be stored is an error."""
        mock_chain.fetch_remote_balance.return_value = make_balance()
        mock_repository.upsert.side_effect = StorageFailureError("disk full")

        with pytest.raises(StorageFailureError, match="disk full"):
            await service.fetch_and_cache(DEVNET_WALLET)

        mock_repository.lookup.assert_not_awaited()

    # ================================================================
    # Fallback path
    # ================================================================

    async def test_network_failure_returns_cached(
        self, service, mock_chain, mock_repository
    ):
        """Test cached record is served when the node is unreachable."""
        cached = make_balance(DEVNET_WALLET, 1_000)
        mock_chain.fetch_remote_balance.side_effect = NetworkFailureError("down")
        mock_repository.lookup.return_value = cached

        result = await service.fetch_and_cache(DEVNET_WALLET)

        assert result is cached
        mock_repository.lookup.assert_awaited_once_with(DEVNET_WALLET)
        mock_repository.upsert.assert_not_awaited()

    async def test_network_failure_without_cache_raises(
        self, service, mock_chain, mock_repository
    ):
        """Test original network error surfaces on cache miss."""
        error = NetworkFailureError("connection refused")
        mock_chain.fetch_remote_balance.side_effect = error

        with pytest.raises(NetworkFailureError) as exc_info:
            await service.fetch_and_cache(DEVNET_WALLET)

        assert exc_info.value is error

    async def test_lookup_error_reraises_network_error(
        self, service, mock_chain, mock_repository
    ):
        """Test broken cache on fallback counts as a miss."""
        error = NetworkFailureError("timeout")
        mock_chain.fetch_remote_balance.side_effect = error
        mock_repository.lookup.side_effect = StorageFailureError("locked")

        with pytest.raises(NetworkFailureError) as exc_info:
            await service.fetch_and_cache(DEVNET_WALLET)

        assert exc_info.value is error

    async def test_invalid_address_has_no_fallback(
        self, service, mock_chain, mock_repository
    ):
        """Test invalid address is reported without consulting the cache."""
        mock_chain.fetch_remote_balance.side_effect = InvalidAddressError("bad")

        with pytest.raises(InvalidAddressError):
            await service.fetch_and_cache("bad")

        mock_repository.lookup.assert_not_awaited()
        mock_repository.upsert.assert_not_awaited()

    async def test_get_latest_cached(self, service, mock_chain, mock_repository):
        """Test cache read does not touch the network."""
        cached = make_balance()
        mock_repository.lookup.return_value = cached

        assert await service.get_latest_cached(DEVNET_WALLET) is cached
        mock_chain.fetch_remote_balance.assert_not_awaited()


class TestRunTick:
    """Unit tests for BalanceService.run_tick."""

    async def test_failure_isolated_per_address(
        self, service, mock_chain, mock_repository
    ):
        """Test one failing address does not stop the others."""
        good = make_balance(WSOL_MINT, 5)

        async def fetch(address):
            if address == DEVNET_WALLET:
                raise NetworkFailureError("down")
            return good

        mock_chain.fetch_remote_balance.side_effect = fetch

        results = await service.run_tick([DEVNET_WALLET, WSOL_MINT])

        assert isinstance(results[DEVNET_WALLET], NetworkFailureError)
        assert results[WSOL_MINT] is good
        mock_repository.upsert.assert_awaited_once_with(good)

    async def test_empty_address_list(self, service, mock_chain):
        """Test tick with no addresses does nothing."""
        assert await service.run_tick([]) == {}
        mock_chain.fetch_remote_balance.assert_not_awaited()


class TestRunPeriodicFetch:
    """Unit tests for BalanceService.run_periodic_fetch."""

    @pytest.mark.parametrize("period", [0, -1, timedelta(0)])
    async def test_rejects_non_positive_period(self, service, mock_chain, period):
        """Test non-positive period raises ValueError before any tick."""
        with pytest.raises(ValueError, match="positive"):
            await service.run_periodic_fetch([DEVNET_WALLET], period)

        mock_chain.fetch_remote_balance.assert_not_awaited()

    async def test_first_tick_immediate(self, service, mock_chain):
        """Test first tick runs without waiting a full period."""
        stop = asyncio.Event()

        async def fetch(address):
            stop.set()
            return make_balance(address)

        mock_chain.fetch_remote_balance.side_effect = fetch

        await asyncio.wait_for(
            service.run_periodic_fetch([DEVNET_WALLET], 60, stop_event=stop),
            timeout=2,
        )

        mock_chain.fetch_remote_balance.assert_awaited_once_with(DEVNET_WALLET)

    async def test_stops_after_event(self, service, mock_chain):
        """Test loop ends promptly when stop event is set."""
        stop = asyncio.Event()
        ticks = []

        async def fetch(address):
            ticks.append(address)
            if len(ticks) == 3:
                stop.set()
            return make_balance(address)

        mock_chain.fetch_remote_balance.side_effect = fetch

        await asyncio.wait_for(
            service.run_periodic_fetch(
                [DEVNET_WALLET], timedelta(milliseconds=10), stop_event=stop
            ),
            timeout=2,
        )

        assert len(ticks) == 3

    async def test_failures_do_not_stop_loop(self, service, mock_chain):
        """Test failing ticks are logged and the loop keeps going."""
        stop = asyncio.Event()
        calls = []

        async def fetch(address):
            calls.append(address)
            if len(calls) == 2:
                stop.set()
            raise NetworkFailureError("down")

        mock_chain.fetch_remote_balance.side_effect = fetch

        await asyncio.wait_for(
            service.run_periodic_fetch([DEVNET_WALLET], 0.01, stop_event=stop),
            timeout=2,
        )

        assert len(calls) == 2

    async def test_cancellation(self, service, mock_chain):
        """Test cancelling the loop task stops it."""
        mock_chain.fetch_remote_balance.side_effect = (
            lambda address: make_balance(address)
        )
        calls = mock_chain.fetch_remote_balance

        task = asyncio.create_task(service.run_periodic_fetch([DEVNET_WALLET], 30))
        await asyncio.sleep(0.05)

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert calls.await_count == 1
