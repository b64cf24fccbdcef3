"""
Balance service - fetch-with-fallback and periodic fetching.

Policy: availability over freshness. A stale cached balance is served
when the node is unreachable, but a fresh balance that could not be
persisted is reported as an error.
"""

import asyncio
from datetime import timedelta
from typing import Dict, Optional, Sequence, Union

from solde.domain.entities.cached_balance import CachedBalance
from solde.domain.exceptions import NetworkFailureError, StorageFailureError
from solde.domain.repositories.i_balance_repository import IBalanceRepository
from solde.domain.services.i_chain_client import IChainClient
from solde.infrastructure.monitoring.system_reporter import SystemReporter

TickResult = Dict[str, Union[CachedBalance, Exception]]


class BalanceService:
    """
    Orchestrates chain client and balance repository.

    Holds only the two handles it is given. Safe to call from the
    on-demand fetch and the periodic loop concurrently.
    """

    def __init__(
        self,
        chain_client: IChainClient,
        repository: IBalanceRepository,
        reporter: Optional[SystemReporter] = None,
    ):
        """
        Initialize service with dependencies.

        Args:
            chain_client: Client reading balances from the node
            repository: Local balance cache
            reporter: Optional SystemReporter for logging
        """
        self.chain_client = chain_client
        self.repository = repository
        self.reporter = reporter or SystemReporter(name="solde.balance_service")

    async def fetch_and_cache(self, address: str) -> CachedBalance:
        """
        Fetch balance from chain, cache it, fall back to cache on failure.

        Args:
            address: Base58 wallet address

        Returns:
            Fresh record, or the cached record when the node is unreachable

        Raises:
            InvalidAddressError: If address cannot be decoded
            NetworkFailureError: If fetch fails and nothing is cached
            StorageFailureError: If fresh balance cannot be persisted
        """
        self.reporter.debug(f"Fetching balance for {address}", context="Fetch")

        try:
            record = await self.chain_client.fetch_remote_balance(address)
        except NetworkFailureError as fetch_error:
            self.reporter.warning(
                f"Failed to fetch balance for {address}: {fetch_error}",
                context="Fetch",
            )
            cached = await self._lookup_for_fallback(address)
            if cached is None:
                raise

            self.reporter.info(
                f"Using cached balance for {address} "
                f"from {cached.last_updated_iso}",
                context="Fetch",
            )
            return cached

        await self.repository.upsert(record)
        self.reporter.info(
            f"Cached balance for {address}: {record.lamports} lamports",
            context="Fetch",
        )
        return record

    async def _lookup_for_fallback(self, address: str) -> Optional[CachedBalance]:
        """Lookup used on the fallback path, storage errors count as a miss."""
        try:
            return await self.repository.lookup(address)
        except StorageFailureError as e:
            self.reporter.error(
                f"Cache lookup failed for {address}: {e}",
                context="Fetch",
            )
            return None

    async def get_latest_cached(self, address: str) -> Optional[CachedBalance]:
        """
        Get latest cached balance without touching the network.

        Args:
            address: Wallet address

        Returns:
            CachedBalance if cached, None otherwise
        """
        return await self.repository.lookup(address)

    async def run_tick(self, addresses: Sequence[str]) -> TickResult:
        """
        Fetch and cache every address once, in order.

        A failure for one address is logged and does not stop the others.

        Args:
            addresses: Wallet addresses to refresh

        Returns:
            Mapping of address to record or to the error it raised
        """
        results: TickResult = {}

        for address in addresses:
            try:
                results[address] = await self.fetch_and_cache(address)
            except Exception as e:
                self.reporter.warning(
                    f"Periodic fetch failed for {address}: {e}",
                    context="Periodic",
                )
                results[address] = e

        return results

    async def run_periodic_fetch(
        self,
        addresses: Sequence[str],
        period: Union[float, timedelta],
        stop_event: Optional[asyncio.Event] = None,
    ) -> None:
        """
        Refresh all addresses on a fixed period until stopped.

        The first tick runs immediately. A tick that takes longer than
        the period is followed by the next one without waiting.

        Args:
            addresses: Wallet addresses to refresh
            period: Seconds (or timedelta) between tick starts
            stop_event: Optional event that ends the loop when set

        Raises:
            ValueError: If period is not positive
        """
        if isinstance(period, timedelta):
            period = period.total_seconds()
        if period <= 0:
            raise ValueError(f"Period must be positive, got {period}")

        addresses = list(addresses)
        loop = asyncio.get_running_loop()

        self.reporter.info(
            f"Starting periodic balance fetch for {len(addresses)} wallets "
            f"every {period}s",
            context="Periodic",
        )

        try:
            while stop_event is None or not stop_event.is_set():
                started = loop.time()
                await self.run_tick(addresses)

                wait_time = max(0.0, period - (loop.time() - started))
                if stop_event is None:
                    await asyncio.sleep(wait_time)
                    continue

                try:
                    await asyncio.wait_for(stop_event.wait(), timeout=wait_time)
                except asyncio.TimeoutError:
                    pass
        finally:
            self.reporter.info("Periodic balance fetch stopped", context="Periodic")
