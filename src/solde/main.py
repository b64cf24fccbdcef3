"""
Solde - process entry point.

Fetches the balance of a tracked wallet once, prints it, then keeps the
cache fresh in the background until SIGINT/SIGTERM.

Usage:
    solde [--address ADDRESS ...] [--interval SECONDS] [--env ENV]
"""

import asyncio
import sys
from typing import List, Optional, Sequence

import click

from solde.config.settings import Settings, load_config
from solde.di import Container
from solde.domain.exceptions import SoldeException
from solde.infrastructure.monitoring import GracefulShutdown


class SoldeApp:
    """
    Solde application orchestrator.

    Responsibilities:
        - Initialize DI container
        - Run the immediate fetch
        - Run the periodic fetch loop as a background task
        - Stop the loop and close connections on shutdown
    """

    def __init__(
        self,
        settings: Settings,
        container: Optional[Container] = None,
    ):
        """
        Initialize Solde application.

        Args:
            settings: Application settings
            container: Optional prebuilt container (for testing)
        """
        self.settings = settings
        self.container = container or Container(settings)
        self.reporter = self.container.reporter
        self.shutdown_manager = GracefulShutdown(reporter=self.reporter)
        self.periodic_task: Optional[asyncio.Task] = None

    async def fetch_now(self, address: str) -> bool:
        """
        Fetch one balance and print it in SOL.

        Returns:
            True if a balance (fresh or cached) was shown
        """
        try:
            balance = await self.container.balance_service.fetch_and_cache(address)
        except SoldeException as e:
            click.echo(f"Error fetching balance: {e}", err=True)
            return False

        click.echo(f"Fetched balance: {balance.sol} SOL")
        return True

    async def start(self, addresses: Sequence[str], interval: float) -> None:
        """Initialize services and launch the periodic loop."""
        await self.container.initialize()

        self.shutdown_manager.register_cleanup(self._stop_periodic_fetch)
        self.shutdown_manager.register_cleanup(self.container.shutdown)

        if addresses:
            await self.fetch_now(addresses[0])

        self.periodic_task = asyncio.create_task(
            self.container.balance_service.run_periodic_fetch(
                addresses,
                interval,
                stop_event=self.shutdown_manager.shutdown_event,
            ),
            name="periodic-balance-fetch",
        )

    async def _stop_periodic_fetch(self) -> None:
        if self.periodic_task is None or self.periodic_task.done():
            return

        self.periodic_task.cancel()
        try:
            await self.periodic_task
        except asyncio.CancelledError:
            pass

    async def run(self, addresses: Sequence[str], interval: float) -> None:
        """Run until a shutdown signal arrives."""
        self.shutdown_manager.setup_signal_handlers()
        try:
            await self.start(addresses, interval)
            click.echo("Balance service running. Press Ctrl+C to exit.")
            await self.shutdown_manager.wait()
        finally:
            await self.shutdown_manager.shutdown()


@click.command()
@click.option(
    "--address",
    "-a",
    "addresses",
    multiple=True,
    help="Wallet address to track (repeatable). Defaults to WALLET_ADDRESSES.",
)
@click.option(
    "--interval",
    "-i",
    type=float,
    default=None,
    help="Fetch period in seconds. Defaults to FETCH_INTERVAL_SECONDS.",
)
@click.option("--env", "-e", default=None, help="Environment (development, test, production)")
def cli(addresses: List[str], interval: Optional[float], env: Optional[str]):
    """Solde - Solana balance fetcher with offline cache."""
    settings = load_config(env=env)
    tracked = list(addresses) or settings.WALLET_ADDRESSES
    if not tracked:
        click.echo("No wallet address configured", err=True)
        sys.exit(2)

    period = settings.FETCH_INTERVAL_SECONDS if interval is None else interval
    if period <= 0:
        click.echo("Interval must be positive", err=True)
        sys.exit(2)

    click.echo(f"Using database at: {settings.database_path}")
    asyncio.run(SoldeApp(settings).run(tracked, period))


def main():
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
