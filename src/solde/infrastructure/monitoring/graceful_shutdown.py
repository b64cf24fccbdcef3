"""
Graceful shutdown handler for Solde.

Handles SIGTERM and SIGINT so the periodic fetch loop stops promptly
and connections are closed before the process exits.
"""

import asyncio
import signal
from typing import Awaitable, Callable, List, Optional

from solde.infrastructure.monitoring.system_reporter import SystemReporter


class GracefulShutdown:
    """
    Coordinates shutdown on SIGTERM/SIGINT.

    Example:
        shutdown = GracefulShutdown(reporter=reporter)
        shutdown.register_cleanup(container.shutdown)
        shutdown.setup_signal_handlers()

        await shutdown.wait()
        await shutdown.shutdown()
    """

    def __init__(
        self,
        shutdown_timeout: float = 30.0,
        reporter: Optional[SystemReporter] = None,
    ):
        """
        Initialize graceful shutdown handler.

        Args:
            shutdown_timeout: Max seconds to wait for each cleanup handler
            reporter: Optional SystemReporter for logging
        """
        self.shutdown_timeout = shutdown_timeout
        self.reporter = reporter or SystemReporter(name="solde.shutdown")
        self.shutdown_event = asyncio.Event()
        self.cleanup_tasks: List[Callable[[], Awaitable[None]]] = []
        self._completed = False

    def register_cleanup(self, task: Callable[[], Awaitable[None]]) -> None:
        """
        Register cleanup task to run on shutdown.

        Args:
            task: Async function to call during cleanup
        """
        self.cleanup_tasks.append(task)

    def setup_signal_handlers(self) -> None:
        """Setup SIGTERM and SIGINT handlers on the running loop."""
        loop = asyncio.get_running_loop()

        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, self.request_shutdown, sig)

        self.reporter.info(
            "Signal handlers registered for graceful shutdown",
            context="Startup",
        )

    def request_shutdown(self, sig: Optional[signal.Signals] = None) -> None:
        """Mark shutdown as requested (signal callback)."""
        if sig is not None:
            self.reporter.info(
                f"Received {signal.Signals(sig).name}, shutting down",
                context="Shutdown",
            )
        self.shutdown_event.set()

    async def wait(self) -> None:
        """Block until shutdown is requested."""
        await self.shutdown_event.wait()

    def is_shutting_down(self) -> bool:
        """Check if shutdown is in progress."""
        return self.shutdown_event.is_set()

    async def shutdown(self) -> None:
        """
        Run registered cleanup tasks in order.

        Each task gets its own timeout. A failing task is logged and the
        remaining ones still run.
        """
        if self._completed:
            return

        self.shutdown_event.set()
        self.reporter.info(
            f"Running {len(self.cleanup_tasks)} cleanup tasks",
            context="Shutdown",
        )

        for task in self.cleanup_tasks:
            name = getattr(task, "__qualname__", repr(task))
            try:
                await asyncio.wait_for(task(), timeout=self.shutdown_timeout)
            except asyncio.TimeoutError:
                self.reporter.warning(
                    f"Cleanup task {name} timed out after "
                    f"{self.shutdown_timeout}s",
                    context="Shutdown",
                )
            except Exception as e:
                self.reporter.error(
                    f"Error in cleanup task {name}: {e}",
                    context="Shutdown",
                    exc_info=True,
                )

        self._completed = True
        self.reporter.info("Graceful shutdown complete", context="Shutdown")
