"""
Monitoring infrastructure: logging and shutdown handling.
"""

from solde.infrastructure.monitoring.graceful_shutdown import GracefulShutdown
from solde.infrastructure.monitoring.system_reporter import SystemReporter

__all__ = ["GracefulShutdown", "SystemReporter"]
