"""
Dependency injection.
"""

from solde.di.container import Container, init_balance_service

__all__ = ["Container", "init_balance_service"]
