"""
Domain exceptions package.
"""

# Base exceptions
from solde.domain.exceptions.base import SoldeException

# Blockchain exceptions
from solde.domain.exceptions.blockchain import (
    InvalidAddressError,
    NetworkFailureError,
)

# Storage exceptions
from solde.domain.exceptions.storage import StorageFailureError

__all__ = [
    # Base
    "SoldeException",
    # Blockchain
    "InvalidAddressError",
    "NetworkFailureError",
    # Storage
    "StorageFailureError",
]
