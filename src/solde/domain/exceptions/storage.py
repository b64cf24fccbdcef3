"""
Storage-related exceptions.
"""

from solde.domain.exceptions.base import SoldeException


class StorageFailureError(SoldeException):
    """Raised when the local database cannot be read or written."""
