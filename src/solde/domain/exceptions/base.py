"""
Base exception for Solde.
"""

from typing import Optional


class SoldeException(Exception):
    """Base exception for all Solde errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)
