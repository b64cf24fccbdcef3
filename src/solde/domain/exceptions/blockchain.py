"""
Blockchain-related exceptions.

Raised by the chain client when an address cannot be decoded or the
RPC node cannot be reached.
"""

from typing import Optional

from solde.domain.exceptions.base import SoldeException


class InvalidAddressError(SoldeException):
    """Raised when wallet address is not a valid Solana public key."""

    def __init__(self, address: str, reason: Optional[str] = None):
        """
        Initialize invalid address error.

        Args:
            address: Address that failed to decode
            reason: Decoder error message
        """
        message = f"Invalid wallet address: {address!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, details={"address": address, "reason": reason})
        self.address = address


class NetworkFailureError(SoldeException):
    """Raised when RPC call fails (timeout, connection, node error)."""
