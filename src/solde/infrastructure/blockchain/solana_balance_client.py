"""
Solana RPC balance client.

Features:
- Address decoding before any network access
- Timeout protection on every getBalance call
- Transport, node and malformed-reply errors mapped to NetworkFailureError

No retry here: a failed fetch is retried by the next periodic tick.
"""

import asyncio
from typing import Optional

from solana.exceptions import SolanaRpcException
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment
from solana.rpc.core import RPCException
from solders.errors import SerdeJSONError
from solders.pubkey import Pubkey

from solde.domain.entities.cached_balance import CachedBalance
from solde.domain.exceptions import InvalidAddressError, NetworkFailureError
from solde.domain.services.i_chain_client import IChainClient

# Transport errors (wrapped by solana-py), JSON-RPC error replies and
# bodies that are not valid JSON-RPC
RPC_ERRORS = (SolanaRpcException, RPCException, SerdeJSONError)


def decode_address(address: str) -> Pubkey:
    """
    Decode base58 wallet address into a public key.

    Args:
        address: Base58 wallet address

    Returns:
        Solana Pubkey

    Raises:
        InvalidAddressError: If address is not a valid 32-byte public key
    """
    if not address or not isinstance(address, str):
        raise InvalidAddressError(str(address), "empty address")

    try:
        return Pubkey.from_string(address)
    except ValueError as e:
        raise InvalidAddressError(address, str(e)) from e


class SolanaBalanceClient(IChainClient):
    """
    Reads wallet balances from a Solana JSON-RPC node.

    Stateless apart from the shared AsyncClient, safe to use from the
    on-demand fetch and the periodic loop at the same time.
    """

    def __init__(
        self,
        rpc_url: str,
        timeout: float = 10.0,
        commitment: str = "confirmed",
        client: Optional[AsyncClient] = None,
    ):
        """
        Initialize Solana balance client.

        Args:
            rpc_url: Solana RPC endpoint URL
            timeout: Max seconds for a single RPC call
            commitment: Commitment level (processed, confirmed, finalized)
            client: Optional preconfigured AsyncClient (for testing)
        """
        self.rpc_url = rpc_url
        self.timeout = timeout
        self.commitment = Commitment(commitment)
        self.client = client or AsyncClient(
            rpc_url,
            commitment=self.commitment,
            timeout=timeout,
            max_transport_retries=0,
        )

    async def fetch_remote_balance(self, address: str) -> CachedBalance:
        """
        Fetch current balance from the node.

        Args:
            address: Base58 wallet address

        Returns:
            CachedBalance stamped with local UTC time

        Raises:
            InvalidAddressError: If address cannot be decoded
            NetworkFailureError: On timeout, connection or node error
        """
        pubkey = decode_address(address)

        try:
            response = await asyncio.wait_for(
                self.client.get_balance(pubkey, commitment=self.commitment),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise NetworkFailureError(
                f"RPC timeout after {self.timeout}s: getBalance",
                details={"address": address, "timeout": self.timeout},
            ) from e
        except RPC_ERRORS as e:
            raise NetworkFailureError(
                f"RPC error: {e}",
                details={"address": address, "rpc_url": self.rpc_url},
            ) from e

        lamports = getattr(response, "value", None)
        if isinstance(lamports, bool) or not isinstance(lamports, int):
            raise NetworkFailureError(
                f"Unexpected getBalance response: {response!r}",
                details={"address": address},
            )

        return CachedBalance.now(wallet_address=address, lamports=lamports)

    async def is_connected(self) -> bool:
        """Check that the node answers."""
        try:
            return await self.client.is_connected()
        except RPC_ERRORS:
            return False

    async def close(self) -> None:
        """Close underlying HTTP session."""
        await self.client.close()
