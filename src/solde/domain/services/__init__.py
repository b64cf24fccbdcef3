"""
Domain service interfaces.
"""

from solde.domain.services.i_chain_client import IChainClient

__all__ = ["IChainClient"]
