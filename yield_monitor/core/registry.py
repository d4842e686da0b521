"""
Protocol Registry - Supported protocols, chains and contract addresses.

On-chain fetchers resolve their contract and RPC endpoint here. A protocol /
chain pair that is not listed is simply not configured: lookups return None.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Any

from ..config.settings import RPC_URLS

logger = logging.getLogger(__name__)


SUPPORTED_PROTOCOLS = {
    "aave_v3": {
        "name": "Aave V3",
        "chains": {
            # AaveProtocolDataProvider
            "base": "0x2d8A3C5677189723C4cB8873CfC9C8976FDF38Ac",
            "ethereum": "0x7B4EB56E7CD4b454BA8ff71E4518426369a138a3",
            "polygon": "0x69FA688f1Dc47d4B5d8029D5a35FB7a548310654",
        },
    },
    "compound_v3": {
        "name": "Compound V3",
        "chains": {
            # cUSDCv3 Comet
            "base": "0x46e6b214b524310239732D51387075E0e70970bf",
            "ethereum": "0xc3d688B66703497DAA19211EEdff47f25384cdc3",
        },
    },
}


@dataclass(frozen=True)
class ChainConfig:
    """Contract address and RPC endpoint for one protocol deployment."""
    protocol: str
    chain: str
    contract_address: str
    rpc_url: str


class ProtocolRegistry:
    """
    Static lookup of on-chain protocol deployments.

    Args:
        protocols: protocol table, defaults to SUPPORTED_PROTOCOLS
        rpc_urls: chain -> RPC endpoint, defaults to the configured RPC_URLS
    """

    def __init__(self, protocols: Dict[str, Dict[str, Any]] = None,
                 rpc_urls: Dict[str, str] = None):
        self.protocols = protocols if protocols is not None else SUPPORTED_PROTOCOLS
        self.rpc_urls = rpc_urls if rpc_urls is not None else RPC_URLS

    def get_chain_config(self, protocol: str, chain: str) -> Optional[ChainConfig]:
        """Return the deployment for protocol on chain, or None if not configured."""
        protocol_def = self.protocols.get(protocol)
        if not protocol_def:
            logger.debug(f"Protocol {protocol} not configured")
            return None

        address = protocol_def["chains"].get(chain)
        rpc_url = self.rpc_urls.get(chain)
        if not address or not rpc_url:
            logger.debug(f"{protocol} not configured on {chain}")
            return None

        return ChainConfig(
            protocol=protocol,
            chain=chain,
            contract_address=address,
            rpc_url=rpc_url,
        )

    def is_onchain(self, protocol: str) -> bool:
        return protocol in self.protocols

    def list_protocols(self) -> List[Dict[str, Any]]:
        """Protocol listing: id, display name and configured chains."""
        return [
            {
                "id": protocol_id,
                "name": protocol_def["name"],
                "chains": list(protocol_def["chains"].keys()),
            }
            for protocol_id, protocol_def in self.protocols.items()
        ]
