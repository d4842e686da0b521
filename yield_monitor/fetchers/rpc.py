"""
Web3 connection helper shared by the on-chain fetchers.
"""

from web3 import Web3
from web3.middleware import ExtraDataToPOAMiddleware

from ..config.settings import POA_CHAINS


def get_web3(rpc_url: str, chain: str) -> Web3:
    """HTTP Web3 client for chain, with the POA middleware where needed."""
    w3 = Web3(Web3.HTTPProvider(rpc_url))
    if chain in POA_CHAINS:
        w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)
    return w3


def get_contract(w3: Web3, address: str, abi: list):
    return w3.eth.contract(address=Web3.to_checksum_address(address), abi=abi)
