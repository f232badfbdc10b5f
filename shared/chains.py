"""Supported chains and their default public RPC endpoints."""

from typing import Dict, List, Optional
from pydantic import BaseModel


class SupportedChain(BaseModel):
    name: str
    chain_selector_name: str
    numeric_id: str
    is_testnet: bool
    default_rpc_url: str


SUPPORTED_CHAINS: List[SupportedChain] = [
    SupportedChain(name="Ethereum Mainnet", chain_selector_name="ethereum-mainnet",
                   numeric_id="5009297550715157269", is_testnet=False,
                   default_rpc_url="https://eth.llamarpc.com"),
    SupportedChain(name="Ethereum Sepolia", chain_selector_name="ethereum-testnet-sepolia",
                   numeric_id="16015286601757825753", is_testnet=True,
                   default_rpc_url="https://rpc.sepolia.org"),
    SupportedChain(name="Polygon Mainnet", chain_selector_name="polygon-mainnet",
                   numeric_id="4051577828743386545", is_testnet=False,
                   default_rpc_url="https://rpc.ankr.com/polygon"),
    SupportedChain(name="Polygon Amoy", chain_selector_name="polygon-testnet-amoy",
                   numeric_id="16281711391670634445", is_testnet=True,
                   default_rpc_url="https://rpc-amoy.polygon.technology"),
    SupportedChain(name="Arbitrum One", chain_selector_name="ethereum-mainnet-arbitrum-1",
                   numeric_id="4949039107694359620", is_testnet=False,
                   default_rpc_url="https://arb1.arbitrum.io/rpc"),
    SupportedChain(name="Arbitrum Sepolia", chain_selector_name="ethereum-testnet-sepolia-arbitrum-1",
                   numeric_id="3478487238524512106", is_testnet=True,
                   default_rpc_url="https://sepolia-rollup.arbitrum.io/rpc"),
    SupportedChain(name="OP Mainnet", chain_selector_name="ethereum-mainnet-optimism-1",
                   numeric_id="3734403246176062136", is_testnet=False,
                   default_rpc_url="https://mainnet.optimism.io"),
    SupportedChain(name="OP Sepolia", chain_selector_name="ethereum-testnet-sepolia-optimism-1",
                   numeric_id="5224473277236331295", is_testnet=True,
                   default_rpc_url="https://sepolia.optimism.io"),
    SupportedChain(name="Avalanche Mainnet", chain_selector_name="avalanche-mainnet",
                   numeric_id="6433500567565415381", is_testnet=False,
                   default_rpc_url="https://api.avax.network/ext/bc/C/rpc"),
    SupportedChain(name="Avalanche Fuji", chain_selector_name="avalanche-testnet-fuji",
                   numeric_id="14767482510784806043", is_testnet=True,
                   default_rpc_url="https://api.avax-test.network/ext/bc/C/rpc"),
    SupportedChain(name="Base Mainnet", chain_selector_name="ethereum-mainnet-base-1",
                   numeric_id="15971525489660198786", is_testnet=False,
                   default_rpc_url="https://base.llamarpc.com"),
    SupportedChain(name="Base Sepolia", chain_selector_name="ethereum-testnet-sepolia-base-1",
                   numeric_id="10344971235874465080", is_testnet=True,
                   default_rpc_url="https://sepolia.base.org"),
    SupportedChain(name="BNB Chain Mainnet", chain_selector_name="binance_smart_chain-mainnet",
                   numeric_id="11344663589394136015", is_testnet=False,
                   default_rpc_url="https://binance.llamarpc.com"),
    SupportedChain(name="BNB Chain Testnet", chain_selector_name="binance_smart_chain-testnet",
                   numeric_id="5142893604156789321", is_testnet=True,
                   default_rpc_url="https://data-seed-prebsc-1-s1.binance.org:8545"),
]

_CHAINS_BY_SELECTOR: Dict[str, SupportedChain] = {
    chain.chain_selector_name: chain for chain in SUPPORTED_CHAINS
}


def get_default_rpc_url(chain_selector_name: str) -> Optional[str]:
    chain = _CHAINS_BY_SELECTOR.get(chain_selector_name)
    return chain.default_rpc_url if chain else None
