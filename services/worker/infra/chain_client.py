"""
EVM JSON-RPC client for preview executors.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Optional, Union
from requests.exceptions import Timeout
from web3 import Web3
from shared.chains import get_default_rpc_url
from shared.constants import EVM_RPC_TIMEOUT_SECONDS, BLOCK_TAGS
from shared.exceptions import ExecutionTimeoutError, InvalidConfigurationError, RpcNotConfiguredError
from shared.types import GlobalConfig


def resolve_rpc_url(chain_selector_name: str, global_config: GlobalConfig) -> str:
    """Workflow-level RPC override first, then the supported-chain default"""
    configured = next((rpc for rpc in global_config.rpcs if rpc.chain_name == chain_selector_name), None)
    if configured and configured.url:
        return configured.url

    default_url = get_default_rpc_url(chain_selector_name)
    if default_url:
        return default_url

    raise RpcNotConfiguredError(
        f"No RPC URL is configured for chain '{chain_selector_name}'.",
        chain_selector_name=chain_selector_name
    )


class ChainClient:
    """Read-only web3 wrapper: eth_call, eth_estimateGas, eth_chainId"""

    def __init__(self, rpc_url: str, timeout_seconds: float = EVM_RPC_TIMEOUT_SECONDS):
        self.rpc_url = rpc_url
        self.timeout_seconds = timeout_seconds
        # One attempt per call
        self.w3 = Web3(Web3.HTTPProvider(
            rpc_url,
            request_kwargs={"timeout": timeout_seconds},
            exception_retry_configuration=None,
        ))

    def call(self, to: str, data: str, from_address: Optional[str] = None,
             block: Union[str, int] = "latest") -> bytes:
        tx: Dict[str, Any] = {"to": Web3.to_checksum_address(to), "data": data}
        if from_address:
            tx["from"] = Web3.to_checksum_address(from_address)
        with self._deadline("eth_call"):
            return bytes(self.w3.eth.call(tx, block_identifier=block))

    def estimate_gas(self, from_address: str, to: str, data: str, value: int = 0) -> int:
        tx: Dict[str, Any] = {
            "from": Web3.to_checksum_address(from_address),
            "to": Web3.to_checksum_address(to),
            "data": data,
        }
        if value:
            tx["value"] = value
        with self._deadline("eth_estimateGas"):
            return self.w3.eth.estimate_gas(tx)

    def get_chain_id(self) -> int:
        with self._deadline("eth_chainId"):
            return self.w3.eth.chain_id

    @contextmanager
    def _deadline(self, method: str):
        try:
            yield
        except Timeout:
            raise ExecutionTimeoutError(
                f"Chain RPC {method} timed out after {self.timeout_seconds:g}s.",
                rpc_method=method
            )


def parse_block_reference(block_number: Optional[Union[str, int]]) -> Union[str, int]:
    if block_number is None or block_number == "":
        return "latest"
    if isinstance(block_number, int):
        return block_number
    text = block_number.strip()
    if text in BLOCK_TAGS:
        return text
    if not text.isdigit():
        raise InvalidConfigurationError(
            f"Block number must be 'latest', 'finalized', or a decimal block number, got '{text}'."
        )
    return int(text, 10)


def create_chain_client(chain_selector_name: str, global_config: GlobalConfig) -> ChainClient:
    rpc_url = resolve_rpc_url(chain_selector_name, global_config)
    logging.info("Creating chain client", extra={"chain_selector_name": chain_selector_name})
    return ChainClient(rpc_url)
