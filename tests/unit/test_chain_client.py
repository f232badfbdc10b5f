"""
Unit tests for RPC resolution and the chain client wrapper.
"""

import pytest
from unittest.mock import Mock
from requests.exceptions import Timeout
from services.worker.infra.chain_client import ChainClient, parse_block_reference, resolve_rpc_url
from shared.exceptions import ExecutionTimeoutError, InvalidConfigurationError, RpcNotConfiguredError
from shared.types import GlobalConfig

TOKEN = "0x" + "aa" * 20


def test_rpc_override_wins():
    config = GlobalConfig.model_validate({
        "rpcs": [{"chainName": "ethereum-testnet-sepolia", "url": "https://my-node.example"}]
    })

    assert resolve_rpc_url("ethereum-testnet-sepolia", config) == "https://my-node.example"


def test_rpc_default_for_supported_chain():
    assert resolve_rpc_url("ethereum-testnet-sepolia", GlobalConfig()) == "https://rpc.sepolia.org"


def test_rpc_not_configured():
    with pytest.raises(RpcNotConfiguredError, match="unknown-chain"):
        resolve_rpc_url("unknown-chain", GlobalConfig())


def test_parse_block_reference():
    assert parse_block_reference(None) == "latest"
    assert parse_block_reference("") == "latest"
    assert parse_block_reference("finalized") == "finalized"
    assert parse_block_reference(" 100 ") == 100
    assert parse_block_reference(7) == 7

    with pytest.raises(InvalidConfigurationError):
        parse_block_reference("0x10")


def test_call_passes_block_and_checksummed_addresses():
    client = ChainClient("https://rpc.example", timeout_seconds=3)
    client.w3 = Mock()
    client.w3.eth.call.return_value = b"\x01"

    assert client.call(TOKEN, "0x1234", block=55) == b"\x01"

    tx = client.w3.eth.call.call_args.args[0]
    assert tx["to"].lower() == TOKEN
    assert tx["to"] != TOKEN
    assert "from" not in tx
    assert client.w3.eth.call.call_args.kwargs == {"block_identifier": 55}


def test_rpc_timeout_is_typed():
    client = ChainClient("https://rpc.example", timeout_seconds=2)
    client.w3 = Mock()
    client.w3.eth.call.side_effect = Timeout("read timed out")

    with pytest.raises(ExecutionTimeoutError, match="eth_call timed out after 2s"):
        client.call(TOKEN, "0x")
