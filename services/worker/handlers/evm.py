"""
EVM read executor and write simulator.

Reads perform a real eth_call. Writes never broadcast: the call data is built
exactly as the deployed node would build it and gas is estimated against the
receiver.
"""

import logging
import re
from typing import Any, List, Optional
from web3 import Web3
from services.preview.engine.template import TemplateResolver
from services.worker.handlers.abi_codec import (
    coerce_abi_value,
    decode_outputs,
    encode_function_call,
    encode_parameters,
)
from services.worker.handlers.registry import register_executor
from services.worker.handlers.schemas import (
    AbiParameter,
    EvmArg,
    EvmReadConfig,
    EvmWriteConfig,
    validate_handler_config,
)
from services.worker.infra.chain_client import create_chain_client, parse_block_reference
from shared.constants import WRITE_PREVIEW_NOTICE, ZERO_ADDRESS
from shared.exceptions import InvalidConfigurationError
from shared.types import ExecutionOutcome, Node, NodeKind, Workflow

_HEX_WEI = re.compile(r"^0[xX][0-9a-fA-F]+$")


def _resolve_evm_arg(arg: EvmArg, param: Optional[AbiParameter], resolver: TemplateResolver) -> Any:
    value: Any = arg.value
    if arg.type == "reference" or "{{" in arg.value:
        value = resolver.resolve_value(arg.value)

    abi_type = param.type if param else arg.abi_type
    components = param.components if param else None
    return coerce_abi_value(abi_type, value, components)


def _require_address(value: str, field: str) -> str:
    address = value.strip()
    if not address:
        raise InvalidConfigurationError(f"{field} is required.")
    if not Web3.is_address(address):
        raise InvalidConfigurationError(f"{field} '{address}' is not a valid EVM address.")
    return address


def normalize_read_result(outputs: List[AbiParameter], decoded: List[Any]) -> dict:
    """Keys decoded return values by output name"""
    if not outputs:
        return {"value": decoded[0] if decoded else None}
    if len(outputs) == 1:
        return {outputs[0].name or "value": decoded[0]}
    return {
        output.name or f"output{index}": value
        for index, (output, value) in enumerate(zip(outputs, decoded))
    }


@register_executor(NodeKind.EVM_READ)
def evm_read_handler(node: Node, workflow: Workflow) -> ExecutionOutcome:
    config: EvmReadConfig = validate_handler_config(NodeKind.EVM_READ, node.data.config)

    contract_address = _require_address(config.contract_address, "Contract address")
    function_name = config.function_name.strip() or config.abi.name.strip()
    if not function_name:
        raise InvalidConfigurationError("Function name is required.")
    if len(config.args) != len(config.abi.inputs):
        raise InvalidConfigurationError(
            f"Function '{function_name}' expects {len(config.abi.inputs)} argument(s), "
            f"got {len(config.args)}."
        )

    block = parse_block_reference(config.block_number)
    resolver = TemplateResolver(workflow)
    args = [
        _resolve_evm_arg(arg, param, resolver)
        for arg, param in zip(config.args, config.abi.inputs)
    ]
    abi_function = config.abi.model_copy(update={"name": function_name})
    calldata = encode_function_call(abi_function, args)

    client = create_chain_client(config.chain_selector_name, workflow.global_config)
    logging.info("Calling contract for preview", extra={
        "node_id": node.id,
        "chain_selector_name": config.chain_selector_name,
        "function_name": function_name
    })

    result = client.call(
        contract_address,
        calldata,
        from_address=config.from_address or None,
        block=block
    )
    decoded = decode_outputs(config.abi.outputs, result)

    return ExecutionOutcome(
        raw={
            "rpcUrl": client.rpc_url,
            "contractAddress": contract_address,
            "functionName": function_name,
            "args": args,
            "calldata": calldata,
            "result": "0x" + result.hex()
        },
        normalized=normalize_read_result(config.abi.outputs, decoded),
        warnings=[]
    )


@register_executor(NodeKind.EVM_WRITE)
def evm_write_handler(node: Node, workflow: Workflow) -> ExecutionOutcome:
    config: EvmWriteConfig = validate_handler_config(NodeKind.EVM_WRITE, node.data.config)

    receiver = _require_address(config.receiver_address, "Receiver address")
    if not config.abi_params:
        raise InvalidConfigurationError("EVM write requires at least one ABI parameter.")
    if len(config.data_mapping) != len(config.abi_params):
        raise InvalidConfigurationError(
            f"EVM write maps {len(config.data_mapping)} value(s) onto "
            f"{len(config.abi_params)} ABI parameter(s)."
        )

    value_wei = _parse_wei(config.value)
    resolver = TemplateResolver(workflow)
    resolved_args = [
        _resolve_evm_arg(arg, param, resolver)
        for arg, param in zip(config.data_mapping, config.abi_params)
    ]
    encoded_data = encode_parameters(config.abi_params, resolved_args)

    client = create_chain_client(config.chain_selector_name, workflow.global_config)
    warnings = [WRITE_PREVIEW_NOTICE]
    raw = {
        "rpcUrl": client.rpc_url,
        "receiverAddress": receiver,
        "resolvedArgs": resolved_args,
        "encodedData": encoded_data
    }
    normalized = {
        "chainSelectorName": config.chain_selector_name,
        "receiverAddress": receiver,
        "encodedData": encoded_data,
        "gasLimit": str(config.gas_limit),
        "valueWei": str(value_wei),
        "simulationStatus": "prepared",
        "broadcast": False
    }

    try:
        estimated = client.estimate_gas(ZERO_ADDRESS, receiver, encoded_data, value_wei)
        raw["estimatedGas"] = str(estimated)
        normalized["estimatedGas"] = str(estimated)
        normalized["simulationStatus"] = "estimated"
    except Exception as e:
        logging.warning("Gas estimation failed during write preview", extra={
            "node_id": node.id,
            "error": str(e)
        })
        raw["estimateGasError"] = str(e)
        normalized["simulationStatus"] = "estimateFailed"
        warnings.append(f"Gas estimation failed: {str(e)}")

    try:
        raw["chainId"] = client.get_chain_id()
    except Exception as e:
        warnings.append(f"Chain id could not be read: {str(e)}")

    return ExecutionOutcome(raw=raw, normalized=normalized, warnings=warnings)


def _parse_wei(value: Any) -> int:
    if value is None or value == "":
        return 0
    if isinstance(value, int) and value >= 0:
        return value
    text = str(value).strip()
    if _HEX_WEI.match(text):
        return int(text, 16)
    if not text.isdigit():
        raise InvalidConfigurationError(
            f"Value must be a non-negative amount of wei in decimal or 0x-prefixed hex, got '{text}'."
        )
    return int(text, 10)
