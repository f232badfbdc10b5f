"""Coercion between resolved template values and Ethereum ABI values.

Resolved values are untyped (str, int, float, bool, dict, list, None). The
codec turns them into exactly what an ABI slot needs, recursively, and wraps
eth-abi for the encode/decode primitives the EVM executors use. Integers are
Python ints end to end so chain values never lose precision.
"""

import json
import math
import re
from typing import Any, List, Optional
import eth_abi
from eth_abi.exceptions import DecodingError, EncodingError, ParseError
from eth_utils import keccak, to_bytes
from services.worker.handlers.schemas import AbiFunction, AbiParameter
from shared.exceptions import ExecutionFailedError, InvalidEvmArgumentError
from shared.utils import compact_json

HEX_PREFIX = "0x"

_ARRAY_TYPE = re.compile(r"^(?P<base>.+)\[(?P<size>\d*)\]$")
_DECIMAL_INTEGER = re.compile(r"^[+-]?\d+$")


def coerce_abi_value(abi_type: str, value: Any, components: Optional[List[AbiParameter]] = None) -> Any:
    """Coerces one resolved value to the representation its ABI type requires"""
    array = _ARRAY_TYPE.match(abi_type)
    if array:
        base = array.group("base")
        return [coerce_abi_value(base, item, components) for item in _as_array(value, abi_type)]

    if abi_type == "tuple":
        return _coerce_tuple(value, components)

    if abi_type.startswith(("uint", "int")):
        return _coerce_integer(abi_type, value)

    if abi_type == "bool":
        if isinstance(value, bool):
            return value
        return _as_text(value).strip().lower() == "true"

    if abi_type == "address":
        return _as_text(value)

    if abi_type.startswith("bytes"):
        if isinstance(value, str) and value.startswith(HEX_PREFIX):
            return value
        if isinstance(value, (bytes, bytearray)):
            return HEX_PREFIX + bytes(value).hex()
        return HEX_PREFIX + _as_text(value).encode("utf-8").hex()

    if abi_type == "string":
        return value if isinstance(value, str) else compact_json(value)

    return value


def _coerce_integer(abi_type: str, value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidEvmArgumentError(f"Value '{value}' cannot be used as {abi_type}.")
        return math.trunc(value)

    text = _as_text(value).strip()
    if not _DECIMAL_INTEGER.match(text):
        raise InvalidEvmArgumentError(f"Value '{text}' is not a base-10 integer for {abi_type}.")
    return int(text, 10)


def _coerce_tuple(value: Any, components: Optional[List[AbiParameter]]) -> Any:
    tuple_value = _as_tuple(value)

    if isinstance(tuple_value, list):
        coerced = []
        for index, item in enumerate(tuple_value):
            component = components[index] if components and index < len(components) else None
            coerced.append(coerce_abi_value(
                component.type if component else "string",
                item,
                component.components if component else None,
            ))
        return coerced

    if not components:
        return tuple_value

    return {
        component.name: coerce_abi_value(component.type, tuple_value.get(component.name), component.components)
        for component in components
    }


def _as_array(value: Any, abi_type: str) -> list:
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, str):
        parsed = _parse_json(value)
        if isinstance(parsed, list):
            return parsed
    raise InvalidEvmArgumentError(
        f"Array ABI values ({abi_type}) must resolve to a JSON array or array value."
    )


def _as_tuple(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, dict):
        return value
    if isinstance(value, str):
        parsed = _parse_json(value)
        if isinstance(parsed, (list, dict)):
            return parsed
    raise InvalidEvmArgumentError(
        "Tuple ABI values must resolve to a JSON object, JSON array, object, or array value."
    )


def _parse_json(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return None


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return compact_json(value)
    return str(value)


def canonical_type(param: AbiParameter) -> str:
    """ABI type string with tuple components expanded, e.g. (address,uint256)[]"""
    if param.type.startswith("tuple"):
        inner = ",".join(canonical_type(component) for component in param.components or [])
        return f"({inner}){param.type[len('tuple'):]}"
    return param.type


def function_selector(abi_function: AbiFunction) -> str:
    signature = f"{abi_function.name}({','.join(canonical_type(i) for i in abi_function.inputs)})"
    return HEX_PREFIX + keccak(text=signature)[:4].hex()


def encode_parameters(params: List[AbiParameter], values: List[Any]) -> str:
    """ABI-encodes already-coerced values, returning 0x-prefixed hex"""
    types = [canonical_type(param) for param in params]
    try:
        prepared = [_to_encodable(param.type, param.components, value) for param, value in zip(params, values)]
        return HEX_PREFIX + eth_abi.encode(types, prepared).hex()
    except (EncodingError, ParseError, ValueError, TypeError, OverflowError) as e:
        raise InvalidEvmArgumentError(f"ABI encoding failed for ({','.join(types)}): {e}")


def encode_function_call(abi_function: AbiFunction, values: List[Any]) -> str:
    return function_selector(abi_function) + encode_parameters(abi_function.inputs, values)[len(HEX_PREFIX):]


def _to_encodable(abi_type: str, components: Optional[List[AbiParameter]], value: Any) -> Any:
    array = _ARRAY_TYPE.match(abi_type)
    if array:
        return [_to_encodable(array.group("base"), components, item) for item in value]

    if abi_type == "tuple":
        components = components or []
        if isinstance(value, dict):
            value = [value.get(component.name) for component in components]
        return tuple(
            _to_encodable(component.type, component.components, item)
            for component, item in zip(components, value)
        )

    if abi_type.startswith("bytes") and isinstance(value, str):
        return to_bytes(hexstr=value)

    return value


def decode_outputs(outputs: List[AbiParameter], data: bytes) -> List[Any]:
    """Decodes eth_call return data into JSON-friendly values, one per output"""
    if not outputs:
        return []

    types = [canonical_type(output) for output in outputs]
    try:
        decoded = eth_abi.decode(types, data)
    except (DecodingError, ParseError) as e:
        raise ExecutionFailedError(
            f"Contract returned data that does not match outputs ({','.join(types)}): {e}"
        )
    return [to_json_value(output.type, output.components, value) for output, value in zip(outputs, decoded)]


def to_json_value(abi_type: str, components: Optional[List[AbiParameter]], value: Any) -> Any:
    array = _ARRAY_TYPE.match(abi_type)
    if array:
        return [to_json_value(array.group("base"), components, item) for item in value]

    if abi_type == "tuple":
        components = components or []
        items = [
            to_json_value(component.type, component.components, item)
            for component, item in zip(components, value)
        ]
        if components and all(component.name for component in components):
            return {component.name: item for component, item in zip(components, items)}
        return items

    if isinstance(value, (bytes, bytearray)):
        return HEX_PREFIX + bytes(value).hex()

    return value
