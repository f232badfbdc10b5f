"""Pydantic schemas for executor configuration validation."""

from typing import Dict, List, Literal, Optional, Union
from pydantic import Field, ValidationError, model_validator
from shared.exceptions import InvalidConfigurationError
from shared.types import CamelModel, NodeKind


class HttpAuthConfig(CamelModel):
    type: Literal["none", "bearerToken"] = "none"
    token_secret: Optional[str] = None

    @model_validator(mode="after")
    def validate_token_secret(self) -> "HttpAuthConfig":
        if self.type == "bearerToken" and not (self.token_secret or "").strip():
            raise ValueError("bearerToken authentication requires tokenSecret")
        return self


class HttpBodyConfig(CamelModel):
    content_type: Literal["json", "formUrlEncoded", "raw"] = "json"
    data: str = ""


class HttpRequestConfig(CamelModel):
    """Config schema for httpRequest nodes"""
    method: Literal["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD"] = "GET"
    url: str
    authentication: Optional[HttpAuthConfig] = None
    headers: Dict[str, str] = Field(default_factory=dict)
    query_parameters: Dict[str, str] = Field(default_factory=dict)
    body: Optional[HttpBodyConfig] = None
    cache_max_age: Optional[int] = None
    timeout: Optional[float] = None  # milliseconds
    expected_status_codes: Optional[List[int]] = None
    response_format: Literal["json", "text", "binary"] = "json"
    follow_redirects: bool = True
    ignore_ssl: bool = Field(default=False, alias="ignoreSSL")


class AbiParameter(CamelModel):
    name: str = ""
    type: str
    indexed: Optional[bool] = None
    components: Optional[List["AbiParameter"]] = None


AbiParameter.model_rebuild()


class AbiFunction(CamelModel):
    type: Literal["function"] = "function"
    name: str = ""
    inputs: List[AbiParameter] = Field(default_factory=list)
    outputs: List[AbiParameter] = Field(default_factory=list)
    state_mutability: Literal["view", "pure", "nonpayable", "payable"] = "view"


class EvmArg(CamelModel):
    """Literal value or {{ node_id.field }} reference, typed by its ABI slot"""
    type: Literal["literal", "reference"] = "literal"
    value: str = ""
    abi_type: str = "string"


class EvmReadConfig(CamelModel):
    """Config schema for evmRead nodes"""
    chain_selector_name: str
    contract_address: str = ""
    abi: AbiFunction
    function_name: str = ""
    args: List[EvmArg] = Field(default_factory=list)
    from_address: Optional[str] = None
    block_number: Optional[Union[str, int]] = None


class EvmWriteConfig(CamelModel):
    """Config schema for evmWrite nodes"""
    chain_selector_name: str
    receiver_address: str = ""
    gas_limit: Union[str, int] = ""
    abi_params: List[AbiParameter] = Field(default_factory=list)
    data_mapping: List[EvmArg] = Field(default_factory=list)
    value: Optional[Union[str, int]] = None


# Executor schema registry
HANDLER_SCHEMAS = {
    NodeKind.HTTP_REQUEST: HttpRequestConfig,
    NodeKind.EVM_READ: EvmReadConfig,
    NodeKind.EVM_WRITE: EvmWriteConfig,
}


def validate_handler_config(kind: NodeKind, config: dict) -> CamelModel:
    """Parses a node's config against its executor schema"""
    if kind not in HANDLER_SCHEMAS:
        raise InvalidConfigurationError(f"No configuration schema for '{kind.value}' nodes")

    try:
        return HANDLER_SCHEMAS[kind].model_validate(config)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'config'}: {err['msg']}" for err in e.errors()
        )
        raise InvalidConfigurationError(f"Invalid configuration for '{kind.value}' node: {problems}")
