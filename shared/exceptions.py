"""Structured exception hierarchy for node execution previews."""

from enum import Enum
from typing import Dict, Any
from pydantic import BaseModel


class ErrorCode(str, Enum):
    NODE_NOT_FOUND = "node_not_found"
    UNSUPPORTED_NODE_KIND = "unsupported_node_kind"
    INVALID_CONFIGURATION = "invalid_configuration"
    REFERENCE_RESOLUTION_FAILED = "reference_resolution_failed"
    SECRET_NOT_DECLARED = "secret_not_declared"
    SECRET_ENVIRONMENT_UNAVAILABLE = "secret_environment_unavailable"
    RPC_NOT_CONFIGURED = "rpc_not_configured"
    INVALID_JSON_RESPONSE = "invalid_json_response"
    UNEXPECTED_HTTP_STATUS = "unexpected_http_status"
    INVALID_EVM_ARGUMENT = "invalid_evm_argument"
    EXECUTION_TIMEOUT = "execution_timeout"
    EXECUTION_FAILED = "execution_failed"


class StatusClass(str, Enum):
    NOT_FOUND = "not_found"
    BAD_REQUEST = "bad_request"
    TIMEOUT = "timeout"
    SERVER_ERROR = "server_error"

    @property
    def http_status_code(self) -> int:
        return _HTTP_STATUS_CODES[self]


_HTTP_STATUS_CODES = {
    StatusClass.NOT_FOUND: 404,
    StatusClass.BAD_REQUEST: 400,
    StatusClass.TIMEOUT: 408,
    StatusClass.SERVER_ERROR: 500,
}


class PreviewFailure(BaseModel):
    """Typed failure returned to callers of a node preview"""
    code: ErrorCode
    message: str
    status: StatusClass

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


class PreviewError(Exception):
    """Base exception for preview errors"""

    code = ErrorCode.EXECUTION_FAILED
    status = StatusClass.BAD_REQUEST

    def __init__(self, message: str, **context):
        self.message = message
        self.context = context
        super().__init__(message)

    def to_failure(self) -> PreviewFailure:
        return PreviewFailure(code=self.code, message=self.message, status=self.status)


class NodeNotFoundError(PreviewError):
    code = ErrorCode.NODE_NOT_FOUND
    status = StatusClass.NOT_FOUND


class UnsupportedNodeKindError(PreviewError):
    code = ErrorCode.UNSUPPORTED_NODE_KIND


class InvalidConfigurationError(PreviewError):
    code = ErrorCode.INVALID_CONFIGURATION


class ReferenceResolutionError(PreviewError):
    code = ErrorCode.REFERENCE_RESOLUTION_FAILED


class TriggerReferenceError(ReferenceResolutionError):
    pass


class SecretNotDeclaredError(PreviewError):
    code = ErrorCode.SECRET_NOT_DECLARED


class SecretEnvironmentUnavailableError(PreviewError):
    code = ErrorCode.SECRET_ENVIRONMENT_UNAVAILABLE


class RpcNotConfiguredError(PreviewError):
    code = ErrorCode.RPC_NOT_CONFIGURED


class InvalidJsonResponseError(PreviewError):
    code = ErrorCode.INVALID_JSON_RESPONSE


class UnexpectedHttpStatusError(PreviewError):
    code = ErrorCode.UNEXPECTED_HTTP_STATUS


class InvalidEvmArgumentError(PreviewError):
    code = ErrorCode.INVALID_EVM_ARGUMENT


class ExecutionTimeoutError(PreviewError):
    code = ErrorCode.EXECUTION_TIMEOUT
    status = StatusClass.TIMEOUT


class ExecutionFailedError(PreviewError):
    code = ErrorCode.EXECUTION_FAILED
    status = StatusClass.SERVER_ERROR
