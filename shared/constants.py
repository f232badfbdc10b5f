"""Centralized constants"""

import os

# Preview bounds
MAX_PREVIEW_DEPTH = 6
MAX_PREVIEW_ARRAY_ITEMS = 20
MAX_PREVIEW_OBJECT_KEYS = 50
MAX_PREVIEW_STRING_LENGTH = 2000

TRUNCATED_PLACEHOLDER = "[truncated]"
REDACTED_PLACEHOLDER = "[redacted]"
SENSITIVE_KEY_PATTERN = r"(secret|token|api[_-]?key|authorization|password|signature)"

# Largest integer a JSON consumer can hold without precision loss
MAX_SAFE_INTEGER = 2 ** 53 - 1

# Timeouts
DEFAULT_HTTP_TIMEOUT_MS = int(os.getenv("PREVIEW_DEFAULT_HTTP_TIMEOUT_MS", "15000"))
EVM_RPC_TIMEOUT_SECONDS = float(os.getenv("EVM_RPC_TIMEOUT_SECONDS", "15"))

# HTTP request defaults
DEFAULT_EXPECTED_STATUS_CODES = [200]
BODY_METHODS = {"POST", "PUT", "PATCH"}

# Limits
MAX_NODES_PER_WORKFLOW = 1000
MAX_CONFIG_SIZE_BYTES = 64 * 1024   # 64KB, ABI definitions can be large
MAX_TEMPLATE_LENGTH = 500

# Graph traversal
DEFAULT_SOURCE_HANDLE = "output"

# Node kinds that relay their inputs without declaring named fields
PASSTHROUGH_NODE_TYPES = {"if", "filter", "merge"}

# Node kinds that can be executed in isolation (closed allow-list)
PREVIEW_NODE_TYPES = {"httpRequest", "evmRead", "evmWrite"}

# EVM
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
BLOCK_TAGS = {"latest", "finalized"}
WRITE_PREVIEW_NOTICE = (
    "EVM write preview prepares calldata and estimates gas; it does not broadcast a transaction."
)
