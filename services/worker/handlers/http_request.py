"""HTTP request preview executor."""

import base64
import json
import logging
from typing import Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit
import requests
from requests.exceptions import RequestException, Timeout
from requests.structures import CaseInsensitiveDict
from services.preview.engine.template import TemplateResolver, stringify_segment
from services.worker.handlers.registry import register_executor
from services.worker.handlers.schemas import HttpRequestConfig, validate_handler_config
from services.worker.handlers.secrets import resolve_secret
from shared.constants import BODY_METHODS, DEFAULT_EXPECTED_STATUS_CODES, DEFAULT_HTTP_TIMEOUT_MS
from shared.exceptions import (
    ExecutionFailedError,
    ExecutionTimeoutError,
    InvalidConfigurationError,
    InvalidJsonResponseError,
    UnexpectedHttpStatusError,
)
from shared.types import ExecutionOutcome, Node, NodeKind, Workflow
from shared.utils import compact_json


@register_executor(NodeKind.HTTP_REQUEST)
def http_request_handler(node: Node, workflow: Workflow) -> ExecutionOutcome:
    config: HttpRequestConfig = validate_handler_config(NodeKind.HTTP_REQUEST, node.data.config)
    if not config.url.strip():
        raise InvalidConfigurationError("HTTP request URL is required.")

    resolver = TemplateResolver(workflow)
    warnings = []

    headers = CaseInsensitiveDict({
        key: stringify_segment(resolver.resolve_value(value)) for key, value in config.headers.items()
    })
    query = {
        key: stringify_segment(resolver.resolve_value(value)) for key, value in config.query_parameters.items()
    }
    url = _with_query(stringify_segment(resolver.resolve_value(config.url)), query)

    if config.authentication and config.authentication.type == "bearerToken":
        token = resolve_secret(config.authentication.token_secret, workflow.global_config.secrets)
        headers["Authorization"] = f"Bearer {token}"

    body = _build_body(config, resolver, headers)

    if config.ignore_ssl:
        warnings.append("ignoreSSL is not honored by execution preview; TLS certificates are verified.")

    timeout_ms = config.timeout if config.timeout and config.timeout > 0 else DEFAULT_HTTP_TIMEOUT_MS

    logging.info("Sending preview HTTP request", extra={
        "node_id": node.id,
        "method": config.method,
        "timeout_ms": timeout_ms
    })

    try:
        response = requests.request(
            config.method,
            url,
            headers=headers,
            data=body.encode("utf-8") if body is not None else None,
            timeout=timeout_ms / 1000,
            allow_redirects=config.follow_redirects
        )
    except Timeout:
        raise ExecutionTimeoutError(
            f"Node execution preview timed out after {timeout_ms:g}ms.",
            node_id=node.id
        )
    except RequestException as e:
        raise ExecutionFailedError(f"HTTP request failed: {str(e)}", node_id=node.id)

    expected = config.expected_status_codes or DEFAULT_EXPECTED_STATUS_CODES
    if response.status_code not in expected:
        raise UnexpectedHttpStatusError(
            f"HTTP request returned {response.status_code}; expected {', '.join(str(c) for c in expected)}.",
            status_code=response.status_code
        )

    if config.response_format == "binary":
        raw_body = base64.b64encode(response.content).decode("ascii")
        normalized = raw_body
    elif config.response_format == "text":
        raw_body = response.text
        normalized = raw_body
    else:
        raw_body = response.text
        try:
            normalized = json.loads(raw_body, parse_constant=_reject_constant)
        except ValueError as e:
            raise InvalidJsonResponseError(f"HTTP response could not be parsed as JSON: {str(e)}")

    return ExecutionOutcome(
        raw={
            "statusCode": response.status_code,
            "headers": dict(response.headers),
            "body": raw_body
        },
        normalized=normalized,
        warnings=warnings
    )


def _reject_constant(token: str):
    raise ValueError(f"'{token}' is not valid JSON")


def _with_query(url: str, query: dict) -> str:
    """Sets query parameters on the URL, replacing any existing values for the same keys"""
    if not query:
        return url
    parts = urlsplit(url)
    params = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k not in query]
    params.extend(query.items())
    return urlunsplit(parts._replace(query=urlencode(params)))


def _build_body(config: HttpRequestConfig, resolver: TemplateResolver,
                headers: CaseInsensitiveDict) -> Optional[str]:
    if config.body is None or config.method not in BODY_METHODS:
        return None

    resolved = resolver.resolve_value(config.body.data)

    if config.body.content_type == "json":
        headers.setdefault("Content-Type", "application/json")
        return resolved if isinstance(resolved, str) else compact_json(resolved)

    if config.body.content_type == "formUrlEncoded":
        headers.setdefault("Content-Type", "application/x-www-form-urlencoded")
        if isinstance(resolved, dict):
            return urlencode({k: stringify_segment(v) for k, v in resolved.items()})
        return stringify_segment(resolved)

    return resolved if isinstance(resolved, str) else compact_json(resolved)
