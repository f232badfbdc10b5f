"""
Unit tests for secret resolution.
"""

import pytest
from pydantic import ValidationError
from services.worker.handlers.secrets import resolve_secret
from shared.exceptions import ErrorCode, SecretEnvironmentUnavailableError, SecretNotDeclaredError
from shared.types import SecretReference

SECRETS = [SecretReference(name="apiToken", env_variable="PREVIEW_TEST_API_TOKEN")]


def test_resolve_declared_secret(monkeypatch):
    monkeypatch.setenv("PREVIEW_TEST_API_TOKEN", "value-123")

    assert resolve_secret("apiToken", SECRETS) == "value-123"


def test_undeclared_secret():
    with pytest.raises(SecretNotDeclaredError) as exc_info:
        resolve_secret("other", SECRETS)

    assert exc_info.value.code == ErrorCode.SECRET_NOT_DECLARED


def test_unset_environment_variable(monkeypatch):
    monkeypatch.delenv("PREVIEW_TEST_API_TOKEN", raising=False)

    with pytest.raises(SecretEnvironmentUnavailableError, match="PREVIEW_TEST_API_TOKEN"):
        resolve_secret("apiToken", SECRETS)


def test_empty_environment_variable(monkeypatch):
    """An empty value is as good as unset; the logical name is never used instead"""
    monkeypatch.setenv("PREVIEW_TEST_API_TOKEN", "")

    with pytest.raises(SecretEnvironmentUnavailableError):
        resolve_secret("apiToken", SECRETS)


def test_secret_mapping_must_name_a_distinct_variable():
    with pytest.raises(ValidationError):
        SecretReference(name="TOKEN", env_variable="TOKEN")
    with pytest.raises(ValidationError):
        SecretReference(name="TOKEN", env_variable="  ")
