"""Secret resolution through declared name -> environment variable mappings."""

import logging
import os
from typing import List
from shared.exceptions import SecretNotDeclaredError, SecretEnvironmentUnavailableError
from shared.types import SecretReference


def resolve_secret(secret_name: str, secrets: List[SecretReference]) -> str:
    """Looks up a declared secret's value from the environment; never falls back to the name itself"""
    declaration = next((s for s in secrets if s.name == secret_name), None)
    if declaration is None:
        raise SecretNotDeclaredError(
            f"Secret '{secret_name}' is not declared in workflow settings.",
            secret_name=secret_name
        )

    value = os.environ.get(declaration.env_variable)
    if not value:
        logging.warning("Secret environment variable is not set", extra={
            "secret_name": secret_name,
            "env_variable": declaration.env_variable
        })
        raise SecretEnvironmentUnavailableError(
            f"Environment variable '{declaration.env_variable}' is not set for secret '{secret_name}'.",
            secret_name=secret_name
        )

    return value
