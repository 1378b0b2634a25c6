"""
op-load-secrets

Loads 1Password secrets into a CI pipeline and unsets them afterwards.

Usage:
    from op_load_secrets import SecretsLoader, validate_auth

    # Per-variable mode: every env var holding an op:// reference
    #   DB_PASSWORD=op://app-prod/db/password
    await loader.load_secrets(export_env=True)

    # Vault item mode: every field of one item
    #   OP_VAULT_ITEM=op://app-prod/deploy-env
    await loader.load_secrets(export_env=False)

Credentials:
    Either OP_SERVICE_ACCOUNT_TOKEN, or both OP_CONNECT_HOST and
    OP_CONNECT_TOKEN. Connect wins when both are present.
"""

__version__ = "1.0.0"

from .exceptions import (
    AuthenticationError,
    CommandError,
    FormatError,
    InputError,
    LoadSecretsError,
    SecretReferenceError,
)
from .interface import AuthType, ClientInfo, FieldEntry, PipelineSink, SecretReader
from .loader import SecretsLoader, validate_auth

__all__ = [
    "__version__",
    "SecretsLoader",
    "validate_auth",
    "AuthType",
    "ClientInfo",
    "FieldEntry",
    "PipelineSink",
    "SecretReader",
    "LoadSecretsError",
    "AuthenticationError",
    "FormatError",
    "CommandError",
    "SecretReferenceError",
    "InputError",
]
