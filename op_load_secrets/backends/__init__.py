"""
Secret Reader Backends

Available readers, keyed by the credential shape they authenticate with.
"""

from ..interface import AuthType, SecretReader
from .onepassword import OnePasswordSDKReader
from .op_cli import OnePasswordCLIReader

# Registry of available backends
BACKENDS = {
    AuthType.SERVICE_ACCOUNT: OnePasswordSDKReader,
    AuthType.CONNECT: OnePasswordCLIReader,
}


def create_reader(auth_type: AuthType, env: dict) -> SecretReader:
    """Instantiate the reader registered for `auth_type`."""
    return BACKENDS[auth_type](env)


__all__ = ["BACKENDS", "create_reader", "OnePasswordSDKReader", "OnePasswordCLIReader"]
