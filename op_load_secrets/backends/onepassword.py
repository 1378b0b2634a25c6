"""
1Password SDK Secret Reader

Implements SecretReader for service accounts using the official SDK.
"""

import logging

from onepassword.client import Client

from ..config import ENV_SERVICE_ACCOUNT_TOKEN
from ..exceptions import AuthenticationError, SecretReferenceError
from ..interface import SecretReader

logger = logging.getLogger(__name__)


class OnePasswordSDKReader(SecretReader):
    """
    Service account reader backed by onepassword-sdk.

    The client is authenticated lazily on the first read, using the
    registered client info as the integration name and version.
    """

    backend_type = "onepassword-sdk"

    def __init__(self, env: dict):
        super().__init__(env)
        self._client: Client | None = None

    async def connect(self) -> Client:
        """Authenticate the SDK client."""
        token = self.env.get(ENV_SERVICE_ACCOUNT_TOKEN)
        if not token:
            raise AuthenticationError(f"{ENV_SERVICE_ACCOUNT_TOKEN} not set")

        info = self.client_info
        integration_name = info.name if info else "op-load-secrets"
        integration_version = f"v{info.version}" if info and info.version else "v0.0.0"

        try:
            self._client = await Client.authenticate(
                auth=token,
                integration_name=integration_name,
                integration_version=integration_version,
            )
        except Exception as e:
            raise AuthenticationError(f"Failed to authenticate with 1Password: {e}") from e
        logger.debug(f"Connected to 1Password as {integration_name} {integration_version}")
        return self._client

    async def read(self, reference: str) -> str:
        """Resolve a reference with client.secrets.resolve."""
        if self._client is None:
            await self.connect()

        try:
            return await self._client.secrets.resolve(reference)
        except Exception as e:
            raise SecretReferenceError(reference, str(e)) from e
