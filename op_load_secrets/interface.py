"""
Secret Loading Interfaces

Defines the abstract collaborators the loader talks to: a secret reader
that resolves op:// references, and a pipeline sink that publishes values
to the CI runner.
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .config import ENV_INTEGRATION_BUILD, ENV_INTEGRATION_ID, ENV_INTEGRATION_NAME


class AuthType(Enum):
    """Credential shape found in the environment."""
    CONNECT = "Connect"
    SERVICE_ACCOUNT = "Service account"


def semver_to_int(version: str) -> int:
    """
    Convert a semantic version into the build number format used by 1Password.

    Each component is zero-padded to two digits and concatenated, so
    "1.2.3" becomes 10203 and "2.14.0" becomes 21400.
    """
    core = version.strip().lstrip("v").split("-", 1)[0].split("+", 1)[0]
    parts = core.split(".")
    if not all(re.fullmatch(r"\d+", p) for p in parts):
        raise ValueError(f"Invalid semantic version: {version}")
    return int("".join(p.zfill(2) for p in parts))


@dataclass(frozen=True)
class ClientInfo:
    """User-agent information passed to 1Password."""
    name: str
    id: str
    build: int
    version: str = ""

    @classmethod
    def from_version(cls, name: str, id: str, version: str) -> "ClientInfo":
        return cls(name=name, id=id, build=semver_to_int(version), version=version)


@dataclass(frozen=True)
class FieldEntry:
    """A single field parsed from an item's field listing."""
    name: str
    value: str


class SecretReader(ABC):
    """
    Abstract base class for secret reference readers.

    Implementations resolve a full reference (e.g., "op://vault/item/field")
    to its value through a specific 1Password integration.
    """

    backend_type: str = "base"

    def __init__(self, env: dict):
        """
        Initialize the reader.

        Args:
            env: Environment mapping holding credentials
        """
        self.env = env
        self.client_info: Optional[ClientInfo] = None

    def set_client_info(self, info: ClientInfo) -> None:
        """
        Register the client identification sent with every request.

        Also exported as OP_INTEGRATION_* so every op CLI process started
        with this environment reports it.
        """
        self.client_info = info
        self.env[ENV_INTEGRATION_NAME] = info.name
        self.env[ENV_INTEGRATION_ID] = info.id
        self.env[ENV_INTEGRATION_BUILD] = str(info.build)

    @abstractmethod
    async def read(self, reference: str) -> str:
        """
        Resolve a secret reference.

        Args:
            reference: Full reference (e.g., "op://vault/item/field")

        Returns:
            The secret value, or an empty string if there is none

        Raises:
            SecretReferenceError: If the backend fails to resolve the reference
        """
        pass


class PipelineSink(ABC):
    """
    Abstract base class for CI pipeline outputs.

    Logging is not part of the sink; messages go through the logging module
    and the CLI decides how they are rendered.
    """

    @abstractmethod
    def export_variable(self, name: str, value: str) -> None:
        """Make `name` available to subsequent steps as an environment variable."""
        pass

    @abstractmethod
    def set_output(self, name: str, value: str) -> None:
        """Set a step output called `name`."""
        pass

    @abstractmethod
    def set_secret(self, value: str) -> None:
        """Register `value` so the runner masks it in logs."""
        pass
