"""
Secret Loader

Resolves 1Password references found in the environment (or every field of a
single vault item) and publishes them to the pipeline, recording what was
published so a later run can unset it.

Usage:
    from op_load_secrets import SecretsLoader, validate_auth
    from op_load_secrets.backends import create_reader
    from op_load_secrets.pipeline import GitHubActionsSink

    auth_type = validate_auth(os.environ)
    loader = SecretsLoader(
        sink=GitHubActionsSink(os.environ),
        reader=create_reader(auth_type, os.environ),
    )
    loader.unset_previous()
    await loader.load_secrets(export_env=True)
"""

import logging
import os
import re
from typing import Awaitable, Callable, List, MutableMapping, Optional

from . import __version__
from .config import (
    AUTH_ERROR,
    CLIENT_ID,
    CLIENT_NAME,
    CMD_ENV_LS,
    CMD_ITEM_GET,
    ENV_CONNECT_HOST,
    ENV_CONNECT_TOKEN,
    ENV_MANAGED_VARIABLES,
    ENV_SERVICE_ACCOUNT_TOKEN,
    ENV_VAULT_ITEM,
    NOTES_FIELD,
)
from .exceptions import AuthenticationError, FormatError
from .interface import AuthType, ClientInfo, PipelineSink, SecretReader
from .item_parser import parse_item_fields
from .shell import get_exec_output

logger = logging.getLogger(__name__)

Executor = Callable[[str], Awaitable[str]]

VAULT_ITEM_RE = re.compile(r'^op://vault/(?!item/)(?P<item>[^/"\\]+)$')


def validate_auth(env: Optional[MutableMapping[str, str]] = None) -> AuthType:
    """
    Check the environment for usable 1Password credentials.

    Connect needs both host and token; a service account needs its token.
    Connect takes priority when both are configured.

    Returns:
        The credential shape that will be used

    Raises:
        AuthenticationError: If no complete credential set is present
    """
    env = os.environ if env is None else env
    is_connect = bool(env.get(ENV_CONNECT_HOST) and env.get(ENV_CONNECT_TOKEN))
    is_service_account = bool(env.get(ENV_SERVICE_ACCOUNT_TOKEN))

    if is_connect and is_service_account:
        logger.warning(
            "WARNING: Both service account and Connect credentials are provided. "
            "Connect credentials will take priority."
        )

    if not is_connect and not is_service_account:
        raise AuthenticationError(AUTH_ERROR)

    auth_type = AuthType.CONNECT if is_connect else AuthType.SERVICE_ACCOUNT
    logger.info(f"Authenticated with {auth_type.value}.")
    return auth_type


def is_valid_vault_item(identifier: str) -> bool:
    """True for op://vault/<item>; no field segment, no quotes."""
    return VAULT_ITEM_RE.match(identifier) is not None


def split_names(output: str) -> List[str]:
    """Split `op env ls` output into names, dropping trailing line breaks."""
    return re.split(r"\r?\n", re.sub(r"(\r?\n)+$", "", output))


class SecretsLoader:
    """
    Loads secrets into a CI pipeline.

    Collaborators are injected so the environment, the pipeline and the
    op CLI can all be replaced in tests.
    """

    def __init__(
        self,
        sink: PipelineSink,
        reader: SecretReader,
        env: Optional[MutableMapping[str, str]] = None,
        executor: Optional[Executor] = None,
    ):
        self.sink = sink
        self.reader = reader
        self.env = os.environ if env is None else env
        self._executor = executor

    async def _exec(self, command: str) -> str:
        if self._executor is not None:
            return await self._executor(command)
        return await get_exec_output(command, env=self.env)

    def _publish(self, name: str, value: str, export_env: bool) -> None:
        self.sink.set_secret(value)
        if export_env:
            self.sink.export_variable(name, value)
        else:
            self.sink.set_output(name, value)

    async def extract_secret(self, name: str, export_env: bool) -> None:
        """
        Resolve the reference stored in `name` and publish it under the same name.

        A missing variable or an empty resolved value is silently skipped.
        """
        logger.info(f"Populating variable: {name}")

        ref = self.env.get(name)
        if not ref:
            return

        secret_value = await self.reader.read(ref)
        if not secret_value:
            return

        self._publish(name, secret_value, export_env)

    async def extract_vault_item(self, identifier: str, export_env: bool) -> List[str]:
        """
        Publish every field of a vault item except notesPlain.

        Args:
            identifier: Item reference, e.g. "op://vault/some_item"
            export_env: Export as environment variables instead of step outputs

        Returns:
            Names of the published fields, in encounter order

        Raises:
            FormatError: If the identifier is not op://vault/<item>
        """
        if not is_valid_vault_item(identifier):
            raise FormatError(identifier)

        logger.info(f"Loading all secrets from vault item: {identifier}")
        output = await self._exec(CMD_ITEM_GET.format(identifier=identifier))

        published: List[str] = []
        for field in parse_item_fields(output):
            if field.name == NOTES_FIELD:
                continue
            logger.info(f"Loading secret: {field.name}")
            self._publish(field.name, field.value, export_env)
            published.append(field.name)

        if export_env and published:
            self.sink.export_variable(ENV_MANAGED_VARIABLES, ",".join(published))
        return published

    async def load_secrets(self, export_env: bool) -> None:
        """
        Load secrets from a vault item, or from every op:// reference in the environment.

        When OP_VAULT_ITEM is set, individual environment variables are not processed.
        """
        self.reader.set_client_info(
            ClientInfo.from_version(name=CLIENT_NAME, id=CLIENT_ID, version=__version__)
        )

        vault_item = self.env.get(ENV_VAULT_ITEM)
        if vault_item:
            await self.extract_vault_item(vault_item, export_env)
            return

        output = await self._exec(CMD_ENV_LS)
        if not output:
            return

        names = split_names(output)
        for name in names:
            await self.extract_secret(name, export_env)
        if export_env:
            self.sink.export_variable(ENV_MANAGED_VARIABLES, ",".join(names))

    def unset_previous(self) -> None:
        """Clear every variable recorded by the previous load."""
        managed = self.env.get(ENV_MANAGED_VARIABLES)
        if not managed:
            return

        logger.info("Unsetting previous values ...")
        for name in managed.split(","):
            logger.info(f"Unsetting {name}")
            self.sink.export_variable(name, "")
