"""
1Password CLI Secret Reader

Resolves references with `op read`. Used for Connect credentials, which the
SDK does not support; the op CLI picks up OP_CONNECT_HOST/OP_CONNECT_TOKEN
from the environment on its own.
"""

import logging
import shlex

from ..exceptions import CommandError, SecretReferenceError
from ..interface import SecretReader
from ..shell import get_exec_output

logger = logging.getLogger(__name__)


class OnePasswordCLIReader(SecretReader):
    """Reader that shells out to `op read --no-newline <reference>`."""

    backend_type = "op-cli"

    async def read(self, reference: str) -> str:
        command = f"op read --no-newline {shlex.quote(reference)}"
        try:
            return await get_exec_output(command, env=self.env)
        except CommandError as e:
            # stderr only; never echo the command output
            raise SecretReferenceError(reference, e.stderr) from e
