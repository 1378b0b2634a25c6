"""
Process execution for op CLI commands.

Commands are given as a single string and split into arguments with
shell-like quoting rules, then executed directly (not through a shell).
`sh -c "op env ls"` therefore runs `sh` with the arguments `-c` and
`op env ls`.
"""

import asyncio
import logging
import shlex
from typing import Mapping, Optional

from .exceptions import CommandError

logger = logging.getLogger(__name__)


async def get_exec_output(
    command: str,
    env: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Execute a command and return its captured standard output.

    Args:
        command: Command line to execute
        env: Environment for the child process (default: inherit)

    Returns:
        Decoded stdout

    Raises:
        CommandError: If the process exits with a non-zero status
    """
    args = shlex.split(command)
    if not args:
        raise ValueError("Command must not be empty")

    logger.debug(f"[command]{command}")
    proc = await asyncio.create_subprocess_exec(
        *args,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        env=dict(env) if env is not None else None,
    )
    stdout_b, stderr_b = await proc.communicate()

    stdout = (stdout_b or b"").decode("utf-8", errors="replace")
    stderr = (stderr_b or b"").decode("utf-8", errors="replace").strip()
    if proc.returncode != 0:
        raise CommandError(command, proc.returncode, stderr)
    return stdout
