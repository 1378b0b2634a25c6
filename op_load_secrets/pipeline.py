"""
GitHub Actions pipeline bindings.

Provides the sink that publishes values through runner file commands
($GITHUB_ENV, $GITHUB_OUTPUT) and workflow commands (::add-mask::), and a
logging handler that renders log records as workflow annotations.
"""

import logging
import os
import sys
import uuid
from typing import MutableMapping, Optional, TextIO

from .config import ENV_GITHUB_ENV, ENV_GITHUB_OUTPUT
from .interface import PipelineSink


def escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: str) -> str:
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


def issue_command(command: str, message: str = "", properties: Optional[dict] = None) -> str:
    """Format a workflow command, e.g. `::set-output name=FOO::bar`."""
    line = f"::{command}"
    if properties:
        line += " " + ",".join(f"{k}={escape_property(str(v))}" for k, v in properties.items() if v)
    return f"{line}::{escape_data(message)}"


def prepare_key_value_message(name: str, value: str) -> str:
    """Build a heredoc-style block for a runner file command."""
    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    if delimiter in name:
        raise ValueError(f"Unexpected input: name should not contain the delimiter \"{delimiter}\"")
    if delimiter in value:
        raise ValueError(f"Unexpected input: value should not contain the delimiter \"{delimiter}\"")
    return f"{name}<<{delimiter}\n{value}\n{delimiter}\n"


class GitHubActionsSink(PipelineSink):
    """
    Publishes values the way @actions/core does.

    Exported variables are also written to `env` so later steps of the same
    process (e.g. unsetting) see them.
    """

    def __init__(
        self,
        env: Optional[MutableMapping[str, str]] = None,
        stream: Optional[TextIO] = None,
    ):
        self.env = os.environ if env is None else env
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream or sys.stdout

    def _write_line(self, line: str) -> None:
        self.stream.write(line + "\n")
        self.stream.flush()

    def _append_file_command(self, env_name: str, name: str, value: str) -> bool:
        path = self.env.get(env_name)
        if not path:
            return False
        if not os.path.exists(path):
            raise FileNotFoundError(f"Missing file at path: {path}")
        with open(path, "a", encoding="utf-8") as f:
            f.write(prepare_key_value_message(name, value))
        return True

    def export_variable(self, name: str, value: str) -> None:
        self.env[name] = value
        if not self._append_file_command(ENV_GITHUB_ENV, name, value):
            self._write_line(issue_command("set-env", value, {"name": name}))

    def set_output(self, name: str, value: str) -> None:
        if not self._append_file_command(ENV_GITHUB_OUTPUT, name, value):
            self._write_line("")
            self._write_line(issue_command("set-output", value, {"name": name}))

    def set_secret(self, value: str) -> None:
        self._write_line(issue_command("add-mask", value))


class GitHubActionsHandler(logging.StreamHandler):
    """Logging handler emitting ::debug::, ::warning:: and ::error:: annotations."""

    def __init__(self, stream: Optional[TextIO] = None):
        super().__init__(stream or sys.stdout)

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if record.levelno >= logging.ERROR:
            return issue_command("error", message)
        if record.levelno >= logging.WARNING:
            return issue_command("warning", message)
        if record.levelno < logging.INFO:
            return issue_command("debug", message)
        return message


def configure_logging(debug: bool = False, stream: Optional[TextIO] = None) -> logging.Handler:
    """Route the package's loggers to the GitHub Actions handler."""
    handler = GitHubActionsHandler(stream)
    handler.setFormatter(logging.Formatter("%(message)s"))

    root = logging.getLogger("op_load_secrets")
    for existing in list(root.handlers):
        if isinstance(existing, GitHubActionsHandler):
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if debug else logging.INFO)
    return handler
