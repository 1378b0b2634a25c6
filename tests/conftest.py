"""
Shared fixtures: a recording pipeline sink, a fake reader and a fake op executor.
"""

import logging
from typing import Dict, List, Optional

import pytest

from op_load_secrets.interface import ClientInfo, PipelineSink, SecretReader


class RecordingSink(PipelineSink):
    """Records every call; exports also update the environment like the real sink."""

    def __init__(self, env: Optional[dict] = None):
        self.env = env if env is not None else {}
        self.exported: List[tuple] = []
        self.outputs: List[tuple] = []
        self.secrets: List[str] = []

    def export_variable(self, name: str, value: str) -> None:
        self.env[name] = value
        self.exported.append((name, value))

    def set_output(self, name: str, value: str) -> None:
        self.outputs.append((name, value))

    def set_secret(self, value: str) -> None:
        self.secrets.append(value)


class FakeReader(SecretReader):
    """Resolves references from a dict; unknown references resolve to ""."""

    backend_type = "fake"

    def __init__(self, values: Optional[Dict[str, str]] = None):
        super().__init__({})
        self.values = values or {}
        self.reads: List[str] = []
        self.client_infos: List[ClientInfo] = []

    def set_client_info(self, info: ClientInfo) -> None:
        super().set_client_info(info)
        self.client_infos.append(info)

    async def read(self, reference: str) -> str:
        self.reads.append(reference)
        return self.values.get(reference, "")


class FakeExecutor:
    """Returns canned stdout per command and records what was run."""

    def __init__(self, outputs: Optional[Dict[str, str]] = None, default: str = ""):
        self.outputs = outputs or {}
        self.default = default
        self.commands: List[str] = []

    async def __call__(self, command: str) -> str:
        self.commands.append(command)
        return self.outputs.get(command, self.default)


@pytest.fixture
def env():
    return {}


@pytest.fixture
def sink(env):
    return RecordingSink(env)


@pytest.fixture
def reader():
    return FakeReader()


@pytest.fixture
def executor():
    return FakeExecutor()


@pytest.fixture
def info_logs(caplog):
    """Capture INFO and above from the package loggers."""
    caplog.set_level(logging.INFO, logger="op_load_secrets")
    return caplog
