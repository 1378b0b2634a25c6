"""Tests for the SDK and CLI secret readers."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from op_load_secrets import AuthenticationError, AuthType, CommandError, SecretReferenceError
from op_load_secrets.backends import BACKENDS, OnePasswordCLIReader, OnePasswordSDKReader, create_reader
from op_load_secrets.interface import ClientInfo

INFO = ClientInfo(name="1Password GitHub Action", id="GHA", build=10000, version="1.0.0")


def test_registry():
    assert BACKENDS[AuthType.SERVICE_ACCOUNT] is OnePasswordSDKReader
    assert BACKENDS[AuthType.CONNECT] is OnePasswordCLIReader
    assert isinstance(create_reader(AuthType.CONNECT, {}), OnePasswordCLIReader)


@pytest.fixture
def sdk_client(monkeypatch):
    client = MagicMock()
    client.secrets.resolve = AsyncMock(return_value="resolved")
    client_cls = MagicMock()
    client_cls.authenticate = AsyncMock(return_value=client)
    monkeypatch.setattr("op_load_secrets.backends.onepassword.Client", client_cls)
    return client_cls, client


@pytest.mark.asyncio
async def test_sdk_reader_authenticates_once_with_client_info(sdk_client):
    client_cls, client = sdk_client
    reader = OnePasswordSDKReader({"OP_SERVICE_ACCOUNT_TOKEN": "ops_token"})
    reader.set_client_info(INFO)

    assert await reader.read("op://v/i/a") == "resolved"
    assert await reader.read("op://v/i/b") == "resolved"

    client_cls.authenticate.assert_awaited_once_with(
        auth="ops_token",
        integration_name="1Password GitHub Action",
        integration_version="v1.0.0",
    )
    assert client.secrets.resolve.await_count == 2


@pytest.mark.asyncio
async def test_sdk_reader_without_token(sdk_client):
    reader = OnePasswordSDKReader({})

    with pytest.raises(AuthenticationError):
        await reader.read("op://v/i/a")


@pytest.mark.asyncio
async def test_sdk_reader_wraps_resolve_errors(sdk_client):
    _, client = sdk_client
    client.secrets.resolve.side_effect = RuntimeError("no such item")
    reader = OnePasswordSDKReader({"OP_SERVICE_ACCOUNT_TOKEN": "ops_token"})

    with pytest.raises(SecretReferenceError) as exc_info:
        await reader.read("op://v/missing/a")

    assert exc_info.value.reference == "op://v/missing/a"
    assert "no such item" in str(exc_info.value)


def test_cli_reader_exports_client_info():
    env = {}
    OnePasswordCLIReader(env).set_client_info(INFO)

    assert env == {
        "OP_INTEGRATION_NAME": "1Password GitHub Action",
        "OP_INTEGRATION_ID": "GHA",
        "OP_INTEGRATION_BUILDNUMBER": "10000",
    }


@pytest.mark.asyncio
async def test_cli_reader_runs_op_read(monkeypatch):
    exec_mock = AsyncMock(return_value="value")
    monkeypatch.setattr("op_load_secrets.backends.op_cli.get_exec_output", exec_mock)
    env = {"OP_CONNECT_HOST": "https://localhost:8000", "OP_CONNECT_TOKEN": "token"}

    value = await OnePasswordCLIReader(env).read("op://My Vault/item/field")

    assert value == "value"
    exec_mock.assert_awaited_once_with("op read --no-newline 'op://My Vault/item/field'", env=env)


@pytest.mark.asyncio
async def test_cli_reader_wraps_command_errors(monkeypatch):
    exec_mock = AsyncMock(side_effect=CommandError("op read", 1, "[ERROR] item not found"))
    monkeypatch.setattr("op_load_secrets.backends.op_cli.get_exec_output", exec_mock)

    with pytest.raises(SecretReferenceError, match="item not found"):
        await OnePasswordCLIReader({}).read("op://v/i/f")


@pytest.mark.asyncio
async def test_sdk_reader_authentication_failure(sdk_client):
    client_cls, _ = sdk_client
    client_cls.authenticate.side_effect = RuntimeError("invalid service account token")
    reader = OnePasswordSDKReader({"OP_SERVICE_ACCOUNT_TOKEN": "bad_token"})

    with pytest.raises(AuthenticationError, match="invalid service account token"):
        await reader.read("op://v/i/a")


def test_sdk_reader_exports_client_info():
    env = {"OP_SERVICE_ACCOUNT_TOKEN": "ops_token"}
    reader = OnePasswordSDKReader(env)
    reader.set_client_info(INFO)

    assert reader.client_info == INFO
    assert env["OP_INTEGRATION_NAME"] == "1Password GitHub Action"
    assert env["OP_INTEGRATION_ID"] == "GHA"
    assert env["OP_INTEGRATION_BUILDNUMBER"] == "10000"
