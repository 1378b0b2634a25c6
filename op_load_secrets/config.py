"""
Shared configuration constants for op-load-secrets.

Import from here to avoid duplication across the loader, backends and CLI.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .exceptions import InputError

# Credentials
ENV_CONNECT_HOST = "OP_CONNECT_HOST"
ENV_CONNECT_TOKEN = "OP_CONNECT_TOKEN"
ENV_SERVICE_ACCOUNT_TOKEN = "OP_SERVICE_ACCOUNT_TOKEN"

# Loader state
ENV_VAULT_ITEM = "OP_VAULT_ITEM"
ENV_MANAGED_VARIABLES = "OP_MANAGED_VARIABLES"

# Client info picked up by the op CLI
ENV_INTEGRATION_NAME = "OP_INTEGRATION_NAME"
ENV_INTEGRATION_ID = "OP_INTEGRATION_ID"
ENV_INTEGRATION_BUILD = "OP_INTEGRATION_BUILDNUMBER"

CLIENT_NAME = "1Password GitHub Action"
CLIENT_ID = "GHA"

# GitHub runner files
ENV_GITHUB_ENV = "GITHUB_ENV"
ENV_GITHUB_OUTPUT = "GITHUB_OUTPUT"
ENV_RUNNER_DEBUG = "RUNNER_DEBUG"

# op CLI commands (must match byte-for-byte)
CMD_ENV_LS = 'sh -c "op env ls"'
CMD_ITEM_GET = 'sh -c "op item get {identifier} --reveal"'

# Reserved free-text field on every item
NOTES_FIELD = "notesPlain"

AUTH_ERROR = (
    "Authentication error with environment variables: you must set either "
    f"1) {ENV_SERVICE_ACCOUNT_TOKEN}, or 2) both {ENV_CONNECT_HOST} and {ENV_CONNECT_TOKEN}."
)

_TRUE_VALUES = ("true", "True", "TRUE")
_FALSE_VALUES = ("false", "False", "FALSE")


def _input_env_name(name: str) -> str:
    return "INPUT_" + name.replace(" ", "_").upper()


def get_boolean_input(name: str, default: bool, env: Optional[Mapping[str, str]] = None) -> bool:
    """
    Read a boolean action input the way the GitHub toolkit does.

    Args:
        name: Input name as declared in action.yml (e.g., "export-env")
        default: Value used when the input is not set
        env: Environment mapping (default: os.environ)

    Returns:
        The parsed boolean

    Raises:
        InputError: If the value is not one of the YAML 1.2 core booleans
    """
    env = os.environ if env is None else env
    raw = (env.get(_input_env_name(name)) or "").strip()
    if not raw:
        return default
    if raw in _TRUE_VALUES:
        return True
    if raw in _FALSE_VALUES:
        return False
    raise InputError(
        f"Input does not meet YAML 1.2 \"Core Schema\": {name}\n"
        "Support boolean input list: `true | True | TRUE | false | False | FALSE`"
    )


@dataclass
class ActionSettings:
    """Inputs controlling a single run."""
    export_env: bool = True
    unset_previous: bool = False

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "ActionSettings":
        return cls(
            export_env=get_boolean_input("export-env", True, env),
            unset_previous=get_boolean_input("unset-previous", False, env),
        )
