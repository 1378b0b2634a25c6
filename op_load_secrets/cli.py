"""
Command-line entry point, run as a GitHub Actions step.

Usage: op-load-secrets [--export-env | --no-export-env] [--unset-previous] [--debug]
"""

import argparse
import asyncio
import logging
import os
import shutil
from typing import MutableMapping, Optional, Sequence

from .backends import create_reader
from .config import ENV_RUNNER_DEBUG, ActionSettings
from .exceptions import LoadSecretsError
from .loader import SecretsLoader, validate_auth
from .pipeline import GitHubActionsSink, configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="op-load-secrets",
        description="Load 1Password secrets into a GitHub Actions job.",
    )
    p.add_argument(
        "--export-env",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Export secrets as environment variables instead of step outputs (input: export-env)",
    )
    p.add_argument(
        "--unset-previous",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Unset variables exported by a previous run (input: unset-previous)",
    )
    p.add_argument("--debug", action="store_true", help="Emit ::debug:: messages")
    return p


def resolve_settings(args: argparse.Namespace, env: MutableMapping[str, str]) -> ActionSettings:
    """Action inputs, overridden by explicit CLI flags."""
    settings = ActionSettings.from_env(env)
    if args.export_env is not None:
        settings.export_env = args.export_env
    if args.unset_previous is not None:
        settings.unset_previous = args.unset_previous
    return settings


async def run(settings: ActionSettings, env: MutableMapping[str, str]) -> None:
    if shutil.which("op", path=env.get("PATH")) is None:
        raise LoadSecretsError("1Password CLI (op) not found on PATH")

    auth_type = validate_auth(env)
    loader = SecretsLoader(
        sink=GitHubActionsSink(env),
        reader=create_reader(auth_type, env),
        env=env,
    )
    if settings.unset_previous:
        loader.unset_previous()
    await loader.load_secrets(settings.export_env)


def main(argv: Optional[Sequence[str]] = None, env: Optional[MutableMapping[str, str]] = None) -> int:
    env = os.environ if env is None else env
    args = build_parser().parse_args(argv)
    configure_logging(debug=args.debug or env.get(ENV_RUNNER_DEBUG) == "1")

    try:
        settings = resolve_settings(args, env)
        asyncio.run(run(settings, env))
    except LoadSecretsError as e:
        logger.error(str(e))
        return 1
    return 0
