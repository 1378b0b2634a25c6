"""
Exceptions raised while loading secrets.

Everything derives from LoadSecretsError so the CLI can turn any of them
into a failed step.
"""


class LoadSecretsError(Exception):
    """Base exception for op-load-secrets."""


class AuthenticationError(LoadSecretsError):
    """Neither Connect nor service account credentials are usable."""


class FormatError(LoadSecretsError):
    """A vault item identifier does not look like op://<vault>/<item>."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"Invalid vault item format: {identifier}")


class CommandError(LoadSecretsError):
    """An op CLI process exited with a non-zero status."""

    def __init__(self, command: str, exit_code: int, stderr: str = ""):
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr
        message = f"The process '{command}' failed with exit code {exit_code}"
        if stderr:
            message += f": {stderr}"
        super().__init__(message)


class SecretReferenceError(LoadSecretsError):
    """A secret reference could not be resolved by the reader backend."""

    def __init__(self, reference: str, reason: str = ""):
        self.reference = reference
        message = f"Could not resolve secret reference: {reference}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class InputError(LoadSecretsError):
    """An action input has an unsupported value."""
