"""Custom exceptions for docker-pullator."""


class PullatorError(Exception):
    """Base exception for all docker-pullator errors."""

    pass


class RegistryError(PullatorError):
    """Base exception for tag listing failures."""

    pass


class RegistryUnreachable(RegistryError):
    """Raised when the registry API cannot be reached."""

    pass


class RegistryResponseInvalid(RegistryError):
    """Raised when the registry API returns an unexpected payload."""

    pass


class RegistryNotFound(RegistryError):
    """Raised when the registry API reports no such repository."""

    pass


class RuntimeInvocationFailed(PullatorError):
    """Raised when a container runtime command fails or cannot be launched."""

    def __init__(self, command: list[str], returncode: int | None = None) -> None:
        self.command = command
        self.returncode = returncode
        if returncode is None:
            message = f"Could not launch: {' '.join(command)}"
        else:
            message = f"Command exited with status {returncode}: {' '.join(command)}"
        super().__init__(message)


class ProfileNotFound(PullatorError):
    """Raised when a profile key is not tracked in the store."""

    pass


class ConfigError(PullatorError):
    """Raised when the config file cannot be read or parsed."""

    pass
