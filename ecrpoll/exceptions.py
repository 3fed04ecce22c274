"""Exception types raised by ecrpoll."""


class PollerError(Exception):
    """Base class for all polling failures."""


class ConfigError(PollerError, ValueError):
    """Missing or malformed configuration."""


class AuthConfigError(PollerError):
    """Credentials or region could not be resolved into a registry client."""


class ListError(PollerError, RuntimeError):
    """Listing images from a repository failed."""

    def __init__(self, repository_name: str, message: str):
        super().__init__(f"{message} (repository: {repository_name})")
        self.repository_name = repository_name


class OutputIOError(PollerError, IOError):
    """Reading, parsing or writing the results file failed."""
