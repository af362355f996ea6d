"""Exceptions raised by the registry access layer."""


class RegistryError(Exception):
    """Base class for failures talking to the registry."""


class HttpStatusError(RegistryError):
    """The registry answered with a non-2xx status."""

    def __init__(self, status_code: int, url: str) -> None:
        super().__init__(f"HTTP {status_code} for {url}")
        self.status_code = status_code
        self.url = url


class RequestTimeoutError(RegistryError, TimeoutError):
    """A request did not settle before its deadline."""


class NetworkError(RegistryError):
    """The request failed at the transport level."""
