"""Exceptions raised by the Jellyfin exporter."""

from typing import List


class JellyfinExporterError(Exception):
    """Base class for all exporter errors."""


class ConfigError(JellyfinExporterError):
    """A required option is missing or an option value is invalid."""


class ApiError(JellyfinExporterError):
    """A single request to the Jellyfin API failed."""

    def __init__(self, url: str, message: str):
        super().__init__(f"{url}: {message}")
        self.url = url


class ApiTimeout(ApiError):
    """The request did not complete within the request timeout."""


class TransportError(ApiError):
    """The request could not be sent or the connection broke."""


class RemoteError(ApiError):
    """The server answered with a status other than 200."""

    def __init__(self, url: str, status_code: int, reason: str):
        super().__init__(url, f"jellyfin api response {status_code} {reason}")
        self.status_code = status_code
        self.reason = reason


class DecodeError(ApiError):
    """The response body is not JSON or does not have the expected shape."""


class ScrapeError(JellyfinExporterError):
    """One collection failed; holds the API errors that caused it."""

    def __init__(self, errors: List[ApiError]):
        self.errors = list(errors)
        details = '; '.join(str(error) for error in self.errors)
        super().__init__(f"scrape failed: {details}")
