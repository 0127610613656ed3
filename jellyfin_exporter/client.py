"""
Jellyfin API client.

Only the two endpoints the exporter needs are modelled. Every request is a
plain authenticated GET with a fixed timeout and no retries: a failed
request fails the current scrape and the next scrape tries again.
"""

import logging
from typing import Any, Callable, Dict, NamedTuple, Optional

import requests

from .errors import ApiTimeout, DecodeError, RemoteError, TransportError

REQUEST_TIMEOUT = 10  # seconds
AUTH_HEADER = 'X-Emby-Token'


class ItemCounts(NamedTuple):
    movie_count: float
    series_count: float


class SystemInfo(NamedTuple):
    version: str


class Endpoint(NamedTuple):
    """A fixed API path and the function turning its JSON body into a result."""
    path: str
    decode: Callable[[str, Any], Any]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def decode_item_counts(url: str, body: Any) -> ItemCounts:
    """Extract movie and series counts from an /Items/Counts body.

    Counters the server leaves out are zero.
    """
    if not isinstance(body, dict):
        raise DecodeError(url, f"expected a JSON object, got {type(body).__name__}")

    counts: Dict[str, float] = {}
    for key, value in body.items():
        if value is None:
            value = 0
        if not _is_number(value):
            raise DecodeError(url, f"counter {key!r} is not a number: {value!r}")
        counts[key] = float(value)

    return ItemCounts(
        movie_count=counts.get('MovieCount', 0.0),
        series_count=counts.get('SeriesCount', 0.0),
    )


def decode_system_info(url: str, body: Any) -> SystemInfo:
    """Extract the server version from a /System/Info body.

    The key is matched case-insensitively since Jellyfin sends ``Version``.
    """
    if not isinstance(body, dict):
        raise DecodeError(url, f"expected a JSON object, got {type(body).__name__}")

    if 'version' in body:
        version = body['version']
    else:
        version = next((v for k, v in body.items() if k.lower() == 'version'), '')

    if version is None:
        version = ''
    if not isinstance(version, str):
        raise DecodeError(url, f"version is not a string: {version!r}")
    return SystemInfo(version=version)


ITEM_COUNTS = Endpoint('/Items/Counts', decode_item_counts)
SYSTEM_INFO = Endpoint('/System/Info', decode_system_info)


class JellyfinClient:
    def __init__(self, host: str, api_key: str, logger: Optional[logging.Logger] = None,
                 timeout: float = REQUEST_TIMEOUT):
        self.host = host.rstrip('/')
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)
        self.session = requests.Session()
        self.session.headers.update({
            AUTH_HEADER: api_key,
            'Accept': 'application/json'
        })

    def url_for(self, path: str) -> str:
        return self.host + path

    def fetch(self, path: str) -> Any:
        """GET ``path`` from the server and return the decoded JSON body."""
        url = self.url_for(path)
        self.logger.debug(f"GET api url={url}")

        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            raise ApiTimeout(url, f"no response within {self.timeout}s ({e})") from e
        except requests.exceptions.RequestException as e:
            raise TransportError(url, str(e)) from e

        try:
            if response.status_code != 200:
                raise RemoteError(url, response.status_code, response.reason or '')
            try:
                return response.json()
            except ValueError as e:
                raise DecodeError(url, f"invalid JSON body: {e}") from e
        finally:
            response.close()

    def get(self, endpoint: Endpoint) -> Any:
        """Fetch ``endpoint`` and decode its body into the endpoint's result type."""
        return endpoint.decode(self.url_for(endpoint.path), self.fetch(endpoint.path))

    def item_counts(self) -> ItemCounts:
        return self.get(ITEM_COUNTS)

    def system_info(self) -> SystemInfo:
        return self.get(SYSTEM_INFO)

    def close(self):
        self.session.close()
