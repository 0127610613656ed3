"""
Prometheus collector for a Jellyfin server.

Registered with a prometheus_client registry, the collector is called once
per scrape of /metrics. Each call queries the server afresh: both API
requests run side by side on a small thread pool and no sample is emitted
until both have finished. If either request fails the whole scrape fails
with a ScrapeError and nothing is emitted.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Iterator, NamedTuple, Optional

from prometheus_client.core import GaugeMetricFamily

from .client import ITEM_COUNTS, SYSTEM_INFO, JellyfinClient
from .descriptors import DEFAULT_NAMESPACE, build_descriptors
from .errors import ApiError, ScrapeError


class ScrapeResult(NamedTuple):
    version: str
    movie_count: float
    series_count: float


class JellyfinCollector:
    """Exports the Jellyfin version plus movie and series counts."""

    def __init__(self, client: JellyfinClient, namespace: str = DEFAULT_NAMESPACE,
                 logger: Optional[logging.Logger] = None):
        self.client = client
        self.descriptors = build_descriptors(namespace)
        self.logger = logger or logging.getLogger(__name__)

    def describe(self) -> Iterator[GaugeMetricFamily]:
        for descriptor in self.descriptors:
            yield descriptor.family()

    def scrape(self) -> ScrapeResult:
        """Query both endpoints concurrently and combine their results.

        Waits for both requests even when one fails early.
        """
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix='jellyfin-scrape') as pool:
            counts_future = pool.submit(self.client.item_counts)
            info_future = pool.submit(self.client.system_info)
            wait([counts_future, info_future])

        errors = []
        for endpoint, future in ((ITEM_COUNTS, counts_future), (SYSTEM_INFO, info_future)):
            error = future.exception()
            if error is None:
                continue
            if not isinstance(error, ApiError):
                raise error
            self.logger.error(f"Error fetching {endpoint.path}: {error}")
            errors.append(error)

        if errors:
            raise ScrapeError(errors)

        counts = counts_future.result()
        info = info_future.result()
        return ScrapeResult(
            version=info.version,
            movie_count=counts.movie_count,
            series_count=counts.series_count,
        )

    def collect(self) -> Iterator[GaugeMetricFamily]:
        result = self.scrape()
        self.logger.debug(
            f"Scrape complete: version={result.version}, movies={result.movie_count}, "
            f"series={result.series_count}"
        )

        yield self.descriptors.movie_count.family(result.movie_count)
        yield self.descriptors.series_count.family(result.series_count)
        yield self.descriptors.version.family(1, [result.version])
