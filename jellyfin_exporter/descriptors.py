"""Static identities of the metrics exported for a Jellyfin server."""

from typing import NamedTuple, Optional, Sequence, Tuple

from prometheus_client.core import GaugeMetricFamily

DEFAULT_NAMESPACE = 'jellyfin'


def build_fq_name(namespace: str, name: str, subsystem: str = '') -> str:
    """Join the non-empty parts with underscores."""
    return '_'.join(part for part in (namespace, subsystem, name) if part)


class MetricDescriptor(NamedTuple):
    name: str
    documentation: str
    labels: Tuple[str, ...] = ()

    def family(self, value: Optional[float] = None,
               label_values: Sequence[str] = ()) -> GaugeMetricFamily:
        """Build a gauge family for this descriptor.

        Without a value the family carries no samples, which is what
        ``describe()`` hands to the registry.
        """
        family = GaugeMetricFamily(self.name, self.documentation, labels=list(self.labels))
        if value is not None:
            family.add_metric(list(label_values), value)
        return family


class Descriptors(NamedTuple):
    version: MetricDescriptor
    movie_count: MetricDescriptor
    series_count: MetricDescriptor


def build_descriptors(namespace: str = DEFAULT_NAMESPACE) -> Descriptors:
    return Descriptors(
        version=MetricDescriptor(
            build_fq_name(namespace, 'version'),
            "always 1. label 'version' contains Jellyfin server version",
            ('version',),
        ),
        movie_count=MetricDescriptor(
            build_fq_name(namespace, 'movieCount'),
            'Number of movies in the Library',
        ),
        series_count=MetricDescriptor(
            build_fq_name(namespace, 'seriesCount'),
            'Number of series in the Library',
        ),
    )
