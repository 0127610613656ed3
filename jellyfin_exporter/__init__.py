"""Prometheus exporter for Jellyfin media servers."""

__version__ = '0.1.0'
