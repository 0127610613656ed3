"""Shared pytest configuration and fixtures."""

import logging
from unittest.mock import Mock

import pytest
from prometheus_client import CollectorRegistry

from jellyfin_exporter.client import ItemCounts, SystemInfo


class FakeClient:
    """Stands in for JellyfinClient; each method returns or raises what it is given."""

    def __init__(self, counts=None, info=None):
        self.counts = counts if counts is not None else ItemCounts(120, 0)
        self.info = info if info is not None else SystemInfo('10.8.5')
        self.calls = []

    def _answer(self, name, outcome):
        self.calls.append(name)
        if callable(outcome):
            outcome = outcome()
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def item_counts(self):
        return self._answer('item_counts', self.counts)

    def system_info(self):
        return self._answer('system_info', self.info)


def make_response(status_code=200, body=None, reason='OK'):
    response = Mock()
    response.status_code = status_code
    response.reason = reason
    if isinstance(body, Exception):
        response.json.side_effect = body
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def logger():
    """Create logger for tests."""
    return logging.getLogger('jellyfin_exporter.test')


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def registry():
    return CollectorRegistry()
