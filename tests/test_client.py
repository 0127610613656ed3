"""Tests for the Jellyfin API client."""

import logging
from unittest.mock import patch

import pytest
import requests

from jellyfin_exporter.client import (
    ITEM_COUNTS, REQUEST_TIMEOUT, SYSTEM_INFO, ItemCounts, JellyfinClient, SystemInfo,
)
from jellyfin_exporter.errors import ApiTimeout, DecodeError, RemoteError, TransportError

from .conftest import make_response


@pytest.fixture
def client(logger):
    client = JellyfinClient('http://jellyfin.local:8096/', 'secret-key', logger=logger)
    yield client
    client.close()


def test_fetch_joins_host_and_path(client):
    with patch.object(client.session, 'get', return_value=make_response(body={})) as get:
        client.fetch('/System/Info')

    get.assert_called_once_with('http://jellyfin.local:8096/System/Info', timeout=REQUEST_TIMEOUT)


def test_trailing_slashes_are_stripped_from_host():
    client = JellyfinClient('http://jellyfin.local///', 'key')
    assert client.url_for('/Items/Counts') == 'http://jellyfin.local/Items/Counts'


def test_api_key_header_is_sent(client):
    assert client.session.headers['X-Emby-Token'] == 'secret-key'


def test_default_timeout_is_ten_seconds():
    assert REQUEST_TIMEOUT == 10
    assert JellyfinClient('http://x', 'k').timeout == 10


def test_fetch_returns_decoded_body(client):
    body = {'MovieCount': 3}
    with patch.object(client.session, 'get', return_value=make_response(body=body)):
        assert client.fetch('/Items/Counts') == body


def test_fetch_logs_requested_url(client, caplog):
    with caplog.at_level(logging.DEBUG, logger='jellyfin_exporter.test'):
        with patch.object(client.session, 'get', return_value=make_response(body={})):
            client.fetch('/Items/Counts')

    assert 'http://jellyfin.local:8096/Items/Counts' in caplog.text


def test_timeout_raises_api_timeout(client):
    with patch.object(client.session, 'get', side_effect=requests.exceptions.ReadTimeout('slow')):
        with pytest.raises(ApiTimeout) as excinfo:
            client.fetch('/System/Info')

    assert excinfo.value.url == 'http://jellyfin.local:8096/System/Info'


def test_connection_failure_raises_transport_error(client):
    with patch.object(client.session, 'get', side_effect=requests.exceptions.ConnectionError('refused')):
        with pytest.raises(TransportError):
            client.fetch('/System/Info')


@pytest.mark.parametrize('status_code, reason', [(500, 'Internal Server Error'), (401, 'Unauthorized'), (204, 'No Content')])
def test_non_200_raises_remote_error(client, status_code, reason):
    response = make_response(status_code=status_code, reason=reason)
    with patch.object(client.session, 'get', return_value=response) as get:
        with pytest.raises(RemoteError) as excinfo:
            client.fetch('/System/Info')

    assert excinfo.value.status_code == status_code
    assert excinfo.value.reason == reason
    assert str(status_code) in str(excinfo.value)
    assert get.call_count == 1
    response.json.assert_not_called()


def test_invalid_json_raises_decode_error(client):
    response = make_response(body=ValueError('Expecting value'))
    with patch.object(client.session, 'get', return_value=response):
        with pytest.raises(DecodeError):
            client.fetch('/System/Info')


def test_item_counts_reads_movie_and_series_counts(client):
    body = {'MovieCount': 120, 'SeriesCount': 7, 'EpisodeCount': 300}
    with patch.object(client.session, 'get', return_value=make_response(body=body)):
        assert client.item_counts() == ItemCounts(120, 7)


def test_item_counts_missing_keys_are_zero(client):
    with patch.object(client.session, 'get', return_value=make_response(body={'EpisodeCount': 4})):
        assert client.item_counts() == ItemCounts(0, 0)


def test_item_counts_null_counter_is_zero():
    assert ITEM_COUNTS.decode('u', {'MovieCount': None, 'SeriesCount': 2}) == ItemCounts(0, 2)


@pytest.mark.parametrize('body', [[1, 2], 'text', {'MovieCount': 'many'}, {'SeriesCount': True}])
def test_item_counts_schema_mismatch_raises_decode_error(body):
    with pytest.raises(DecodeError):
        ITEM_COUNTS.decode('http://x/Items/Counts', body)


def test_system_info_reads_version(client):
    with patch.object(client.session, 'get', return_value=make_response(body={'version': '10.8.5'})):
        assert client.system_info() == SystemInfo('10.8.5')


def test_system_info_version_key_is_case_insensitive():
    body = {'ServerName': 'media', 'Version': '10.9.1'}
    assert SYSTEM_INFO.decode('u', body) == SystemInfo('10.9.1')


def test_system_info_without_version_is_empty():
    assert SYSTEM_INFO.decode('u', {'ServerName': 'media'}) == SystemInfo('')


@pytest.mark.parametrize('body', [['10.8.5'], {'version': 10.8}])
def test_system_info_schema_mismatch_raises_decode_error(body):
    with pytest.raises(DecodeError):
        SYSTEM_INFO.decode('http://x/System/Info', body)
