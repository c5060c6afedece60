# tests/test_lrclib_client.py
"""Test the LRCLIB client's request building and status mapping"""

import pytest
import requests
from unittest.mock import Mock

from lrcsync import __version__
from lrcsync.exceptions import SchemaError, ServiceError, TransportError
from lrcsync.lyrics.lrclib import LrclibClient, get_lrclib_client, reset_lrclib_client
from lrcsync.lyrics.models import LookupQuery, LyricsCandidate


def make_response(status_code=200, body=None, json_error=None):
    """Build a fake requests.Response"""
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.url = "https://lrclib.example/api/x"
    if json_error:
        response.json.side_effect = json_error
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def client():
    """Client with a mocked session"""
    client = LrclibClient(base_url="https://lrclib.example/", timeout=7.0)
    client.session = Mock()
    return client


@pytest.fixture
def query():
    return LookupQuery("Song", "Artist", "Album", 200.0)


class TestLrclibClient:
    """Test client construction"""

    def test_default_headers(self):
        """Test that both identification headers are set"""
        client = LrclibClient()
        agent = client.session.headers['User-Agent']
        assert agent.startswith(f"lrcsync/{__version__} (")
        assert client.session.headers['Lrclib-Client'] == agent
        client.close()

    def test_custom_user_agent(self):
        """Test that a configured user agent is used as is"""
        with LrclibClient(user_agent="my-player/1.0") as client:
            assert client.session.headers['User-Agent'] == "my-player/1.0"

    def test_trailing_slash_is_stripped(self, client):
        """Test base URL normalization"""
        assert client.base_url == "https://lrclib.example"


class TestExactGet:
    """Test the exact lookup endpoint"""

    def test_request_shape(self, client, query, sample_record):
        """Test URL, parameters and timeout of the exact lookup"""
        client.session.get.return_value = make_response(body=sample_record)
        client.exact_get(query)
        client.session.get.assert_called_once_with(
            "https://lrclib.example/api/get",
            params=[
                ("track_name", "Song"),
                ("artist_name", "Artist"),
                ("album_name", "Album"),
                ("duration", "200"),
            ],
            timeout=7.0,
        )

    def test_success(self, client, query, sample_record):
        """Test that a record is decoded into a candidate"""
        client.session.get.return_value = make_response(body=sample_record)
        candidate = client.exact_get(query)
        assert isinstance(candidate, LyricsCandidate)
        assert candidate.id == 3396226
        assert candidate.duration == 233.0
        assert candidate.has_synced_lyrics

    def test_not_found(self, client, query):
        """Test that a 404 is a miss, not an error"""
        client.session.get.return_value = make_response(status_code=404)
        assert client.exact_get(query) is None

    @pytest.mark.parametrize("status", [400, 429, 500, 503])
    def test_service_error(self, client, query, status):
        """Test that other non-success statuses raise ServiceError"""
        client.session.get.return_value = make_response(status_code=status)
        with pytest.raises(ServiceError) as exc_info:
            client.exact_get(query)
        assert exc_info.value.status_code == status

    def test_transport_error(self, client, query):
        """Test that connection failures raise TransportError"""
        client.session.get.side_effect = requests.exceptions.ConnectionError("refused")
        with pytest.raises(TransportError):
            client.exact_get(query)

    def test_timeout(self, client, query):
        """Test that timeouts raise TransportError"""
        client.session.get.side_effect = requests.exceptions.Timeout("slow")
        with pytest.raises(TransportError):
            client.exact_get(query)

    def test_invalid_json(self, client, query):
        """Test that an undecodable body raises SchemaError"""
        client.session.get.return_value = make_response(json_error=ValueError("Expecting value"))
        with pytest.raises(SchemaError) as exc_info:
            client.exact_get(query)
        assert "did the api schema change?" in str(exc_info.value)

    def test_missing_field(self, client, query, sample_record):
        """Test that a record without a required field raises SchemaError"""
        del sample_record['duration']
        client.session.get.return_value = make_response(body=sample_record)
        with pytest.raises(SchemaError):
            client.exact_get(query)

    def test_wrong_field_type(self, client, query, sample_record):
        """Test that a wrongly typed field raises SchemaError"""
        sample_record['duration'] = "233"
        client.session.get.return_value = make_response(body=sample_record)
        with pytest.raises(SchemaError):
            client.exact_get(query)

    def test_list_body_is_schema_error(self, client, query, sample_record):
        """Test that the exact lookup rejects a list"""
        client.session.get.return_value = make_response(body=[sample_record])
        with pytest.raises(SchemaError):
            client.exact_get(query)

    def test_null_lyrics_are_allowed(self, client, query, sample_record):
        """Test that absent lyrics decode as None"""
        sample_record.update(instrumental=True, plainLyrics=None, syncedLyrics=None)
        client.session.get.return_value = make_response(body=sample_record)
        candidate = client.exact_get(query)
        assert candidate.instrumental
        assert not candidate.has_synced_lyrics


class TestFuzzySearch:
    """Test the search endpoint"""

    def test_request_shape(self, client, sample_record):
        """Test that the search omits duration and an empty artist"""
        client.session.get.return_value = make_response(body=[sample_record])
        client.fuzzy_search(LookupQuery("Song", "", None, 200.0))
        client.session.get.assert_called_once_with(
            "https://lrclib.example/api/search",
            params=[("track_name", "Song")],
            timeout=7.0,
        )

    def test_results_keep_order(self, client, query, sample_record):
        """Test that candidates come back in service order"""
        second = dict(sample_record, id=2, duration=180.5)
        client.session.get.return_value = make_response(body=[sample_record, second])
        candidates = client.fuzzy_search(query)
        assert [c.id for c in candidates] == [3396226, 2]
        assert candidates[1].duration == 180.5

    def test_empty_list(self, client, query):
        """Test that an empty result is returned as an empty list"""
        client.session.get.return_value = make_response(body=[])
        assert client.fuzzy_search(query) == []

    def test_not_found(self, client, query):
        """Test that a 404 maps to None"""
        client.session.get.return_value = make_response(status_code=404)
        assert client.fuzzy_search(query) is None

    def test_object_body_is_schema_error(self, client, query, sample_record):
        """Test that the search rejects a single object"""
        client.session.get.return_value = make_response(body=sample_record)
        with pytest.raises(SchemaError):
            client.fuzzy_search(query)

    def test_bad_record_in_list(self, client, query, sample_record):
        """Test that one malformed record fails the whole response"""
        client.session.get.return_value = make_response(body=[sample_record, {"id": 1}])
        with pytest.raises(SchemaError):
            client.fuzzy_search(query)


class TestClientFactory:
    """Test the shared client"""

    def test_built_from_settings(self, monkeypatch):
        """Test that the shared client uses the configured URL"""
        monkeypatch.setenv("LRCLIB_URL", "https://mirror.example/")
        client = get_lrclib_client()
        assert client.base_url == "https://mirror.example"
        assert get_lrclib_client() is client
        reset_lrclib_client()
        assert get_lrclib_client() is not client
