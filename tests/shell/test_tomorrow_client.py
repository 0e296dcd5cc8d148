"""Tests for the Tomorrow.io API client."""

from urllib.parse import parse_qs, urlparse

import pytest
import requests
import responses

from src.shell.tomorrow_client import EventsQueryParams, TomorrowClient


EVENTS_URL = "https://api.tomorrow.io/v4/events"

SAMPLE_RESPONSE = {
    "data": {
        "events": [
            {
                "insight": "floods",
                "startTime": "2024-05-01T12:00:00Z",
                "endTime": "2024-05-01T18:00:00Z",
                "severity": "severe",
                "eventValues": {
                    "title": "Flood Warning",
                    "description": "Flooding expected.",
                    "location": {"type": "Point", "coordinates": [-122.42, 37.8]},
                },
            }
        ]
    }
}


@pytest.fixture
def client():
    return TomorrowClient(insights=("floods", "wind"))


class TestBuildParams:
    """Tests for query parameter construction."""

    def test_basic_params(self, client):
        params = client._build_params(
            EventsQueryParams(location="37.77,-122.42", insights=("floods", "wind")),
            "test-key",
        )

        assert params == {
            "location": "37.77,-122.42",
            "apikey": "test-key",
            "insights": "floods,wind",
        }

    def test_buffer_included_when_set(self, client):
        params = client._build_params(
            EventsQueryParams(location="0,0", insights=(), buffer=25.0),
            "k",
        )

        assert params["buffer"] == "25.0"
        assert "insights" not in params

    def test_events_url_strips_trailing_slash(self):
        client = TomorrowClient(base_url="https://example.com/v4/")
        assert client.events_url == "https://example.com/v4/events"


class TestFetchEvents:
    """Tests for HTTP behaviour."""

    @responses.activate
    def test_returns_json(self, client):
        responses.add(responses.GET, EVENTS_URL, json=SAMPLE_RESPONSE, status=200)

        data = client.fetch_raw_alerts("37.77,-122.42", "test-key")

        assert data == SAMPLE_RESPONSE

    @responses.activate
    def test_sends_query_params(self, client):
        responses.add(responses.GET, EVENTS_URL, json={"data": {"events": []}}, status=200)

        client.fetch_raw_alerts("37.77,-122.42", "test-key")

        query = parse_qs(urlparse(responses.calls[0].request.url).query)
        assert query["location"] == ["37.77,-122.42"]
        assert query["apikey"] == ["test-key"]
        assert query["insights"] == ["floods,wind"]

    @pytest.mark.parametrize("status", [401, 404, 429, 500])
    @responses.activate
    def test_error_status_raises_http_error(self, client, status):
        responses.add(responses.GET, EVENTS_URL, json={"message": "nope"}, status=status)

        with pytest.raises(requests.HTTPError) as exc_info:
            client.fetch_raw_alerts("37.77,-122.42", "test-key")

        assert exc_info.value.response.status_code == status

    @responses.activate
    def test_connection_error_propagates(self, client):
        responses.add(
            responses.GET,
            EVENTS_URL,
            body=requests.ConnectionError("Connection refused"),
        )

        with pytest.raises(requests.ConnectionError):
            client.fetch_raw_alerts("37.77,-122.42", "test-key")

    @responses.activate
    def test_unexpected_body_is_returned_as_is(self, client):
        responses.add(responses.GET, EVENTS_URL, json={"data": None}, status=200)

        assert client.fetch_raw_alerts("0,0", "k") == {"data": None}
