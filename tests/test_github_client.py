from unittest.mock import MagicMock, patch

import pytest
import requests

from ghworld.data.github.exceptions import RateLimitError, UpstreamUnavailableError
from ghworld.data.github.github_client import GitHubClient


@pytest.fixture
def client():
    return GitHubClient(token="fake")


def test_init_headers(client):
    assert "Authorization" in client.session.headers
    assert client.headers["User-Agent"] == "ghworld-app"


@patch("ghworld.data.github.github_client.requests.Session.get")
def test_make_request_tracks_budget(mock_get, client):
    mock_resp = MagicMock(status_code=200)
    mock_resp.headers = {'X-RateLimit-Remaining': '10'}
    mock_get.return_value = mock_resp
    response = client.make_request("https://api.github.com/test")
    assert response.status_code == 200
    assert client.core_remaining == 10
    assert mock_get.call_args.kwargs["timeout"] == 10


@patch("ghworld.data.github.github_client.requests.Session.get")
def test_make_request_transport_error_returns_none(mock_get, client):
    mock_get.side_effect = requests.exceptions.Timeout("slow")
    assert client.make_request("url") is None
    assert mock_get.call_count == 1


@patch("ghworld.data.github.github_client.requests.Session.get")
def test_get_public_events(mock_get, client):
    mock_resp = MagicMock(status_code=200)
    mock_resp.headers = {'X-RateLimit-Remaining': '4200'}
    mock_resp.json.return_value = [{"type": "PushEvent"}]
    mock_get.return_value = mock_resp

    events, remaining = client.get_public_events(per_page=100)

    assert events == [{"type": "PushEvent"}]
    assert remaining == 4200
    assert mock_get.call_args.kwargs["params"] == {"per_page": 100}


@pytest.mark.parametrize("status", [403, 429])
@patch("ghworld.data.github.github_client.requests.Session.get")
def test_get_public_events_rate_limited(mock_get, status, client):
    mock_resp = MagicMock(status_code=status)
    mock_resp.headers = {'X-RateLimit-Remaining': '0', 'X-RateLimit-Reset': '123456789'}
    mock_get.return_value = mock_resp

    with pytest.raises(RateLimitError) as excinfo:
        client.get_public_events()

    assert excinfo.value.reset_at == 123456789
    assert mock_get.call_count == 1


@patch("ghworld.data.github.github_client.requests.Session.get")
def test_get_public_events_server_error(mock_get, client):
    mock_resp = MagicMock(status_code=502)
    mock_resp.headers = {}
    mock_get.return_value = mock_resp

    with pytest.raises(UpstreamUnavailableError):
        client.get_public_events()


@patch("ghworld.data.github.github_client.requests.Session.get")
def test_get_public_events_unreachable(mock_get, client):
    mock_get.side_effect = requests.exceptions.ConnectionError("down")

    with pytest.raises(UpstreamUnavailableError):
        client.get_public_events()


@patch("ghworld.data.github.github_client.requests.Session.get")
def test_get_user_location_success(mock_get, client):
    mock_resp = MagicMock(status_code=200)
    mock_resp.headers = {}
    mock_resp.json.return_value = {"location": " Earth "}
    mock_get.return_value = mock_resp
    assert client.get_user_location("user") == "Earth"


@patch("ghworld.data.github.github_client.requests.Session.get")
def test_get_user_location_missing(mock_get, client):
    mock_resp = MagicMock(status_code=200)
    mock_resp.headers = {}
    mock_resp.json.return_value = {"location": None}
    mock_get.return_value = mock_resp
    assert client.get_user_location("user") == ""


@patch("ghworld.data.github.github_client.requests.Session.get")
def test_get_user_info_gone(mock_get, client):
    mock_resp = MagicMock(status_code=404)
    mock_resp.headers = {}
    mock_get.return_value = mock_resp
    assert client.get_user_info("unknown") == {}
    assert client.get_user_location("unknown") == ""


@patch("ghworld.data.github.github_client.requests.Session.get")
def test_get_user_location_failure(mock_get, client):
    mock_resp = MagicMock(status_code=502)
    mock_resp.headers = {}
    mock_get.return_value = mock_resp
    assert client.get_user_info("user") is None
    assert client.get_user_location("user") is None


@patch("ghworld.data.github.github_client.requests.Session.get")
def test_get_user_location_timeout(mock_get, client):
    mock_get.side_effect = requests.exceptions.Timeout("slow")
    assert client.get_user_location("user") is None


@patch("ghworld.data.github.github_client.requests.Session.get")
def test_get_repository_gone_vs_failure(mock_get, client):
    gone = MagicMock(status_code=404)
    gone.headers = {}
    broken = MagicMock(status_code=500)
    broken.headers = {}
    mock_get.side_effect = [gone, broken]

    assert client.get_repository("o/deleted") == {}
    assert client.get_repository("o/flaky") is None
