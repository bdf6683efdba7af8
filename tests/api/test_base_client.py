"""Tests for the base API client."""

from unittest import mock

import pytest
import requests

from mlbv.api.base_client import BaseAPIClient
from mlbv.api.exceptions import ConnectionFailedError, NetworkError, NetworkTimeoutError


class ExampleClient(BaseAPIClient):
    BASE_URL = "https://statsapi.mlb.com"


class TestBaseAPIClient:
    """Tests for BaseAPIClient class."""

    @pytest.fixture
    def client(self):
        return ExampleClient(timeout=5)

    def test_client_initialization(self, client):
        """Client sets timeout and default headers."""
        assert client.timeout == 5
        assert client.session.headers["Accept"] == "application/json"
        assert "Mozilla" in client.session.headers["User-Agent"]

    def test_rejects_non_positive_timeout(self):
        """A zero timeout is rejected."""
        with pytest.raises(ValueError):
            ExampleClient(timeout=0)

    def test_get_full_url(self, client):
        """_get_full_url joins relative paths and passes absolute URLs through."""
        assert client._get_full_url("/api/v1/schedule") == (
            "https://statsapi.mlb.com/api/v1/schedule"
        )
        assert client._get_full_url("api/v1/schedule") == (
            "https://statsapi.mlb.com/api/v1/schedule"
        )
        assert client._get_full_url("https://example.com/x") == "https://example.com/x"

    def test_get_full_url_requires_base_url(self):
        """Relative endpoints need BASE_URL."""
        client = BaseAPIClient()
        with pytest.raises(ValueError, match="BASE_URL"):
            client._get_full_url("/path")

    def test_request_passes_timeout(self, client):
        """Every request carries the configured timeout."""
        with mock.patch.object(client.session, "request") as mock_request:
            mock_request.return_value = mock.Mock(status_code=200)

            response = client.get("/api/v1/schedule", params={"sportId": 1})

            assert response.status_code == 200
            kwargs = mock_request.call_args[1]
            assert kwargs["timeout"] == 5
            assert kwargs["params"] == {"sportId": 1}

    def test_non_200_is_returned_not_raised(self, client):
        """Status handling is left to subclasses."""
        with mock.patch.object(client.session, "request") as mock_request:
            mock_request.return_value = mock.Mock(status_code=500)

            assert client.get("/x").status_code == 500

    def test_post_sets_json_content_type(self, client):
        """post sends JSON with merged headers."""
        with mock.patch.object(client.session, "request") as mock_request:
            mock_request.return_value = mock.Mock(status_code=200)

            client.post("/x", json_data={"a": 1}, headers={"Origin": "https://www.mlb.com"})

            kwargs = mock_request.call_args[1]
            assert kwargs["json"] == {"a": 1}
            assert kwargs["headers"]["Content-Type"] == "application/json"
            assert kwargs["headers"]["Origin"] == "https://www.mlb.com"

    def test_post_form_sets_form_content_type(self, client):
        with mock.patch.object(client.session, "request") as mock_request:
            mock_request.return_value = mock.Mock(status_code=200)

            client.post_form("/token", data={"grant_type": "refresh_token"})

            kwargs = mock_request.call_args[1]
            assert kwargs["data"] == {"grant_type": "refresh_token"}
            assert kwargs["headers"]["Content-Type"] == "application/x-www-form-urlencoded"

    @pytest.mark.parametrize(
        "raised, expected",
        [
            (requests.exceptions.Timeout("slow"), NetworkTimeoutError),
            (requests.exceptions.ConnectionError("refused"), ConnectionFailedError),
            (requests.exceptions.TooManyRedirects("loop"), NetworkError),
        ],
    )
    def test_transport_errors_are_mapped(self, client, raised, expected):
        """requests exceptions become NetworkError subclasses."""
        with mock.patch.object(client.session, "request", side_effect=raised):
            with pytest.raises(expected):
                client.get("/x")

    def test_context_manager_closes_session(self):
        client = ExampleClient()
        with mock.patch.object(client.session, "close") as mock_close:
            with client:
                pass
            mock_close.assert_called_once()
