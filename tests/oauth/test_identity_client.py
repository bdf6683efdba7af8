"""Tests for the identity provider client."""

from datetime import datetime, timedelta, timezone
from unittest import mock
from urllib.parse import parse_qs, urlparse

import pytest
import requests

from mlbv.oauth.config import IdentityConfig
from mlbv.oauth.credential_store import Credentials
from mlbv.oauth.exceptions import (
    AuthError,
    AuthNetworkError,
    AuthorizationError,
    InvalidGrantError,
    RefreshExpiredError,
)
from mlbv.oauth.identity_client import IdentityClient
from mlbv.oauth.pkce import derive_code_challenge

TOKEN_BODY = {
    "access_token": "new_access",
    "refresh_token": "new_refresh",
    "token_type": "Bearer",
    "expires_in": 3600,
    "scope": "openid offline_access",
}


class TestIdentityClient:
    """Tests for IdentityClient class."""

    @pytest.fixture
    def client(self, identity_config):
        return IdentityClient(identity_config)

    def test_begin_login_builds_pkce_request(self, client):
        """The authorization URL carries the S256 challenge of the kept verifier."""
        request = client.begin_login()

        params = parse_qs(urlparse(request.url).query)
        assert request.url.startswith(client.config.authorization_url)
        assert params["client_id"] == ["test_client_id"]
        assert params["response_type"] == ["code"]
        assert params["response_mode"] == ["okta_post_message"]
        assert params["code_challenge_method"] == ["S256"]
        assert params["code_challenge"] == [derive_code_challenge(request.code_verifier)]
        assert params["state"] == [request.state]
        assert params["nonce"] == [request.nonce]
        assert request.code_verifier not in request.url

    def test_begin_login_browser_mode_uses_loopback(self, tmp_path):
        config = IdentityConfig(
            client_id="cid",
            login_mode="browser",
            callback_port=9100,
            credentials_file=str(tmp_path / "s.json"),
        )
        request = IdentityClient(config).begin_login()

        params = parse_qs(urlparse(request.url).query)
        assert params["response_mode"] == ["query"]
        assert request.redirect_uri == "http://localhost:9100/oauth/callback"

    def test_each_login_gets_fresh_verifier(self, client):
        assert client.begin_login().code_verifier != client.begin_login().code_verifier

    def test_client_id_discovered_and_cached(self, tmp_path, response_factory):
        config = IdentityConfig(credentials_file=str(tmp_path / "s.json"))
        client = IdentityClient(config)
        script = 'x={production:{clientId:"0oa_discovered",issuer:"..."}}'

        with mock.patch.object(
            client.session,
            "request",
            return_value=response_factory(200, text=script),
        ) as mock_request:
            assert client.get_client_id() == "0oa_discovered"
            assert client.get_client_id() == "0oa_discovered"

        mock_request.assert_called_once()

    def test_client_id_missing_from_script(self, tmp_path, response_factory):
        client = IdentityClient(IdentityConfig(credentials_file=str(tmp_path / "s.json")))

        with mock.patch.object(
            client.session, "request", return_value=response_factory(200, text="nothing")
        ):
            with pytest.raises(AuthorizationError):
                client.get_client_id()

    def test_complete_login_success(self, client, response_factory):
        with mock.patch.object(
            client.session, "request", return_value=response_factory(200, TOKEN_BODY)
        ) as mock_request:
            creds = client.complete_login("code_1", "verifier_1", device_id="device-1")

        assert creds.access_token == "new_access"
        assert creds.refresh_token == "new_refresh"
        assert creds.device_id == "device-1"
        assert creds.expires_at > datetime.now(timezone.utc) + timedelta(minutes=59)

        data = mock_request.call_args[1]["data"]
        assert data["grant_type"] == "authorization_code"
        assert data["code"] == "code_1"
        assert data["code_verifier"] == "verifier_1"

    def test_complete_login_invalid_grant(self, client, response_factory):
        body = {"error": "invalid_grant", "error_description": "PKCE verification failed"}
        with mock.patch.object(
            client.session, "request", return_value=response_factory(400, body)
        ):
            with pytest.raises(InvalidGrantError, match="invalid_grant"):
                client.complete_login("code_1", "wrong_verifier")

    def test_complete_login_server_error(self, client, response_factory):
        with mock.patch.object(
            client.session, "request", return_value=response_factory(500, text="oops")
        ):
            with pytest.raises(AuthError):
                client.complete_login("code_1", "verifier_1")

    def test_missing_expires_in_uses_default_lifetime(self, client, response_factory):
        body = dict(TOKEN_BODY)
        del body["expires_in"]
        with mock.patch.object(
            client.session, "request", return_value=response_factory(200, body)
        ):
            creds = client.complete_login("code_1", "verifier_1")

        remaining = (creds.expires_at - datetime.now(timezone.utc)).total_seconds()
        assert 290 <= remaining <= 300

    def test_network_failure_is_auth_network_error(self, client):
        with mock.patch.object(
            client.session, "request", side_effect=requests.exceptions.ConnectionError("down")
        ):
            with pytest.raises(AuthNetworkError):
                client.complete_login("code_1", "verifier_1")

    def test_refresh_success(self, client, response_factory, expiring_credentials):
        with mock.patch.object(
            client.session, "request", return_value=response_factory(200, TOKEN_BODY)
        ) as mock_request:
            refreshed = client.refresh(expiring_credentials)

        assert refreshed.access_token == "new_access"
        assert refreshed.device_id == expiring_credentials.device_id
        data = mock_request.call_args[1]["data"]
        assert data["grant_type"] == "refresh_token"
        assert data["refresh_token"] == "refresh_token_456"

    def test_refresh_keeps_refresh_token_when_not_rotated(
        self, client, response_factory, expiring_credentials
    ):
        body = dict(TOKEN_BODY)
        del body["refresh_token"]
        with mock.patch.object(
            client.session, "request", return_value=response_factory(200, body)
        ):
            refreshed = client.refresh(expiring_credentials)

        assert refreshed.refresh_token == "refresh_token_456"

    def test_refresh_rejected(self, client, response_factory, expiring_credentials):
        with mock.patch.object(
            client.session,
            "request",
            return_value=response_factory(400, {"error": "invalid_grant"}),
        ):
            with pytest.raises(RefreshExpiredError):
                client.refresh(expiring_credentials)

    def test_refresh_without_refresh_token(self, client):
        with pytest.raises(RefreshExpiredError):
            client.refresh(Credentials(access_token="a"))

    def test_authenticate_password(self, client, response_factory):
        body = {"status": "SUCCESS", "sessionToken": "okta_session"}
        with mock.patch.object(
            client.session, "request", return_value=response_factory(200, body)
        ) as mock_request:
            token = client.authenticate_password("fan@example.com", "hunter2")

        assert token == "okta_session"
        assert mock_request.call_args[1]["json"]["username"] == "fan@example.com"

    def test_authenticate_password_rejected(self, client, response_factory):
        with mock.patch.object(
            client.session, "request", return_value=response_factory(401, {})
        ):
            with pytest.raises(InvalidGrantError):
                client.authenticate_password("fan@example.com", "wrong")

    def test_authenticate_password_mfa_required(self, client, response_factory):
        with mock.patch.object(
            client.session,
            "request",
            return_value=response_factory(200, {"status": "MFA_REQUIRED"}),
        ):
            with pytest.raises(AuthorizationError, match="MFA_REQUIRED"):
                client.authenticate_password("fan@example.com", "hunter2")

    def test_authorize_with_session_token(self, client, response_factory):
        request = client.begin_login()
        page = (
            "<script>data.code = 'auth\\x2Dcode';"
            f"data.state = '{request.state}';</script>"
        )
        with mock.patch.object(
            client.session, "request", return_value=response_factory(200, text=page)
        ) as mock_request:
            code = client.authorize_with_session_token(request, "okta_session")

        assert code == "auth-code"
        assert mock_request.call_args[1]["params"] == {"sessionToken": "okta_session"}

    def test_authorize_with_session_token_state_mismatch(self, client, response_factory):
        request = client.begin_login()
        page = "<script>data.code = 'c';data.state = 'forged';</script>"
        with mock.patch.object(
            client.session, "request", return_value=response_factory(200, text=page)
        ):
            with pytest.raises(AuthorizationError, match="state"):
                client.authorize_with_session_token(request, "okta_session")

    def test_authorize_with_session_token_error_page(self, client, response_factory):
        request = client.begin_login()
        page = "<script>data.error_description = 'User is not assigned';</script>"
        with mock.patch.object(
            client.session, "request", return_value=response_factory(200, text=page)
        ):
            with pytest.raises(AuthorizationError, match="not assigned"):
                client.authorize_with_session_token(request, "okta_session")
