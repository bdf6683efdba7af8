"""Shared fixtures for mlbv tests."""

from datetime import datetime, timedelta, timezone
from unittest import mock

import pytest

from mlbv.models import Capability, ContentSession
from mlbv.oauth.config import IdentityConfig
from mlbv.oauth.credential_store import Credentials, CredentialStore


def make_response(status_code=200, json_data=None, text=""):
    """Build a mock requests.Response."""
    response = mock.Mock()
    response.status_code = status_code
    response.text = text
    if json_data is None:
        response.json.side_effect = ValueError("No JSON body")
    else:
        response.json.return_value = json_data
    return response


@pytest.fixture
def response_factory():
    """Factory for mock HTTP responses."""
    return make_response


@pytest.fixture
def identity_config(tmp_path):
    """Identity configuration writing its session under tmp_path."""
    return IdentityConfig(
        client_id="test_client_id",
        credentials_file=str(tmp_path / "session.json"),
    )


@pytest.fixture
def store(identity_config):
    return CredentialStore(identity_config.credentials_file)


@pytest.fixture
def valid_credentials():
    """Credentials good for another hour."""
    return Credentials(
        access_token="access_token_123",
        refresh_token="refresh_token_456",
        expires_at=datetime.now(timezone.utc) + timedelta(hours=1),
        device_id="device-1",
        scope="openid offline_access",
    )


@pytest.fixture
def expiring_credentials():
    """Credentials inside the 60 second safety margin."""
    return Credentials(
        access_token="old_access_token",
        refresh_token="refresh_token_456",
        expires_at=datetime.now(timezone.utc) + timedelta(seconds=30),
        device_id="device-1",
        scope="openid offline_access",
    )


def make_session(
    token="access_token_123",
    expires_in=timedelta(hours=1),
    capabilities=(Capability.LIVE, Capability.ARCHIVE, Capability.AUDIO),
    device_id="device-1",
):
    """Build a ContentSession expiring after expires_in."""
    return ContentSession(
        content_token=token,
        content_token_expires_at=datetime.now(timezone.utc) + expires_in,
        entitlement_flags=frozenset(capabilities),
        session_id="session-1",
        device_id=device_id,
    )


@pytest.fixture
def session_factory():
    """Factory for ContentSession objects."""
    return make_session
