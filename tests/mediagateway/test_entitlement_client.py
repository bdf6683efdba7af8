"""Tests for the entitlement exchange."""

import base64
import json
from datetime import datetime, timedelta, timezone
from unittest import mock

import pytest

from mlbv.api.exceptions import ConnectionFailedError
from mlbv.mediagateway.client import MediaGatewayClient
from mlbv.mediagateway.entitlement_client import (
    EntitlementClient,
    capabilities_for,
    jwt_expiry,
)
from mlbv.mediagateway.exceptions import (
    EntitlementError,
    EntitlementUnauthorizedError,
    GatewayAuthError,
    GatewayError,
    NoSubscriptionError,
)
from mlbv.models import Capability


def make_jwt(claims):
    payload = base64.urlsafe_b64encode(json.dumps(claims).encode()).rstrip(b"=").decode()
    return f"eyJhbGciOiJSUzI1NiJ9.{payload}.signature"


INIT_SESSION_DATA = {
    "deviceId": "device-1",
    "sessionId": "session-1",
    "entitlements": [{"code": "MLBALL_2024"}],
    "features": [],
}


class TestCapabilitiesFor:
    """Tests for capabilities_for function."""

    def test_full_subscription(self):
        assert capabilities_for(["MLBALL"]) == {
            Capability.LIVE,
            Capability.ARCHIVE,
            Capability.AUDIO,
        }

    def test_prefix_and_case_insensitive(self):
        assert Capability.LIVE in capabilities_for(["mlbtv_single_team"])

    def test_audio_only(self):
        assert capabilities_for(["GAMEDAYAUDIO"]) == {Capability.AUDIO}

    def test_unknown_codes_grant_nothing(self):
        assert capabilities_for(["FREE_GAME_OF_THE_DAY"]) == frozenset()
        assert capabilities_for([]) == frozenset()


class TestJwtExpiry:
    """Tests for jwt_expiry function."""

    def test_reads_exp_claim(self):
        token = make_jwt({"sub": "fan", "exp": 1893456000})
        assert jwt_expiry(token) == datetime(2030, 1, 1, tzinfo=timezone.utc)

    def test_not_a_jwt(self):
        assert jwt_expiry("opaque-token") is None

    def test_missing_exp(self):
        assert jwt_expiry(make_jwt({"sub": "fan"})) is None

    def test_garbage_payload(self):
        assert jwt_expiry("a.!!!notbase64!!!.c") is None


class TestEntitlementClient:
    """Tests for EntitlementClient class."""

    @pytest.fixture
    def gateway(self):
        gateway = mock.Mock(spec=MediaGatewayClient)
        gateway.execute.return_value = dict(INIT_SESSION_DATA)
        return gateway

    @pytest.fixture
    def client(self, gateway):
        return EntitlementClient(gateway)

    def test_exchange_builds_content_session(self, client, gateway):
        expires_at = datetime.now(timezone.utc) + timedelta(hours=1)

        session = client.exchange("identity_token", device_id="device-1", token_expires_at=expires_at)

        assert session.content_token == "identity_token"
        assert session.content_token_expires_at == expires_at
        assert session.session_id == "session-1"
        assert session.device_id == "device-1"
        assert session.has_capability(Capability.LIVE)

        variables = gateway.execute.call_args[0][2]
        assert variables["device"]["knownDeviceId"] == "device-1"
        assert variables["clientType"] == "WEB"

    def test_expiry_from_jwt_claim(self, client):
        token = make_jwt({"exp": 1893456000})

        session = client.exchange(token)

        assert session.content_token_expires_at == datetime(2030, 1, 1, tzinfo=timezone.utc)

    def test_expiry_fallback(self, client):
        session = client.exchange("opaque_token")

        remaining = (session.content_token_expires_at - datetime.now(timezone.utc)).total_seconds()
        assert 290 <= remaining <= 300

    def test_gateway_auth_error(self, client, gateway):
        gateway.execute.side_effect = GatewayAuthError("rejected", status_code=401)

        with pytest.raises(EntitlementUnauthorizedError):
            client.exchange("identity_token")

    def test_not_entitled(self, client, gateway):
        gateway.execute.side_effect = GatewayError("no", codes=["NOT_ENTITLED"])

        with pytest.raises(NoSubscriptionError):
            client.exchange("identity_token")

    def test_other_gateway_error(self, client, gateway):
        gateway.execute.side_effect = GatewayError("boom", codes=["INTERNAL"])

        with pytest.raises(EntitlementError):
            client.exchange("identity_token")

    def test_network_error_propagates(self, client, gateway):
        gateway.execute.side_effect = ConnectionFailedError("down")

        with pytest.raises(ConnectionFailedError):
            client.exchange("identity_token")

    def test_required_capability_missing(self, client, gateway):
        data = dict(INIT_SESSION_DATA)
        data["entitlements"] = [{"code": "MLBAUDIO"}]
        gateway.execute.return_value = data

        with pytest.raises(NoSubscriptionError):
            client.exchange("identity_token", required_capability=Capability.LIVE)

    def test_invalid_response(self, client, gateway):
        gateway.execute.return_value = {"sessionId": "s"}

        with pytest.raises(EntitlementError, match="Invalid initSession"):
            client.exchange("identity_token")
