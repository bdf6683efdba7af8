"""
Entitlement exchange: identity access token -> media gateway ContentSession.

The media gateway accepts the identity access token directly as its bearer
token; initSession registers the device and reports which entitlement codes
the account holds. Those codes are mapped to Capability flags here.
"""

import base64
import json
import logging
from datetime import datetime, timedelta, timezone
from typing import FrozenSet, Iterable, Optional

from pydantic import ValidationError

from mlbv.models import Capability, ContentSession

from . import endpoints
from .client import MediaGatewayClient
from .exceptions import (
    EntitlementError,
    EntitlementUnauthorizedError,
    GatewayAuthError,
    GatewayError,
    NoSubscriptionError,
)
from .schemas import InitSessionResults

logger = logging.getLogger(__name__)

# Entitlement code prefix -> capabilities granted
ENTITLEMENT_CAPABILITIES = {
    "MLBALL": frozenset({Capability.LIVE, Capability.ARCHIVE, Capability.AUDIO}),
    "MLBTV": frozenset({Capability.LIVE, Capability.ARCHIVE, Capability.AUDIO}),
    "MLBAUDIO": frozenset({Capability.AUDIO}),
    "GAMEDAYAUDIO": frozenset({Capability.AUDIO}),
}

FALLBACK_SESSION_LIFETIME_SECONDS = 300


def capabilities_for(codes: Iterable[str]) -> FrozenSet[Capability]:
    """
    Map entitlement codes to capabilities.

    Codes are matched by prefix (e.g. MLBALL_2024 -> MLBALL). Unknown codes
    grant nothing and are logged.
    """
    granted = set()
    for code in codes:
        normalized = code.upper()
        for prefix, capabilities in ENTITLEMENT_CAPABILITIES.items():
            if normalized.startswith(prefix):
                granted.update(capabilities)
                break
        else:
            logger.debug(f"Ignoring unrecognized entitlement code: {code}")
    return frozenset(granted)


def jwt_expiry(token: str) -> Optional[datetime]:
    """
    Read the "exp" claim of a JWT without verifying it.

    Returns:
        Expiry as a timezone-aware datetime, or None if the token is not a
        JWT or carries no exp claim
    """
    parts = token.split(".")
    if len(parts) != 3:
        return None

    payload_b64 = parts[1]
    payload_b64 += "=" * (-len(payload_b64) % 4)
    try:
        claims = json.loads(base64.urlsafe_b64decode(payload_b64))
    except (ValueError, UnicodeDecodeError):
        return None

    exp = claims.get("exp") if isinstance(claims, dict) else None
    if not isinstance(exp, (int, float)):
        return None
    return datetime.fromtimestamp(exp, tz=timezone.utc)


class EntitlementClient:
    """
    Exchanges an identity access token for a ContentSession.

    Never retries; SessionManager decides whether to refresh and try again.
    """

    def __init__(self, gateway: Optional[MediaGatewayClient] = None):
        self.gateway = gateway or MediaGatewayClient()

    def exchange(
        self,
        identity_access_token: str,
        device_id: Optional[str] = None,
        required_capability: Optional[Capability] = None,
        token_expires_at: Optional[datetime] = None,
    ) -> ContentSession:
        """
        Start a media gateway session.

        Args:
            identity_access_token: Identity provider access token
            device_id: Previously assigned device ID (reused when known)
            required_capability: Capability the caller needs
            token_expires_at: Expiry of the identity token; read from the
                              token's exp claim when omitted

        Returns:
            ContentSession with entitlement flags

        Raises:
            EntitlementUnauthorizedError: If the gateway rejected the token
            NoSubscriptionError: If required_capability is not held
            EntitlementError: For any other gateway failure
            NetworkError: On transport failure
        """
        device = dict(endpoints.DEVICE_INFO)
        device["knownDeviceId"] = device_id or ""

        try:
            data = self.gateway.execute(
                endpoints.INIT_SESSION,
                endpoints.INIT_SESSION_QUERY,
                {"device": device, "clientType": "WEB"},
                identity_access_token,
            )
        except GatewayAuthError as e:
            raise EntitlementUnauthorizedError(str(e)) from e
        except GatewayError as e:
            if e.has_code("NOT_ENTITLED"):
                raise NoSubscriptionError(str(e)) from e
            raise EntitlementError(str(e)) from e

        try:
            results = InitSessionResults.model_validate(data)
        except ValidationError as e:
            raise EntitlementError(f"Invalid initSession response: {e}") from e

        flags = capabilities_for(e.code for e in results.entitlements)
        logger.info(
            f"Media session started; capabilities: "
            f"{', '.join(sorted(c.value for c in flags)) or 'none'}"
        )

        expires_at = token_expires_at or jwt_expiry(identity_access_token)
        if expires_at is None:
            expires_at = datetime.now(timezone.utc) + timedelta(
                seconds=FALLBACK_SESSION_LIFETIME_SECONDS
            )
            logger.warning(
                f"Could not determine token expiry; assuming "
                f"{FALLBACK_SESSION_LIFETIME_SECONDS}s lifetime"
            )

        session = ContentSession(
            content_token=identity_access_token,
            content_token_expires_at=expires_at,
            entitlement_flags=flags,
            session_id=results.session_id,
            device_id=results.device_id,
        )

        if required_capability is not None and not session.has_capability(required_capability):
            raise NoSubscriptionError(
                f"Your MLB.tv account does not include {required_capability.value} access"
            )

        return session
