"""
PKCE (RFC 7636) helpers and the in-memory authorization request.

The code verifier lives only inside an AuthorizationRequest for the
duration of one login; it is never persisted or logged.
"""

import base64
import hashlib
import secrets
from dataclasses import dataclass, field

# 48 random bytes -> 64 URL-safe characters (RFC 7636 allows 43-128)
VERIFIER_BYTES = 48


def generate_code_verifier() -> str:
    """Return a cryptographically random code verifier (64 chars)."""
    return secrets.token_urlsafe(VERIFIER_BYTES)


def derive_code_challenge(verifier: str) -> str:
    """
    Derive the S256 code challenge for a verifier.

    Args:
        verifier: PKCE code verifier

    Returns:
        base64url(SHA-256(verifier)) without padding
    """
    digest = hashlib.sha256(verifier.encode("ascii")).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


def generate_state() -> str:
    """Random value for the OAuth state / OpenID nonce parameters."""
    return secrets.token_urlsafe(32)


@dataclass(frozen=True)
class AuthorizationRequest:
    """
    One pending authorization-code login.

    Attributes:
        url: Fully built authorization URL to visit
        state: CSRF state echoed back by the provider
        nonce: OpenID Connect nonce
        code_verifier: PKCE secret (kept out of repr)
        code_challenge: S256 challenge sent in the URL
        redirect_uri: Redirect URI the code will be delivered to
        client_id: OAuth client the request was built for
    """

    url: str
    state: str
    nonce: str
    code_verifier: str = field(repr=False)
    code_challenge: str
    redirect_uri: str
    client_id: str
