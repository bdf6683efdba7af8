"""Tests for PKCE helpers."""

import base64
import hashlib

from mlbv.oauth.pkce import (
    AuthorizationRequest,
    derive_code_challenge,
    generate_code_verifier,
    generate_state,
)


class TestPKCE:
    """Tests for verifier/challenge generation."""

    def test_verifier_length_within_rfc_bounds(self):
        verifier = generate_code_verifier()
        assert 43 <= len(verifier) <= 128

    def test_verifier_uses_url_safe_alphabet(self):
        allowed = set("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_")
        assert set(generate_code_verifier()) <= allowed

    def test_verifiers_are_unique(self):
        assert len({generate_code_verifier() for _ in range(20)}) == 20

    def test_challenge_is_base64url_sha256_of_verifier(self):
        """Challenge equals base64url(SHA-256(verifier)) without padding."""
        verifier = generate_code_verifier()
        expected = (
            base64.urlsafe_b64encode(hashlib.sha256(verifier.encode("ascii")).digest())
            .rstrip(b"=")
            .decode("ascii")
        )

        challenge = derive_code_challenge(verifier)

        assert challenge == expected
        assert "=" not in challenge
        assert len(challenge) == 43

    def test_rfc7636_appendix_b_vector(self):
        """Known answer from RFC 7636 Appendix B."""
        verifier = "dBjftJeZ4CVP-mB92K27uhbUJU1p1r_wW1gFWFOEjXk"
        assert derive_code_challenge(verifier) == "E9Melhoa2OwvFrEMTJguCHaoeK1t8URWbuGJSstw-cM"

    def test_state_is_random(self):
        assert generate_state() != generate_state()

    def test_authorization_request_hides_verifier(self):
        request = AuthorizationRequest(
            url="https://ids.mlb.com/authorize",
            state="s",
            nonce="n",
            code_verifier="secret_verifier",
            code_challenge="c",
            redirect_uri="https://www.mlb.com/login",
            client_id="client",
        )
        assert "secret_verifier" not in repr(request)
