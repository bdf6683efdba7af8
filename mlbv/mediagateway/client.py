"""
Low-level client for the MLB media gateway GraphQL API.

Every call carries the caller's bearer token; the client itself holds no
session state. Error envelopes are classified into GatewayAuthError (token
rejected) and GatewayError (everything else) so the entitlement and stream
layers can map them onto their own exceptions.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

import requests
from pydantic import ValidationError

from mlbv.api.base_client import BaseAPIClient

from . import endpoints
from .exceptions import GatewayAuthError, GatewayError
from .schemas import GraphQLEnvelope

logger = logging.getLogger(__name__)

AUTH_ERROR_CODES = ("UNAUTHENTICATED", "UNAUTHORIZED", "INVALID_TOKEN")
CONTENT_ERROR_CODES = ("BLACKOUT", "NOT_ENTITLED")


class MediaGatewayClient(BaseAPIClient):
    """
    Authenticated GraphQL client for media-gateway.mlb.com.

    Example:
        gateway = MediaGatewayClient()
        data = gateway.execute(
            endpoints.INIT_SESSION,
            endpoints.INIT_SESSION_QUERY,
            {"device": endpoints.DEVICE_INFO, "clientType": "WEB"},
            access_token,
        )
    """

    BASE_URL = endpoints.GRAPHQL_URL

    def __init__(self, timeout: float = 30, session: Optional[requests.Session] = None):
        super().__init__(timeout=timeout, session=session)

    def execute(
        self,
        operation_name: str,
        query: str,
        variables: Dict[str, Any],
        access_token: str,
    ) -> Dict[str, Any]:
        """
        Run one GraphQL operation.

        Args:
            operation_name: GraphQL operation name
            query: GraphQL document
            variables: Operation variables
            access_token: Bearer token

        Returns:
            The operation's entry in the response "data" object

        Raises:
            GatewayAuthError: If the token was rejected
            GatewayError: For any other error envelope or malformed response
            NetworkError: On transport failure
        """
        headers = dict(endpoints.GATEWAY_HEADERS)
        headers["Authorization"] = f"Bearer {access_token}"

        logger.debug(f"Media gateway operation: {operation_name}")
        response = self.post(
            endpoints.GRAPHQL_URL,
            json_data={
                "operationName": operation_name,
                "query": query,
                "variables": variables,
            },
            headers=headers,
        )
        status_code = response.status_code
        auth_status = status_code in (401, 403)

        try:
            envelope = GraphQLEnvelope.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            if auth_status:
                logger.warning(f"{operation_name} rejected with status {status_code}")
                raise GatewayAuthError(
                    f"Media gateway rejected the session ({status_code})",
                    status_code=status_code,
                ) from e
            raise GatewayError(
                f"Invalid {operation_name} response (status {status_code}): {e}",
                status_code=status_code,
            ) from e

        codes = []
        message = ""
        if envelope.errors:
            for error in envelope.errors:
                if error.code:
                    codes.append(error.code.upper())
                if error.message:
                    codes.append(error.message.upper())
            message = "; ".join(e.message or e.code for e in envelope.errors)
            logger.warning(f"{operation_name} returned errors: {message}")

        # BLACKOUT and NOT_ENTITLED take precedence over a 401/403 status.
        if _matches(codes, CONTENT_ERROR_CODES):
            raise GatewayError(
                f"{operation_name} failed: {message}",
                codes=codes,
                status_code=status_code,
            )

        if auth_status or _matches(codes, AUTH_ERROR_CODES):
            if auth_status:
                logger.warning(f"{operation_name} rejected with status {status_code}")
            raise GatewayAuthError(
                f"Media gateway rejected the session: {message}"
                if message
                else f"Media gateway rejected the session ({status_code})",
                codes=codes,
                status_code=status_code,
            )

        if envelope.errors:
            raise GatewayError(
                f"{operation_name} failed: {message}",
                codes=codes,
                status_code=status_code,
            )

        if status_code != 200:
            raise GatewayError(
                f"{operation_name} failed with status {status_code}",
                status_code=status_code,
            )

        result = (envelope.data or {}).get(operation_name)
        if result is None:
            raise GatewayError(f"{operation_name} response contained no data")

        return result


def _matches(codes: List[str], fragments: Tuple[str, ...]) -> bool:
    return any(fragment in code for code in codes for fragment in fragments)
