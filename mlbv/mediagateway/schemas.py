"""Pydantic models for media gateway GraphQL responses.

Only the fields mlbv reads are declared; everything else in the payloads
is ignored.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class GatewayModel(BaseModel):
    """Base model: camelCase aliases, unknown fields ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class GraphQLErrorItem(GatewayModel):
    """One entry of a GraphQL "errors" array."""

    message: str = ""
    extensions: Dict[str, Any] = Field(default_factory=dict)

    @property
    def code(self) -> str:
        return str(self.extensions.get("code") or self.extensions.get("errorCode") or "")


class GraphQLEnvelope(GatewayModel):
    """Top-level GraphQL response."""

    data: Optional[Dict[str, Any]] = None
    errors: List[GraphQLErrorItem] = Field(default_factory=list)


class StreamMediaState(GatewayModel):
    state: str = Field(default="", description="ON, OFF, ...")
    media_type: str = Field(default="VIDEO", alias="mediaType")
    content_experience: str = Field(default="", alias="contentExperience")


class StreamData(GatewayModel):
    """One entry of contentSearch.content."""

    media_id: str = Field(..., alias="mediaId")
    feed_type: str = Field(default="", alias="feedType")
    call_sign: Optional[str] = Field(default=None, alias="callSign")
    language: Optional[str] = None
    content_restrictions: List[str] = Field(default_factory=list, alias="contentRestrictions")
    media_state: StreamMediaState = Field(default_factory=StreamMediaState, alias="mediaState")


class ContentSearchResults(GatewayModel):
    total: int = 0
    content: List[StreamData] = Field(default_factory=list)


class Entitlement(GatewayModel):
    code: str


class InitSessionResults(GatewayModel):
    device_id: str = Field(..., alias="deviceId")
    session_id: str = Field(..., alias="sessionId")
    entitlements: List[Entitlement] = Field(default_factory=list)
    features: List[str] = Field(default_factory=list)


class Playback(GatewayModel):
    url: str
    token: Optional[str] = None
    expiration: Optional[str] = None
    cdn: Optional[str] = None


class InitPlaybackSessionResults(GatewayModel):
    playback_session_id: Optional[str] = Field(default=None, alias="playbackSessionId")
    playback: Playback
