"""
MLB media gateway endpoint and GraphQL operation definitions.

All operations are POSTed to a single GraphQL endpoint with a bearer token
and the BAM SDK headers the web player sends.
"""

GRAPHQL_URL = "https://media-gateway.mlb.com/graphql"

GATEWAY_HEADERS = {
    "x-bamsdk-version": "3.4",
    "x-bamsdk-platform": "macintosh",
    "Origin": "https://www.mlb.com",
}

# Operation names
CONTENT_SEARCH = "contentSearch"
INIT_SESSION = "initSession"
INIT_PLAYBACK_SESSION = "initPlaybackSession"

CONTENT_SEARCH_LIMIT = 16

CONTENT_SEARCH_RETURNING = (
    "HomeTeamId, HomeTeamName, AwayTeamId, AwayTeamName, Date, MediaType, "
    "ContentExperience, MediaState, PartnerCallLetters"
)

CONTENT_SEARCH_QUERY = """
query contentSearch($query: String!, $limit: Int = 10, $skip: Int = 0) {
    contentSearch(query: $query, limit: $limit, skip: $skip) {
        total
        content {
            audioTracks { language name renditionName trackType }
            contentId
            mediaId
            contentType
            contentRestrictions
            sportId
            feedType
            callSign
            language
            mediaState { state mediaType contentExperience }
            fields { name value }
        }
    }
}
"""

INIT_SESSION_QUERY = """
mutation initSession($device: InitSessionInput!, $clientType: ClientType!, $experience: ExperienceTypeInput) {
    initSession(device: $device, clientType: $clientType, experience: $experience) {
        deviceId
        sessionId
        entitlements { code }
        location { countryCode regionName zipCode latitude longitude }
        clientExperience
        features
    }
}
"""

INIT_PLAYBACK_SESSION_QUERY = """
mutation initPlaybackSession(
    $adCapabilities: [AdExperienceType]
    $mediaId: String!
    $deviceId: String!
    $sessionId: String!
    $quality: PlaybackQuality
) {
    initPlaybackSession(
        adCapabilities: $adCapabilities
        mediaId: $mediaId
        deviceId: $deviceId
        sessionId: $sessionId
        quality: $quality
    ) {
        playbackSessionId
        playback { url token expiration cdn }
    }
}
"""

AD_CAPABILITIES = ["GOOGLE_STANDALONE_AD_PODS"]
PLAYBACK_QUALITY = "PLACEHOLDER"

DEVICE_INFO = {
    "appVersion": "7.8.2",
    "deviceFamily": "desktop",
    "knownDeviceId": "",
    "languagePreference": "ENGLISH",
    "manufacturer": "Apple",
    "model": "Macintosh",
    "os": "macos",
    "osVersion": "10.15",
}


def content_search_expression(game_id: int) -> str:
    """Media gateway search expression for the GAME content of one game."""
    return f'GamePk={game_id} AND ContentType="GAME" RETURNING {CONTENT_SEARCH_RETURNING}'
