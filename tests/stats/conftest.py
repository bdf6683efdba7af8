"""Schedule API fixtures."""

import copy

import pytest

# Trimmed statsapi.mlb.com/api/v1/schedule response for 2023-07-04
SCHEDULE_2023_07_04 = {
    "totalGames": 3,
    "dates": [
        {
            "date": "2023-07-04",
            "games": [
                {
                    "gamePk": 717465,
                    "gameDate": "2023-07-04T23:05:00Z",
                    "officialDate": "2023-07-04",
                    "status": {"abstractGameState": "Final", "detailedState": "Final"},
                    "teams": {
                        "away": {
                            "team": {"id": 120, "name": "Washington Nationals"},
                            "score": 3,
                        },
                        "home": {
                            "team": {"id": 121, "name": "New York Mets"},
                            "score": 5,
                        },
                    },
                    "gameNumber": 1,
                    "doubleHeader": "N",
                    "gamesInSeries": 3,
                    "seriesGameNumber": 2,
                    "broadcasts": [
                        {
                            "type": "TV",
                            "homeAway": "home",
                            "callSign": "SNY",
                            "language": "en",
                            "isNational": False,
                            "mediaId": "mets-home-tv",
                            "availableForStreaming": True,
                            "mediaState": {"mediaStateCode": "MEDIA_ARCHIVE"},
                        },
                        {
                            "type": "TV",
                            "homeAway": "away",
                            "callSign": "MASN",
                            "language": "en",
                            "isNational": False,
                            "mediaId": "nats-away-tv",
                            "availableForStreaming": True,
                            "mediaState": {"mediaStateCode": "MEDIA_ARCHIVE"},
                        },
                        {
                            "type": "AM",
                            "homeAway": "home",
                            "callSign": "WCBS 880",
                            "mediaId": "mets-radio",
                            "availableForStreaming": True,
                        },
                    ],
                    "content": {
                        "media": {
                            "epgAlternate": [
                                {
                                    "title": "Extended Highlights",
                                    "items": [
                                        {
                                            "id": "cg-717465",
                                            "title": "Condensed Game: WSH@NYM",
                                            "playbacks": [
                                                {"name": "hlsCloud", "url": "https://cuts.example.com/cg.m3u8"},
                                                {"name": "mp4Avc", "url": "https://cuts.example.com/cg.mp4"},
                                            ],
                                        }
                                    ],
                                },
                                {
                                    "title": "Daily Recap",
                                    "items": [
                                        {
                                            "id": "recap-717465",
                                            "title": "Nationals vs. Mets Highlights",
                                            "playbacks": [
                                                {"name": "hlsCloud", "url": "https://cuts.example.com/recap.m3u8"},
                                            ],
                                        }
                                    ],
                                },
                            ]
                        }
                    },
                },
                {
                    "gamePk": 717466,
                    "gameDate": "2023-07-04T17:05:00Z",
                    "officialDate": "2023-07-04",
                    "status": {
                        "abstractGameState": "Final",
                        "detailedState": "Postponed",
                        "reason": "Rain",
                    },
                    "teams": {
                        "away": {"team": {"id": 147, "name": "New York Yankees"}},
                        "home": {"team": {"id": 110, "name": "Baltimore Orioles"}},
                    },
                    "gameNumber": 1,
                    "doubleHeader": "N",
                },
                {
                    "gamePk": 717467,
                    "gameDate": "2023-07-04T20:10:00Z",
                    "officialDate": "2023-07-04",
                    "status": {"abstractGameState": "Live", "detailedState": "In Progress"},
                    "teams": {
                        "away": {"team": {"id": 136, "name": "Seattle Mariners"}, "score": 1},
                        "home": {"team": {"id": 111, "name": "Boston Red Sox"}, "score": 0},
                    },
                    "linescore": {"teams": {"home": {"runs": 0}, "away": {"runs": 1}}},
                    "broadcasts": [
                        {
                            "type": "TV",
                            "homeAway": "home",
                            "callSign": "FOX",
                            "isNational": True,
                            "mediaId": "fox-national",
                            "availableForStreaming": True,
                            "mediaState": {"mediaStateCode": "MEDIA_ON"},
                        },
                        {
                            "type": "TV",
                            "homeAway": "away",
                            "callSign": "ROOT",
                            "mediaId": "root-away",
                            "availableForStreaming": False,
                        },
                    ],
                },
            ],
        }
    ],
}


@pytest.fixture
def schedule_body():
    """A fresh copy of the 2023-07-04 schedule response."""
    return copy.deepcopy(SCHEDULE_2023_07_04)
