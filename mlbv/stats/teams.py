"""Static table of the 30 MLB clubs."""

from dataclasses import dataclass
from typing import Dict, List, Optional

RETIRED_CODES = {"oak": "ath"}


@dataclass(frozen=True)
class Team:
    """
    An MLB club.

    Attributes:
        id: Stats API team ID
        code: Short code used on the command line (e.g. "wsh")
        name: Full name as reported by the Stats API
    """

    id: int
    code: str
    name: str


TEAMS: List[Team] = [
    Team(108, "laa", "Los Angeles Angels"),
    Team(109, "ari", "Arizona Diamondbacks"),
    Team(110, "bal", "Baltimore Orioles"),
    Team(111, "bos", "Boston Red Sox"),
    Team(112, "chc", "Chicago Cubs"),
    Team(113, "cin", "Cincinnati Reds"),
    Team(114, "cle", "Cleveland Guardians"),
    Team(115, "col", "Colorado Rockies"),
    Team(116, "det", "Detroit Tigers"),
    Team(117, "hou", "Houston Astros"),
    Team(118, "kcr", "Kansas City Royals"),
    Team(119, "lad", "Los Angeles Dodgers"),
    Team(120, "wsh", "Washington Nationals"),
    Team(121, "nym", "New York Mets"),
    Team(133, "ath", "Athletics"),
    Team(134, "pit", "Pittsburgh Pirates"),
    Team(135, "sdp", "San Diego Padres"),
    Team(136, "sea", "Seattle Mariners"),
    Team(137, "sfg", "San Francisco Giants"),
    Team(138, "stl", "St. Louis Cardinals"),
    Team(139, "tbr", "Tampa Bay Rays"),
    Team(140, "tex", "Texas Rangers"),
    Team(141, "tor", "Toronto Blue Jays"),
    Team(142, "min", "Minnesota Twins"),
    Team(143, "phi", "Philadelphia Phillies"),
    Team(144, "atl", "Atlanta Braves"),
    Team(145, "cws", "Chicago White Sox"),
    Team(146, "mia", "Miami Marlins"),
    Team(147, "nyy", "New York Yankees"),
    Team(158, "mil", "Milwaukee Brewers"),
]

_BY_CODE: Dict[str, Team] = {team.code: team for team in TEAMS}
_BY_ID: Dict[int, Team] = {team.id: team for team in TEAMS}


def find_by_code(code: str) -> Team:
    """
    Look up a team by its code (case-insensitive).

    Raises:
        ValueError: If the code is unknown or retired
    """
    normalized = code.strip().lower()
    if normalized in RETIRED_CODES:
        raise ValueError(
            f"The {normalized.upper()} code has been retired and replaced with "
            f"{RETIRED_CODES[normalized].upper()}"
        )
    try:
        return _BY_CODE[normalized]
    except KeyError:
        raise ValueError(f"Invalid team code: {code}") from None


def find_by_id(team_id: int) -> Optional[Team]:
    return _BY_ID.get(team_id)


def find_by_name(name: str) -> Optional[Team]:
    """Look up a team by its full name as reported by the Stats API."""
    return next((team for team in TEAMS if team.name == name), None)


def team_codes() -> List[str]:
    """All valid team codes, sorted."""
    return sorted(_BY_CODE)
