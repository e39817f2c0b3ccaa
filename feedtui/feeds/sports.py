"""Scoreboards from ESPN's public site API."""

from __future__ import annotations

import logging

import httpx

from feedtui.feeds import FeedFetchError, HttpFetcher, SportsData, SportsEvent

logger = logging.getLogger(__name__)

ESPN_SCOREBOARD_URL = "https://site.api.espn.com/apis/site/v2/sports/{}/scoreboard"

LEAGUE_ENDPOINTS = {
    "nba": "basketball/nba",
    "nfl": "football/nfl",
    "mlb": "baseball/mlb",
    "nhl": "hockey/nhl",
    "mls": "soccer/usa.1",
    "epl": "soccer/eng.1",
    "premier-league": "soccer/eng.1",
    "ncaaf": "football/college-football",
    "college-football": "football/college-football",
    "ncaab": "basketball/mens-college-basketball",
    "college-basketball": "basketball/mens-college-basketball",
}


def _score(competitor: dict) -> int | None:
    try:
        return int(competitor.get("score"))
    except (TypeError, ValueError):
        return None


def parse_scoreboard(league: str, data: dict) -> list[SportsEvent]:
    events = []
    for event in data.get("events") or []:
        competitions = event.get("competitions") or []
        if not competitions:
            continue
        competitors = competitions[0].get("competitors", [])
        home = next((c for c in competitors if c.get("homeAway") == "home"), None)
        away = next((c for c in competitors if c.get("homeAway") == "away"), None)
        if home is None or away is None:
            continue

        events.append(
            SportsEvent(
                league=league.upper(),
                home_team=home["team"]["displayName"],
                away_team=away["team"]["displayName"],
                home_score=_score(home),
                away_score=_score(away),
                status=event.get("status", {}).get("type", {}).get("description", ""),
                start_time=competitions[0].get("startDate"),
            )
        )
    return events


class SportsFetcher(HttpFetcher):
    def __init__(
        self,
        leagues: list[str],
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(transport)
        self._leagues = [league.lower() for league in leagues]

    async def fetch(self) -> SportsData:
        all_events: list[SportsEvent] = []

        async with self._client() as client:
            for league in self._leagues:
                endpoint = LEAGUE_ENDPOINTS.get(league)
                if endpoint is None:
                    logger.warning("Unknown league: %s", league)
                    continue
                try:
                    resp = await client.get(ESPN_SCOREBOARD_URL.format(endpoint))
                    resp.raise_for_status()
                    all_events.extend(parse_scoreboard(league, resp.json()))
                except (httpx.HTTPError, KeyError, ValueError) as e:
                    logger.warning("Scoreboard for %s failed: %s", league, e)

        if self._leagues and not all_events and not any(
            league in LEAGUE_ENDPOINTS for league in self._leagues
        ):
            raise FeedFetchError("No known leagues configured")
        return SportsData(tuple(all_events))
