"""
Predicsure AI — Real-time sports and stock market context.

Two small HTTP clients feed live data into sports and stocks predictions:

- ``SportsDataService``: TheSportsDB free API (team lookup, last results)
- ``StocksDataService``: Alpha Vantage (global quote, company overview)

Responses are cached through :mod:`app.cache`.  Alpha Vantage's free tier
allows 25 calls per day, so stock data is held four times longer than sports
data.  Network and API failures are logged and produce empty context; they
never abort a prediction.
"""

from __future__ import annotations

import asyncio
import re
from datetime import datetime, timezone
from typing import Optional

import httpx
import structlog

from app.cache import cache_get, cache_set
from app.config import get_settings

logger = structlog.get_logger("predicsure.market_data_service")

REQUEST_TIMEOUT_SECONDS = 10.0

_VERSUS = re.compile(r"(\w+(?:\s+\w+)?)\s+(?:vs|versus|against)\s+(\w+(?:\s+\w+)?)", re.IGNORECASE)
_CAPITALISED_NAME = re.compile(r"\b([A-Z][a-z]+(?:\s+[A-Z][a-z]+)?)\b")
_DOLLAR_SYMBOL = re.compile(r"\$([A-Z]{1,5})\b")
_BARE_SYMBOL = re.compile(r"\b([A-Z]{1,5})\b")

SYMBOL_STOPWORDS = frozenset({
    "THE", "AND", "FOR", "ARE", "BUT", "NOT", "YOU", "ALL", "CAN", "HER",
    "WAS", "ONE", "OUR", "OUT", "DAY", "GET", "HAS", "HIM", "HIS", "HOW",
    "ITS", "MAY", "NEW", "NOW", "OLD", "SEE", "TWO", "WHO", "BOY", "DID",
    "LET", "PUT", "SAY", "SHE", "TOO", "USE",
})


# ══════════════════════════════════════════════════════════════════════════
# Sports
# ══════════════════════════════════════════════════════════════════════════


class SportsDataService:
    """Team and recent-results lookup against TheSportsDB."""

    CACHE_TTL_SECONDS: int = 60 * 60
    RECENT_GAMES: int = 3

    def __init__(self, base_url: Optional[str] = None) -> None:
        self.base_url = base_url or get_settings().SPORTS_DB_BASE_URL

    async def _get_json(self, path: str, params: dict) -> Optional[dict]:
        try:
            async with httpx.AsyncClient(base_url=self.base_url, timeout=REQUEST_TIMEOUT_SECONDS) as client:
                response = await client.get(path, params=params)
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("sports_api_error", path=path, error=str(exc))
            return None

    async def _find_raw_team(self, team_name: str) -> Optional[dict]:
        data = await self._get_json("/searchteams.php", {"t": team_name})
        if not data or not data.get("teams"):
            return None
        return data["teams"][0]

    async def search_team(self, team_name: str) -> Optional[dict]:
        cache_key = f"sports:team:{team_name.lower()}"
        cached = await cache_get(cache_key)
        if cached is not None:
            return cached

        team = await self._find_raw_team(team_name)
        if team is None:
            return None

        info = {
            "name": team.get("strTeam"),
            "league": team.get("strLeague"),
            "formed": team.get("intFormedYear"),
            "stadium": team.get("strStadium"),
            "description": team.get("strDescriptionEN"),
        }
        await cache_set(cache_key, info, self.CACHE_TTL_SECONDS)
        return info

    async def recent_games(self, team_name: str, limit: int = 5) -> list[dict]:
        cache_key = f"sports:games:{team_name.lower()}:{limit}"
        cached = await cache_get(cache_key)
        if cached is not None:
            return cached

        team = await self._find_raw_team(team_name)
        if team is None:
            return []

        data = await self._get_json("/eventslast.php", {"id": team.get("idTeam")})
        if not data or not data.get("results"):
            return []

        games = [
            {
                "date": event.get("dateEvent"),
                "home_team": event.get("strHomeTeam"),
                "away_team": event.get("strAwayTeam"),
                "home_score": event.get("intHomeScore"),
                "away_score": event.get("intAwayScore"),
                "status": event.get("strStatus"),
            }
            for event in data["results"][:limit]
        ]
        await cache_set(cache_key, games, self.CACHE_TTL_SECONDS)
        return games

    async def get_context(self, user_input: str) -> dict:
        """Pull team data for the teams mentioned in *user_input*.

        ``"A vs B"`` style questions look up both teams; otherwise the first
        capitalised name is tried as a single team.
        """
        versus = _VERSUS.search(user_input)
        if versus:
            first_name, second_name = versus.group(1), versus.group(2)
            first, second = await asyncio.gather(
                self.search_team(first_name),
                self.search_team(second_name),
            )
            teams = [team for team in (first, second) if team]
            games = await self.recent_games(first_name, self.RECENT_GAMES) if first else []
            league = (first or {}).get("league") or (second or {}).get("league")
            return {"teams": teams, "recent_games": games, "league": league}

        single = _CAPITALISED_NAME.search(user_input)
        if single:
            team_name = single.group(1)
            team = await self.search_team(team_name)
            if team:
                games = await self.recent_games(team_name, self.RECENT_GAMES)
                return {"teams": [team], "recent_games": games, "league": team.get("league")}

        return {}

    @staticmethod
    def format_context(context: dict) -> str:
        teams = context.get("teams") or []
        if not teams:
            return ""

        out = "\n\n**Real-Time Sports Data:**\n"
        for team in teams:
            out += f"\n**{team['name']}** ({team['league']}):\n"
            if team.get("stadium"):
                out += f"- Stadium: {team['stadium']}\n"
            if team.get("formed"):
                out += f"- Founded: {team['formed']}\n"

        games = context.get("recent_games") or []
        if games:
            out += "\n**Recent Games:**\n"
            for game in games:
                if game.get("home_score") and game.get("away_score"):
                    score = f"{game['home_score']}-{game['away_score']}"
                else:
                    score = "TBD"
                out += f"- {game['date']}: {game['home_team']} vs {game['away_team']} ({score})\n"

        out += "\n**Use this real-time data to:**\n"
        out += "- Provide data-driven predictions based on recent performance\n"
        out += "- Reference specific game results and trends\n"
        out += "- Make your prediction more credible and specific\n"
        return out


# ══════════════════════════════════════════════════════════════════════════
# Stocks
# ══════════════════════════════════════════════════════════════════════════


def market_status(now: Optional[datetime] = None) -> str:
    """Rough US market state from the UTC clock."""
    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    if now.weekday() >= 5:
        return "closed (weekend)"
    if 14 <= now.hour < 21:
        return "open"
    return "closed"


def extract_stock_symbols(user_input: str) -> list[str]:
    symbols = [m.group(1) for m in _DOLLAR_SYMBOL.finditer(user_input)]
    symbols.extend(
        token
        for token in _BARE_SYMBOL.findall(user_input)
        if len(token) >= 2 and token not in SYMBOL_STOPWORDS
    )
    return list(dict.fromkeys(symbols))


class StocksDataService:
    """Quote and company overview lookup against Alpha Vantage."""

    CACHE_TTL_SECONDS: int = 4 * 60 * 60
    MAX_SYMBOLS: int = 2

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None) -> None:
        settings = get_settings()
        self.api_key = api_key or settings.ALPHA_VANTAGE_API_KEY
        self.base_url = base_url or settings.ALPHA_VANTAGE_BASE_URL

    async def _query(self, function: str, symbol: str) -> Optional[dict]:
        params = {"function": function, "symbol": symbol, "apikey": self.api_key}
        try:
            async with httpx.AsyncClient(timeout=REQUEST_TIMEOUT_SECONDS) as client:
                response = await client.get(self.base_url, params=params)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("stocks_api_error", function=function, symbol=symbol, error=str(exc))
            return None

        if data.get("Error Message"):
            logger.error("stocks_api_rejected", symbol=symbol, error=data["Error Message"])
            return None
        if data.get("Note"):
            logger.warning("stocks_api_rate_limited", symbol=symbol, note=data["Note"])
            return None
        return data

    async def quote(self, symbol: str) -> Optional[dict]:
        cache_key = f"stocks:quote:{symbol.upper()}"
        cached = await cache_get(cache_key)
        if cached is not None:
            logger.debug("stocks_quote_cache_hit", symbol=symbol)
            return cached

        data = await self._query("GLOBAL_QUOTE", symbol)
        raw = (data or {}).get("Global Quote") or {}
        if not raw.get("05. price"):
            logger.info("stocks_quote_missing", symbol=symbol)
            return None

        result = {
            "symbol": raw.get("01. symbol"),
            "price": raw.get("05. price"),
            "change": raw.get("09. change"),
            "change_percent": raw.get("10. change percent"),
            "volume": raw.get("06. volume"),
            "last_updated": raw.get("07. latest trading day"),
        }
        await cache_set(cache_key, result, self.CACHE_TTL_SECONDS)
        return result

    async def company(self, symbol: str) -> Optional[dict]:
        cache_key = f"stocks:company:{symbol.upper()}"
        cached = await cache_get(cache_key)
        if cached is not None:
            return cached

        data = await self._query("OVERVIEW", symbol)
        if not data or not data.get("Symbol"):
            return None

        result = {
            "symbol": data.get("Symbol"),
            "name": data.get("Name"),
            "description": data.get("Description"),
            "sector": data.get("Sector"),
            "industry": data.get("Industry"),
            "market_cap": data.get("MarketCapitalization"),
        }
        await cache_set(cache_key, result, self.CACHE_TTL_SECONDS)
        return result

    async def get_context(self, user_input: str, now: Optional[datetime] = None) -> dict:
        symbols = extract_stock_symbols(user_input)[: self.MAX_SYMBOLS]
        if not symbols:
            return {}

        logger.info("stocks_symbols_extracted", symbols=symbols)
        quotes = await asyncio.gather(*(self.quote(symbol) for symbol in symbols))
        company = await self.company(symbols[0])

        return {
            "quotes": [q for q in quotes if q] or None,
            "companies": [company] if company else None,
            "market_status": market_status(now),
        }

    @staticmethod
    def format_context(context: dict) -> str:
        quotes = context.get("quotes") or []
        if not quotes:
            return ""

        out = "\n\n**Real-Time Market Data:**\n"
        if context.get("market_status"):
            out += f"\n**Market Status:** {context['market_status']}\n"

        for quote in quotes:
            sign = "+" if _to_float(quote.get("change")) >= 0 else ""
            out += f"\n**{quote['symbol']}** - ${quote['price']}\n"
            out += f"- Change: {sign}{quote['change']} ({quote['change_percent']})\n"
            out += f"- Volume: {_to_int(quote.get('volume')):,}\n"
            out += f"- Last Updated: {quote['last_updated']}\n"

        companies = context.get("companies") or []
        if companies:
            out += "\n**Company Information:**\n"
            for company in companies:
                out += f"\n**{company['name']}** ({company['symbol']}):\n"
                if company.get("sector"):
                    out += f"- Sector: {company['sector']}\n"
                if company.get("industry"):
                    out += f"- Industry: {company['industry']}\n"
                if company.get("market_cap"):
                    out += f"- Market Cap: ${_to_int(company['market_cap']) / 1e9:.2f}B\n"

        out += "\n**Use this real-time data to:**\n"
        out += "- Provide data-driven predictions based on current market conditions\n"
        out += "- Reference specific price movements and trends\n"
        out += "- Make your prediction more credible and actionable\n"
        return out


def _to_float(value) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _to_int(value) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return 0
