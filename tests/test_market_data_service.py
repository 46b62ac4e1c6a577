"""Unit tests for the live sports and stocks context."""
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from app.services.market_data_service import (
    SportsDataService,
    StocksDataService,
    extract_stock_symbols,
    market_status,
)

LAKERS = {
    "idTeam": "134867",
    "strTeam": "Los Angeles Lakers",
    "strLeague": "NBA",
    "intFormedYear": "1947",
    "strStadium": "Crypto.com Arena",
    "strDescriptionEN": "Basketball team.",
}


class TestMarketStatus:

    @pytest.mark.parametrize(
        "now, expected",
        [
            (datetime(2025, 6, 14, 15, tzinfo=timezone.utc), "closed (weekend)"),  # Saturday
            (datetime(2025, 6, 16, 15, tzinfo=timezone.utc), "open"),
            (datetime(2025, 6, 16, 21, tzinfo=timezone.utc), "closed"),
            (datetime(2025, 6, 16, 13, 59, tzinfo=timezone.utc), "closed"),
        ],
    )
    def test_status(self, now, expected):
        assert market_status(now) == expected


class TestSymbolExtraction:

    def test_dollar_and_bare_symbols(self):
        assert extract_stock_symbols("Should I buy $AAPL or TSLA this week?") == ["AAPL", "TSLA"]

    def test_stopwords_and_single_letters_dropped(self):
        assert extract_stock_symbols("WILL THE NVDA rally? I think A lot") == ["WILL", "NVDA"]

    def test_none(self):
        assert extract_stock_symbols("will tech stocks go up") == []


class TestSportsService:

    @pytest.mark.asyncio
    async def test_versus_question_looks_up_both_teams(self):
        service = SportsDataService(base_url="https://sports.test")

        async def fake_get_json(path, params):
            if path == "/searchteams.php":
                return {"teams": [dict(LAKERS, strTeam=params["t"])]}
            return {"results": [
                {"dateEvent": "2025-06-01", "strHomeTeam": "Lakers", "strAwayTeam": "Celtics",
                 "intHomeScore": "110", "intAwayScore": "102", "strStatus": "FT"},
            ]}

        service._get_json = AsyncMock(side_effect=fake_get_json)
        context = await service.get_context("Lakers vs Celtics tonight?")

        assert [t["name"] for t in context["teams"]] == ["Lakers", "Celtics tonight"]
        assert context["league"] == "NBA"
        assert context["recent_games"][0]["home_score"] == "110"

    @pytest.mark.asyncio
    async def test_team_lookup_is_cached(self):
        service = SportsDataService(base_url="https://sports.test")
        service._get_json = AsyncMock(return_value={"teams": [LAKERS]})

        first = await service.search_team("Lakers")
        second = await service.search_team("lakers")

        assert first == second
        assert first["stadium"] == "Crypto.com Arena"
        service._get_json.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_no_team_gives_empty_context(self):
        service = SportsDataService(base_url="https://sports.test")
        service._get_json = AsyncMock(return_value={"teams": None})
        assert await service.get_context("will my team win") == {}

    @pytest.mark.asyncio
    async def test_http_error_returns_none(self):
        client = MagicMock()
        client.get = AsyncMock(side_effect=httpx.ConnectError("down"))
        client_cls = MagicMock()
        client_cls.return_value.__aenter__.return_value = client
        with patch("app.services.market_data_service.httpx.AsyncClient", client_cls):
            assert await SportsDataService(base_url="https://sports.test").search_team("Lakers") is None

    def test_format_context(self):
        text = SportsDataService.format_context({
            "teams": [{"name": "Lakers", "league": "NBA", "stadium": None, "formed": "1947"}],
            "recent_games": [{"date": "2025-06-01", "home_team": "Lakers", "away_team": "Celtics",
                              "home_score": None, "away_score": None}],
        })
        assert "**Lakers** (NBA):" in text
        assert "- Founded: 1947" in text
        assert "Stadium" not in text
        assert "Lakers vs Celtics (TBD)" in text
        assert SportsDataService.format_context({}) == ""


class TestStocksService:

    @pytest.mark.asyncio
    async def test_quote_maps_fields(self):
        service = StocksDataService(api_key="k", base_url="https://stocks.test")
        service._query = AsyncMock(return_value={"Global Quote": {
            "01. symbol": "AAPL", "05. price": "190.12", "09. change": "-1.5",
            "10. change percent": "-0.78%", "06. volume": "51234567", "07. latest trading day": "2025-06-13",
        }})
        quote = await service.quote("aapl")
        assert quote["price"] == "190.12"
        assert quote["change_percent"] == "-0.78%"

    @pytest.mark.asyncio
    async def test_missing_price_is_none(self):
        service = StocksDataService(api_key="k", base_url="https://stocks.test")
        service._query = AsyncMock(return_value={"Global Quote": {}})
        assert await service.quote("ZZZZ") is None

    @pytest.mark.asyncio
    async def test_rate_limit_note_is_treated_as_failure(self):
        response = MagicMock()
        response.json.return_value = {"Note": "Thank you for using Alpha Vantage!"}
        client = MagicMock()
        client.get = AsyncMock(return_value=response)
        client_cls = MagicMock()
        client_cls.return_value.__aenter__.return_value = client
        with patch("app.services.market_data_service.httpx.AsyncClient", client_cls):
            result = await StocksDataService(api_key="k", base_url="https://stocks.test")._query("GLOBAL_QUOTE", "AAPL")
        assert result is None

    @pytest.mark.asyncio
    async def test_context_limits_symbols(self):
        service = StocksDataService(api_key="k", base_url="https://stocks.test")
        service.quote = AsyncMock(side_effect=lambda s: {"symbol": s})
        service.company = AsyncMock(return_value=None)

        context = await service.get_context("AAPL MSFT NVDA?", now=datetime(2025, 6, 16, 15, tzinfo=timezone.utc))

        assert [q["symbol"] for q in context["quotes"]] == ["AAPL", "MSFT"]
        assert context["companies"] is None
        assert context["market_status"] == "open"

    def test_format_context(self):
        text = StocksDataService.format_context({
            "quotes": [{"symbol": "AAPL", "price": "190.12", "change": "1.5", "change_percent": "0.78%",
                        "volume": "51234567", "last_updated": "2025-06-13"}],
            "companies": [{"name": "Apple Inc", "symbol": "AAPL", "sector": "TECHNOLOGY",
                           "industry": None, "market_cap": "2950000000000"}],
            "market_status": "open",
        })
        assert "**AAPL** - $190.12" in text
        assert "- Change: +1.5 (0.78%)" in text
        assert "- Volume: 51,234,567" in text
        assert "- Market Cap: $2950.00B" in text
        assert StocksDataService.format_context({"quotes": None}) == ""
