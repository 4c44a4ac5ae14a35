"""Tests for the endpoints backed by outside services: weather, locations, advisory and mandi prices"""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from kisandecks.config import NOMINATIM_BASE_URL, OPEN_METEO_FORECAST_URL, OPEN_METEO_GEOCODING_URL
from kisandecks.main import app
from kisandecks.models import AdvisoryChat, MarketPrice
from kisandecks.routes.weather import build_forecast, farming_alerts, weather_condition
from kisandecks.services.market_data import MarketDataService
from kisandecks.services.openai_client import get_openai_client

DAILY = {
    "time": ["2026-10-18", "2026-10-19", "2026-10-20", "2026-10-21", "2026-10-22", "2026-10-23"],
    "weather_code": [0, 61, 3, 95, 1, 2],
    "temperature_2m_max": [33, 31, 32, 29, 30, 31],
    "temperature_2m_min": [21, 20, 20, 19, 19, 20],
    "precipitation_probability_max": [0, 80, 10, 90, None, 5],
    "sunrise": ["2026-10-18T06:12"] * 6,
    "sunset": ["2026-10-18T17:45"] * 6,
}

FORECAST = {
    "current": {
        "temperature_2m": 41.2,
        "relative_humidity_2m": 30,
        "apparent_temperature": 44.0,
        "weather_code": 95,
        "cloud_cover": 75,
        "pressure_msl": 1008.6,
        "wind_speed_10m": 45.4,
        "precipitation_probability": 70,
    },
    "daily": DAILY,
}


def _fake_get(responses):
    """AsyncClient.get replacement that answers by URL"""

    async def fake_get(url, params=None, headers=None):
        response = responses[url]
        if isinstance(response, Exception):
            raise response
        return response

    return fake_get


@pytest.fixture
def chat_client():
    fake = FakeChatClient()
    app.dependency_overrides[get_openai_client] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_openai_client, None)


class FakeChatClient:
    configured = True

    def __init__(self):
        self.answer = "Use neem oil spray every 7 days."
        self.calls = []

    async def complete(self, messages, max_tokens):
        self.calls.append(messages)
        return self.answer


def _seed_prices(db):
    db.add_all(
        [
            MarketPrice(state="Punjab", district="Ludhiana", market="Khanna", commodity="Wheat",
                        min_price=2200, max_price=2400, modal_price=2300, price_date="17/10/2026"),
            MarketPrice(state="Punjab", district="Amritsar", market="Amritsar", commodity="Paddy",
                        variety="Basmati", min_price=3500, max_price=4100, modal_price=3800),
            MarketPrice(state="Madhya Pradesh", district="Indore", market="Indore", commodity="Soyabean",
                        modal_price=4600),
            MarketPrice(state="Madhya Pradesh", district="Sehore", market="Sehore", commodity="Wheat",
                        modal_price=2350),
        ]
    )
    db.commit()


# ============================================================================
# WEATHER
# ============================================================================


class TestWeatherHelpers:
    @pytest.mark.parametrize(
        "code, expected",
        [
            (None, ("Clear", "clear")),
            (0, ("Clear", "clear sky")),
            (3, ("Clouds", "overcast")),
            (45, ("Fog", "foggy")),
            (63, ("Rain", "rain")),
            (81, ("Rain", "rain showers")),
            (96, ("Thunderstorm", "thunderstorm")),
            (150, ("Clear", "clear")),
        ],
    )
    def test_weather_condition(self, code, expected):
        assert weather_condition(code) == expected

    def test_no_alerts_in_mild_weather(self):
        assert farming_alerts("Clear", 28, 10) == []

    def test_heat_and_wind(self):
        alerts = farming_alerts("Clear", 37, 65)

        assert [(a.type, a.severity) for a in alerts] == [
            ("Heat Advisory", "medium"),
            ("High Wind Advisory", "high"),
        ]

    def test_frost(self):
        assert [a.type for a in farming_alerts("Snow", 2, None)] == ["Frost Warning"]

    def test_forecast_skips_today(self):
        days = build_forecast(DAILY)

        assert len(days) == 5
        assert days[0].date == "19 Oct"
        assert days[0].dayName == "Mon"
        assert days[0].condition == "Rain"
        assert days[0].rainProbability == 80
        assert days[3].rainProbability == 0


class TestWeatherApi:
    def test_city_lookup_prefers_india(self, client):
        geocoding = {
            "results": [
                {"name": "Patna", "latitude": 1.0, "longitude": 2.0, "country_code": "US"},
                {"name": "Patna", "latitude": 25.6, "longitude": 85.1, "country_code": "IN",
                 "admin1": "Bihar", "admin2": "Patna"},
            ]
        }
        responses = {
            OPEN_METEO_GEOCODING_URL: httpx.Response(200, json=geocoding),
            OPEN_METEO_FORECAST_URL: httpx.Response(200, json=FORECAST),
        }

        with patch.object(httpx.AsyncClient, "get", new=AsyncMock(side_effect=_fake_get(responses))) as mock_get:
            response = client.get("/weather", params={"city": "Patna"})

        assert response.status_code == 200
        body = response.json()
        assert body["location"] == "Patna"
        assert body["state"] == "Bihar"
        assert body["district"] == "Patna"
        assert body["condition"] == "Thunderstorm"
        assert body["windSpeed"] == 45
        assert body["pressure"] == 1009
        assert body["sunrise"] == "06:12 am"
        assert body["sunset"] == "05:45 pm"
        assert len(body["forecast"]) == 5
        assert {a["type"] for a in body["alerts"]} == {"Rain Alert", "Extreme Heat Warning", "High Wind Advisory"}
        assert mock_get.call_args.kwargs["params"]["latitude"] == 25.6

    def test_coordinates_skip_geocoding(self, client):
        responses = {OPEN_METEO_FORECAST_URL: httpx.Response(200, json={"current": {"temperature_2m": 25}})}

        with patch.object(httpx.AsyncClient, "get", new=AsyncMock(side_effect=_fake_get(responses))):
            response = client.get("/weather", params={"lat": 23.25, "lon": 77.41})

        body = response.json()
        assert body["location"] == "23.25°N, 77.41°E"
        assert body["condition"] == "Clear"
        assert "alerts" not in body
        assert body["forecast"] == []

    def test_requires_city_or_coordinates(self, client):
        response = client.get("/weather", params={"lat": 23.25})

        assert response.status_code == 400
        assert response.json()["error"] == "Please provide city name or coordinates"

    def test_unknown_city(self, client):
        responses = {OPEN_METEO_GEOCODING_URL: httpx.Response(200, json={})}

        with patch.object(httpx.AsyncClient, "get", new=AsyncMock(side_effect=_fake_get(responses))):
            response = client.get("/weather", params={"city": "Atlantis"})

        assert response.status_code == 404

    def test_upstream_failure(self, client):
        responses = {OPEN_METEO_FORECAST_URL: httpx.ConnectError("boom")}

        with patch.object(httpx.AsyncClient, "get", new=AsyncMock(side_effect=_fake_get(responses))):
            response = client.get("/weather", params={"lat": 23.25, "lon": 77.41})

        assert response.status_code == 502
        assert response.json()["error"] == "Failed to fetch weather data. Please try again."


class TestLocationSearch:
    def test_short_query(self, client):
        assert client.get("/locations/search", params={"q": "a"}).json() == []

    def test_proxies_nominatim(self, client):
        places = [{"display_name": "Nashik, Maharashtra, India", "lat": "20.0", "lon": "73.8"}]
        responses = {f"{NOMINATIM_BASE_URL}/search": httpx.Response(200, json=places)}

        with patch.object(httpx.AsyncClient, "get", new=AsyncMock(side_effect=_fake_get(responses))) as mock_get:
            response = client.get("/locations/search", params={"q": "Nashik"})

        assert response.json() == places
        assert mock_get.call_args.kwargs["params"]["countrycodes"] == "in"
        assert "KisanDecks" in mock_get.call_args.kwargs["headers"]["User-Agent"]

    def test_upstream_error(self, client):
        responses = {f"{NOMINATIM_BASE_URL}/search": httpx.Response(503, text="busy")}

        with patch.object(httpx.AsyncClient, "get", new=AsyncMock(side_effect=_fake_get(responses))):
            response = client.get("/locations/search", params={"q": "Nashik"})

        assert response.status_code == 502


# ============================================================================
# ADVISORY
# ============================================================================


class TestAdvisory:
    def test_answer_is_stored(self, client, chat_client):
        response = client.post(
            "/advisory", json={"sessionId": "s1", "message": "My tomato leaves curl", "category": "pest"}
        )

        assert response.status_code == 200
        assert response.json()["role"] == "assistant"
        assert response.json()["content"] == chat_client.answer
        assert response.json()["advisoryType"] == "general"

        history = client.get("/advisory/s1").json()
        assert [m["role"] for m in history] == ["user", "assistant"]

    def test_history_is_sent_as_context(self, client, chat_client):
        client.post("/advisory", json={"sessionId": "s1", "message": "First question"})
        client.post("/advisory", json={"sessionId": "s1", "message": "Second question"})

        messages = chat_client.calls[-1]
        assert messages[0]["role"] == "system"
        assert [m["content"] for m in messages[1:]] == ["First question", chat_client.answer, "Second question"]

    def test_history_window(self, client, chat_client, db):
        for i in range(12):
            db.add(AdvisoryChat(session_id="s1", role="user", content=f"old {i}"))
        db.commit()

        client.post("/advisory", json={"sessionId": "s1", "message": "latest"})

        messages = chat_client.calls[-1]
        assert len(messages) == 11
        assert messages[-1]["content"] == "latest"

    def test_live_prices_in_prompt(self, client, chat_client, db):
        _seed_prices(db)

        client.post("/advisory", json={"sessionId": "s1", "message": "Should I sell wheat now?", "advisoryType": "crop"})

        system_prompt = chat_client.calls[-1][0]["content"]
        assert "LIVE DATA FROM OFFICIAL SOURCES" in system_prompt
        assert "Wheat at Khanna, Ludhiana, Punjab: modal ₹2,300" in system_prompt

    def test_no_live_prices_for_cattle(self, client, chat_client, db):
        _seed_prices(db)

        client.post("/advisory", json={"sessionId": "s1", "message": "wheat straw for cows?", "advisoryType": "cattle"})

        assert "LIVE DATA FROM OFFICIAL SOURCES" not in chat_client.calls[-1][0]["content"]

    def test_fallback_answer(self, client, chat_client):
        chat_client.answer = None

        response = client.post("/advisory", json={"sessionId": "s1", "message": "Hello"})

        assert response.json()["content"] == "Sorry, I could not generate a response. Please try again."

    @pytest.mark.parametrize(
        "payload, error",
        [
            ({"sessionId": "s1", "message": "   "}, "Please enter your question"),
            ({"sessionId": "s1", "message": "Hi", "advisoryType": "astrology"}, None),
            ({"message": "Hi"}, None),
        ],
    )
    def test_invalid_query(self, client, chat_client, payload, error):
        response = client.post("/advisory", json=payload)

        assert response.status_code == 400
        if error:
            assert response.json()["error"] == error
        assert chat_client.calls == []

    def test_unconfigured_provider(self, client):
        response = client.post("/advisory", json={"sessionId": "s1", "message": "Hello"})

        assert response.status_code == 502
        assert response.json()["error"] == "AI advisory is unavailable. Please try again."
        assert [m["role"] for m in client.get("/advisory/s1").json()] == ["user"]

    def test_vision(self, client, chat_client):
        response = client.post(
            "/advisory/vision",
            files={"image": ("leaf.png", b"\x89PNG fake image", "image/png")},
            data={"sessionId": "s2", "advisoryType": "cattle"},
        )

        assert response.status_code == 200
        assert response.json()["advisoryType"] == "cattle"

        user_part = chat_client.calls[-1][1]["content"]
        assert user_part[1]["image_url"]["url"].startswith("data:image/png;base64,")

        history = client.get("/advisory/s2").json()
        assert history[0]["content"] == "Please diagnose this animal's condition"
        assert history[0]["imageUrl"].startswith("/uploads/advisory/")

    def test_vision_requires_image(self, client, chat_client):
        response = client.post("/advisory/vision", data={"sessionId": "s2"})

        assert response.status_code == 400
        assert response.json()["error"] == "No image uploaded"


# ============================================================================
# MARKET
# ============================================================================


class TestMarket:
    def test_filters(self, client, db):
        _seed_prices(db)

        punjab = client.get("/market", params={"state": "punjab"}).json()
        assert punjab["totalCount"] == 2
        assert [p["commodity"] for p in punjab["prices"]] == ["Paddy", "Wheat"]
        assert punjab["lastUpdated"] is not None

        wheat = client.get("/market", params={"commodity": "WHEAT", "district": "sehore"}).json()
        assert [p["market"] for p in wheat["prices"]] == ["Sehore"]

        basmati = client.get("/market", params={"search": "basmati"}).json()
        assert basmati["prices"][0]["variety"] == "Basmati"
        assert basmati["prices"][0]["modalPrice"] == 3800

    def test_empty_table(self, client):
        body = client.get("/market").json()

        assert body == {"prices": [], "totalCount": 0, "lastUpdated": None}

    def test_catalog(self, client, db):
        _seed_prices(db)

        catalog = client.get("/market/catalog").json()

        assert catalog["states"] == ["Madhya Pradesh", "Punjab"]
        assert catalog["commodities"] == ["Paddy", "Soyabean", "Wheat"]

    def test_state_markets(self, client, db):
        _seed_prices(db)

        body = client.get("/market/districts/Madhya Pradesh").json()

        assert body == {"districts": ["Indore", "Sehore"], "markets": ["Indore", "Sehore"]}

    def test_commodity_prices(self, client, db):
        _seed_prices(db)

        prices = client.get("/prices/whe").json()

        assert {p["market"] for p in prices} == {"Khanna", "Sehore"}

    def test_refresh_upserts(self, admin_client, db):
        _seed_prices(db)
        records = [
            {"state": "Punjab", "district": "Ludhiana", "market": "Khanna", "commodity": "Wheat",
             "min_price": "2250", "max_price": "2450", "modal_price": "2380.0", "arrival_date": "18/10/2026"},
            {"state": "Bihar", "district": "Patna", "market": "Patna", "commodity": "Maize", "modal_price": "n/a"},
            {"state": "Bihar", "commodity": "Maize"},
        ]

        with patch("kisandecks.services.market_data.DATA_GOV_API_KEY", "test-key"), patch.object(
            MarketDataService, "fetch_records", new=AsyncMock(return_value=records)
        ):
            response = admin_client.post("/admin/advisory/refresh-prices")

        assert response.json() == {"message": "Data refresh completed", "updated": 2}

        khanna = admin_client.get("/market", params={"district": "Ludhiana"}).json()["prices"]
        assert len(khanna) == 1
        assert khanna[0]["modalPrice"] == 2380
        assert khanna[0]["priceDate"] == "18/10/2026"

        maize = admin_client.get("/prices/maize").json()
        assert maize[0]["modalPrice"] is None

    def test_refresh_requires_admin(self, client):
        assert client.post("/admin/advisory/refresh-prices").status_code == 401
