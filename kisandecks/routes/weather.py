"""Weather for farmers via Open-Meteo (no API key required).

A city is geocoded with the Open-Meteo geocoding API (preferring Indian
matches); coordinates are used as given. The response carries current
conditions, a 5-day forecast and farming alerts derived from the current
conditions.
"""

import logging
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

import httpx
from fastapi import APIRouter
from pydantic import BaseModel

from ..config import OPEN_METEO_FORECAST_URL, OPEN_METEO_GEOCODING_URL
from ..errors import NotFound, UpstreamError, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/weather", tags=["Weather"])

IST = ZoneInfo("Asia/Kolkata")
FORECAST_DAYS = 5
WEATHER_UNAVAILABLE = ("Failed to fetch weather data. Please try again.", "मौसम की जानकारी नहीं मिल सकी। फिर से प्रयास करें।")

CURRENT_FIELDS = (
    "temperature_2m,relative_humidity_2m,apparent_temperature,weather_code,"
    "cloud_cover,pressure_msl,wind_speed_10m,precipitation_probability"
)
DAILY_FIELDS = "weather_code,temperature_2m_max,temperature_2m_min,sunrise,sunset,precipitation_probability_max"


class WeatherAlert(BaseModel):
    type: str
    severity: str  # medium, high
    message: str


class ForecastDay(BaseModel):
    date: str
    dayName: str
    tempMax: Optional[float] = None
    tempMin: Optional[float] = None
    condition: str
    icon: str = "01d"
    rainProbability: float = 0


class WeatherResponse(BaseModel):
    location: str
    country: str
    state: str = ""
    district: str = ""
    date: str
    temp: Optional[float] = None
    feelsLike: Optional[float] = None
    condition: str
    description: str
    humidity: Optional[float] = None
    windSpeed: int = 0
    visibility: int = 10
    pressure: Optional[int] = None
    clouds: Optional[float] = None
    sunrise: str = ""
    sunset: str = ""
    icon: str = "01d"
    rainProbability: float = 0
    alerts: Optional[list[WeatherAlert]] = None
    forecast: list[ForecastDay]


def weather_condition(code: Optional[int]) -> tuple[str, str]:
    """Map a WMO weather code to (main, description)"""
    if code is None:
        return "Clear", "clear"
    if code == 0:
        return "Clear", "clear sky"
    if code == 1:
        return "Clear", "mainly clear"
    if code == 2:
        return "Clouds", "partly cloudy"
    if code == 3:
        return "Clouds", "overcast"
    if 45 <= code <= 48:
        return "Fog", "foggy"
    if 51 <= code <= 55:
        return "Drizzle", "drizzle"
    if 56 <= code <= 57:
        return "Drizzle", "freezing drizzle"
    if 61 <= code <= 65:
        return "Rain", "rain"
    if 66 <= code <= 67:
        return "Rain", "freezing rain"
    if 71 <= code <= 77:
        return "Snow", "snow"
    if 80 <= code <= 82:
        return "Rain", "rain showers"
    if 85 <= code <= 86:
        return "Snow", "snow showers"
    if 95 <= code <= 99:
        return "Thunderstorm", "thunderstorm"
    return "Clear", "clear"


def farming_alerts(condition: str, temperature: Optional[float], wind_speed: Optional[float]) -> list[WeatherAlert]:
    alerts = []
    if condition in ("Rain", "Thunderstorm"):
        alerts.append(
            WeatherAlert(
                type="Rain Alert",
                severity="high" if condition == "Thunderstorm" else "medium",
                message="Rain expected. Protect harvested crops and ensure proper drainage in fields.",
            )
        )

    if temperature is not None:
        if temperature > 40:
            alerts.append(
                WeatherAlert(
                    type="Extreme Heat Warning",
                    severity="high",
                    message="Very high temperatures. Irrigate crops during early morning/evening. "
                    "Provide shade for livestock.",
                )
            )
        elif temperature > 35:
            alerts.append(
                WeatherAlert(
                    type="Heat Advisory",
                    severity="medium",
                    message="High temperatures expected. Ensure adequate water for crops and animals.",
                )
            )
        if temperature < 5:
            alerts.append(
                WeatherAlert(
                    type="Frost Warning",
                    severity="high",
                    message="Very low temperatures. Protect frost-sensitive crops with mulching or covers.",
                )
            )

    if wind_speed is not None and wind_speed > 40:
        alerts.append(
            WeatherAlert(
                type="High Wind Advisory",
                severity="high" if wind_speed > 60 else "medium",
                message="Strong winds expected. Secure young plants and avoid spraying pesticides.",
            )
        )
    return alerts


def _clock_label(iso_value: Optional[str]) -> str:
    """Clock time such as "06:12 am" from an ISO timestamp"""
    if not iso_value:
        return ""
    moment = datetime.fromisoformat(iso_value)
    return f"{moment:%I:%M} {'am' if moment.hour < 12 else 'pm'}"


def _at(values: Optional[list], index: int):
    return values[index] if values and index < len(values) else None


def build_forecast(daily: dict) -> list[ForecastDay]:
    """Days 1..5 of the daily block (day 0 is today)"""
    days = []
    times = daily.get("time") or []
    for i in range(1, min(FORECAST_DAYS + 1, len(times))):
        day = date.fromisoformat(times[i])
        days.append(
            ForecastDay(
                date=f"{day.day} {day:%b}",
                dayName=f"{day:%a}",
                tempMax=_at(daily.get("temperature_2m_max"), i),
                tempMin=_at(daily.get("temperature_2m_min"), i),
                condition=weather_condition(_at(daily.get("weather_code"), i))[0],
                rainProbability=_at(daily.get("precipitation_probability_max"), i) or 0,
            )
        )
    return days


async def _get_json(client: httpx.AsyncClient, url: str, params: dict) -> dict:
    try:
        resp = await client.get(url, params=params)
    except httpx.HTTPError as e:
        logger.error(f"❌ Open-Meteo request failed: {str(e)}")
        raise UpstreamError(*WEATHER_UNAVAILABLE) from e
    if resp.status_code >= 400:
        logger.warning(f"Open-Meteo error {resp.status_code}: {resp.text[:200]}")
        raise UpstreamError(*WEATHER_UNAVAILABLE)
    return resp.json()


async def geocode_city(client: httpx.AsyncClient, city: str) -> dict:
    data = await _get_json(
        client,
        OPEN_METEO_GEOCODING_URL,
        {"name": city, "count": 5, "language": "en", "format": "json"},
    )
    results = data.get("results") or []
    if not results:
        raise NotFound("Location not found. Please try another city name.", "स्थान नहीं मिला। कोई दूसरा शहर आज़माएँ।")
    return next((r for r in results if r.get("country_code") == "IN"), results[0])


@router.get("", response_model=WeatherResponse, response_model_exclude_none=True)
async def get_weather(city: Optional[str] = None, lat: Optional[float] = None, lon: Optional[float] = None):
    country, state, district = "IN", "", ""

    async with httpx.AsyncClient(timeout=10.0) as client:
        if lat is not None and lon is not None:
            latitude, longitude = lat, lon
            location = f"{latitude:.2f}°N, {longitude:.2f}°E"
        elif city and city.strip():
            place = await geocode_city(client, city.strip())
            latitude, longitude = place["latitude"], place["longitude"]
            location = place.get("name", city.strip())
            country = place.get("country_code") or "IN"
            state = place.get("admin1") or ""
            district = place.get("admin2") or place.get("admin3") or ""
        else:
            raise ValidationError("Please provide city name or coordinates", "कृपया शहर का नाम या निर्देशांक दें")

        data = await _get_json(
            client,
            OPEN_METEO_FORECAST_URL,
            {
                "latitude": latitude,
                "longitude": longitude,
                "current": CURRENT_FIELDS,
                "hourly": "precipitation_probability",
                "daily": DAILY_FIELDS,
                "timezone": "Asia/Kolkata",
                "forecast_days": FORECAST_DAYS + 1,
            },
        )

    current = data.get("current") or {}
    daily = data.get("daily") or {}
    main, description = weather_condition(current.get("weather_code"))
    temperature = current.get("temperature_2m")
    wind_speed = current.get("wind_speed_10m")
    pressure = current.get("pressure_msl")
    alerts = farming_alerts(main, temperature, wind_speed)
    today = datetime.now(IST)

    logger.info(f"🌤️ Weather for {location}: {main}, {temperature}°C, {len(alerts)} alerts")
    return WeatherResponse(
        location=location,
        country=country,
        state=state,
        district=district,
        date=f"{today:%A}, {today.day} {today:%B %Y}",
        temp=temperature,
        feelsLike=current.get("apparent_temperature"),
        condition=main,
        description=description,
        humidity=current.get("relative_humidity_2m"),
        windSpeed=round(wind_speed or 0),
        pressure=round(pressure) if pressure is not None else None,
        clouds=current.get("cloud_cover"),
        sunrise=_clock_label(_at(daily.get("sunrise"), 0)),
        sunset=_clock_label(_at(daily.get("sunset"), 0)),
        rainProbability=current.get("precipitation_probability") or 0,
        alerts=alerts or None,
        forecast=build_forecast(daily),
    )
