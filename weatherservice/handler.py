"""API Gateway request handling for the weather service."""

from __future__ import annotations

import json
import logging
import math
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Protocol

from weatherservice.cache import CachedWeather
from weatherservice.errorlog import log_error
from weatherservice.weather import Forecast

logger = logging.getLogger(__name__)

_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_DATE_FORMAT = "%Y-%m-%d"


class ForecastClient(Protocol):
    def get_forecast(self, lat: str, long: str) -> dict[str, Forecast]: ...


class Cache(Protocol):
    def put(self, key: str, weather: CachedWeather) -> None: ...

    def get(self, key: str) -> CachedWeather | None: ...


def _json_string(text: str) -> str:
    encoded = json.dumps(text, ensure_ascii=False)
    for char, escape in (
        ("<", "\\u003c"),
        (">", "\\u003e"),
        ("&", "\\u0026"),
        ("\u2028", "\\u2028"),
        ("\u2029", "\\u2029"),
    ):
        encoded = encoded.replace(char, escape)
    return encoded


def _json_number(value: float) -> str:
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"unsupported value: {value!r}")
    magnitude = abs(value)
    if value == 0 or 1e-6 <= magnitude < 1e21:
        text = format(Decimal(repr(value)), "f")
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        return text
    return re.sub(r"e([+-])0(\d)$", r"e\1\2", repr(value))


@dataclass(frozen=True)
class WeatherServiceResponse:
    """The forecast returned to API callers."""

    date: str
    latitude: str
    longitude: str
    temperature: float
    uv_index: float
    rain_probability: float

    def to_json(self) -> str:
        """Encode as compact JSON; raises ValueError for non-finite numbers."""
        parts = (
            ("date", _json_string(self.date)),
            ("latitude", _json_string(self.latitude)),
            ("longitude", _json_string(self.longitude)),
            ("temperature", _json_number(self.temperature)),
            ("uvIndex", _json_number(self.uv_index)),
            ("rainProbability", _json_number(self.rain_probability)),
        )
        return "{" + ",".join(f'"{name}":{value}' for name, value in parts) + "}"


@dataclass(frozen=True)
class ProxyResponse:
    """An API Gateway proxy response."""

    status_code: int
    body: str
    headers: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return the response in the shape API Gateway expects."""
        return {"statusCode": self.status_code, "headers": dict(self.headers), "body": self.body}


def cached_data_to_response(cached: CachedWeather) -> WeatherServiceResponse:
    """Build a response from a cache entry keyed ``lat_lon_date``."""
    parts = cached.key.split("_")
    if len(parts) < 3:
        raise ValueError(f"cache key {cached.key!r} is not of the form lat_lon_date")
    return WeatherServiceResponse(
        parts[2], parts[0], parts[1], cached.temp_max, cached.uv_index, cached.rain_prob
    )


def forecast_to_cached_data(forecast: Forecast) -> CachedWeather:
    """Build a cache entry, without key or expiry, from a forecast."""
    return CachedWeather(
        temp_max=forecast.temp_2m_max,
        uv_index=forecast.uv_index_max,
        rain_prob=forecast.precip_probability,
    )


def _respond(payload: WeatherServiceResponse) -> ProxyResponse:
    try:
        body = payload.to_json()
    except ValueError as err:
        error_id = log_error(err, {"weatherServiceResponse": payload})
        return ProxyResponse(400, f"[{error_id}] Error while generating response")
    return ProxyResponse(200, body, {"Content-Type": "application/json"})


def _parse_date(text: str) -> datetime:
    if not _DATE_PATTERN.fullmatch(text):
        raise ValueError(f"invalid date {text!r}")
    return datetime.strptime(text, _DATE_FORMAT).replace(tzinfo=timezone.utc)


def _local_now() -> datetime:
    return datetime.now().astimezone()


class WeatherService:
    """Answers forecast requests from the cache or the forecast provider."""

    def __init__(
        self,
        weather_client: ForecastClient,
        weather_cache: Cache,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.weather_client = weather_client
        self.weather_cache = weather_cache
        self._clock = clock or _local_now

    def _now(self) -> datetime:
        now = self._clock()
        return now.astimezone() if now.tzinfo is None else now

    def handle_request(self, event: Mapping[str, Any] | None, context: Any = None) -> ProxyResponse:
        """Handle an API Gateway proxy event with lat, lon and date parameters."""
        params = (event or {}).get("queryStringParameters") or {}
        lat = params.get("lat") or ""
        lon = params.get("lon") or ""
        date = params.get("date") or ""

        logger.info(
            "Going to handle request",
            extra={"context": {"lat": lat, "lon": lon, "date": date}},
        )

        if not lat or not lon:
            return ProxyResponse(400, "Missing lat/lon")

        now = self._now()
        if not date:
            date = now.strftime(_DATE_FORMAT)

        try:
            parsed_date = _parse_date(date)
        except ValueError:
            return ProxyResponse(400, "Invalid date")

        utc_now = now.astimezone(timezone.utc)
        today = datetime(utc_now.year, utc_now.month, utc_now.day, tzinfo=timezone.utc)
        if parsed_date < today:
            return ProxyResponse(400, "Invalid date: Date could not be older than today")
        if parsed_date > now + timedelta(days=7):
            return ProxyResponse(400, "Invalid date: Date could not be 7 day from today")

        key = f"{lat}_{lon}_{date}"
        try:
            cached = self.weather_cache.get(key)
        except Exception:
            cached = None
        if cached is not None:
            logger.info("Got weather from cache", extra={"context": {"key": key}})
            return _respond(cached_data_to_response(cached))

        logger.info(
            "Did not find weather from cache, will fetch from third party provider",
            extra={"context": {"key": key}},
        )
        try:
            forecasts = self.weather_client.get_forecast(lat, lon)
        except Exception as err:
            error_id = log_error(err, {"lat": lat, "lon": lon})
            return ProxyResponse(500, f"[{error_id}] Weather api error")

        forecast = forecasts.get(date)
        if forecast is None:
            error_id = log_error(None, {"lat": lat, "lon": lon, "date": date})
            return ProxyResponse(404, f"[{error_id}] Weather forecast not found for this date")

        response = WeatherServiceResponse(
            date,
            forecast.latitude,
            forecast.longitude,
            forecast.temp_2m_max,
            forecast.uv_index_max,
            forecast.precip_probability,
        )
        self._store_all(forecasts)
        return _respond(response)

    def _store_all(self, forecasts: Mapping[str, Forecast]) -> None:
        for day, forecast in forecasts.items():
            store_key = f"{forecast.latitude}_{forecast.longitude}_{day}"
            data = forecast_to_cached_data(forecast)
            try:
                self.weather_cache.put(store_key, data)
            except Exception as err:
                log_error(err, {"key": day, "data": data})