"""Daily forecasts from the Open-Meteo API."""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Union

from weatherservice.errorlog import log_error

logger = logging.getLogger(__name__)

Fetch = Callable[[str], Union[bytes, str]]


@dataclass(frozen=True)
class Forecast:
    """One day's forecast at a location."""

    latitude: str
    longitude: str
    temp_2m_max: float
    uv_index_max: float
    precip_probability: float


def _as_float(value: Any, name: str) -> float:
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"field {name!r} holds a non-numeric value: {value!r}")
    return float(value)


def _series(daily: dict[str, Any], name: str) -> list[float]:
    values = daily.get(name) or []
    if not isinstance(values, list):
        raise ValueError(f"field {name!r} is not a list")
    return [_as_float(value, name) for value in values]


def parse_forecast(payload: bytes | str) -> dict[str, Forecast]:
    """Turn an Open-Meteo JSON response into forecasts keyed by date."""
    data = json.loads(payload)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("forecast response is not a JSON object")
    daily = data.get("daily") or {}
    if not isinstance(daily, dict):
        raise ValueError("field 'daily' is not an object")

    times = daily.get("time") or []
    if not isinstance(times, list) or not all(isinstance(day, str) for day in times):
        raise ValueError("field 'time' is not a list of strings")
    temps = _series(daily, "temperature_2m_max")
    uv_indexes = _series(daily, "uv_index_max")
    rain = _series(daily, "precipitation_probability_max")
    if min(len(temps), len(uv_indexes), len(rain)) < len(times):
        raise ValueError("daily series are shorter than the list of days")

    latitude = f"{_as_float(data.get('latitude'), 'latitude'):.4f}"
    longitude = f"{_as_float(data.get('longitude'), 'longitude'):.4f}"
    return {
        day: Forecast(latitude, longitude, temp, uv_index, rain_probability)
        for day, temp, uv_index, rain_probability in zip(times, temps, uv_indexes, rain)
    }


def urllib_fetch(url: str) -> bytes:
    """GET ``url`` and return the response body, whatever the status code."""
    try:
        with urllib.request.urlopen(url) as response:
            return response.read()
    except urllib.error.HTTPError as err:
        try:
            return err.read()
        finally:
            err.close()


class OpenMeteoClient:
    """Fetches forecasts from a URL template taking latitude and longitude."""

    def __init__(self, fetch: Fetch, url: str) -> None:
        self.fetch = fetch
        self.url = url

    def get_forecast(self, lat: str, long: str) -> dict[str, Forecast]:
        """Return the forecasts for a location keyed by date."""
        logger.info(
            "Going to get forecast from OpenMeteo",
            extra={"context": {"lat": lat, "long": long}},
        )
        payload = self.fetch(self.url % (lat, long))
        try:
            return parse_forecast(payload)
        except ValueError as err:
            log_error(err, {"lat": lat, "long": long})
            raise