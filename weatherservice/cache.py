"""Forecast cache stored in a DynamoDB table."""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from weatherservice.errorlog import log_error

logger = logging.getLogger(__name__)


def _format_number(value: float | int) -> str:
    if isinstance(value, int):
        return str(value)
    if not math.isfinite(value):
        raise ValueError(f"cannot store non-finite number {value!r}")
    text = format(Decimal(repr(float(value))), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _attribute(item: Mapping[str, Any], name: str, kind: str) -> Any:
    value = item.get(name)
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise ValueError(f"attribute {name!r} is not an attribute value")
    if value.get("NULL"):
        return None
    if kind not in value:
        raise ValueError(f"attribute {name!r} is not of type {kind}")
    return value[kind]


def _read_float(item: Mapping[str, Any], name: str) -> float:
    raw = _attribute(item, name, "N")
    return 0.0 if raw is None else float(raw)


def _read_int(item: Mapping[str, Any], name: str) -> int:
    raw = _attribute(item, name, "N")
    return 0 if raw is None else int(raw)


@dataclass
class CachedWeather:
    """A cached forecast and the Unix time at which it expires."""

    key: str = ""
    temp_max: float = 0.0
    uv_index: float = 0.0
    rain_prob: float = 0.0
    ttl: int = 0

    def to_item(self) -> dict[str, dict[str, str]]:
        """Return the DynamoDB attribute-value map for this entry."""
        return {
            "Key": {"S": self.key},
            "TempMax": {"N": _format_number(self.temp_max)},
            "UVIndex": {"N": _format_number(self.uv_index)},
            "RainProb": {"N": _format_number(self.rain_prob)},
            "TTL": {"N": _format_number(int(self.ttl))},
        }

    @classmethod
    def from_item(cls, item: Mapping[str, Any]) -> CachedWeather:
        """Build an entry from a DynamoDB attribute-value map."""
        key = _attribute(item, "Key", "S")
        if key is not None and not isinstance(key, str):
            raise ValueError("attribute 'Key' is not a string")
        return cls(
            key=key or "",
            temp_max=_read_float(item, "TempMax"),
            uv_index=_read_float(item, "UVIndex"),
            rain_prob=_read_float(item, "RainProb"),
            ttl=_read_int(item, "TTL"),
        )


class DynamoDBCache:
    """Stores forecasts in a table through a low-level DynamoDB client."""

    def __init__(self, client: Any, table_name: str, ttl_minutes: int) -> None:
        self.client = client
        self.table_name = table_name
        self.ttl_minutes = ttl_minutes

    def put(self, key: str, weather: CachedWeather) -> None:
        """Store ``weather`` under ``key``, setting its key and expiry time."""
        weather.key = key
        weather.ttl = int(time.time()) + self.ttl_minutes * 60
        item = weather.to_item()
        self.client.put_item(TableName=self.table_name, Item=item)

    def get(self, key: str) -> CachedWeather | None:
        """Return the live entry under ``key``, or None if absent or expired."""
        logger.info("Going to get a weather from cache", extra={"context": {"key": key}})
        if not key:
            raise ValueError("empty key provided")

        try:
            response = self.client.get_item(
                TableName=self.table_name, Key={"Key": {"S": key}}
            )
        except Exception as err:
            log_error(err, {"key": key, "reason": "error while getting weather from cache"})
            raise

        item = (response or {}).get("Item")
        if item is None:
            return None

        try:
            data = CachedWeather.from_item(item)
        except ValueError as err:
            log_error(err, {"key": key, "reason": "error while unmarshaling weather from cache"})
            raise

        if data.ttl < int(time.time()):
            return None
        return data