"""Configuration and wiring of the weather service."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from weatherservice.cache import DynamoDBCache
from weatherservice.handler import WeatherService
from weatherservice.weather import Fetch, OpenMeteoClient, urllib_fetch

logger = logging.getLogger(__name__)

DEFAULT_REGION = "eu-west-1"


class ConfigError(Exception):
    """The environment holds a value that cannot be parsed."""


@dataclass(frozen=True)
class AppConfig:
    """Settings read from the environment."""

    open_meteo_url: str = ""
    dynamodb_table: str = ""
    ttl_minutes: int = 0


def load_app_config(environ: Mapping[str, str] | None = None) -> AppConfig:
    """Read the configuration from ``environ``, or from the process environment."""
    env = os.environ if environ is None else environ
    ttl_minutes = 0
    ttl_text = env.get("TTL_MINUTES")
    if ttl_text is not None:
        try:
            ttl_minutes = int(ttl_text, 0)
        except ValueError as err:
            logger.error("error while binding to 'AppConfig': %s", err)
            raise ConfigError(f"failed to parse configuration from environment: {err}") from err
    return AppConfig(
        open_meteo_url=env.get("OPEN_MATEO_URL", ""),
        dynamodb_table=env.get("DYNAMODB_TABLE", ""),
        ttl_minutes=ttl_minutes,
    )


def create_service(config: AppConfig, dynamodb_client: Any, fetch: Fetch | None = None) -> WeatherService:
    """Build a weather service backed by ``dynamodb_client`` and the forecast URL."""
    weather_client = OpenMeteoClient(fetch or urllib_fetch, config.open_meteo_url)
    weather_cache = DynamoDBCache(dynamodb_client, config.dynamodb_table, config.ttl_minutes)
    logger.info("Starting Weather api service")
    return WeatherService(weather_client, weather_cache)