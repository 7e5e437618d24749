"""Configuration loader for enrich_articles."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from common.config import ConfigSingleton, find_config_path, load_yaml

CONFIG_DIR = Path(__file__).resolve().parents[2] / "configs"

NEWS_API_KEY_ENV = "NEWS_API_KEY"
OPENAI_API_KEY_ENV = "OPENAI_API_KEY"
GOOGLE_GEOCODING_API_KEY_ENV = "GOOGLE_GEOCODING_API_KEY"


class ConfigError(ValueError):
    """Raised when required configuration is missing or malformed."""


@dataclass
class NewsApiSettings:
    language: str = "en"
    sort_by: str = "publishedAt"
    days_range: int = 1


@dataclass
class ApiUrls:
    category_keywords_url: str
    articles_url: str


@dataclass
class OpenAISettings:
    model: str = "gpt-3.5-turbo-instruct"


@dataclass
class GeocodingSettings:
    endpoint: str = "https://maps.googleapis.com/maps/api/geocode/json"


@dataclass
class TimingSettings:
    output_path: str = "~/Documents/StopwatchRecords.txt"


@dataclass
class ApiKeys:
    news_api_key: str
    openai_api_key: str
    google_geocoding_api_key: str


@dataclass
class Config:
    api_urls: ApiUrls
    news_api: NewsApiSettings = field(default_factory=NewsApiSettings)
    openai: OpenAISettings = field(default_factory=OpenAISettings)
    geocoding: GeocodingSettings = field(default_factory=GeocodingSettings)
    timing: TimingSettings = field(default_factory=TimingSettings)
    keywords_envelope: str = "$values"
    request_timeout: int = 30


def load_config(config_name: str | None = None, config_dir: Path = CONFIG_DIR) -> Config:
    """Load configuration from YAML file.

    Args:
        config_name: Name of config file (without .yaml extension) or a path
                    to a YAML file. If None, uses CONFIG_ENV env var or "prod".
        config_dir: Directory searched for named configs.

    Returns:
        Loaded Config object
    """
    config_path = find_config_path(config_name, config_dir, env_var="CONFIG_ENV")
    return parse_config(load_yaml(config_path))


def parse_config(data: dict[str, Any]) -> Config:
    """Parse config dictionary into Config object."""
    urls = data.get("api_urls") or {}
    missing = [key for key in ("category_keywords_url", "articles_url") if not urls.get(key)]
    if missing:
        raise ConfigError(f"Missing api_urls settings: {', '.join(missing)}")

    news_api = data.get("news_api", {})
    try:
        days_range = int(news_api.get("days_range", 1))
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"news_api.days_range must be an integer: {news_api.get('days_range')!r}") from exc

    return Config(
        api_urls=ApiUrls(
            category_keywords_url=urls["category_keywords_url"],
            articles_url=urls["articles_url"],
        ),
        news_api=NewsApiSettings(
            language=str(news_api.get("language", "en")),
            sort_by=str(news_api.get("sort_by", "publishedAt")),
            days_range=days_range,
        ),
        openai=OpenAISettings(
            model=data.get("openai", {}).get("model", "gpt-3.5-turbo-instruct"),
        ),
        geocoding=GeocodingSettings(
            endpoint=data.get("geocoding", {}).get(
                "endpoint", "https://maps.googleapis.com/maps/api/geocode/json"
            ),
        ),
        timing=TimingSettings(
            output_path=data.get("timing", {}).get("output_path", "~/Documents/StopwatchRecords.txt"),
        ),
        keywords_envelope=data.get("keywords_envelope", "$values"),
        request_timeout=int(data.get("request_timeout", 30)),
    )


def load_api_keys() -> ApiKeys:
    """Read the three service API keys from the environment."""
    env_names = (NEWS_API_KEY_ENV, OPENAI_API_KEY_ENV, GOOGLE_GEOCODING_API_KEY_ENV)
    missing = [name for name in env_names if not os.environ.get(name)]
    if missing:
        raise ConfigError(f"Missing API keys in environment: {', '.join(missing)}")

    return ApiKeys(
        news_api_key=os.environ[NEWS_API_KEY_ENV],
        openai_api_key=os.environ[OPENAI_API_KEY_ENV],
        google_geocoding_api_key=os.environ[GOOGLE_GEOCODING_API_KEY_ENV],
    )


# Global config instance (loaded on first access)
_manager: ConfigSingleton[Config] = ConfigSingleton(load_config)
get_config = _manager.get
set_config = _manager.set
reset_config = _manager.reset
