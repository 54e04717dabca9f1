"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

from place_enrichment.models import PlaceProvider

logger = logging.getLogger(__name__)

_PROVIDER_NAMES = {
    "google": PlaceProvider.GOOGLE,
    "apple": PlaceProvider.APPLE,
}


def _env_number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning(f"[CONFIG] Invalid {name} '{raw}'; using {default}.")
        return default


@dataclass(frozen=True)
class Settings:
    google_places_api_key: str = ""
    apple_maps_auth_token: str = ""
    default_provider: PlaceProvider = PlaceProvider.GOOGLE
    cache_max_size: int = 100
    cache_ttl_seconds: float = 3600.0
    photo_max_width: int = 400
    http_timeout: float = 10.0
    language: str = "en"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    google_places_api_key = os.getenv("GOOGLE_PLACES_API_KEY", "")
    apple_maps_auth_token = os.getenv("APPLE_MAPS_AUTH_TOKEN", "")
    provider_raw = os.getenv("PLACES_DEFAULT_PROVIDER", "google").strip().lower()
    default_provider = _PROVIDER_NAMES.get(provider_raw)
    if default_provider is None:
        logger.warning(f"[CONFIG] Unknown PLACES_DEFAULT_PROVIDER '{provider_raw}'; using google.")
        default_provider = PlaceProvider.GOOGLE

    if not google_places_api_key:
        logger.warning("[CONFIG] GOOGLE_PLACES_API_KEY is not configured; Google Places requests will fail.")
    if not apple_maps_auth_token:
        logger.warning("[CONFIG] APPLE_MAPS_AUTH_TOKEN is not configured; Apple Maps requests will fail.")

    return Settings(
        google_places_api_key=google_places_api_key,
        apple_maps_auth_token=apple_maps_auth_token,
        default_provider=default_provider,
        cache_max_size=_env_number("PLACES_CACHE_MAX_SIZE", 100, int),
        cache_ttl_seconds=_env_number("PLACES_CACHE_TTL_SECONDS", 3600.0, float),
        photo_max_width=_env_number("PLACES_PHOTO_MAX_WIDTH", 400, int),
        http_timeout=_env_number("PLACES_HTTP_TIMEOUT", 10.0, float),
        language=os.getenv("PLACES_LANGUAGE", "en"),
    )
