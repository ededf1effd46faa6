# src/sosrelay/config/settings.py
"""
Application settings (Pydantic).

Settings are loaded from `src/sosrelay/config/defaults.yaml`, then optionally overridden by:
- an external YAML file via `SOSRELAY_CONFIG_PATH`
- environment variables (e.g., `SOSRELAY_RESOLVER_STRATEGY`, `GOOGLE_APPLICATION_CREDENTIALS`)

Design rule:
- Tuning knobs (TTL, cache bound, timeouts, fallback identifiers) live in YAML, not in resolver code.
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Literal
from sosrelay.core.env import load_dotenv_if_present

import yaml
from pydantic import BaseModel, Field


ResolverStrategy = Literal["static", "geocode", "asserted"]


def _read_package_yaml(filename: str) -> dict[str, Any]:
    """Read a YAML file packaged inside `sosrelay.config`."""
    text = resources.files("sosrelay.config").joinpath(filename).read_text(encoding="utf-8")
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {filename}; expected a mapping.")
    return data


def _read_yaml_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML file from disk and return its mapping root."""
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid YAML root object for {path}; expected a mapping.")
    return data


class AppSettings(BaseModel):
    name: str = "SOS Relay"
    log_level: str = "INFO"
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])


class SimulatorSettings(BaseModel):
    enabled: bool = True
    north: float = 37.8
    south: float = 37.7
    east: float = -122.3
    west: float = -122.5
    district: str = "bengaluru_urban"


class StaticResolverSettings(BaseModel):
    bounds_file: str = "district_bounds.yaml"
    simulator: SimulatorSettings = Field(default_factory=SimulatorSettings)


class GeocodeResolverSettings(BaseModel):
    base_url: str = "https://nominatim.openstreetmap.org"
    user_agent: str = "sosrelay/0.1.0 (+https://local)"
    accept_language: str = "en"
    response_format: str = "json"
    zoom: int = Field(10, ge=0, le=18)
    timeout_seconds: float = Field(2.5, gt=0)
    cache_ttl_seconds: int = Field(60 * 60 * 12, gt=0)
    cache_max_entries: int = Field(1000, ge=1)
    coordinate_precision: int = Field(4, ge=0, le=8)


class ResolverSettings(BaseModel):
    strategy: ResolverStrategy = "static"
    fallback_district: str = "india_general"
    static: StaticResolverSettings = Field(default_factory=StaticResolverSettings)
    geocode: GeocodeResolverSettings = Field(default_factory=GeocodeResolverSettings)


class MessagingSettings(BaseModel):
    topic_prefix: str = "district-"
    credentials_path: str | None = None
    project_id: str | None = None
    dry_run: bool = False


class ManualAlertSettings(BaseModel):
    latitude: float = Field(12.9716, ge=-90, le=90)
    longitude: float = Field(77.5946, ge=-180, le=180)
    district: str = "bengaluru_urban"
    device_id: str = "test-device"
    app_version: str = "1.0.0"


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    resolver: ResolverSettings = Field(default_factory=ResolverSettings)
    messaging: MessagingSettings = Field(default_factory=MessagingSettings)
    test_alert: ManualAlertSettings = Field(default_factory=ManualAlertSettings)


def _env_flag(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "y"}


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Overlay selected environment variables onto raw settings payload.

    Note: We intentionally keep this whitelist small to avoid exposing unsafe overrides.
    """
    load_dotenv_if_present()
    data = dict(data)

    log_level = os.getenv("SOSRELAY_LOG_LEVEL")
    if log_level:
        data.setdefault("app", {})["log_level"] = log_level

    cors_origins = os.getenv("SOSRELAY_CORS_ORIGINS")
    if cors_origins:
        data.setdefault("app", {})["cors_origins"] = [
            s.strip() for s in cors_origins.split(",") if s.strip()
        ]

    strategy = os.getenv("SOSRELAY_RESOLVER_STRATEGY")
    if strategy:
        data.setdefault("resolver", {})["strategy"] = strategy.strip().lower()

    nominatim_url = os.getenv("SOSRELAY_NOMINATIM_URL")
    if nominatim_url:
        data.setdefault("resolver", {}).setdefault("geocode", {})["base_url"] = nominatim_url

    user_agent = os.getenv("SOSRELAY_NOMINATIM_USER_AGENT")
    if user_agent:
        data.setdefault("resolver", {}).setdefault("geocode", {})["user_agent"] = user_agent

    credentials_path = os.getenv("GOOGLE_APPLICATION_CREDENTIALS")
    if credentials_path:
        data.setdefault("messaging", {})["credentials_path"] = credentials_path

    project_id = os.getenv("FIREBASE_PROJECT_ID")
    if project_id:
        data.setdefault("messaging", {})["project_id"] = project_id

    dry_run = os.getenv("SOSRELAY_FIREBASE_DRY_RUN")
    if dry_run:
        data.setdefault("messaging", {})["dry_run"] = _env_flag(dry_run)

    return data


@lru_cache
def get_settings() -> Settings:
    """Load and validate settings (cached)."""
    load_dotenv_if_present()
    config_path = os.getenv("SOSRELAY_CONFIG_PATH")
    raw = _read_yaml_file(config_path) if config_path else _read_package_yaml("defaults.yaml")
    raw = _apply_env_overrides(raw)
    return Settings.model_validate(raw)


@lru_cache
def get_logging_config() -> dict[str, Any]:
    """Load logging configuration (cached)."""
    return _read_package_yaml("logging.yaml")


@lru_cache
def get_district_bounds(filename: str = "district_bounds.yaml") -> dict[str, Any]:
    """Load the packaged static district table (cached, read-only)."""
    return _read_package_yaml(filename)
