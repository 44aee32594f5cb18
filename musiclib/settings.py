#!/usr/bin/env python
"""
Immutable settings snapshot for the catalog components.

Built once at application start from config.Config (or the Flask config
mapping) and injected into the store, lookup client, workflow and routes,
so no component reads global configuration while serving a request.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from config import Config


class CatalogSettings(BaseModel):
    """Catalog-wide settings; frozen after construction."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    # External song info API
    music_api_url: str
    music_api_timeout: float = Field(default=10.0, gt=0)

    # Pagination
    default_page_limit: int = Field(default=10, ge=0)

    # Per-request work is abandoned before persisting once this elapses
    request_deadline: Optional[float] = 30.0

    @field_validator("music_api_url", mode="before")
    @classmethod
    def _normalize_url(cls, value: object) -> str:
        url = str(value or "").strip()
        if not url:
            raise ValueError("music_api_url must not be empty")
        return url.rstrip("/")

    @field_validator("request_deadline", mode="before")
    @classmethod
    def _coerce_deadline(cls, value: object) -> Optional[float]:
        if value in (None, ""):
            return None
        try:
            deadline = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return None
        # Zero or negative disables the deadline
        return deadline if deadline > 0 else None


def _read(source: Any, key: str, default: Any = None) -> Any:
    if isinstance(source, Mapping):
        return source.get(key, default)
    return getattr(source, key, default)


def load_catalog_settings(
    source: Any = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> CatalogSettings:
    """Build settings from ``source`` (Config class or Flask config), then overrides."""
    source = Config if source is None else source
    data: Dict[str, Any] = {
        "music_api_url": _read(source, "MUSIC_API_URL", Config.MUSIC_API_URL),
        "music_api_timeout": _read(source, "MUSIC_API_TIMEOUT_SECONDS", Config.MUSIC_API_TIMEOUT_SECONDS),
        "default_page_limit": _read(source, "DEFAULT_PAGE_LIMIT", Config.DEFAULT_PAGE_LIMIT),
        "request_deadline": _read(source, "REQUEST_DEADLINE_SECONDS", Config.REQUEST_DEADLINE_SECONDS),
    }
    if overrides:
        data.update(overrides)
    return CatalogSettings.model_validate(data)


__all__ = [
    "CatalogSettings",
    "load_catalog_settings",
]
