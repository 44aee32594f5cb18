#!/usr/bin/env python
# config.py
import os
from typing import List

# This assumes config.py is at the root of your project
basedir = os.path.abspath(os.path.dirname(__file__))


def _get_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def _get_csv_list(name: str, default: str) -> List[str]:
    raw = os.getenv(name)
    source = raw if raw is not None else default
    return [token.strip() for token in source.split(",") if token and token.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'change-me-music-library'

    # Database
    # Defaults to a local SQLite file; set DATABASE_URL for Postgres in deployments.
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'musiclib', 'database', 'instance', 'musiclib.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # External song info API (GET {MUSIC_API_URL}/info?group=..&song=..)
    MUSIC_API_URL = os.getenv('MUSIC_API_URL', 'http://localhost:8081')
    MUSIC_API_TIMEOUT_SECONDS = _get_float('MUSIC_API_TIMEOUT_SECONDS', 10.0)

    # HTTP surface
    # Empty prefix serves /songs/...; the versioned layout uses /api/v1
    API_PREFIX = os.getenv('API_PREFIX', '')
    PORT = _get_int('PORT', 5000)
    DEFAULT_PAGE_LIMIT = _get_int('DEFAULT_PAGE_LIMIT', 10)
    # Work for a request is abandoned before persisting once this elapses
    REQUEST_DEADLINE_SECONDS = _get_float('REQUEST_DEADLINE_SECONDS', 30.0)
    CORS_ALLOWED_ORIGINS = _get_csv_list('CORS_ALLOWED_ORIGINS', 'http://localhost:3000')

    # Runtime behavior
    DEBUG = _get_bool('DEBUG', False)
    # Control console logging; when disabled, logs go only to file and JSON stdout
    ENABLE_CONSOLE_LOGS = _get_bool('ENABLE_CONSOLE_LOGS', False)
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
    LOG_DIR = os.getenv('LOG_DIR', os.path.join(basedir, 'musiclib', 'log'))

    # Health
    READINESS_CHECK_DATABASE = _get_bool('READINESS_CHECK_DATABASE', True)

    # Observability (optional OpenTelemetry export)
    OTEL_EXPORTER_OTLP_ENDPOINT = os.getenv('OTEL_EXPORTER_OTLP_ENDPOINT')
    OTEL_EXPORTER_OTLP_HEADERS = os.getenv('OTEL_EXPORTER_OTLP_HEADERS')
    OTEL_EXPORTER_OTLP_INSECURE = _get_bool('OTEL_EXPORTER_OTLP_INSECURE', True)
    OTEL_SERVICE_NAME = os.getenv('OTEL_SERVICE_NAME', 'music-library')
