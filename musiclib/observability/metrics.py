from __future__ import annotations

from typing import Optional

from flask import Blueprint, Response
from prometheus_client import Counter, Histogram, generate_latest

metrics_blueprint = Blueprint("metrics_bp", __name__)

CONTENT_TYPE_LATEST = "text/plain; version=0.0.4; charset=utf-8"

ENRICHMENT_ATTEMPTS = Counter(
    "musiclib_enrichment_attempts_total",
    "Total number of outbound song info lookups issued.",
)
ENRICHMENT_SUCCESSES = Counter(
    "musiclib_enrichment_success_total",
    "Total number of songs created from a successful lookup.",
)
ENRICHMENT_FAILURES = Counter(
    "musiclib_enrichment_failure_total",
    "Total number of failed add-song requests, by failure reason.",
    ["reason"],
)
ENRICHMENT_DURATION = Histogram(
    "musiclib_enrichment_duration_seconds",
    "Wall time of add-song requests from validation to commit.",
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10, float("inf")),
)
SONGS_DELETED = Counter(
    "musiclib_songs_deleted_total",
    "Total number of rows removed by delete requests.",
)


def record_enrichment_attempt() -> None:
    ENRICHMENT_ATTEMPTS.inc()


def record_enrichment_success(duration_seconds: Optional[float] = None) -> None:
    ENRICHMENT_SUCCESSES.inc()
    if duration_seconds is not None:
        ENRICHMENT_DURATION.observe(duration_seconds)


def record_enrichment_failure(reason: str, duration_seconds: Optional[float] = None) -> None:
    ENRICHMENT_FAILURES.labels(reason=reason).inc()
    if duration_seconds is not None:
        ENRICHMENT_DURATION.observe(duration_seconds)


def record_song_deleted(removed: bool) -> None:
    if removed:
        SONGS_DELETED.inc()


@metrics_blueprint.route("/metrics")
def metrics_endpoint() -> Response:
    return Response(generate_latest(), mimetype=CONTENT_TYPE_LATEST)
