from __future__ import annotations

from flask import Blueprint, current_app, jsonify
from sqlalchemy import text

from musiclib.database.db_manager import db

health_bp = Blueprint("health_bp", __name__)


def _check_database() -> str:
    try:
        db.session.execute(text("SELECT 1"))
        return "ok"
    except Exception as exc:  # pragma: no cover - DB failure path
        db.session.rollback()
        return f"error: {exc}"


@health_bp.route("/healthz")
def healthz():
    checks = {"database": _check_database()}
    checks["music_api"] = "configured" if current_app.extensions.get("music_info_client") else "unavailable"

    status = 200 if checks["database"] == "ok" else 503
    overall = "ok" if status == 200 else "degraded"
    return jsonify({"status": overall, "checks": checks}), status


@health_bp.route("/readyz")
def readyz():
    ready = True
    payload = {}
    if current_app.config.get("READINESS_CHECK_DATABASE", True):
        payload["database"] = _check_database()
        ready = payload["database"] == "ok"
    payload["status"] = "ready" if ready else "blocked"
    return jsonify(payload), 200 if ready else 503
