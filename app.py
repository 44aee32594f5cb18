import os
import logging
from datetime import datetime
from uuid import uuid4

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Flask specific imports ---
from flask import Flask, request, g
from flask_cors import CORS

from config import Config
from musiclib.clients.music_info import HttpMusicInfoClient
from musiclib.database.db_manager import initialize_database
from musiclib.domain.catalog import SqlAlchemySongStore
from musiclib.interfaces.http.routes import songs_bp, health_bp
from musiclib.observability import configure_structured_logging, metrics_blueprint, init_tracing
from musiclib.settings import load_catalog_settings


logger = logging.getLogger(__name__)


def configure_logging(log_dir: str, level: str = "INFO") -> str:
    """
    Configure root logging with:
      - FileHandler (``level``+) to a new file per run: log-YYYY-MM-DD-HH-MM-SS
      - StreamHandler (WARNING+) to console when ENABLE_CONSOLE_LOGS is set
      - Werkzeug/Flask loggers routed to root (no extra console spam)

    Returns the path to the created log file.
    """
    os.makedirs(log_dir, exist_ok=True)

    timestamp = datetime.now().strftime("%Y-%m-%d-%H-%M-%S")
    log_filename = f"log-{timestamp}"
    log_path = os.path.join(log_dir, log_filename)

    resolved_level = logging.getLevelName(str(level).upper())
    if not isinstance(resolved_level, int):
        resolved_level = logging.INFO

    root = logging.getLogger()
    root.setLevel(resolved_level)

    # Preserve structured handlers; remove existing file/console handlers to avoid duplicates
    root.handlers = [
        h for h in root.handlers
        if not isinstance(h, logging.FileHandler) and not getattr(h, "_musiclib_console", False)
    ]

    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    file_handler = logging.FileHandler(log_path, encoding='utf-8')
    file_handler.setLevel(resolved_level)
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)

    if Config.ENABLE_CONSOLE_LOGS:
        console_handler = logging.StreamHandler()
        # If console logging is enabled, keep it concise: warnings and above
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(formatter)
        console_handler._musiclib_console = True
        root.addHandler(console_handler)

    # Quiet Flask/Werkzeug own console handlers; let them propagate to root
    for name in ("werkzeug", "flask.app"):
        _l = logging.getLogger(name)
        _l.setLevel(logging.INFO)
        _l.handlers = []
        _l.propagate = True

    return log_path


def create_app(config_overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    configure_structured_logging(app)
    init_tracing(app)

    @app.before_request
    def _assign_request_id():
        g.request_id = request.headers.get('X-Request-ID') or uuid4().hex

    @app.after_request
    def _inject_request_id(response):
        if getattr(g, 'request_id', None):
            response.headers.setdefault('X-Request-ID', g.request_id)
        return response

    allowed_origins = sorted({
        origin.strip()
        for origin in app.config.get('CORS_ALLOWED_ORIGINS', [])
        if origin and origin.strip() and origin.strip() != "*"
    })
    CORS(app, resources={r"/*": {"origins": allowed_origins}})

    # Initialize database
    initialize_database(app)

    # Immutable settings snapshot injected into every catalog component
    settings = load_catalog_settings(app.config)
    app.extensions['catalog_settings'] = settings
    app.extensions['song_store'] = SqlAlchemySongStore()
    app.extensions['music_info_client'] = HttpMusicInfoClient(
        base_url=settings.music_api_url,
        timeout=settings.music_api_timeout,
    )
    app.logger.info(
        "Song info lookup configured: url=%s timeout=%ss",
        settings.music_api_url, settings.music_api_timeout,
    )

    # --- Register Blueprints ---
    api_prefix = (app.config.get('API_PREFIX') or '').rstrip('/')
    app.register_blueprint(songs_bp, url_prefix=f"{api_prefix}/songs")
    app.register_blueprint(metrics_blueprint)
    app.register_blueprint(health_bp)

    return app


if __name__ == '__main__':
    # Configure logging:
    # - In debug with reloader: only in the child process to avoid duplicate files
    # - In non-debug: always configure here
    debug_mode = bool(Config.DEBUG)
    if not debug_mode or os.environ.get('WERKZEUG_RUN_MAIN') == 'true':
        log_file_path = configure_logging(Config.LOG_DIR, Config.LOG_LEVEL)
        logger.info("File logging initialized at %s", log_file_path)

    if not Config.MUSIC_API_URL:
        logger.warning("MUSIC_API_URL is not set; adding songs will fail.")

    app = create_app()
    # Route app.logger through root handlers, keep levels consistent
    app.logger.handlers = []
    app.logger.propagate = True
    logger.info("Starting Flask application on port %s...", Config.PORT)
    app.run(debug=Config.DEBUG, host='0.0.0.0', port=Config.PORT, threaded=True)
