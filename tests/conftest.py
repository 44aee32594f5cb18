import os
import sys
from pathlib import Path

import pytest

# Ensure project root is on sys.path so 'app', 'config', and 'musiclib' import correctly
_TESTS_DIR = os.path.dirname(__file__)
_ROOT_DIR = os.path.abspath(os.path.join(_TESTS_DIR, os.pardir))
if _ROOT_DIR not in sys.path:
    sys.path.insert(0, _ROOT_DIR)

from tests.support import factories as test_factories
from tests.support import stubs as test_stubs


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch, tmp_path_factory):
    """Ensure a clean env for tests with per-test sqlite files."""
    db_dir = tmp_path_factory.mktemp("db")
    db_path = Path(db_dir) / "test.sqlite"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_path.as_posix()}")
    monkeypatch.setenv("MUSIC_API_URL", "http://music-api.test")
    yield db_path


@pytest.fixture
def lookup_stub():
    """Song info lookup fake returning complete details unless reconfigured."""
    return test_stubs.MusicInfoLookupStub()


@pytest.fixture
def app(_isolate_env, tmp_path, lookup_stub):
    import app as app_module

    application = app_module.create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{_isolate_env.as_posix()}",
            "MUSIC_API_URL": "http://music-api.test",
            "LOG_DIR": str(tmp_path / "logs"),
        }
    )
    # Never hit the network from route tests
    application.extensions['music_info_client'] = lookup_stub
    yield application


@pytest.fixture
def app_context(app):
    with app.app_context():
        yield app


@pytest.fixture
def db_session(app_context):
    from musiclib.database.db_manager import db

    test_factories.set_session(db.session)
    try:
        yield db.session
    finally:
        try:
            db.session.rollback()
        except Exception:
            pass
        db.session.remove()
        test_factories.reset_session()


@pytest.fixture
def factories(db_session):
    yield test_factories


@pytest.fixture
def store(db_session):
    from musiclib.domain.catalog import SqlAlchemySongStore

    return SqlAlchemySongStore()


@pytest.fixture
def client(app):
    return app.test_client()
