import pytest
from sqlalchemy.exc import OperationalError

from musiclib.database.db_manager import Song
from musiclib.domain.catalog.store import SqlAlchemySongStore, resolve_sort
from musiclib.errors import InvalidArgument, NotFound, StorageError
from musiclib.models.dto import UpdateSongRequest


class _ExplodingSession:
    """Session double that fails loudly if the store touches it."""

    def __getattr__(self, name):
        raise AssertionError(f"session.{name} should not be used")


class _FailingSession:
    def __init__(self):
        self.rolled_back = False

    def _fail(self, *args, **kwargs):
        raise OperationalError("INSERT", {}, Exception("database is locked"))

    add = _fail
    query = _fail

    def commit(self):
        self._fail()

    def rollback(self):
        self.rolled_back = True


@pytest.mark.unit
def test_list_defaults_to_id_ascending(store, factories, db_session):
    songs = [factories.SongFactory() for _ in range(3)]
    db_session.commit()

    listed = store.list_songs()
    assert [s.id for s in listed] == sorted(s.id for s in songs)


@pytest.mark.unit
def test_list_sorts_by_allowed_column_descending(store, factories, db_session):
    factories.SongFactory(group="ABBA", song="Waterloo")
    factories.SongFactory(group="Queen", song="Bohemian Rhapsody")
    factories.SongFactory(group="Muse", song="Uprising")
    db_session.commit()

    listed = store.list_songs(sort_by="group", sort_order="DESC")
    assert [s.group for s in listed] == ["Queen", "Muse", "ABBA"]


@pytest.mark.unit
def test_list_breaks_ties_by_id(store, factories, db_session):
    first = factories.SongFactory(group="Same")
    second = factories.SongFactory(group="Same")
    db_session.commit()

    for order in ("asc", "desc"):
        listed = store.list_songs(sort_by="group", sort_order=order)
        assert [s.id for s in listed] == [first.id, second.id]


@pytest.mark.unit
def test_list_applies_limit_and_offset(store, factories, db_session):
    songs = [factories.SongFactory() for _ in range(5)]
    db_session.commit()

    listed = store.list_songs(limit=2, offset=3)
    assert [s.id for s in listed] == [songs[3].id, songs[4].id]
    assert store.list_songs(limit=2, offset=50) == []
    assert store.list_songs(limit=0) == []


@pytest.mark.unit
def test_list_empty_catalog_returns_empty_list(store):
    assert store.list_songs() == []


@pytest.mark.unit
@pytest.mark.parametrize("sort_by", ["text", "id; DROP TABLE songs", "group_name", "ID"])
def test_list_rejects_unknown_sort_key_before_querying(sort_by):
    store = SqlAlchemySongStore(session=_ExplodingSession())
    with pytest.raises(InvalidArgument):
        store.list_songs(sort_by=sort_by)


@pytest.mark.unit
def test_resolve_sort_unknown_order_defaults_to_ascending():
    clauses = resolve_sort("title", "sideways")
    assert "ASC" in str(clauses[0]).upper()
    assert len(clauses) == 2


@pytest.mark.unit
def test_get_text_returns_raw_text(store, factories, db_session):
    song = factories.SongFactory(text="a\\nb")
    db_session.commit()
    assert store.get_text(song.id) == "a\\nb"


@pytest.mark.unit
def test_get_text_returns_empty_string_for_empty_text(store, factories, db_session):
    song = factories.SongFactory(text="")
    db_session.commit()
    assert store.get_text(song.id) == ""


@pytest.mark.unit
def test_get_text_missing_song_raises_not_found(store):
    with pytest.raises(NotFound):
        store.get_text(12345)


@pytest.mark.unit
def test_create_assigns_id_and_round_trips_through_list(store):
    created = store.create(
        Song(group="Muse", song="Supermassive Black Hole", release_date="16.07.2006", text="x", link="https://l")
    )
    assert created.id is not None

    listed = [s.to_dict() for s in store.list_songs()]
    assert {
        "id": created.id,
        "group": "Muse",
        "song": "Supermassive Black Hole",
        "releaseDate": "16.07.2006",
        "text": "x",
        "link": "https://l",
    } in listed


@pytest.mark.unit
def test_create_failure_rolls_back_and_raises_storage_error():
    session = _FailingSession()
    store = SqlAlchemySongStore(session=session)
    with pytest.raises(StorageError):
        store.create(Song(group="g", song="s"))
    assert session.rolled_back


@pytest.mark.unit
def test_update_merges_only_provided_fields(store, factories, db_session):
    song = factories.SongFactory(group="Muse", song="Uprising", link="https://old")
    db_session.commit()

    store.update(song.id, UpdateSongRequest(link="https://new", releaseDate="2009"))

    refreshed = store.get_song(song.id)
    assert refreshed.link == "https://new"
    assert refreshed.release_date == "2009"
    assert refreshed.group == "Muse"
    assert refreshed.song == "Uprising"


@pytest.mark.unit
def test_update_rejects_blank_required_fields(store, factories, db_session):
    song = factories.SongFactory()
    db_session.commit()
    with pytest.raises(InvalidArgument):
        store.update(song.id, {"group": "  "})


@pytest.mark.unit
def test_update_rejects_unknown_fields(store, factories, db_session):
    song = factories.SongFactory()
    db_session.commit()
    with pytest.raises(InvalidArgument):
        store.update(song.id, {"id": 99})


@pytest.mark.unit
def test_update_missing_song_raises_not_found(store):
    with pytest.raises(NotFound):
        store.update(999, {"text": "new"})


@pytest.mark.unit
def test_delete_is_idempotent(store, factories, db_session):
    song = factories.SongFactory()
    db_session.commit()
    # The instance is expired once its row is gone
    song_id = song.id

    assert store.delete(song_id) is True
    assert store.delete(song_id) is False
    with pytest.raises(NotFound):
        store.get_text(song_id)
    with pytest.raises(NotFound):
        store.get_song(song_id)
