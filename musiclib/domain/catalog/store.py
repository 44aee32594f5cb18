from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from sqlalchemy.exc import SQLAlchemyError

from musiclib.database.db_manager import db, Song
from musiclib.errors import InvalidArgument, NotFound, StorageError
from musiclib.models.dto import UpdateSongRequest


logger = logging.getLogger(__name__)

DEFAULT_SORT_KEY = "id"

# Caller-facing sort names mapped onto columns. Never interpolate caller text.
SORTABLE_COLUMNS = {
    "id": Song.id,
    "group": Song.group,
    "song": Song.song,
    "title": Song.song,
    "release_date": Song.release_date,
    "releaseDate": Song.release_date,
    "link": Song.link,
}

WRITABLE_FIELDS = ("group", "song", "release_date", "text", "link")
REQUIRED_FIELDS = ("group", "song")


def resolve_sort(sort_by: Optional[str], sort_order: Optional[str]):
    """Return the ORDER BY clauses for a list query.

    Raises InvalidArgument for keys outside SORTABLE_COLUMNS. Ties are broken
    by id ascending.
    """
    key = (sort_by or "").strip() or DEFAULT_SORT_KEY
    column = SORTABLE_COLUMNS.get(key)
    if column is None:
        raise InvalidArgument(f"Unsupported sort_by value: {key}")
    descending = (sort_order or "").strip().lower() == "desc"
    primary = column.desc() if descending else column.asc()
    if key == DEFAULT_SORT_KEY:
        return [primary]
    return [primary, Song.id.asc()]


class SongStore:
    """Interface for persisting song records."""

    def list_songs(
        self,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> List[Song]:  # pragma: no cover - interface
        raise NotImplementedError

    def get_song(self, song_id: int) -> Song:  # pragma: no cover - interface
        raise NotImplementedError

    def get_text(self, song_id: int) -> str:  # pragma: no cover - interface
        raise NotImplementedError

    def create(self, song: Song) -> Song:  # pragma: no cover - interface
        raise NotImplementedError

    def update(
        self, song_id: int, changes: Union[UpdateSongRequest, Mapping[str, Any]]
    ) -> Song:  # pragma: no cover - interface
        raise NotImplementedError

    def delete(self, song_id: int) -> bool:  # pragma: no cover - interface
        raise NotImplementedError


class SqlAlchemySongStore(SongStore):
    """SongStore backed by the Flask-SQLAlchemy session.

    Each write is one statement followed by a commit; on any database error
    the session is rolled back and StorageError raised.
    """

    def __init__(self, session=None):
        self._session = session

    @property
    def session(self):
        return self._session if self._session is not None else db.session

    def list_songs(self, sort_by=None, sort_order=None, limit=10, offset=0):
        logger.debug(
            "Starting list_songs: sort_by=%s sort_order=%s limit=%s offset=%s",
            sort_by, sort_order, limit, offset,
        )
        if limit < 0 or offset < 0:
            raise InvalidArgument("Invalid limit or offset value")
        order_by = resolve_sort(sort_by, sort_order)
        if limit == 0:
            return []
        try:
            songs = (
                self.session.query(Song)
                .order_by(*order_by)
                .limit(limit)
                .offset(offset)
                .all()
            )
        except SQLAlchemyError as e:
            logger.error("Failed to list songs: %s", e, exc_info=True)
            raise StorageError("Error getting songs") from e
        logger.debug("Successfully retrieved songs: count=%s", len(songs))
        return songs

    def get_song(self, song_id):
        try:
            song = self.session.get(Song, song_id)
        except SQLAlchemyError as e:
            logger.error("Failed to load song %s: %s", song_id, e, exc_info=True)
            raise StorageError("Error getting song") from e
        if song is None:
            raise NotFound("Song not found")
        return song

    def get_text(self, song_id):
        logger.debug("Starting get_text: id=%s", song_id)
        try:
            row = self.session.query(Song.text).filter(Song.id == song_id).first()
        except SQLAlchemyError as e:
            logger.error("Failed to get song text for %s: %s", song_id, e, exc_info=True)
            raise StorageError("Error getting song text") from e
        if row is None:
            logger.debug("Song not found: id=%s", song_id)
            raise NotFound("Song not found")
        text = row[0] or ""
        logger.debug("Successfully retrieved song text: id=%s length=%s", song_id, len(text))
        return text

    def create(self, song):
        logger.debug("Starting create: group=%s song=%s", song.group, song.song)
        try:
            self.session.add(song)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("Failed to create song: %s", e, exc_info=True)
            raise StorageError("Failed to create song") from e
        logger.debug("Successfully created song: id=%s", song.id)
        return song

    def update(self, song_id, changes):
        if isinstance(changes, UpdateSongRequest):
            fields: Dict[str, Any] = changes.changes()
        else:
            fields = {k: v for k, v in dict(changes).items() if v is not None}
        unknown = set(fields) - set(WRITABLE_FIELDS)
        if unknown:
            raise InvalidArgument(f"Unknown song fields: {', '.join(sorted(unknown))}")
        for name in REQUIRED_FIELDS:
            if name in fields and not str(fields[name]).strip():
                raise InvalidArgument(f"{name.capitalize()} must not be empty")

        logger.debug("Starting update: id=%s fields=%s", song_id, sorted(fields))
        song = self.get_song(song_id)
        try:
            for name, value in fields.items():
                setattr(song, name, value)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("Failed to update song %s: %s", song_id, e, exc_info=True)
            raise StorageError("Failed to update song") from e
        logger.debug("Successfully updated song: id=%s", song_id)
        return song

    def delete(self, song_id):
        logger.debug("Starting delete: id=%s", song_id)
        try:
            removed = (
                self.session.query(Song)
                .filter(Song.id == song_id)
                .delete(synchronize_session=False)
            )
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("Failed to delete song %s: %s", song_id, e, exc_info=True)
            raise StorageError("Error deleting song") from e
        logger.debug("Successfully deleted song: id=%s rows_affected=%s", song_id, removed)
        return removed > 0


__all__ = [
    "SongStore",
    "SqlAlchemySongStore",
    "SORTABLE_COLUMNS",
    "resolve_sort",
]
