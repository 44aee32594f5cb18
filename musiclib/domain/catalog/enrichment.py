"""Create-with-enrichment workflow for new songs.

A new song is only a group/title pair from the caller; release date,
lyric text and link come from the external lookup. The workflow moves
through Validating -> Enriching -> Persisting -> Done and stops in Failed
on the first error. Nothing is retried and nothing is written unless the
lookup returned every enriched field.
"""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Optional

from musiclib.clients.music_info import MusicInfoLookup
from musiclib.database.db_manager import Song
from musiclib.errors import CatalogError, InvalidArgument, UpstreamIncomplete
from musiclib.models.dto import AddSongRequest, SongDetail
from musiclib.observability.metrics import (
    record_enrichment_attempt,
    record_enrichment_failure,
    record_enrichment_success,
)
from musiclib.utils.cancellation import CancellationRequested, CancellationToken

from .store import SongStore

logger = logging.getLogger(__name__)


class WorkflowState(str, Enum):
    VALIDATING = "validating"
    ENRICHING = "enriching"
    PERSISTING = "persisting"
    DONE = "done"
    FAILED = "failed"


class SongEnrichmentWorkflow:
    """Validate an add request, enrich it from the lookup, then persist it.

    One instance handles one create call; ``state`` and ``failure`` describe
    where it ended.
    """

    def __init__(
        self,
        store: SongStore,
        lookup: MusicInfoLookup,
        *,
        cancel_token: Optional[CancellationToken] = None,
    ) -> None:
        self.store = store
        self.lookup = lookup
        self.cancel_token = cancel_token or CancellationToken()
        self.state = WorkflowState.VALIDATING
        self.failure: Optional[Exception] = None

    def add_song(self, request: AddSongRequest) -> Song:
        started = time.perf_counter()
        try:
            song = self._run(request)
        except (CatalogError, CancellationRequested) as exc:
            self.state = WorkflowState.FAILED
            self.failure = exc
            reason = getattr(exc, "code", "cancelled")
            record_enrichment_failure(reason, time.perf_counter() - started)
            logger.info("Add song failed in %s: %s", reason, exc)
            raise
        self.state = WorkflowState.DONE
        record_enrichment_success(time.perf_counter() - started)
        return song

    def _run(self, request: AddSongRequest) -> Song:
        self.state = WorkflowState.VALIDATING
        self._validate(request)

        self.state = WorkflowState.ENRICHING
        self.cancel_token.raise_if_cancelled("song lookup")
        record_enrichment_attempt()
        detail = self.lookup.fetch(
            request.group, request.song, timeout=self.cancel_token.remaining()
        )
        self._ensure_complete(detail)

        self.state = WorkflowState.PERSISTING
        self.cancel_token.raise_if_cancelled("persisting song")
        song = Song(
            group=request.group,
            song=request.song,
            release_date=detail.release_date,
            text=detail.text,
            link=detail.link,
        )
        created = self.store.create(song)
        logger.info("Created song %s: %s - %s", created.id, created.group, created.song)
        return created

    @staticmethod
    def _validate(request: AddSongRequest) -> None:
        if not request.group:
            raise InvalidArgument("Group is required")
        if not request.song:
            raise InvalidArgument("Song is required")

    @staticmethod
    def _ensure_complete(detail: SongDetail) -> None:
        missing = detail.missing_fields()
        if missing:
            logger.error("External API returned incomplete data: missing=%s", ", ".join(missing))
            raise UpstreamIncomplete(
                "Incomplete song details received", context={"missing": missing}
            )


__all__ = ["SongEnrichmentWorkflow", "WorkflowState"]
