"""Catalog domain: verse segmentation, pagination, song store, enrichment."""

from .verses import segment
from .pagination import PageWindow, paginate, parse_query_int, parse_window
from .store import SongStore, SqlAlchemySongStore
from .enrichment import SongEnrichmentWorkflow, WorkflowState

__all__ = [
    "segment",
    "PageWindow",
    "paginate",
    "parse_query_int",
    "parse_window",
    "SongStore",
    "SqlAlchemySongStore",
    "SongEnrichmentWorkflow",
    "WorkflowState",
]
