"""Song catalog routes: list, lyric verses, add, update, delete."""

from __future__ import annotations

import logging

from flask import Blueprint, Response, current_app, jsonify, request
from pydantic import ValidationError

from musiclib.domain.catalog import (
    SongEnrichmentWorkflow,
    paginate,
    parse_query_int,
    parse_window,
    segment,
)
from musiclib.errors import CatalogError, InvalidArgument, NotFound
from musiclib.models.dto import AddSongRequest, UpdateSongRequest, VersePage
from musiclib.observability.metrics import record_song_deleted
from musiclib.utils.cancellation import CancellationRequested, CancellationToken


logger = logging.getLogger(__name__)

songs_bp = Blueprint('songs_bp', __name__, url_prefix='/songs')


def _settings():
    return current_app.extensions['catalog_settings']


def _store():
    return current_app.extensions['song_store']


def _lookup():
    return current_app.extensions['music_info_client']


def _require_song_id() -> int:
    raw = (request.args.get('id') or '').strip()
    if not raw:
        raise InvalidArgument('Song ID is required')
    return parse_query_int(raw, 'Invalid song ID')


def _json_body() -> dict:
    # Decode regardless of Content-Type
    payload = request.get_json(force=True, silent=True)
    if not isinstance(payload, dict):
        raise InvalidArgument('Invalid request body')
    return payload


@songs_bp.errorhandler(CatalogError)
def _handle_catalog_error(error: CatalogError):
    if error.status_code >= 500:
        logger.error("%s: %s", error.code, error.message, extra={"context": error.context})
    else:
        logger.info("%s: %s", error.code, error.message)
    return jsonify(error.to_dict()), error.status_code


@songs_bp.errorhandler(CancellationRequested)
def _handle_cancelled(error: CancellationRequested):
    logger.warning("Request abandoned: %s", error)
    return jsonify({'error': 'cancelled', 'message': 'Request was cancelled'}), 503


@songs_bp.route('/list', methods=['GET'])
def list_songs():
    settings = _settings()
    limit, offset = parse_window(
        request.args.get('limit'),
        request.args.get('offset'),
        default_limit=settings.default_page_limit,
    )
    songs = _store().list_songs(
        sort_by=request.args.get('sort_by'),
        sort_order=request.args.get('sort_order'),
        limit=limit,
        offset=offset,
    )
    return jsonify([song.to_dict() for song in songs]), 200


@songs_bp.route('/text', methods=['GET'])
def song_text():
    song_id = _require_song_id()
    settings = _settings()
    limit, offset = parse_window(
        request.args.get('limit'),
        request.args.get('offset'),
        default_limit=settings.default_page_limit,
    )

    verses = segment(_store().get_text(song_id))
    if not verses:
        raise NotFound('Song text is empty')

    window = paginate(len(verses), offset, limit)
    page = VersePage(total=len(verses), verses=window.slice(verses), has_more=window.has_more)
    return jsonify(page.model_dump()), 200


@songs_bp.route('/', methods=['DELETE'])
def delete_song():
    song_id = _require_song_id()
    removed = _store().delete(song_id)
    record_song_deleted(removed)
    return Response('Song deleted successfully', status=200, mimetype='text/plain')


@songs_bp.route('/', methods=['PUT'])
def update_song():
    song_id = _require_song_id()
    try:
        changes = UpdateSongRequest.model_validate(_json_body())
    except ValidationError:
        raise InvalidArgument('Invalid request body') from None

    _store().update(song_id, changes)
    return jsonify({'message': 'Song updated successfully', 'id': song_id}), 200


@songs_bp.route('/', methods=['POST'])
def add_song():
    try:
        add_request = AddSongRequest.model_validate(_json_body())
    except ValidationError:
        raise InvalidArgument('Invalid request body') from None

    workflow = SongEnrichmentWorkflow(
        _store(),
        _lookup(),
        cancel_token=CancellationToken(_settings().request_deadline),
    )
    song = workflow.add_song(add_request)
    return jsonify(song.to_dict()), 201


__all__ = ['songs_bp']
