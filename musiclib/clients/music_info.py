# musiclib/clients/music_info.py
import logging
from typing import Optional

import requests
from pydantic import ValidationError

from musiclib.errors import (
    InvalidArgument,
    UpstreamBadResponse,
    UpstreamError,
    UpstreamUnavailable,
)
from musiclib.models.dto import SongDetail

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


class MusicInfoLookup:
    """Interface for the external song info provider."""

    def fetch(self, group: str, song: str, *, timeout: Optional[float] = None) -> SongDetail:  # pragma: no cover - interface
        raise NotImplementedError


class HttpMusicInfoClient(MusicInfoLookup):
    """Calls ``GET {base_url}/info?group=..&song=..`` and decodes the SongDetail body.

    One attempt per call; failures are mapped onto the catalog error taxonomy:
    transport problems -> UpstreamUnavailable, HTTP 400 -> InvalidArgument,
    other non-200 -> UpstreamError, undecodable bodies -> UpstreamBadResponse.
    """

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT_SECONDS, session=None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self._session = session or requests.Session()

    @property
    def info_url(self) -> str:
        return f"{self.base_url}/info"

    def fetch(self, group, song, *, timeout=None):
        effective_timeout = self.timeout if timeout is None else min(timeout, self.timeout)
        params = {"group": group, "song": song}
        logger.debug("Requesting song details from %s for %s - %s", self.info_url, group, song)
        try:
            resp = self._session.get(self.info_url, params=params, timeout=effective_timeout)
        except requests.RequestException as exc:
            logger.error("Failed to make external API request to %s: %s", self.info_url, exc)
            raise UpstreamUnavailable("Failed to fetch song details") from exc

        if resp.status_code == 400:
            logger.info("External API rejected group=%r song=%r", group, song)
            raise InvalidArgument("Invalid song or group name")
        if resp.status_code != 200:
            logger.error(
                "External API returned non-200 status %s for %s", resp.status_code, self.info_url
            )
            raise UpstreamError("Failed to fetch song details", status=resp.status_code)

        try:
            payload = resp.json()
        except ValueError as exc:
            logger.error("Failed to decode external API response: %s", exc)
            raise UpstreamBadResponse("Failed to parse song details") from exc
        if not isinstance(payload, dict):
            logger.error("External API response is not an object: %r", type(payload).__name__)
            raise UpstreamBadResponse("Failed to parse song details")
        try:
            return SongDetail.model_validate(payload)
        except ValidationError as exc:
            logger.error("External API response has an unexpected shape: %s", exc)
            raise UpstreamBadResponse("Failed to parse song details") from exc


__all__ = ["MusicInfoLookup", "HttpMusicInfoClient", "DEFAULT_TIMEOUT_SECONDS"]
