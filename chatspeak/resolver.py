"""
Client for the volume service that tracks per-user TTS volume.

    GET /api/tts/{user}/json  -> {success, volume, volumePercent, ttsCount}
    GET /api/tts/{user}       -> plain text summary
    GET /api/stats            -> plain text stats
"""
import logging
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from .exceptions import ResolverFailure
from .models import VolumeInfo
from .schemas import VolumeResponse

log = logging.getLogger("resolver")

class VolumeResolver:
    def __init__(self, base_url: str, timeout: float = 5.0, client: httpx.Client | None = None):
        self._client = client or httpx.Client(base_url=base_url.rstrip("/"), timeout=timeout)

    def close(self) -> None:
        self._client.close()

    def _get(self, path: str) -> httpx.Response:
        # single attempt, no retries
        try:
            response = self._client.get(path)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ResolverFailure(f"volume service responded with {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise ResolverFailure(f"volume service unreachable: {e}") from e
        return response

    def resolve_volume(self, user: str) -> VolumeInfo:
        response = self._get(f"/api/tts/{quote(user, safe='')}/json")
        try:
            data = VolumeResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise ResolverFailure(f"malformed volume payload: {e}") from e
        if not data.success:
            raise ResolverFailure("volume service returned success=false")

        try:
            info = VolumeInfo(
                volume=data.volume,
                volume_percent=round(data.volume_percent),
                usage_count=data.tts_count,
            )
        except (ArithmeticError, ValueError) as e:
            raise ResolverFailure(f"unusable volume payload: {e}") from e
        log.info(f"{user} volume {info.volume_percent}%", extra={"user": user, "event": "volume_resolved"})
        return info

    def volume_text(self, user: str) -> str:
        return self._get(f"/api/tts/{quote(user, safe='')}").text

    def stats_text(self) -> str:
        return self._get("/api/stats").text
