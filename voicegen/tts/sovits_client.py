"""
GPT-SoVITS api_v2 HTTP client for SoVITS VoiceGen.

This module talks to a GPT-SoVITS server started with ``api_v2.py``.

Key points:

- Model weights are swapped with two independent GET calls:
  ``/set_gpt_weights`` and ``/set_sovits_weights``. There is no endpoint that
  sets both at once, so callers must serialize switches themselves
  (see ``switch_queue.ModelSwitchSerializer``).
- Synthesis is a single ``POST /tts`` returning the whole audio file.
- Error bodies are JSON (``{"message": ..., "Exception": ...}``) or plain text.

Configuration (env vars or config):

- SOVITS_API_URL   (default: "http://127.0.0.1:9880")
- SOVITS_TIMEOUT   (default: unset, no timeout)
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import httpx

from .errors import ModelSlot, ModelSwitchError, SynthesisError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

ENDPOINT_TTS = "/tts"
ENDPOINT_SET_GPT_WEIGHTS = "/set_gpt_weights"
ENDPOINT_SET_SOVITS_WEIGHTS = "/set_sovits_weights"

_SLOT_ENDPOINTS: Dict[str, str] = {
    "gpt": ENDPOINT_SET_GPT_WEIGHTS,
    "sovits": ENDPOINT_SET_SOVITS_WEIGHTS,
}


# ---------------------------------------------------------------------------
# Low-level helpers
# ---------------------------------------------------------------------------


def error_detail(resp: httpx.Response) -> str:
    """
    Extract a human readable error from a failed backend response.

    Preference order: JSON ``message``, JSON ``detail``, the whole JSON body,
    the raw response text, and finally a generic status line.
    """
    try:
        data = resp.json()
    except ValueError:
        text = resp.text.strip()
        return text or f"HTTP error status: {resp.status_code}"

    if isinstance(data, dict):
        detail = data.get("message") or data.get("detail")
        if detail:
            return detail if isinstance(detail, str) else json.dumps(detail)
    return json.dumps(data)


class SovitsApiClient:
    """
    Async client for the three GPT-SoVITS api_v2 endpoints used here.

    Pass ``http_client`` to reuse an existing ``httpx.AsyncClient`` (tests
    mount a fake backend this way); it must already carry the base URL.
    Otherwise a client is created and owned by this instance.
    """

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:9880",
        *,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
        )

    async def __aenter__(self) -> "SovitsApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    # -----------------------------------------------------------------------
    # Model weights
    # -----------------------------------------------------------------------

    async def set_gpt_weights(self, weights_path: str) -> None:
        await self._set_weights("gpt", weights_path)

    async def set_sovits_weights(self, weights_path: str) -> None:
        await self._set_weights("sovits", weights_path)

    async def _set_weights(self, slot: ModelSlot, weights_path: str) -> None:
        endpoint = _SLOT_ENDPOINTS[slot]
        logger.debug("Setting %s weights via GET %s (weights_path=%s)", slot, endpoint, weights_path)
        try:
            resp = await self._http.get(endpoint, params={"weights_path": weights_path})
        except httpx.HTTPError as exc:
            raise ModelSwitchError(
                slot, f"error calling {self.base_url}{endpoint}: {exc}"
            ) from exc

        if not resp.is_success:
            detail = error_detail(resp)
            logger.error("Failed to switch %s model: %s", slot, detail)
            raise ModelSwitchError(slot, detail, status_code=resp.status_code)

        logger.debug("%s weights loaded: %s", slot, weights_path)

    # -----------------------------------------------------------------------
    # Synthesis
    # -----------------------------------------------------------------------

    async def synthesize(self, payload: Dict[str, Any]) -> bytes:
        """
        POST ``payload`` to ``/tts`` and return the audio file bytes.

        Raises
        ------
        SynthesisError:
            On transport errors, non-2xx responses, or an empty body.
        """
        logger.debug("Sending TTS request to %s%s: %s", self.base_url, ENDPOINT_TTS, payload)
        try:
            resp = await self._http.post(ENDPOINT_TTS, json=payload)
        except httpx.HTTPError as exc:
            raise SynthesisError(
                f"error calling {self.base_url}{ENDPOINT_TTS}: {exc}"
            ) from exc

        if not resp.is_success:
            raise SynthesisError(error_detail(resp), status_code=resp.status_code)

        audio = resp.content
        if not audio:
            raise SynthesisError(
                "backend returned empty audio content", status_code=resp.status_code
            )
        return audio
