"""
Voice-over generation on top of a GPT-SoVITS api_v2 backend.

`VoiceSynthesizer.generate` validates the request, switches the backend's
models only when the requested GPT/SoVITS pair differs from the last pair it
applied, then calls ``/tts`` and wraps the audio in an `AudioClip`.

Each synthesizer remembers its own last applied pair, so two synthesizers
pointed at different backends never share state.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from .audio import AudioClip
from .errors import VoiceConfigError, VoiceGenerationError
from .models import ModelSelection, VoiceConfig, build_tts_payload
from .sovits_client import SovitsApiClient
from .switch_queue import ModelSwitchSerializer

logger = logging.getLogger(__name__)

PREVIEW_CHARS = 100


def _get_settings():
    """Lazy import settings to avoid reading the environment at import time."""
    from ..settings import settings
    return settings


def _preview(text: str) -> str:
    return text if len(text) <= PREVIEW_CHARS else text[:PREVIEW_CHARS] + "..."


class VoiceSynthesizer:
    """
    Generate voice clips, reloading backend models only when needed.

    Parameters
    ----------
    client:
        Backend client used for both switching and synthesis.
    serializer:
        Switch queue to share with other synthesizers talking to the same
        backend. A private one is created when omitted.
    serialize_model_checks:
        When True, concurrent ``generate`` calls take turns on the
        compare-and-switch step, so a pair is never loaded twice in a row.
        Off by default: two concurrent calls that both see a stale
        ``last_applied`` will each queue a switch.
    """

    def __init__(
        self,
        client: SovitsApiClient,
        *,
        serializer: Optional[ModelSwitchSerializer] = None,
        serialize_model_checks: bool = False,
    ) -> None:
        self.client = client
        self.serializer = serializer or ModelSwitchSerializer(client)
        self.last_applied: Optional[ModelSelection] = None
        self._owns_serializer = serializer is None
        self._owns_client = False
        self._check_lock = asyncio.Lock() if serialize_model_checks else None

    @classmethod
    def from_settings(cls, settings=None) -> "VoiceSynthesizer":
        """Build a synthesizer (and the client it owns) from `Settings`."""
        settings = settings or _get_settings()
        client = SovitsApiClient(settings.SOVITS_API_URL, timeout=settings.SOVITS_TIMEOUT)
        synthesizer = cls(
            client, serialize_model_checks=settings.SOVITS_SERIALIZE_MODEL_CHECKS
        )
        synthesizer._owns_client = True
        return synthesizer

    async def __aenter__(self) -> "VoiceSynthesizer":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_serializer:
            await self.serializer.close()
        if self._owns_client:
            await self.client.aclose()

    # -----------------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------------

    async def generate(
        self,
        voice_config: Union[VoiceConfig, Mapping[str, Any], None],
        text: Optional[str],
        tag: Optional[str] = None,
    ) -> AudioClip:
        """
        Synthesize ``text`` with the voice described by ``voice_config``.

        Returns
        -------
        AudioClip:
            Handle to the generated audio. The caller must release it.

        Raises
        ------
        VoiceConfigError:
            Reference audio, either model, or the text is missing. Nothing is
            sent to the backend.
        ModelSwitchError:
            The backend failed to load one of the models.
        SynthesisError:
            The ``/tts`` call failed or returned no audio.
        """
        config = self._validate(voice_config, text)
        cleaned_text = text.strip()
        logger.info("Generating audio for %s with text: %s", tag, _preview(cleaned_text))

        try:
            await self._ensure_models(config.selection)
            payload = build_tts_payload(config, cleaned_text)
            audio = await self.client.synthesize(payload)
        except VoiceGenerationError as exc:
            logger.error("Voice generation error for %s: %s", tag, exc)
            raise

        logger.info("Audio generated successfully for %s, %d bytes", tag, len(audio))
        return AudioClip(audio, media_type=payload["media_type"], tag=tag)

    # -----------------------------------------------------------------------
    # Internals
    # -----------------------------------------------------------------------

    @staticmethod
    def _validate(
        voice_config: Union[VoiceConfig, Mapping[str, Any], None],
        text: Optional[str],
    ) -> VoiceConfig:
        if isinstance(voice_config, VoiceConfig):
            config = voice_config
        else:
            try:
                config = VoiceConfig.model_validate(voice_config or {})
            except ValidationError as exc:
                raise VoiceConfigError(f"Invalid voice config: {exc}") from exc

        missing = config.missing_fields()
        if not isinstance(text, str) or not text.strip():
            missing.append("text")
        if missing:
            logger.error("Missing required parameters: %s", ", ".join(missing))
            raise VoiceConfigError(
                "Missing required parameters for voice generation: " + ", ".join(missing)
            )
        return config

    async def _ensure_models(self, selection: ModelSelection) -> None:
        if self._check_lock is None:
            await self._switch_if_needed(selection)
            return
        async with self._check_lock:
            await self._switch_if_needed(selection)

    async def _switch_if_needed(self, selection: ModelSelection) -> None:
        if selection == self.last_applied:
            logger.info("Using cached models - no need to switch")
            return

        logger.info("Models changed, switching...")
        await self.serializer.switch(selection)
        # Only reached on success; a failed switch is retried next time.
        self.last_applied = selection
