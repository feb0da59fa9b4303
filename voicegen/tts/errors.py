"""Error types raised by the GPT-SoVITS client."""

from __future__ import annotations

from typing import Literal, Optional

ModelSlot = Literal["gpt", "sovits"]

_SLOT_LABELS = {"gpt": "GPT", "sovits": "SoVITS"}


class VoiceGenerationError(RuntimeError):
    """Base class for every voice generation failure."""


class VoiceConfigError(VoiceGenerationError, ValueError):
    """Raised when a voice config or text is incomplete. No request is sent."""


class ModelSwitchError(VoiceGenerationError):
    """Raised when the backend refuses (or never answers) a weights change.

    ``slot`` names the model that failed to load, ``detail`` carries whatever
    the backend said about it.
    """

    def __init__(
        self,
        slot: ModelSlot,
        detail: str,
        *,
        status_code: Optional[int] = None,
    ) -> None:
        self.slot = slot
        self.detail = detail
        self.status_code = status_code
        super().__init__(f"Failed to switch {_SLOT_LABELS[slot]} model: {detail}")


class SynthesisError(VoiceGenerationError):
    """Raised when the /tts call fails or returns no usable audio."""

    def __init__(self, detail: str, *, status_code: Optional[int] = None) -> None:
        self.detail = detail
        self.status_code = status_code
        super().__init__(f"TTS generation failed: {detail}")


class AudioClipReleasedError(VoiceGenerationError):
    """Raised when a released AudioClip is used again."""
