"""TTS module for SoVITS VoiceGen.

This module provides voice-over generation against a GPT-SoVITS api_v2 server.
"""

from .audio import AudioClip
from .errors import (
    AudioClipReleasedError,
    ModelSwitchError,
    SynthesisError,
    VoiceConfigError,
    VoiceGenerationError,
)
from .models import TTS_DEFAULTS, ModelSelection, VoiceConfig, build_tts_payload
from .sovits_client import SovitsApiClient
from .switch_queue import ModelSwitchSerializer
from .synthesizer import VoiceSynthesizer

__all__ = [
    "AudioClip",
    "AudioClipReleasedError",
    "ModelSelection",
    "ModelSwitchError",
    "ModelSwitchSerializer",
    "SovitsApiClient",
    "SynthesisError",
    "TTS_DEFAULTS",
    "VoiceConfig",
    "VoiceConfigError",
    "VoiceGenerationError",
    "VoiceSynthesizer",
    "build_tts_payload",
]
