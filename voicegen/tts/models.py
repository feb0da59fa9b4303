"""Voice configuration and request payload models for the GPT-SoVITS api_v2 client."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

# Defaults applied to /tts tuning fields the caller leaves unset (None).
TTS_DEFAULTS: Dict[str, Any] = {
    "prompt_text": "",
    "text_lang": "en",
    "prompt_lang": "en",
    "top_k": 25,
    "top_p": 1,
    "temperature": 0.6,
    "speed_factor": 1,
    "text_split_method": "cut5",
    "sample_steps": 32,
    "super_sampling": True,
    "fragment_interval": 0.15,
    "streaming_mode": False,
    "media_type": "wav",
    "parallel_infer": False,
    "repetition_penalty": 1.35,
}

# Empty strings fall back to the default for these, not just None.
_EMPTY_MEANS_DEFAULT = ("prompt_text", "text_lang", "prompt_lang")

# Extra api_v2 fields that are only sent when explicitly set.
PASS_THROUGH_FIELDS = (
    "seed",
    "batch_size",
    "batch_threshold",
    "split_bucket",
    "aux_ref_audio_paths",
)

REQUIRED_FIELDS = ("ref_audio_path", "gpt_model", "sovits_model")


@dataclass(frozen=True)
class ModelSelection:
    """The GPT + SoVITS weight pair that should be loaded on the backend."""

    gpt_model: str
    sovits_model: str


class VoiceConfig(BaseModel):
    """Everything needed to voice a line of text with a particular speaker.

    Field names follow the api_v2 request body. The camelCase names used by
    older front-end configs (``refAudioPath``, ``gptModel``, ``sovitsModel``,
    ``promptText``, ``speed``) are accepted as well.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    ref_audio_path: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("ref_audio_path", "refAudioPath"),
        description="Reference audio path as seen by the backend",
    )
    gpt_model: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("gpt_model", "gptModel"),
        description="GPT weights (.ckpt) path as seen by the backend",
    )
    sovits_model: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("sovits_model", "sovitsModel"),
        description="SoVITS weights (.pth) path as seen by the backend",
    )
    prompt_text: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("prompt_text", "promptText"),
        description="Transcript of the reference audio",
    )
    text_lang: Optional[str] = None
    prompt_lang: Optional[str] = None

    top_k: Optional[int] = None
    top_p: Optional[float] = None
    temperature: Optional[float] = None
    speed_factor: Optional[float] = Field(
        None, validation_alias=AliasChoices("speed_factor", "speed")
    )
    text_split_method: Optional[str] = None
    sample_steps: Optional[int] = None
    super_sampling: Optional[bool] = None
    fragment_interval: Optional[float] = None
    streaming_mode: Optional[bool] = None
    media_type: Optional[str] = None
    parallel_infer: Optional[bool] = None
    repetition_penalty: Optional[float] = None

    seed: Optional[int] = None
    batch_size: Optional[int] = None
    batch_threshold: Optional[float] = None
    split_bucket: Optional[bool] = None
    aux_ref_audio_paths: Optional[List[str]] = None

    def missing_fields(self) -> List[str]:
        return [name for name in REQUIRED_FIELDS if not getattr(self, name)]

    @property
    def selection(self) -> ModelSelection:
        return ModelSelection(gpt_model=self.gpt_model, sovits_model=self.sovits_model)

    @property
    def effective_media_type(self) -> str:
        return self.media_type or TTS_DEFAULTS["media_type"]


def build_tts_payload(config: VoiceConfig, text: str) -> Dict[str, Any]:
    """Map a VoiceConfig and cleaned text onto the api_v2 ``POST /tts`` body."""

    def pick(name: str) -> Any:
        value = getattr(config, name)
        if value is None or (name in _EMPTY_MEANS_DEFAULT and value == ""):
            return TTS_DEFAULTS[name]
        return value

    payload: Dict[str, Any] = {
        "text": text,
        "text_lang": pick("text_lang"),
        "ref_audio_path": config.ref_audio_path,
        "prompt_lang": pick("prompt_lang"),
        "prompt_text": pick("prompt_text"),
        "top_k": pick("top_k"),
        "top_p": pick("top_p"),
        "temperature": pick("temperature"),
        "speed_factor": pick("speed_factor"),
        "text_split_method": pick("text_split_method"),
        "sample_steps": pick("sample_steps"),
        "super_sampling": pick("super_sampling"),
        "fragment_interval": pick("fragment_interval"),
        "streaming_mode": pick("streaming_mode"),
        "media_type": pick("media_type"),
        "parallel_infer": pick("parallel_infer"),
        "repetition_penalty": pick("repetition_penalty"),
    }

    for name in PASS_THROUGH_FIELDS:
        value = getattr(config, name)
        if value is not None:
            payload[name] = value

    return payload
