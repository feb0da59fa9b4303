"""
voicegen/cli.py

Command line voice-over generator for a running GPT-SoVITS api_v2 server.

Loads the requested GPT/SoVITS weights (only if they differ from what this run
already applied), synthesizes the text, and writes the audio to --out.

Examples:
  python -m voicegen --text "Hello world" \
      --ref-audio refs/narrator.wav \
      --gpt-model GPT_weights_v2/narrator-e15.ckpt \
      --sovits-model SoVITS_weights_v2/narrator_e8_s200.pth

  python -m voicegen --file chapter1.txt --ref-audio refs/narrator.wav \
      --gpt-model ... --sovits-model ... --text-lang en --out chapter1.wav
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import List, Optional

from .settings import settings
from .tts import SovitsApiClient, VoiceConfig, VoiceGenerationError, VoiceSynthesizer

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Generate a voice-over clip with GPT-SoVITS api_v2")

    src = p.add_mutually_exclusive_group(required=True)
    src.add_argument("--text", default=None, help="Text to synthesize")
    src.add_argument("--file", default=None, help="Text file to synthesize")

    p.add_argument("--ref-audio", required=True, help="Reference audio path (as seen by the server)")
    p.add_argument("--gpt-model", required=True, help="GPT weights path (.ckpt)")
    p.add_argument("--sovits-model", required=True, help="SoVITS weights path (.pth)")
    p.add_argument("--prompt-text", default=None, help="Transcript of the reference audio")
    p.add_argument("--text-lang", default=None, help="Language of the text (en, zh, ja, ...)")
    p.add_argument("--prompt-lang", default=None, help="Language of the prompt text")
    p.add_argument("--speed", type=float, default=None, help="Speed factor (default: 1)")
    p.add_argument("--media-type", default=None, choices=["wav", "ogg", "aac", "raw"])

    p.add_argument("--url", default=settings.SOVITS_API_URL, help="Base URL of the api_v2 server")
    p.add_argument("--timeout", type=float, default=settings.SOVITS_TIMEOUT,
                   help="HTTP timeout seconds (default: none)")
    p.add_argument("--out", default=None, help="Output audio path (default: output.<media-type>)")
    p.add_argument("--tag", default="cli", help="Label used in log messages")
    p.add_argument("--verbose", action="store_true", help="Log request payloads")

    args = p.parse_args(argv)
    if args.out is None:
        args.out = f"output.{args.media_type or 'wav'}"
    return args


def read_input_text(args: argparse.Namespace) -> str:
    if args.text is not None:
        return args.text
    return Path(args.file).read_text(encoding="utf-8", errors="replace")


def build_voice_config(args: argparse.Namespace) -> VoiceConfig:
    return VoiceConfig(
        ref_audio_path=args.ref_audio,
        gpt_model=args.gpt_model,
        sovits_model=args.sovits_model,
        prompt_text=args.prompt_text,
        text_lang=args.text_lang,
        prompt_lang=args.prompt_lang,
        speed_factor=args.speed,
        media_type=args.media_type,
    )


async def run(args: argparse.Namespace, text: str) -> Path:
    client = SovitsApiClient(args.url, timeout=args.timeout)
    async with client, VoiceSynthesizer(client) as synthesizer:
        clip = await synthesizer.generate(build_voice_config(args), text, args.tag)
        with clip:
            return clip.save(args.out)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    settings.configure_logging()
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        text = read_input_text(args)
    except OSError as exc:
        logger.error("Cannot read input text from %s: %s", args.file, exc)
        return 1

    try:
        out_path = asyncio.run(run(args, text))
    except VoiceGenerationError as exc:
        logger.error("%s", exc)
        return 1

    logger.info("Saved %s (%d bytes)", out_path, out_path.stat().st_size)
    return 0
