"""Test suite for SoVITS VoiceGen.

Unit and in-process integration tests for the GPT-SoVITS client, the
model-switch queue, and the voice synthesizer.

Author: Ruslan Magana Vsevolodovna
Website: https://ruslanmv.com
License: Apache-2.0
"""

from __future__ import annotations

__all__: list[str] = []
