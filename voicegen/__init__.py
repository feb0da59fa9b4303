"""SoVITS VoiceGen - async client for GPT-SoVITS voice-over generation.

This package drives a remote GPT-SoVITS ``api_v2`` server to produce voice
clips from text and a reference recording.

The package includes:
- A FIFO model-switch queue that applies GPT/SoVITS weight changes one at a time
- A synthesizer that only reloads models when the requested pair changes
- Pydantic Settings based configuration and a small command line entry point

Author: Ruslan Magana Vsevolodovna
Website: https://ruslanmv.com
License: Apache-2.0
"""

from __future__ import annotations

__version__ = "0.1.0"
__author__ = "Ruslan Magana Vsevolodovna"
__email__ = "contact@ruslanmv.com"
__license__ = "Apache-2.0"
__copyright__ = "Copyright 2025 Ruslan Magana Vsevolodovna"

__all__ = [
    "__version__",
    "__author__",
    "__email__",
    "__license__",
    "__copyright__",
]
