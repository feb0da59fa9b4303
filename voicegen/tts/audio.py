"""
audio.py  – client-side handle for a synthesized clip
-----------------------------------------------------

`AudioClip` keeps the bytes returned by ``/tts`` and can hand them out as a
file path (materialized lazily in the temp dir), base64 for JSON responses, or
a copy saved wherever the caller wants. Whoever receives a clip owns it and
should call `release()` (or use it as a context manager) when done so the temp
file goes away.
"""

from __future__ import annotations

import base64
import logging
import tempfile
from pathlib import Path
from typing import Any, Optional, Union

from .errors import AudioClipReleasedError

logger = logging.getLogger(__name__)


class AudioClip:
    def __init__(self, data: bytes, *, media_type: str = "wav", tag: Optional[str] = None) -> None:
        self._data: Optional[bytes] = data
        self.media_type = media_type
        self.tag = tag
        self._path: Optional[Path] = None

    def __repr__(self) -> str:
        state = "released" if self.released else f"{len(self._data)} bytes"
        return f"AudioClip(tag={self.tag!r}, media_type={self.media_type!r}, {state})"

    def __enter__(self) -> "AudioClip":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.release()

    @property
    def released(self) -> bool:
        return self._data is None

    @property
    def data(self) -> bytes:
        if self._data is None:
            raise AudioClipReleasedError(f"audio clip {self.tag!r} was already released")
        return self._data

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def path(self) -> Path:
        """Temp file holding the clip, written on first access."""
        data = self.data
        if self._path is None:
            with tempfile.NamedTemporaryFile(
                prefix="voicegen-", suffix=f".{self.media_type}", delete=False
            ) as fh:
                fh.write(data)
            self._path = Path(fh.name)
            logger.debug("Materialized clip %r at %s", self.tag, self._path)
        return self._path

    def save(self, dest: Union[str, Path]) -> Path:
        dest = Path(dest)
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(self.data)
        return dest

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def release(self) -> None:
        """Drop the bytes and delete the temp file, if any. Safe to call twice."""
        if self._path is not None:
            self._path.unlink(missing_ok=True)
            self._path = None
        self._data = None
