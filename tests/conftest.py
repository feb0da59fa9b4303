# tests/conftest.py
"""
Global pytest configuration and fixtures for the SoVITS VoiceGen tests.
Ensures the `voicegen/` package is on PYTHONPATH and provides a fake
GPT-SoVITS api_v2 backend mounted in-process through httpx.ASGITransport.
"""

import asyncio
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

# Add project root so `import voicegen` works
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from voicegen.tts import SovitsApiClient, VoiceSynthesizer  # noqa: E402
from voicegen.tts.switch_queue import ModelSwitchSerializer  # noqa: E402

BASE_URL = "http://sovits.test"
FAKE_WAV = b"RIFF\x24\x00\x00\x00WAVEfmt \x10\x00\x00\x00fake-pcm-frames"

Failure = Tuple[int, Any]


def _error_response(failure: Failure) -> Response:
    status, body = failure
    if isinstance(body, (dict, list)):
        return JSONResponse(status_code=status, content=body)
    return PlainTextResponse(body, status_code=status)


class FakeSovitsBackend:
    """
    Minimal stand-in for GPT-SoVITS api_v2.py.

    Records every call in order. Failures are injected per weights path
    (`fail_gpt`, `fail_sovits`) or for every /tts call (`tts_failure`);
    `delays` slows down individual weights loads to expose ordering bugs.
    """

    def __init__(self) -> None:
        self.calls: List[Tuple[str, Any]] = []
        self.audio = FAKE_WAV
        self.fail_gpt: Dict[str, Failure] = {}
        self.fail_sovits: Dict[str, Failure] = {}
        self.tts_failure: Optional[Failure] = None
        self.delays: Dict[str, float] = {}
        self.in_flight = 0
        self.max_in_flight = 0
        self.app = self._build_app()

    @property
    def switch_calls(self) -> List[Tuple[str, str]]:
        return [call for call in self.calls if call[0] in ("gpt", "sovits")]

    @property
    def tts_bodies(self) -> List[Dict[str, Any]]:
        return [body for name, body in self.calls if name == "tts"]

    async def _set_weights(self, slot: str, weights_path: str, failures: Dict[str, Failure]) -> Response:
        self.calls.append((slot, weights_path))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(weights_path, 0))
        finally:
            self.in_flight -= 1

        if weights_path in failures:
            return _error_response(failures[weights_path])
        return JSONResponse({"message": "success"})

    def _build_app(self) -> FastAPI:
        app = FastAPI(title="fake-gpt-sovits-api-v2")

        @app.get("/set_gpt_weights")
        async def set_gpt_weights(weights_path: str):
            return await self._set_weights("gpt", weights_path, self.fail_gpt)

        @app.get("/set_sovits_weights")
        async def set_sovits_weights(weights_path: str):
            return await self._set_weights("sovits", weights_path, self.fail_sovits)

        @app.post("/tts")
        async def tts(request: Request):
            self.calls.append(("tts", await request.json()))
            if self.tts_failure is not None:
                return _error_response(self.tts_failure)
            return Response(content=self.audio, media_type="audio/wav")

        return app

    def http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.ASGITransport(app=self.app), base_url=BASE_URL)


@pytest.fixture(autouse=True)
def isolate_env(tmp_path, monkeypatch):
    """
    Run every test from an empty directory with no SOVITS_* overrides so a
    developer's .env or shell exports never leak into Settings().
    """
    for name in ("SOVITS_API_URL", "SOVITS_TIMEOUT", "SOVITS_SERIALIZE_MODEL_CHECKS", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def backend() -> FakeSovitsBackend:
    return FakeSovitsBackend()


@pytest_asyncio.fixture
async def sovits_client(backend):
    http = backend.http_client()
    client = SovitsApiClient(BASE_URL, http_client=http)
    yield client
    await http.aclose()


@pytest_asyncio.fixture
async def serializer(sovits_client):
    queue = ModelSwitchSerializer(sovits_client)
    yield queue
    await queue.close()


@pytest_asyncio.fixture
async def synthesizer(sovits_client):
    synth = VoiceSynthesizer(sovits_client)
    yield synth
    await synth.aclose()
