"""Tests for the AudioClip handle lifecycle."""

import base64

import pytest

from voicegen.tts import AudioClip, AudioClipReleasedError


def test_path_is_materialized_once():
    clip = AudioClip(b"abc", media_type="wav", tag="hero")

    first = clip.path
    assert first.suffix == ".wav"
    assert first.read_bytes() == b"abc"
    assert clip.path == first

    clip.release()
    assert not first.exists()


def test_release_is_idempotent_and_blocks_access():
    clip = AudioClip(b"abc")
    clip.release()
    clip.release()

    assert clip.released
    with pytest.raises(AudioClipReleasedError):
        clip.data
    with pytest.raises(AudioClipReleasedError):
        clip.path


def test_context_manager_releases(tmp_path):
    with AudioClip(b"\x00\x01", media_type="ogg") as clip:
        temp_file = clip.path
        saved = clip.save(tmp_path / "out" / "line.ogg")

    assert clip.released
    assert not temp_file.exists()
    assert saved.read_bytes() == b"\x00\x01"


def test_size_and_base64():
    clip = AudioClip(b"hello")

    assert clip.size == 5
    assert base64.b64decode(clip.to_base64()) == b"hello"


def test_repr_reports_state():
    clip = AudioClip(b"hello", tag="npc")
    assert "5 bytes" in repr(clip)
    clip.release()
    assert "released" in repr(clip)
