"""Tests for completion sound synthesis and the SoundManager API."""

from __future__ import annotations

import io
import wave

import pytest

from pomobar.audio.sounds import (
    COMPLETION_SOUNDS,
    SAMPLE_RATE,
    SOUND_NAMES,
    SoundManager,
    _generate_break_complete,
    _generate_click,
    _generate_work_complete,
)


def _read_wav(data: bytes) -> wave.Wave_read:
    return wave.open(io.BytesIO(data), "rb")


# ═══════════════════════════════════════════════════════════════════════
#  SYNTHESIS
# ═══════════════════════════════════════════════════════════════════════


class TestGenerators:
    @pytest.mark.parametrize("gen", [
        _generate_work_complete,
        _generate_break_complete,
        _generate_click,
    ])
    def test_valid_mono_16bit(self, gen):
        wf = _read_wav(gen())
        assert wf.getnchannels() == 1
        assert wf.getsampwidth() == 2
        assert wf.getframerate() == SAMPLE_RATE
        assert wf.getnframes() > 0

    def test_work_chime_is_double(self):
        # 0.5 s chime plus the 150 ms offset of the second strike
        wf = _read_wav(_generate_work_complete())
        assert wf.getnframes() == int(SAMPLE_RATE * 0.15) + int(SAMPLE_RATE * 0.5)

    def test_break_chime_length(self):
        wf = _read_wav(_generate_break_complete())
        assert wf.getnframes() == int(SAMPLE_RATE * 0.4)

    def test_completion_kinds(self):
        assert set(COMPLETION_SOUNDS) == {"work", "break"}
        assert set(COMPLETION_SOUNDS.values()) <= set(SOUND_NAMES)


# ═══════════════════════════════════════════════════════════════════════
#  SOUND MANAGER
# ═══════════════════════════════════════════════════════════════════════


class TestSoundManager:
    @pytest.fixture
    def manager(self, qapp, tmp_path):
        return SoundManager(sounds_dir=tmp_path / "sounds")

    def test_writes_wav_cache(self, manager, tmp_path):
        for name in SOUND_NAMES:
            assert (tmp_path / "sounds" / f"{name}.wav").exists()

    def test_loads_every_sound(self, manager):
        assert set(manager.loaded_sounds) == set(SOUND_NAMES)

    def test_existing_files_are_kept(self, qapp, tmp_path):
        d = tmp_path / "sounds"
        d.mkdir()
        existing = d / "click.wav"
        existing.write_bytes(_generate_click())
        mtime = existing.stat().st_mtime_ns
        SoundManager(sounds_dir=d)
        assert existing.stat().st_mtime_ns == mtime

    def test_volume(self, manager):
        assert manager.volume == 70
        manager.set_volume(150)
        assert manager.volume == 100
        manager.set_volume(-5)
        assert manager.volume == 0

    def test_disabled_plays_nothing(self, manager):
        manager.set_enabled(False)
        assert manager.enabled is False
        assert manager.play_completion_sound("work") is False
        assert manager.play("click") is False

    def test_unknown_kind(self, manager):
        assert manager.play_completion_sound("lunch") is False

    def test_unknown_name(self, manager):
        assert manager.play("fanfare") is False

    def test_unwritable_cache_is_tolerated(self, qapp, tmp_path):
        blocker = tmp_path / "not_a_dir"
        blocker.write_text("")
        mgr = SoundManager(sounds_dir=blocker / "sounds")
        assert mgr.loaded_sounds == ()
        assert mgr.play_completion_sound("break") is False
