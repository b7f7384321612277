"""Completion chimes, synthesized with numpy and played with QSoundEffect.

The WAV files are rendered once into a cache directory and reused on later
launches.

Sounds
------
- ``work_complete``  — two bright 830 Hz strikes, 150 ms apart
- ``break_complete`` — one softer strike at 523 Hz
- ``click``          — short tick used to preview the volume
"""

from __future__ import annotations

import io
import logging
import wave
from pathlib import Path
from typing import Callable

import numpy as np

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QSoundEffect

logger = logging.getLogger(__name__)


SOUNDS_DIR = Path.home() / "Library" / "Application Support" / "Pomobar" / "sounds"
SAMPLE_RATE = 44100

# completion kind → sound name
COMPLETION_SOUNDS: dict[str, str] = {
    "work": "work_complete",
    "break": "break_complete",
}


# ═══════════════════════════════════════════════════════════════════════════
#  SYNTHESIS
# ═══════════════════════════════════════════════════════════════════════════


def _sine(freq: float, duration_s: float) -> np.ndarray:
    t = np.arange(int(SAMPLE_RATE * duration_s)) / SAMPLE_RATE
    return np.sin(2 * np.pi * freq * t)


def _strike(freq: float, duration_s: float, peak: float, attack_s: float = 0.01) -> np.ndarray:
    """A struck tone: linear attack, then an exponential fade to 1% of *peak*."""
    tone = _sine(freq, duration_s) * peak
    n = len(tone)
    rise = min(int(SAMPLE_RATE * attack_s), n)
    env = np.ones(n)
    env[:rise] = np.linspace(0.0, 1.0, rise)
    if n > rise:
        env[rise:] = np.geomspace(1.0, 0.01, n - rise)
    return tone * env


def _pcm16(samples: np.ndarray) -> bytes:
    """Mono 16-bit WAV file contents for *samples* in -1..1."""
    pcm = np.round(np.clip(samples, -1.0, 1.0) * 32767).astype("<i2")
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(SAMPLE_RATE)
        wf.writeframes(pcm.tobytes())
    return buf.getvalue()


def _generate_work_complete() -> bytes:
    chime = _strike(830.0, 0.5, 0.3)
    gap = int(SAMPLE_RATE * 0.15)
    out = np.zeros(gap + len(chime))
    out[: len(chime)] += chime
    out[gap:] += chime
    return _pcm16(out)


def _generate_break_complete() -> bytes:
    return _pcm16(_strike(523.0, 0.4, 0.2))


def _generate_click() -> bytes:
    tick = _strike(1200.0, 0.015, 0.2, attack_s=0.0005)
    # trailing silence keeps QSoundEffect from cutting the tail
    return _pcm16(np.concatenate([tick, np.zeros(int(SAMPLE_RATE * 0.03))]))


GENERATORS: dict[str, Callable[[], bytes]] = {
    "work_complete": _generate_work_complete,
    "break_complete": _generate_break_complete,
    "click": _generate_click,
}

SOUND_NAMES = tuple(GENERATORS)


# ═══════════════════════════════════════════════════════════════════════════
#  PLAYBACK
# ═══════════════════════════════════════════════════════════════════════════


class SoundManager(QObject):
    """Owns one QSoundEffect per cached WAV.

    Usage::

        sounds = SoundManager(parent=self)
        sounds.set_volume(70)
        sounds.play_completion_sound("work")
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sounds_dir: Path | None = None,
    ) -> None:
        super().__init__(parent)
        self._dir = sounds_dir or SOUNDS_DIR
        self._enabled = True
        self._level = 70
        self._effects: dict[str, QSoundEffect] = {}

        try:
            self._render_missing()
        except OSError as exc:
            logger.warning("Could not write sound cache to %s: %s", self._dir, exc)
        for name in SOUND_NAMES:
            self._load(name)

    # ── settings ──────────────────────────────────────────────────────

    @property
    def volume(self) -> int:
        return self._level

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def loaded_sounds(self) -> tuple[str, ...]:
        return tuple(self._effects)

    def set_volume(self, level: int) -> None:
        """0-100; applied to every loaded effect."""
        self._level = max(0, min(100, int(level)))
        for effect in self._effects.values():
            effect.setVolume(self._level / 100)

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = bool(enabled)

    # ── playback ──────────────────────────────────────────────────────

    def play(self, name: str) -> bool:
        """False when muted or when *name* never loaded."""
        if not self._enabled:
            return False
        effect = self._effects.get(name)
        if effect is None:
            logger.warning("Sound %r is not loaded", name)
            return False
        effect.play()
        return True

    def play_completion_sound(self, kind: str) -> bool:
        """*kind* is ``"work"`` or ``"break"``."""
        name = COMPLETION_SOUNDS.get(kind)
        if name is None:
            logger.warning("Unknown completion sound kind %r", kind)
            return False
        return self.play(name)

    # ── cache ─────────────────────────────────────────────────────────

    def _path(self, name: str) -> Path:
        return self._dir / f"{name}.wav"

    def _render_missing(self) -> None:
        self._dir.mkdir(parents=True, exist_ok=True)
        for name, generate in GENERATORS.items():
            path = self._path(name)
            if not path.exists():
                path.write_bytes(generate())
                logger.debug("Rendered %s", path)

    def _load(self, name: str) -> None:
        path = self._path(name)
        if not path.exists():
            return
        effect = QSoundEffect(self)
        effect.setSource(QUrl.fromLocalFile(str(path)))
        effect.setVolume(self._level / 100)
        self._effects[name] = effect
