"""Audio package."""

from .sounds import SoundManager, SOUND_NAMES, COMPLETION_SOUNDS

__all__ = ["SoundManager", "SOUND_NAMES", "COMPLETION_SOUNDS"]
