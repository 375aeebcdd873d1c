"""Pitched sample assets and the bank that holds them once decoded."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, Callable, Optional, Protocol

from tanpura.models import Pitch, PitchLike


logger = logging.getLogger(__name__)

AUDIO_EXTENSIONS = (".mp3", ".wav", ".flac", ".ogg")


class AssetSource(Protocol):
    """Anything that can hand out a readable audio file for a pitch key."""

    def open(self, key: str) -> BinaryIO:
        """Return a binary file object for ``key`` or raise ``OSError``."""


class DirectoryAssetSource:
    """Reads ``<root>/<key>.<ext>`` files, trying each known extension in turn."""

    def __init__(self, root, extensions: tuple[str, ...] = AUDIO_EXTENSIONS):
        self.root = Path(root)
        self.extensions = extensions

    def path_for(self, key: str) -> Optional[Path]:
        for ext in self.extensions:
            candidate = self.root / f"{key}{ext}"
            if candidate.is_file():
                return candidate
        return None

    def open(self, key: str) -> BinaryIO:
        path = self.path_for(key)
        if path is None:
            raise FileNotFoundError(f"no audio file for '{key}' in {self.root}")
        return path.open("rb")


class SampleBank:
    """
    Maps each pitch to the sound id of its decoded sample.

    ``initialize`` runs once; pitches whose asset cannot be opened or
    decoded are logged and left out, so the bank may end up partial.
    """

    def __init__(self):
        self._samples: dict[Pitch, int] = {}
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(self, assets: AssetSource, load: Callable[[BinaryIO], int]):
        """Open and decode every pitch's asset through ``load``.

        ``load`` is the playback subsystem's loader and returns a sound id.
        """
        if self._initialized:
            return
        for pitch in Pitch:
            key = pitch.asset_key
            try:
                with assets.open(key) as fh:
                    self._samples[pitch] = load(fh)
            except Exception as e:
                logger.error("[Samples] could not load '%s': %s", key, e)
        self._initialized = True
        logger.info("[Samples] %d/%d pitches loaded", len(self._samples), len(Pitch))

    def get_sample(self, pitch: PitchLike) -> Optional[int]:
        return self._samples.get(Pitch.parse(pitch))

    @property
    def loaded(self) -> list[Pitch]:
        return [p for p in Pitch if p in self._samples]

    @property
    def missing(self) -> list[Pitch]:
        return [p for p in Pitch if p not in self._samples]

    def clear(self):
        """Forget every sample so ``initialize`` can run again."""
        self._samples.clear()
        self._initialized = False
