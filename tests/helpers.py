from __future__ import annotations

import tempfile
from pathlib import Path

import numpy as np
import soundfile as sf

from tanpura.host import TanpuraCore
from tanpura.models import Pitch

SR = 8000


def write_tone(path: Path, freq: float = 220.0, seconds: float = 0.5,
               sr: int = SR, channels: int = 1, amplitude: float = 0.5):
    t = np.arange(int(sr * seconds)) / sr
    tone = (amplitude * np.sin(2 * np.pi * freq * t)).astype(np.float32)
    data = tone if channels == 1 else np.column_stack([tone] * channels)
    sf.write(str(path), data, sr)


def make_asset_dir(skip=(), sr: int = SR, seconds: float = 0.5) -> tempfile.TemporaryDirectory:
    """Temporary directory with one WAV per pitch, except the keys in ``skip``."""
    tmp = tempfile.TemporaryDirectory()
    for i, pitch in enumerate(Pitch):
        if pitch.asset_key in skip:
            continue
        write_tone(Path(tmp.name) / f"{pitch.asset_key}.wav",
                   freq=220.0 * 2 ** (i / 12), sr=sr, seconds=seconds)
    return tmp


def make_host(skip=(), **kwargs):
    """Return (host, tmpdir); the host is initialized at the test sample rate."""
    tmp = make_asset_dir(skip)
    kwargs.setdefault("sample_rate", SR)
    kwargs.setdefault("buffer_size", 256)
    host = TanpuraCore.from_directory(tmp.name, **kwargs)
    host.initialize()
    return host, tmp
