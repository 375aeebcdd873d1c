"""Sample playback subsystem (sounddevice output callback).

Works like a small sound pool: decoded sounds are loaded once and
referenced by a sound id, every ``play`` call starts an independent
stream referenced by a stream id, and the output callback sums all live
streams into one stereo block.
"""

from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass
from typing import Optional

from tanpura.deps import HAS_SOUNDDEVICE, np, sd, sf


logger = logging.getLogger(__name__)

MIN_RATE = 0.5
MAX_RATE = 2.0


@dataclass
class _Stream:
    sound_id: int
    left: float
    right: float
    priority: int
    loop: int  # 0 once, -1 forever, n repeat n more times
    rate: float
    position: float = 0.0


def _to_stereo(data: np.ndarray) -> np.ndarray:
    """(frames, channels) -> (frames, 2)."""
    if data.shape[1] == 1:
        return np.column_stack([data[:, 0], data[:, 0]])
    return data[:, :2]


def _resample(data: np.ndarray, src_sr: int, dst_sr: int) -> np.ndarray:
    """Linear-interpolation resampling, per channel."""
    if src_sr == dst_sr:
        return data
    n_out = max(1, int(round(len(data) * dst_sr / src_sr)))
    src_x = np.arange(len(data), dtype=np.float64)
    dst_x = np.linspace(0.0, len(data) - 1, n_out)
    return np.column_stack(
        [np.interp(dst_x, src_x, data[:, ch]) for ch in range(data.shape[1])]
    ).astype(np.float32)


class SamplePlayer:
    """
    Mixes loaded sounds into a stereo output stream.

    Per callback:
      1. Read each live stream at its playback rate
      2. Scale by the stream's left/right gain
      3. Advance, loop or retire the stream
      4. Clip the sum and write it to the output buffer
    """

    def __init__(self, sample_rate: int = 44100, buffer_size: int = 512,
                 max_streams: int = 3):
        self.sample_rate = sample_rate
        self.buffer_size = buffer_size
        self.max_streams = max_streams

        self._sounds: dict[int, np.ndarray] = {}
        self._streams: dict[int, _Stream] = {}  # insertion order = start order
        self._sound_ids = itertools.count(1)
        self._stream_ids = itertools.count(1)
        self._lock = threading.Lock()
        self._stream = None

    # -- sounds --------------------------------------------------------------

    def load(self, handle) -> int:
        """Decode an audio file (path or binary file object), return a sound id."""
        data, sr = sf.read(handle, dtype="float32", always_2d=True)
        if len(data) == 0:
            raise ValueError("audio file contains no frames")
        data = _resample(_to_stereo(data), sr, self.sample_rate)
        with self._lock:
            sound_id = next(self._sound_ids)
            self._sounds[sound_id] = np.ascontiguousarray(data, dtype=np.float32)
        logger.debug("[Audio] loaded sound %d (%d frames)", sound_id, len(data))
        return sound_id

    def unload(self, sound_id: int) -> bool:
        with self._lock:
            if self._sounds.pop(sound_id, None) is None:
                return False
            for stream_id in [k for k, s in self._streams.items() if s.sound_id == sound_id]:
                del self._streams[stream_id]
        return True

    def has_sound(self, sound_id: int) -> bool:
        return sound_id in self._sounds

    # -- streams -------------------------------------------------------------

    def play(self, sound_id: int, left: float, right: float, priority: int = 1,
             loop: int = 0, rate: float = 1.0) -> int:
        """Start a stream; return its id, or 0 if the sound id is unknown."""
        rate = max(MIN_RATE, min(MAX_RATE, float(rate)))
        with self._lock:
            if sound_id not in self._sounds:
                return 0
            if len(self._streams) >= self.max_streams:
                self._steal_locked(priority)
                if len(self._streams) >= self.max_streams:
                    return 0
            stream_id = next(self._stream_ids)
            self._streams[stream_id] = _Stream(sound_id, float(left), float(right),
                                               priority, loop, rate)
        return stream_id

    def _steal_locked(self, priority: int):
        """Stop the oldest stream with the lowest priority not above ``priority``."""
        candidates = [(s.priority, i, sid) for i, (sid, s) in enumerate(self._streams.items())
                      if s.priority <= priority]
        if not candidates:
            return
        _, _, victim = min(candidates)
        del self._streams[victim]
        logger.debug("[Audio] stream %d stolen", victim)

    def set_volume(self, stream_id: int, left: float, right: float):
        with self._lock:
            stream = self._streams.get(stream_id)
            if stream is not None:
                stream.left = float(left)
                stream.right = float(right)

    def stop(self, stream_id: int):
        with self._lock:
            self._streams.pop(stream_id, None)

    def stop_all(self):
        with self._lock:
            self._streams.clear()

    def is_playing(self, stream_id: int) -> bool:
        return stream_id in self._streams

    def stream_gain(self, stream_id: int) -> Optional[tuple[float, float]]:
        stream = self._streams.get(stream_id)
        return (stream.left, stream.right) if stream else None

    @property
    def active_streams(self) -> int:
        return len(self._streams)

    # -- rendering -----------------------------------------------------------

    def render(self, frames: int) -> np.ndarray:
        """Mix every live stream into a (frames, 2) float32 block."""
        mixed = np.zeros((frames, 2), dtype=np.float32)
        with self._lock:
            finished = []
            for stream_id, stream in self._streams.items():
                if not self._render_stream(stream, mixed):
                    finished.append(stream_id)
            for stream_id in finished:
                del self._streams[stream_id]
        np.clip(mixed, -1.0, 1.0, out=mixed)
        return mixed

    def _render_stream(self, stream: _Stream, out: np.ndarray) -> bool:
        """Add one stream into ``out``; return False once it has ended."""
        audio = self._sounds[stream.sound_id]
        length = len(audio)
        frames = len(out)
        idx = stream.position + np.arange(frames) * stream.rate

        if stream.loop == -1:
            idx = np.mod(idx, length)
            valid = frames
        else:
            total = length * (stream.loop + 1)
            valid = int(np.count_nonzero(idx < total))
            idx = np.mod(idx[:valid], length)

        if valid:
            pos = idx.astype(np.int64)
            out[:valid, 0] += audio[pos, 0] * stream.left
            out[:valid, 1] += audio[pos, 1] * stream.right

        stream.position += frames * stream.rate
        if stream.loop == -1:
            stream.position %= length
            return True
        return valid == frames and stream.position < length * (stream.loop + 1)

    def _callback(self, outdata, frames: int, time_info, status):
        if status:
            logger.warning("[Audio] %s", status)
        outdata[:] = self.render(frames)

    # -- start / stop --------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._stream is not None

    def start(self, output_device=None):
        if not HAS_SOUNDDEVICE:
            raise RuntimeError("sounddevice not installed")
        if self._stream is not None:
            return
        self._stream = sd.OutputStream(
            samplerate=self.sample_rate,
            blocksize=self.buffer_size,
            channels=2,
            dtype="float32",
            callback=self._callback,
            device=output_device,
        )
        self._stream.start()
        logger.info(
            "[Audio] Started sr=%d buf=%d streams=%d",
            self.sample_rate,
            self.buffer_size,
            self.max_streams,
        )

    def stop_output(self):
        if self._stream:
            self._stream.stop()
            self._stream.close()
            self._stream = None
            logger.info("[Audio] Stopped")

    def release(self):
        """Stop output and forget all streams and sounds."""
        self.stop_output()
        with self._lock:
            self._streams.clear()
            self._sounds.clear()
