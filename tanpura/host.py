"""tanpura core - one engine instance tying samples, playback and voices together."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from controllers.keyboard import KeyboardController
from tanpura.mixer import VoiceMixer
from tanpura.models import POLYPHONY, EffectParams, Pitch, PitchLike, PlayOutcome, clamp
from tanpura.paths import default_assets_dir
from tanpura.player import SamplePlayer
from tanpura.samples import AssetSource, DirectoryAssetSource, SampleBank


logger = logging.getLogger(__name__)


class TanpuraCore:
    """
    The instrument engine.

    Lifecycle: construct, ``initialize()`` to decode the samples, then
    drive it through the note and effect methods; ``dispose()`` stops
    everything and frees the decoded audio. Each instance is independent.
    """

    def __init__(self, assets: Optional[AssetSource] = None, sample_rate: int = 44100,
                 buffer_size: int = 512, master_volume: float = 1.0):
        self.assets = assets if assets is not None else DirectoryAssetSource(default_assets_dir())
        self.sample_rate = sample_rate
        self.buffer_size = buffer_size

        self.player = SamplePlayer(sample_rate, buffer_size, max_streams=POLYPHONY)
        self.bank = SampleBank()
        self.mixer = VoiceMixer(self.bank, self.player, max_voices=POLYPHONY)
        self._master_volume = clamp(master_volume, 0.0, 1.0)

        self.keyboard = KeyboardController(self)

    @property
    def keyboard_midi_name(self) -> Optional[str]:
        return self.keyboard.port_name

    @classmethod
    def from_directory(cls, path, **kwargs) -> "TanpuraCore":
        return cls(DirectoryAssetSource(Path(path)), **kwargs)

    # -- lifecycle -----------------------------------------------------------

    def initialize(self):
        self.bank.initialize(self.assets, self.player.load)

    @property
    def initialized(self) -> bool:
        return self.bank.initialized

    def dispose(self):
        self.mixer.stop_all_notes()
        self.player.release()
        self.bank.clear()
        logger.info("[Host] disposed")

    # -- master volume -------------------------------------------------------

    @property
    def master_volume(self) -> float:
        return self._master_volume

    @master_volume.setter
    def master_volume(self, value: float):
        self._master_volume = clamp(value, 0.0, 1.0)

    # -- notes ---------------------------------------------------------------

    def press_key(self, pitch: PitchLike) -> PlayOutcome:
        """Toggle a key: stop it if sounding, otherwise play at master volume."""
        pitch = Pitch.parse(pitch)
        if self.mixer.is_sounding(pitch):
            return self.mixer.stop_note(pitch)
        return self.mixer.play_note(pitch, self._master_volume)

    def play_note(self, pitch: PitchLike, gain: Optional[float] = None) -> PlayOutcome:
        return self.mixer.play_note(pitch, self._master_volume if gain is None else gain)

    def stop_note(self, pitch: PitchLike) -> PlayOutcome:
        return self.mixer.stop_note(pitch)

    def update_volume(self, pitch: PitchLike, gain: float) -> PlayOutcome:
        return self.mixer.update_volume(pitch, gain)

    def stop_all_notes(self) -> PlayOutcome:
        return self.mixer.stop_all_notes()

    def update_effects(self, bass: float = 0.0, treble: float = 0.0,
                       reverb_mix: float = 0.0, echo_mix: float = 0.0) -> PlayOutcome:
        return self.mixer.update_effects(EffectParams(bass, treble, reverb_mix, echo_mix))

    # -- audio ---------------------------------------------------------------

    def start_audio(self, output_device=None):
        self.player.start(output_device)

    def stop_audio(self):
        self.player.stop_output()

    # -- MIDI keyboard -------------------------------------------------------

    def open_keyboard_midi(self, port_index: int, latch: bool = True):
        self.keyboard.latch = latch
        name = self.keyboard.open(port_index)
        print(f"[MIDI] Opened: {name}")

    def close_keyboard_midi(self):
        self.keyboard.close()

    # -- shutdown ------------------------------------------------------------

    def shutdown(self):
        self.keyboard.close()
        self.dispose()
        print("[Host] Shutdown complete")
