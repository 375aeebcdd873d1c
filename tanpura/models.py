"""Shared data models and constants."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

POLYPHONY = 3  # max simultaneously sounding voices

BASS_RANGE = (-20.0, 20.0)
TREBLE_RANGE = (-20.0, 20.0)
MIX_RANGE = (0.0, 100.0)


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, float(value)))


class Pitch(Enum):
    """The twelve chromatic pitch classes of one octave."""

    C = "C"
    C_SHARP = "C#"
    D = "D"
    D_SHARP = "D#"
    E = "E"
    F = "F"
    F_SHARP = "F#"
    G = "G"
    G_SHARP = "G#"
    A = "A"
    A_SHARP = "A#"
    B = "B"

    @property
    def asset_key(self) -> str:
        """Bundled asset name: ``"C#"`` -> ``"csharp"``."""
        return self.value.lower().replace("#", "sharp")

    @property
    def is_sharp(self) -> bool:
        return self.value.endswith("#")

    @classmethod
    def parse(cls, name: Union[str, "Pitch"]) -> "Pitch":
        """Accept a Pitch, a note name (``"c#"``) or an asset key (``"csharp"``)."""
        if isinstance(name, Pitch):
            return name
        text = str(name).strip().upper().replace("SHARP", "#")
        for pitch in cls:
            if pitch.value == text:
                return pitch
        raise ValueError(f"unknown pitch '{name}'")

    @classmethod
    def from_midi(cls, note: int) -> "Pitch":
        """Map a MIDI note number onto its pitch class (60 -> C)."""
        return list(cls)[int(note) % 12]


PitchLike = Union[str, Pitch]


class PlayOutcome(Enum):
    """Result of a mixer operation. None of these are errors."""

    STARTED = "started"
    DROPPED_CAPACITY = "dropped (all voices busy)"
    DROPPED_NO_SAMPLE = "dropped (no sample)"
    ALREADY_SOUNDING = "already sounding"
    UPDATED = "updated"
    STOPPED = "stopped"
    NOOP = "no-op"


@dataclass
class Voice:
    """A currently sounding note owned by the VoiceMixer."""

    pitch: Pitch
    stream_id: int
    volume: float = 1.0


@dataclass(frozen=True)
class EffectParams:
    """Global tone/effect settings. Stored and reported, never applied to audio."""

    bass: float = 0.0
    treble: float = 0.0
    reverb_mix: float = 0.0
    echo_mix: float = 0.0

    def clamped(self) -> "EffectParams":
        return EffectParams(
            bass=clamp(self.bass, *BASS_RANGE),
            treble=clamp(self.treble, *TREBLE_RANGE),
            reverb_mix=clamp(self.reverb_mix, *MIX_RANGE),
            echo_mix=clamp(self.echo_mix, *MIX_RANGE),
        )


@dataclass(frozen=True)
class MixerState:
    """Read-only snapshot handed to observers: sounding notes and effects."""

    voices: dict[str, float] = field(default_factory=dict)
    effects: EffectParams = field(default_factory=EffectParams)

    @property
    def active_notes(self) -> set[str]:
        return set(self.voices)
