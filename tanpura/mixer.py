"""Voice pool: polyphony cap, note identity and per-voice gain."""

from __future__ import annotations

import logging
import threading
from typing import Callable

from tanpura.models import (
    POLYPHONY,
    EffectParams,
    MixerState,
    Pitch,
    PitchLike,
    PlayOutcome,
    Voice,
    clamp,
)
from tanpura.player import SamplePlayer
from tanpura.samples import SampleBank


logger = logging.getLogger(__name__)

Listener = Callable[[MixerState], None]


class VoiceMixer:
    """
    Starts, retunes and stops at most ``max_voices`` notes, one per pitch.

    Every operation is fire-and-forget for the caller: nothing raises for
    a full pool, a missing sample or an idle pitch. The returned
    ``PlayOutcome`` says what actually happened.

    A single lock covers each check-then-modify of the voice map, so
    requests from the CLI and the MIDI callback thread cannot push the
    pool past its cap.
    """

    def __init__(self, bank: SampleBank, player: SamplePlayer,
                 max_voices: int = POLYPHONY):
        self.bank = bank
        self.player = player
        self.max_voices = max_voices

        self._voices: dict[Pitch, Voice] = {}
        self._effects = EffectParams()
        self._listeners: list[Listener] = []
        self._lock = threading.Lock()

    # -- notes ---------------------------------------------------------------

    def play_note(self, pitch: PitchLike, gain: float) -> PlayOutcome:
        pitch = Pitch.parse(pitch)
        gain = clamp(gain, 0.0, 1.0)
        with self._lock:
            if pitch in self._voices:
                return PlayOutcome.ALREADY_SOUNDING
            if len(self._voices) >= self.max_voices:
                logger.debug("[Mixer] %s dropped, %d voices busy", pitch.value, len(self._voices))
                return PlayOutcome.DROPPED_CAPACITY
            sound_id = self.bank.get_sample(pitch)
            if sound_id is None:
                return PlayOutcome.DROPPED_NO_SAMPLE
            stream_id = self.player.play(sound_id, gain, gain, priority=1, loop=0, rate=1.0)
            if not stream_id:
                return PlayOutcome.DROPPED_NO_SAMPLE
            self._voices[pitch] = Voice(pitch, stream_id, gain)
        logger.debug("[Mixer] playing %s at %.2f", pitch.value, gain)
        self._notify()
        return PlayOutcome.STARTED

    def update_volume(self, pitch: PitchLike, gain: float) -> PlayOutcome:
        pitch = Pitch.parse(pitch)
        gain = clamp(gain, 0.0, 1.0)
        with self._lock:
            voice = self._voices.get(pitch)
            if voice is None:
                return PlayOutcome.NOOP
            self.player.set_volume(voice.stream_id, gain, gain)
            voice.volume = gain
        logger.debug("[Mixer] %s volume %.2f", pitch.value, gain)
        self._notify()
        return PlayOutcome.UPDATED

    def stop_note(self, pitch: PitchLike) -> PlayOutcome:
        pitch = Pitch.parse(pitch)
        with self._lock:
            voice = self._voices.pop(pitch, None)
            if voice is None:
                return PlayOutcome.NOOP
            self.player.stop(voice.stream_id)
        logger.debug("[Mixer] stopped %s", pitch.value)
        self._notify()
        return PlayOutcome.STOPPED

    def stop_all_notes(self) -> PlayOutcome:
        with self._lock:
            if not self._voices:
                return PlayOutcome.NOOP
            for voice in self._voices.values():
                self.player.stop(voice.stream_id)
            self._voices.clear()
        logger.debug("[Mixer] stopped all notes")
        self._notify()
        return PlayOutcome.STOPPED

    # -- effects -------------------------------------------------------------

    def update_effects(self, params: EffectParams) -> PlayOutcome:
        """Replace the stored effect snapshot. Sounding voices are untouched."""
        params = params.clamped()
        with self._lock:
            self._effects = params
        logger.info("[Mixer] effects bass=%.1f treble=%.1f reverb=%.1f echo=%.1f",
                    params.bass, params.treble, params.reverb_mix, params.echo_mix)
        self._notify()
        return PlayOutcome.UPDATED

    @property
    def effects(self) -> EffectParams:
        return self._effects

    # -- observation ---------------------------------------------------------

    def is_sounding(self, pitch: PitchLike) -> bool:
        return Pitch.parse(pitch) in self._voices

    def volume_of(self, pitch: PitchLike):
        voice = self._voices.get(Pitch.parse(pitch))
        return voice.volume if voice else None

    @property
    def voice_count(self) -> int:
        return len(self._voices)

    def state(self) -> MixerState:
        with self._lock:
            return self._state_locked()

    def _state_locked(self) -> MixerState:
        ordered = sorted(self._voices.values(), key=lambda v: list(Pitch).index(v.pitch))
        return MixerState(voices={v.pitch.value: v.volume for v in ordered},
                          effects=self._effects)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` with a fresh MixerState after every change."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self):
        if not self._listeners:
            return
        state = self.state()
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("[Mixer] state listener failed")
