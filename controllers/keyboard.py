"""MIDI keyboard integration: keys toggle notes, knobs set levels."""

from __future__ import annotations

import logging
from typing import Optional

from tanpura.midi import MidiPort
from tanpura.models import Pitch


logger = logging.getLogger(__name__)

MASTER_VOLUME_CC = 7
VOICE_VOLUME_CCS = [70, 71, 72]  # 1st/2nd/3rd sounding note, in pitch order
ALL_SOUND_OFF_CC = 120
ALL_NOTES_OFF_CC = 123


class KeyboardController:
    """Handle MIDI keyboard events and apply them to a tanpura engine.

    In latch mode (the default) each key press toggles its pitch class,
    like tapping a key on screen. With ``latch=False`` a note sounds
    only while its key is held.
    """

    def __init__(self, host, latch: bool = True):
        self._host = host
        self._port = MidiPort()
        self.latch = latch

    @property
    def port_name(self) -> Optional[str]:
        return self._port.name

    def open(self, port_index: int) -> str:
        return self._port.open(port_index, self.on_midi)

    def close(self):
        self._port.close()

    def on_midi(self, event, data=None):
        """rtmidi callback for incoming keyboard events."""
        del data

        raw, _dt = event
        if not raw or len(raw) < 3:
            return

        msg_type = raw[0] & 0xF0
        if msg_type == 0x90 and raw[2] > 0:
            logger.debug("[MIDI] note on %d velocity=%d", raw[1], raw[2])
            self._note_on(raw[1])
        elif msg_type == 0x80 or (msg_type == 0x90 and raw[2] == 0):
            logger.debug("[MIDI] note off %d", raw[1])
            self._note_off(raw[1])
        elif msg_type == 0xB0:
            logger.debug("[MIDI] CC %d value=%d", raw[1], raw[2])
            self._handle_cc(raw[1], raw[2])

    def _note_on(self, note: int):
        pitch = Pitch.from_midi(note)
        if self.latch:
            self._host.press_key(pitch)
        else:
            self._host.play_note(pitch)

    def _note_off(self, note: int):
        if not self.latch:
            self._host.stop_note(Pitch.from_midi(note))

    def _handle_cc(self, cc: int, value: int):
        level = value / 127.0
        if cc == MASTER_VOLUME_CC:
            self._host.master_volume = level
        elif cc in VOICE_VOLUME_CCS:
            notes = list(self._host.mixer.state().voices)
            position = VOICE_VOLUME_CCS.index(cc)
            if position < len(notes):
                self._host.update_volume(notes[position], level)
        elif cc in (ALL_SOUND_OFF_CC, ALL_NOTES_OFF_CC):
            self._host.stop_all_notes()
