"""Interactive command-line interface for tanpura.

Notes are named the way they appear on the keyboard (C, C#, D ... B);
asset keys such as ``csharp`` are accepted too. Gains are 0.0-1.0.
"""

from __future__ import annotations

import cmd

from tanpura.deps import HAS_RTMIDI, HAS_SOUNDDEVICE, sd
from tanpura.host import TanpuraCore
from tanpura.midi import MidiPort
from tanpura.models import Pitch


def _parse_gain(text: str) -> float:
    try:
        return float(text)
    except ValueError:
        raise ValueError("gain must be a number") from None


class TanpuraCLI(cmd.Cmd):
    intro = r"""
============================================================
  tanpura  -  three-voice sustained keyboard
============================================================
Type 'help' for available commands.
Notes: C C# D D# E F F# G G# A A# B   (up to 3 at once)
"""
    prompt = "tanpura> "

    def __init__(self, host: TanpuraCore, stdout=None, owns_host: bool = True):
        super().__init__(stdout=stdout)
        self.host = host
        # When True, quit/exit will call host.shutdown().
        self._owns_host = owns_host

    def _print(self, *args, **kwargs):
        """Print to self.stdout so output can be captured."""
        kwargs.setdefault("file", self.stdout)
        print(*args, **kwargs)

    def emptyline(self):
        return False

    # -- notes ---------------------------------------------------------------

    def do_play(self, arg):
        """Play a note: play <note> [gain]  (gain defaults to master volume)"""
        parts = arg.strip().split()
        if not parts:
            self._print("Usage: play <note> [gain]")
            return
        try:
            gain = _parse_gain(parts[1]) if len(parts) > 1 else None
            outcome = self.host.play_note(parts[0], gain)
        except ValueError as e:
            self._print(f"Error: {e}")
            return
        self._print(f"  {parts[0].upper()}: {outcome.value}")

    def do_key(self, arg):
        """Toggle a key like tapping it: key <note>"""
        if not arg.strip():
            self._print("Usage: key <note>")
            return
        try:
            outcome = self.host.press_key(arg.strip())
        except ValueError as e:
            self._print(f"Error: {e}")
            return
        self._print(f"  {arg.strip().upper()}: {outcome.value}")

    def do_stop(self, arg):
        """Stop a note: stop <note>"""
        if not arg.strip():
            self._print("Usage: stop <note>")
            return
        try:
            outcome = self.host.stop_note(arg.strip())
        except ValueError as e:
            self._print(f"Error: {e}")
            return
        self._print(f"  {arg.strip().upper()}: {outcome.value}")

    def do_stop_all(self, arg):
        """Stop every sounding note."""
        outcome = self.host.stop_all_notes()
        self._print(f"  all: {outcome.value}")

    def do_volume(self, arg):
        """Set a sounding note's volume: volume <note> <0.0-1.0>"""
        parts = arg.strip().split()
        if len(parts) < 2:
            self._print("Usage: volume <note> <gain>")
            return
        try:
            outcome = self.host.update_volume(parts[0], _parse_gain(parts[1]))
        except ValueError as e:
            self._print(f"Error: {e}")
            return
        self._print(f"  {parts[0].upper()}: {outcome.value}")

    def do_notes(self, arg):
        """Show sounding notes and their volumes."""
        voices = self.host.mixer.state().voices
        if not voices:
            self._print("  No notes sounding.")
            return
        for name, volume in voices.items():
            self._print(f"  {name:<3} volume={volume:.2f}")

    # -- levels / effects ----------------------------------------------------

    def do_master(self, arg):
        """Get/set master volume used for new notes: master [0.0-1.0]"""
        if arg.strip():
            try:
                self.host.master_volume = _parse_gain(arg.strip())
            except ValueError as e:
                self._print(f"Error: {e}")
                return
        self._print(f"  master volume = {self.host.master_volume:.2f}")

    def do_fx(self, arg):
        """Get/set effects: fx [<bass> <treble> <reverb> <echo>]"""
        parts = arg.strip().split()
        if parts:
            if len(parts) != 4:
                self._print("Usage: fx <bass -20..20> <treble -20..20> "
                            "<reverb 0..100> <echo 0..100>")
                return
            try:
                values = [float(p) for p in parts]
            except ValueError:
                self._print("Error: effect values must be numbers")
                return
            self.host.update_effects(*values)
        fx = self.host.mixer.effects
        self._print(f"  bass={fx.bass:.1f} treble={fx.treble:.1f} "
                    f"reverb={fx.reverb_mix:.1f} echo={fx.echo_mix:.1f}")

    # -- samples / audio -----------------------------------------------------

    def do_samples(self, arg):
        """Show which pitches have a loaded sample."""
        for pitch in Pitch:
            ok = self.host.bank.get_sample(pitch) is not None
            self._print(f"  {pitch.value:<3} {pitch.asset_key:<7} {'OK' if ok else 'MISSING'}")

    def do_audio_start(self, arg):
        """Start audio: audio_start [device]"""
        dev = arg.strip() or None
        if dev and dev.isdigit():
            dev = int(dev)
        try:
            self.host.start_audio(dev)
        except Exception as e:
            self._print(f"Error: {e}")

    def do_audio_stop(self, arg):
        """Stop audio."""
        self.host.stop_audio()

    def do_devices(self, arg):
        """List audio devices."""
        if HAS_SOUNDDEVICE:
            self._print(sd.query_devices())
        else:
            self._print("  sounddevice not installed")

    # -- MIDI ----------------------------------------------------------------

    def do_midi_ports(self, arg):
        """List MIDI input ports."""
        ports = MidiPort.list_ports()
        if not ports:
            self._print("  No MIDI input ports found.")
            return
        for i, name in enumerate(ports):
            self._print(f"  [{i}] {name}")

    def do_midi(self, arg):
        """Open a MIDI keyboard: midi <port_index> [hold]"""
        parts = arg.strip().split()
        if not parts:
            self._print("Usage: midi <port_index> [hold]")
            return
        try:
            latch = not (len(parts) > 1 and parts[1] == "hold")
            self.host.open_keyboard_midi(int(parts[0]), latch=latch)
        except Exception as e:
            self._print(f"Error: {e}")

    # -- status --------------------------------------------------------------

    def do_status(self, arg):
        """Overall status."""
        player = self.host.player
        self._print("=== tanpura Status ===")
        self._print(f"  Audio  : {'RUNNING' if player.running else 'STOPPED'}"
                    f"  (sr={self.host.sample_rate} buf={self.host.buffer_size})")
        self._print(f"  MIDI   : {self.host.keyboard_midi_name or 'closed'}")
        self._print(f"  Samples: {len(self.host.bank.loaded)}/{len(Pitch)}")
        self._print(f"  Master : {self.host.master_volume:.2f}")
        self._print()
        self.do_notes("")

    def do_deps(self, arg):
        """Check optional dependencies."""
        for name, ok in [("sounddevice", HAS_SOUNDDEVICE), ("python-rtmidi", HAS_RTMIDI)]:
            self._print(f"  {name}: {'OK' if ok else 'MISSING'}")

    def do_quit(self, arg):
        """Exit the session."""
        if self._owns_host:
            self.host.shutdown()
        return True

    do_exit = do_quit
    do_EOF = do_quit
