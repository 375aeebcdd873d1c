"""Graceful optional dependency imports.

Audio output and MIDI input depend on system libraries that may be absent
on headless machines, so their imports are guarded here and every other
module reads the availability flags instead of repeating try/except blocks.
"""

from __future__ import annotations

# -- sounddevice (real-time audio output) -----------------------------------

try:
    import sounddevice as sd
    HAS_SOUNDDEVICE = True
except (ImportError, OSError):
    sd = None  # type: ignore[assignment]
    HAS_SOUNDDEVICE = False

# -- python-rtmidi (MIDI keyboard input) ------------------------------------

try:
    import rtmidi
    HAS_RTMIDI = True
except ImportError:
    rtmidi = None  # type: ignore[assignment]
    HAS_RTMIDI = False

# -- numpy / soundfile (always required) ------------------------------------

import numpy as np
import soundfile as sf
