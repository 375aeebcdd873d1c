"""Controller modules for external MIDI hardware."""

from controllers.keyboard import KeyboardController

__all__ = ["KeyboardController"]
