"""Low-level MIDI input port wrapper (python-rtmidi)."""

from __future__ import annotations

from typing import Callable, Optional

from tanpura.deps import HAS_RTMIDI, rtmidi


class MidiPort:
    """Opens a single hardware MIDI input port with a callback."""

    def __init__(self):
        self._port = None
        self._name: Optional[str] = None

    @staticmethod
    def list_ports() -> list[str]:
        if not HAS_RTMIDI:
            return []
        m = rtmidi.MidiIn()
        ports = [m.get_port_name(i) for i in range(m.get_port_count())]
        m.delete()
        return ports

    def open(self, port_index: int, callback: Callable) -> str:
        self.close()
        if not HAS_RTMIDI:
            raise RuntimeError("python-rtmidi not installed")
        port = rtmidi.MidiIn()
        if not 0 <= port_index < port.get_port_count():
            port.delete()
            raise ValueError(f"no MIDI input port {port_index}")
        port.open_port(port_index)
        port.set_callback(callback)
        self._port = port
        self._name = port.get_port_name(port_index)
        return self._name

    def close(self):
        if self._port:
            self._port.close_port()
            self._port.delete()
            self._port = None
            self._name = None

    @property
    def is_open(self) -> bool:
        return self._port is not None

    @property
    def name(self) -> Optional[str]:
        return self._name
