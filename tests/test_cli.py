import io
import unittest

from tanpura.cli import TanpuraCLI
from tests.helpers import make_host


class TestTanpuraCLI(unittest.TestCase):
    def setUp(self):
        self.host, tmp = make_host(skip=("fsharp",))
        self.addCleanup(tmp.cleanup)
        self.addCleanup(self.host.dispose)
        self.out = io.StringIO()
        self.cli = TanpuraCLI(self.host, stdout=self.out, owns_host=False)

    def run_cmd(self, line: str) -> str:
        self.out.seek(0)
        self.out.truncate()
        self.cli.onecmd(line)
        return self.out.getvalue()

    def test_play_and_notes(self):
        self.assertIn("started", self.run_cmd("play C 0.5"))
        self.assertIn("C   volume=0.50", self.run_cmd("notes"))

    def test_play_missing_sample(self):
        self.assertIn("no sample", self.run_cmd("play F#"))

    def test_play_bad_input(self):
        self.assertIn("Usage", self.run_cmd("play"))
        self.assertIn("Error", self.run_cmd("play H"))
        self.assertIn("Error: gain must be a number", self.run_cmd("play C loud"))

    def test_capacity_message(self):
        for name in ("C", "D", "E"):
            self.run_cmd(f"key {name}")
        self.assertIn("all voices busy", self.run_cmd("key G"))

    def test_key_toggle(self):
        self.assertIn("started", self.run_cmd("key a#"))
        self.assertIn("stopped", self.run_cmd("key a#"))

    def test_volume_and_stop(self):
        self.run_cmd("play D")
        self.assertIn("updated", self.run_cmd("volume D 0.2"))
        self.assertAlmostEqual(self.host.mixer.volume_of("D"), 0.2)
        self.assertIn("no-op", self.run_cmd("volume E 0.2"))
        self.assertIn("stopped", self.run_cmd("stop D"))
        self.assertIn("No notes sounding", self.run_cmd("notes"))

    def test_stop_all(self):
        self.run_cmd("play C")
        self.run_cmd("play D")
        self.assertIn("stopped", self.run_cmd("stop_all"))
        self.assertEqual(self.host.mixer.voice_count, 0)

    def test_master(self):
        self.assertIn("master volume = 0.40", self.run_cmd("master 0.4"))
        self.run_cmd("play C")
        self.assertAlmostEqual(self.host.mixer.volume_of("C"), 0.4)
        self.assertIn("Error", self.run_cmd("master abc"))

    def test_fx(self):
        self.assertIn("bass=5.0 treble=-3.0 reverb=40.0 echo=10.0",
                      self.run_cmd("fx 5 -3 40 10"))
        self.assertIn("Usage", self.run_cmd("fx 1 2"))
        self.assertIn("bass=5.0", self.run_cmd("fx"))

    def test_samples(self):
        out = self.run_cmd("samples")
        self.assertIn("F#  fsharp  MISSING", out)
        self.assertIn("C   c       OK", out)

    def test_status(self):
        out = self.run_cmd("status")
        self.assertIn("Audio  : STOPPED", out)
        self.assertIn("Samples: 11/12", out)

    def test_quit_without_owning_host(self):
        self.run_cmd("play C")
        self.assertTrue(self.cli.onecmd("quit"))
        self.assertTrue(self.host.mixer.is_sounding("C"))
