import unittest

from tanpura.host import TanpuraCore
from tanpura.models import Pitch, PlayOutcome
from tests.helpers import make_asset_dir, make_host


class TestLifecycle(unittest.TestCase):
    def test_fresh_instances_are_isolated(self):
        a, tmp_a = make_host()
        b, tmp_b = make_host()
        self.addCleanup(tmp_a.cleanup)
        self.addCleanup(tmp_b.cleanup)
        a.play_note("C")
        self.assertTrue(a.mixer.is_sounding("C"))
        self.assertFalse(b.mixer.is_sounding("C"))

    def test_operations_before_initialize_degrade(self):
        tmp = make_asset_dir()
        self.addCleanup(tmp.cleanup)
        host = TanpuraCore.from_directory(tmp.name, sample_rate=8000)
        self.assertFalse(host.initialized)
        self.assertIs(host.play_note("C", 1.0), PlayOutcome.DROPPED_NO_SAMPLE)
        self.assertIs(host.stop_note("C"), PlayOutcome.NOOP)
        self.assertIs(host.update_volume("C", 0.5), PlayOutcome.NOOP)

    def test_dispose_then_reinitialize(self):
        host, tmp = make_host()
        self.addCleanup(tmp.cleanup)
        host.play_note("E", 1.0)
        host.dispose()
        self.assertFalse(host.initialized)
        self.assertEqual(host.mixer.voice_count, 0)
        self.assertEqual(host.player.active_streams, 0)

        host.initialize()
        self.assertEqual(len(host.bank.loaded), 12)
        self.assertIs(host.play_note("E", 1.0), PlayOutcome.STARTED)

    def test_missing_directory_loads_nothing(self):
        host = TanpuraCore.from_directory("/nonexistent/tanpura-assets", sample_rate=8000)
        with self.assertLogs("tanpura.samples", level="ERROR"):
            host.initialize()
        self.assertTrue(host.initialized)
        self.assertEqual(host.bank.missing, list(Pitch))


class TestKeys(unittest.TestCase):
    def setUp(self):
        self.host, tmp = make_host()
        self.addCleanup(tmp.cleanup)
        self.addCleanup(self.host.dispose)

    def test_press_key_toggles(self):
        self.assertIs(self.host.press_key("D#"), PlayOutcome.STARTED)
        self.assertTrue(self.host.mixer.is_sounding("D#"))
        self.assertIs(self.host.press_key("D#"), PlayOutcome.STOPPED)
        self.assertFalse(self.host.mixer.is_sounding("D#"))

    def test_new_notes_start_at_master_volume(self):
        self.host.master_volume = 0.3
        self.host.press_key("A")
        self.host.play_note("B")
        self.assertEqual(self.host.mixer.state().voices, {"A": 0.3, "B": 0.3})

    def test_master_change_does_not_retune_sounding_notes(self):
        self.host.press_key("C")
        self.host.master_volume = 0.1
        self.assertAlmostEqual(self.host.mixer.volume_of("C"), 1.0)

    def test_master_volume_is_clamped(self):
        self.host.master_volume = 1.7
        self.assertEqual(self.host.master_volume, 1.0)
        self.host.master_volume = -2
        self.assertEqual(self.host.master_volume, 0.0)

    def test_fourth_key_is_dropped(self):
        for name in ("C", "E", "G"):
            self.host.press_key(name)
        self.assertIs(self.host.press_key("B"), PlayOutcome.DROPPED_CAPACITY)

    def test_update_effects_passthrough(self):
        self.host.update_effects(5, -3, 40, 10)
        fx = self.host.mixer.effects
        self.assertEqual((fx.bass, fx.treble, fx.reverb_mix, fx.echo_mix), (5, -3, 40, 10))
