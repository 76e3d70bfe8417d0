"""Tests for the widget facade and its ambient pieces.

Covers: cw.core.widget, cw.core.notify, cw.core.config, cw.util, cw.ui.ticker
"""

import importlib.util
import json
import shutil
import tempfile
import unittest
from datetime import datetime
from pathlib import Path

from tests.recording import COMPLETED, FIRED, RecordingNotifier, SteppingClock

T0 = datetime(2026, 10, 18, 7, 29, 58)


def _build_widget(permission=None, labels=None):
    from cw.core.widget import ClockWidget
    clock = SteppingClock(T0)
    notifier = RecordingNotifier(permission)
    widget = ClockWidget(notifier=notifier, labels=labels, clock=clock)
    return widget, notifier, clock


# ──────────────────────────────────────────────────────────────────────────
# widget.py tests
# ──────────────────────────────────────────────────────────────────────────

class TestClockWidget(unittest.TestCase):
    """Button-level behaviour of the facade."""

    def setUp(self):
        self.widget, self.notifier, self.clock = _build_widget()

    def test_start_renders_clock_and_starts_ticker(self):
        self.widget.start()
        self.assertTrue(self.widget.clock_ticker.is_active)
        source, reading = self.notifier.updates[-1]
        self.assertEqual(source, "clock")
        self.assertEqual(reading.time, "07:29:58")
        self.assertEqual(reading.date, "Sunday, October 18, 2026")

    def test_clock_ticks_check_alarms(self):
        self.widget.start()
        alarm = self.widget.add_alarm("07:30")
        for _ in range(70):
            self.clock.advance(1)
            self.widget.clock_ticker.fire()
        self.assertEqual(self.notifier.count(FIRED), 1)
        self.assertFalse(alarm.active)
        self.assertIn("Alarm: 07:30", self.notifier.messages)

    def test_stop_stops_every_ticker(self):
        self.widget.start()
        self.widget.start_timer(0, 1, 0)
        self.widget.start_stopwatch()
        self.widget.stop()
        self.assertFalse(self.widget.clock_ticker.is_active)
        self.assertFalse(self.widget.countdown.ticker.is_active)
        self.assertFalse(self.widget.stopwatch.ticker.is_active)

    def test_start_timer_from_fields(self):
        self.assertTrue(self.widget.start_timer("0", "1", "30"))
        self.assertEqual(self.widget.countdown.remaining_seconds, 90)
        self.assertTrue(self.widget.countdown.running)

    def test_start_timer_blank_fields_count_as_zero(self):
        self.assertTrue(self.widget.start_timer("", None, "45"))
        self.assertEqual(self.widget.countdown.remaining_seconds, 45)

    def test_start_timer_rejects_zero_duration(self):
        self.assertFalse(self.widget.start_timer(0, 0, 0))
        self.assertFalse(self.widget.countdown.running)
        self.assertEqual(self.notifier.messages, ["Please set a valid timer duration"])

    def test_start_timer_rejects_negative_field(self):
        self.assertFalse(self.widget.start_timer(1, -5, 0))
        self.assertEqual(self.notifier.messages, ["Please set a valid timer duration"])

    def test_start_timer_while_running_is_ignored(self):
        self.widget.start_timer(0, 0, 10)
        self.assertFalse(self.widget.start_timer(0, 0, 99))
        self.assertEqual(self.widget.countdown.remaining_seconds, 10)

    def test_timer_completion_through_ticker(self):
        self.widget.start_timer(0, 0, 2)
        for _ in range(4):
            self.clock.advance(0.5)
            self.widget.countdown.ticker.fire()
        self.assertFalse(self.widget.countdown.running)
        self.assertEqual(self.notifier.count(COMPLETED), 1)
        self.assertEqual(self.notifier.messages, ["Timer finished!"])
        self.assertEqual(self.notifier.popups, [])

    def test_pause_and_reset_timer_refresh_display(self):
        self.widget.start_timer(0, 0, 10)
        self.clock.advance(3.5)
        self.widget.pause_timer()
        self.assertEqual(self.notifier.updates_for("countdown")[-1], 7)
        self.widget.reset_timer()
        self.assertEqual(self.notifier.updates_for("countdown")[-1], 0)
        self.assertEqual(self.widget.countdown.remaining_seconds, 0)

    def test_resume_ignores_new_fields(self):
        self.widget.start_timer(0, 0, 10)
        self.clock.advance(4)
        self.widget.pause_timer()
        self.widget.start_timer(5, 0, 0)
        self.assertEqual(self.widget.countdown.remaining_seconds, 6)

    def test_add_alarm(self):
        alarm = self.widget.add_alarm("07:45")
        self.assertIsNotNone(alarm)
        self.assertEqual(self.notifier.messages, ["Alarm added successfully"])
        self.assertEqual(list(self.widget.alarms), [alarm])

    def test_add_alarm_empty(self):
        self.assertIsNone(self.widget.add_alarm(""))
        self.assertEqual(self.notifier.messages, ["Please select a time for the alarm"])
        self.assertEqual(len(self.widget.alarms), 0)

    def test_toggle_unknown_alarm_reports(self):
        self.assertIsNone(self.widget.toggle_alarm(42))
        self.assertEqual(self.notifier.messages, ["No alarm with id 42"])

    def test_toggle_and_delete_alarm(self):
        alarm = self.widget.add_alarm("07:45")
        self.assertIs(self.widget.toggle_alarm(alarm.id), alarm)
        self.assertFalse(alarm.active)
        self.assertTrue(self.widget.delete_alarm(alarm.id))
        self.assertFalse(self.widget.delete_alarm(alarm.id))
        self.assertEqual(self.notifier.messages[-1], "Alarm deleted")

    def test_stopwatch_controls(self):
        self.widget.start_stopwatch()
        self.clock.advance(5.2)
        first = self.widget.lap_stopwatch()
        self.clock.advance(2)
        self.widget.pause_stopwatch()
        self.assertEqual(first.displayed_elapsed, 5)
        self.assertEqual(self.notifier.updates_for("stopwatch")[-1], 7)

        self.widget.reset_stopwatch()
        self.assertEqual(self.notifier.updates_for("stopwatch")[-1], 0)
        self.assertEqual(self.widget.stopwatch.laps, ())

    def test_lap_before_start_reports(self):
        self.assertIsNone(self.widget.lap_stopwatch())
        self.assertEqual(self.notifier.messages, ["Start the stopwatch before recording a lap"])


# ──────────────────────────────────────────────────────────────────────────
# notify.py tests
# ──────────────────────────────────────────────────────────────────────────

class TestPermission(unittest.TestCase):
    """Fire-and-forget notification permission."""

    def test_no_requester_leaves_state_unknown(self):
        from cw.core.notify import NotificationPermission
        widget, notifier, _ = _build_widget()
        widget.start_timer(0, 0, 5)
        self.assertIs(notifier.permission.state, NotificationPermission.UNKNOWN)

    def test_requested_once_per_session(self):
        from cw.core.notify import PermissionGate
        requests = []
        widget, _, _ = _build_widget(PermissionGate(requests.append))
        widget.start_timer(0, 0, 5)
        widget.reset_timer()
        widget.start_timer(0, 0, 5)
        widget.add_alarm("08:00")
        self.assertEqual(len(requests), 1)

    def test_pending_request_does_not_block_start(self):
        from cw.core.notify import NotificationPermission, PermissionGate
        widget, notifier, _ = _build_widget(PermissionGate(lambda resolve: None))
        self.assertTrue(widget.start_timer(0, 0, 5))
        self.assertIsNotNone(widget.add_alarm("08:00"))
        self.assertIs(notifier.permission.state, NotificationPermission.UNKNOWN)

    def test_granted_permission_enables_popups(self):
        from cw.core.notify import PermissionGate
        widget, notifier, clock = _build_widget(PermissionGate(lambda resolve: resolve(True)))
        widget.start_timer(0, 0, 1)
        clock.advance(1)
        widget.countdown.ticker.fire()
        self.assertEqual(notifier.popups, [("Timer Finished!", "Your countdown has ended.")])

    def test_granted_permission_alarm_popup(self):
        from cw.core.notify import PermissionGate
        widget, notifier, clock = _build_widget(PermissionGate(lambda resolve: resolve(True)))
        widget.add_alarm("07:30")
        clock.advance(2)
        widget.tick_clock()
        self.assertEqual(notifier.popups, [("Alarm!", "It's time for your 07:30 alarm.")])

    def test_denied_permission_messages_once(self):
        from cw.core.notify import PERMISSION_DENIED_MESSAGE, PermissionGate
        gate = PermissionGate(lambda resolve: resolve(False))
        widget, notifier, clock = _build_widget(gate)
        widget.start_timer(0, 0, 1)
        gate.resolve(False)
        clock.advance(1)
        widget.countdown.ticker.fire()
        self.assertEqual(notifier.messages.count(PERMISSION_DENIED_MESSAGE), 1)
        self.assertIn("Timer finished!", notifier.messages)
        self.assertEqual(notifier.popups, [])

    def test_failing_requester_degrades_to_denied(self):
        from cw.core.notify import NotificationPermission, PermissionGate

        def broken(resolve):
            raise RuntimeError("no notification service")

        widget, notifier, _ = _build_widget(PermissionGate(broken))
        self.assertTrue(widget.start_timer(0, 0, 5))
        self.assertIs(notifier.permission.state, NotificationPermission.DENIED)

    def test_announcement_rejects_updates(self):
        from cw.core.notify import Event, EventKind, announcement
        with self.assertRaises(ValueError):
            announcement(EventKind.UPDATED, Event("countdown", 3))


# ──────────────────────────────────────────────────────────────────────────
# config.py tests
# ──────────────────────────────────────────────────────────────────────────

class TestLabelConfig(unittest.TestCase):
    """Immutable label snapshots."""

    def test_defaults(self):
        from cw.core.config import LabelConfig
        self.assertEqual(LabelConfig().as_dict(), {
            "clock_title": "Digital Clock",
            "timer_label": "Timer",
            "alarm_label": "Alarm",
            "stopwatch_label": "Stopwatch",
        })

    def test_merged_returns_new_snapshot(self):
        from cw.core.config import LabelConfig
        original = LabelConfig()
        updated = original.merged({"timer_label": "Countdown", "bogus": "x"})
        self.assertEqual(updated.timer_label, "Countdown")
        self.assertEqual(original.timer_label, "Timer")
        self.assertIsNot(updated, original)

    def test_blank_values_fall_back_to_defaults(self):
        from cw.core.config import LabelConfig
        custom = LabelConfig(clock_title="Kitchen")
        updated = custom.merged({"clock_title": "  ", "alarm_label": None})
        self.assertEqual(updated.clock_title, "Digital Clock")
        self.assertEqual(updated.alarm_label, "Alarm")

    def test_snapshot_is_frozen(self):
        from dataclasses import FrozenInstanceError
        from cw.core.config import LabelConfig
        with self.assertRaises(FrozenInstanceError):
            LabelConfig().clock_title = "x"

    def test_widget_apply_config_replaces_snapshot(self):
        widget, notifier, _ = _build_widget()
        before = widget.labels
        after = widget.apply_config({"stopwatch_label": "Chrono"})
        self.assertIs(widget.labels, after)
        self.assertEqual(before.stopwatch_label, "Stopwatch")
        self.assertEqual(after.stopwatch_label, "Chrono")
        self.assertEqual(notifier.label_changes, [after])


class TestLabelPersistence(unittest.TestCase):
    """Loading and saving settings.json."""

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self._tmppath = Path(self.tmpdir)

        # Monkey-patch the settings path to use temp dir
        from cw.core import config
        self._orig_settings_path = config.SETTINGS_PATH
        config.SETTINGS_PATH = self._tmppath / "settings.json"

    def tearDown(self):
        from cw.core import config
        config.SETTINGS_PATH = self._orig_settings_path
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def _write(self, content):
        from cw.core import config
        with open(config.SETTINGS_PATH, "w", encoding="utf-8") as f:
            f.write(content)

    def test_missing_file_gives_defaults(self):
        from cw.core.config import LabelConfig, load_labels
        self.assertEqual(load_labels(), LabelConfig())

    def test_save_and_load_roundtrip(self):
        from cw.core import config
        labels = config.LabelConfig(clock_title="Desk Clock", alarm_label="Wake")
        config.save_labels(labels)
        self.assertEqual(config.load_labels(), labels)

        with open(config.SETTINGS_PATH, encoding="utf-8") as f:
            saved = json.load(f)
        self.assertIn("saved_at", saved["meta"])

    def test_partial_labels_are_defaulted(self):
        from cw.core.config import load_labels
        self._write(json.dumps({"labels": {"timer_label": "Countdown", "alarm_label": 7}}))
        loaded = load_labels()
        self.assertEqual(loaded.timer_label, "Countdown")
        self.assertEqual(loaded.alarm_label, "Alarm")
        self.assertEqual(loaded.clock_title, "Digital Clock")

    def test_missing_labels_section(self):
        from cw.core.config import LabelConfig, load_labels
        self._write(json.dumps({"something": "else"}))
        self.assertEqual(load_labels(), LabelConfig())

    def test_corrupted_file_falls_back(self):
        from cw.core.config import LabelConfig, load_labels
        self._write("{invalid json!!")
        self.assertEqual(load_labels(), LabelConfig())


# ──────────────────────────────────────────────────────────────────────────
# util tests
# ──────────────────────────────────────────────────────────────────────────

class TestFormatting(unittest.TestCase):

    def test_format_time(self):
        from cw.util import format_time
        self.assertEqual(format_time(0), "00:00:00")
        self.assertEqual(format_time(90), "00:01:30")
        self.assertEqual(format_time(3661), "01:01:01")
        self.assertEqual(format_time(-4), "00:00:00")
        self.assertEqual(format_time(100 * 3600), "100:00:00")

    def test_clock_strings(self):
        from cw.util import format_clock_time, format_long_date, format_time_of_day
        now = datetime(2026, 1, 5, 7, 5, 9)
        self.assertEqual(format_clock_time(now), "07:05:09")
        self.assertEqual(format_time_of_day(now), "07:05")
        self.assertEqual(format_long_date(now), "Monday, January 5, 2026")

    def test_parse_duration_field(self):
        from cw.util import parse_duration_field
        self.assertEqual(parse_duration_field(None), 0)
        self.assertEqual(parse_duration_field(""), 0)
        self.assertEqual(parse_duration_field("abc"), 0)
        self.assertEqual(parse_duration_field(" 12 "), 12)
        self.assertEqual(parse_duration_field(7), 7)
        self.assertEqual(parse_duration_field("-3"), -3)


# ──────────────────────────────────────────────────────────────────────────
# ui/ticker.py tests
# ──────────────────────────────────────────────────────────────────────────

@unittest.skipUnless(importlib.util.find_spec("PySide6"), "PySide6 not installed")
class TestQtTicker(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        from PySide6.QtCore import QCoreApplication
        cls.app = QCoreApplication.instance() or QCoreApplication([])

    def test_start_and_stop(self):
        from cw.ui.ticker import QtTicker
        calls = []
        ticker = QtTicker(50, "test")
        ticker.start(lambda: calls.append(1))
        self.assertTrue(ticker.is_active)
        self.assertTrue(ticker._timer.isActive())
        self.assertEqual(ticker._timer.interval(), 50)
        ticker._on_timeout()
        ticker.stop()
        self.assertFalse(ticker.is_active)
        self.assertFalse(ticker._timer.isActive())
        ticker._on_timeout()
        self.assertEqual(calls, [1])


if __name__ == "__main__":
    unittest.main()
