import sys
from PySide6.QtCore import Qt, QTime, QTimer
from PySide6.QtGui import QFont
from PySide6.QtWidgets import (
    QApplication,
    QDialog,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QMainWindow,
    QPushButton,
    QSpinBox,
    QStyle,
    QSystemTrayIcon,
    QTabWidget,
    QTimeEdit,
    QVBoxLayout,
    QWidget,
)
from cw.common.logger import log
from cw.core import config
from cw.core.notify import EventKind
from cw.core.widget import ClockWidget
from cw.ui.dialogs import LabelsDialog
from cw.ui.notifier import QtNotifier
from cw.ui.ticker import QtTicker
from cw.util import format_time

TOAST_MS = 3000


# ---------------------------------------------------------------------------
# Main window
# ---------------------------------------------------------------------------

# Main window of the clock widget. Holds no timing state of its own, everything lives in ClockWidget and comes back
# through the notifier's signals.
class MainWindow(QMainWindow):

    def __init__(self):
        super().__init__()
        self.setWindowTitle("Clock Widget")
        icon = self.style().standardIcon(QStyle.SP_ComputerIcon)
        self.setWindowIcon(icon)

        # -- Engines --
        self._tray = QSystemTrayIcon(icon, self)
        self._tray.show()
        self.notifier = QtNotifier(self._tray)
        self.widget = ClockWidget(
            notifier=self.notifier,
            labels=config.load_labels(),
            ticker_factory=lambda interval_ms, name: QtTicker(interval_ms, name, self),
        )

        # -- Build UI skeleton --
        central = QWidget()
        self.setCentralWidget(central)
        main_lay = QVBoxLayout(central)

        header = QHBoxLayout()
        self._title = QLabel()
        self._title.setFont(QFont(self.font().family(), 14, QFont.Bold))
        header.addWidget(self._title)
        header.addStretch(1)
        labels_btn = QPushButton("Labels...")
        labels_btn.clicked.connect(self._on_labels)
        header.addWidget(labels_btn)
        main_lay.addLayout(header)

        self._clock_time = QLabel("00:00:00")
        self._clock_time.setFont(QFont(self.font().family(), 32, QFont.Bold))
        self._clock_time.setAlignment(Qt.AlignCenter)
        main_lay.addWidget(self._clock_time)
        self._clock_date = QLabel()
        self._clock_date.setAlignment(Qt.AlignCenter)
        main_lay.addWidget(self._clock_date)

        self._tabs = QTabWidget()
        self._tabs.addTab(self._build_timer_tab(), "")
        self._tabs.addTab(self._build_alarm_tab(), "")
        self._tabs.addTab(self._build_stopwatch_tab(), "")
        main_lay.addWidget(self._tabs)

        self._toast = QLabel()
        self._toast.setAlignment(Qt.AlignCenter)
        self._toast.setVisible(False)
        main_lay.addWidget(self._toast)
        self._toast_timer = QTimer(self)
        self._toast_timer.setSingleShot(True)
        self._toast_timer.timeout.connect(lambda: self._toast.setVisible(False))

        # -- Signals --
        self.notifier.signals.updated.connect(self._on_updated)
        self.notifier.signals.transition.connect(self._on_transition)
        self.notifier.signals.message.connect(self._show_toast)
        self.notifier.signals.labels.connect(self._apply_labels)

        self._apply_labels(self.widget.labels)
        self._sync_timer_buttons()
        self._sync_stopwatch_buttons()
        self.widget.start()

    # ------------------------------------------------------------------ #
    #  Tab builders                                                        #
    # ------------------------------------------------------------------ #

    def _build_timer_tab(self):
        tab = QWidget()
        lay = QVBoxLayout(tab)

        self._timer_display = self._big_display()
        lay.addWidget(self._timer_display)

        inputs = QHBoxLayout()
        self._timer_inputs = []
        for suffix, maximum, default in (("h", 99, 0), ("m", 59, 5), ("s", 59, 0)):
            spin = QSpinBox()
            spin.setRange(0, maximum)
            spin.setValue(default)
            spin.setSuffix(f" {suffix}")
            inputs.addWidget(spin)
            self._timer_inputs.append(spin)
        lay.addLayout(inputs)

        buttons = QHBoxLayout()
        self._timer_start = QPushButton("Start")
        self._timer_start.clicked.connect(self._on_timer_start)
        self._timer_pause = QPushButton("Pause")
        self._timer_pause.clicked.connect(self._on_timer_pause)
        timer_reset = QPushButton("Reset")
        timer_reset.clicked.connect(self._on_timer_reset)
        for btn in (self._timer_start, self._timer_pause, timer_reset):
            buttons.addWidget(btn)
        lay.addLayout(buttons)
        lay.addStretch(1)
        return tab

    def _build_alarm_tab(self):
        tab = QWidget()
        lay = QVBoxLayout(tab)

        row = QHBoxLayout()
        self._alarm_time = QTimeEdit()
        self._alarm_time.setDisplayFormat("HH:mm")
        self._alarm_time.setTime(QTime.currentTime())
        row.addWidget(self._alarm_time)
        add_btn = QPushButton("Add Alarm")
        add_btn.clicked.connect(self._on_alarm_add)
        row.addWidget(add_btn)
        lay.addLayout(row)

        self._alarm_rows = QVBoxLayout()
        lay.addLayout(self._alarm_rows)
        lay.addStretch(1)
        return tab

    def _build_stopwatch_tab(self):
        tab = QWidget()
        lay = QVBoxLayout(tab)

        self._stopwatch_display = self._big_display()
        lay.addWidget(self._stopwatch_display)

        buttons = QHBoxLayout()
        self._stopwatch_start = QPushButton("Start")
        self._stopwatch_start.clicked.connect(self._on_stopwatch_start)
        self._stopwatch_pause = QPushButton("Pause")
        self._stopwatch_pause.clicked.connect(self._on_stopwatch_pause)
        self._stopwatch_lap = QPushButton("Lap")
        self._stopwatch_lap.clicked.connect(self._on_stopwatch_lap)
        stopwatch_reset = QPushButton("Reset")
        stopwatch_reset.clicked.connect(self._on_stopwatch_reset)
        for btn in (self._stopwatch_start, self._stopwatch_pause, self._stopwatch_lap, stopwatch_reset):
            buttons.addWidget(btn)
        lay.addLayout(buttons)

        self._lap_list = QListWidget()
        lay.addWidget(self._lap_list)
        return tab

    def _big_display(self):
        label = QLabel(format_time(0))
        label.setFont(QFont(self.font().family(), 24, QFont.Bold))
        label.setAlignment(Qt.AlignCenter)
        return label

    # ------------------------------------------------------------------ #
    #  Button handlers                                                     #
    # ------------------------------------------------------------------ #

    def _on_timer_start(self):
        hours, minutes, seconds = (spin.value() for spin in self._timer_inputs)
        self.widget.start_timer(hours, minutes, seconds)
        self._sync_timer_buttons()

    def _on_timer_pause(self):
        self.widget.pause_timer()
        self._sync_timer_buttons()

    def _on_timer_reset(self):
        self.widget.reset_timer()
        self._timer_inputs[0].setValue(0)
        self._timer_inputs[1].setValue(5)
        self._timer_inputs[2].setValue(0)
        self._sync_timer_buttons()

    def _on_alarm_add(self):
        if self.widget.add_alarm(self._alarm_time.time().toString("HH:mm")) is not None:
            self._rebuild_alarms()

    def _on_alarm_toggle(self, alarm_id):
        self.widget.toggle_alarm(alarm_id)
        self._rebuild_alarms()

    def _on_alarm_delete(self, alarm_id):
        self.widget.delete_alarm(alarm_id)
        self._rebuild_alarms()

    def _on_stopwatch_start(self):
        self.widget.start_stopwatch()
        self._sync_stopwatch_buttons()

    def _on_stopwatch_pause(self):
        self.widget.pause_stopwatch()
        self._sync_stopwatch_buttons()

    def _on_stopwatch_lap(self):
        lap = self.widget.lap_stopwatch()
        if lap is not None:
            self._lap_list.insertItem(0, f"{lap.label}    {lap.formatted}")

    def _on_stopwatch_reset(self):
        self.widget.reset_stopwatch()
        self._lap_list.clear()
        self._sync_stopwatch_buttons()

    def _on_labels(self):
        dlg = LabelsDialog(self, self.widget.labels)
        if dlg.exec() == QDialog.Accepted:
            labels = self.widget.apply_config(dlg.chosen_labels)
            config.save_labels(labels)

    # ------------------------------------------------------------------ #
    #  Notifier slots                                                      #
    # ------------------------------------------------------------------ #

    def _on_updated(self, source, value):
        if source == "clock":
            self._clock_time.setText(value.time)
            self._clock_date.setText(value.date)
        elif source == self.widget.countdown.name:
            self._timer_display.setText(format_time(value))
        elif source == self.widget.stopwatch.name:
            self._stopwatch_display.setText(format_time(value))

    def _on_transition(self, kind, payload):
        if kind is EventKind.COMPLETED:
            self._timer_display.setText(format_time(0))
            self._sync_timer_buttons()
        elif kind is EventKind.FIRED:
            self._rebuild_alarms()

    def _show_toast(self, text):
        self._toast.setText(text)
        self._toast.setVisible(True)
        self._toast_timer.start(TOAST_MS)

    def _apply_labels(self, labels):
        self._title.setText(labels.clock_title)
        self._tabs.setTabText(0, labels.timer_label)
        self._tabs.setTabText(1, labels.alarm_label)
        self._tabs.setTabText(2, labels.stopwatch_label)

    # ------------------------------------------------------------------ #
    #  Display helpers                                                     #
    # ------------------------------------------------------------------ #

    def _sync_timer_buttons(self):
        running = self.widget.countdown.running
        self._timer_start.setVisible(not running)
        self._timer_pause.setVisible(running)

    def _sync_stopwatch_buttons(self):
        running = self.widget.stopwatch.running
        self._stopwatch_start.setVisible(not running)
        self._stopwatch_pause.setVisible(running)
        self._stopwatch_lap.setVisible(running)

    def _rebuild_alarms(self):
        while self._alarm_rows.count():
            item = self._alarm_rows.takeAt(0)
            if item.widget() is not None:
                item.widget().deleteLater()

        for alarm in self.widget.alarms:
            row = QWidget()
            row_lay = QHBoxLayout(row)
            row_lay.setContentsMargins(0, 0, 0, 0)

            time_lbl = QLabel(alarm.time_of_day)
            time_lbl.setFont(QFont(self.font().family(), 14, QFont.Bold))
            row_lay.addWidget(time_lbl)
            row_lay.addWidget(QLabel("Active" if alarm.active else "Inactive"))
            row_lay.addStretch(1)

            toggle_btn = QPushButton("Pause" if alarm.active else "Resume")
            toggle_btn.clicked.connect(lambda _=False, aid=alarm.id: self._on_alarm_toggle(aid))
            row_lay.addWidget(toggle_btn)
            delete_btn = QPushButton("Delete")
            delete_btn.clicked.connect(lambda _=False, aid=alarm.id: self._on_alarm_delete(aid))
            row_lay.addWidget(delete_btn)

            self._alarm_rows.addWidget(row)

    # ------------------------------------------------------------------ #
    #  Window close                                                        #
    # ------------------------------------------------------------------ #

    def closeEvent(self, event):
        self.widget.stop()
        self._tray.hide()
        log.info("Main window closed")
        event.accept()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main():
    app = QApplication(sys.argv)
    window = MainWindow()
    window.show()
    sys.exit(app.exec())
