from PySide6.QtWidgets import QDialog, QDialogButtonBox, QFormLayout, QLineEdit
from cw.core.config import LabelConfig

_FIELD_NAMES = {
    "clock_title": "Clock title",
    "timer_label": "Timer tab",
    "alarm_label": "Alarm tab",
    "stopwatch_label": "Stopwatch tab",
}


# Small edit panel for the four display labels. Blank fields fall back to their defaults once applied.
class LabelsDialog(QDialog):

    def __init__(self, parent, labels: LabelConfig):
        super().__init__(parent)
        self.setWindowTitle("Labels")
        layout = QFormLayout(self)

        self._edits = {}
        for key, value in labels.as_dict().items():
            edit = QLineEdit(value)
            edit.setPlaceholderText(getattr(LabelConfig(), key))
            layout.addRow(_FIELD_NAMES[key], edit)
            self._edits[key] = edit

        buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)
        layout.addRow(buttons)

    @property
    def chosen_labels(self):
        return {key: edit.text() for key, edit in self._edits.items()}
