import json
from dataclasses import dataclass, fields, replace
from cw.common.logger import log
from cw.common.setup import PATHS
from cw.util import now_iso

#region === Labels ===

SETTINGS_PATH = PATHS.data / "settings.json"

# The four host-editable display labels. The engines never read these, they only feed the rendering layer.
@dataclass(frozen=True)
class LabelConfig:
    clock_title: str = "Digital Clock"
    timer_label: str = "Timer"
    alarm_label: str = "Alarm"
    stopwatch_label: str = "Stopwatch"

    # Returns a new snapshot with the given overrides applied. Blank or missing values fall back to the default,
    # unknown keys are ignored.
    def merged(self, overrides):
        defaults = LabelConfig()
        changes = {}
        for field in fields(self):
            if field.name not in overrides:
                continue
            value = overrides[field.name]
            if isinstance(value, str) and value.strip():
                changes[field.name] = value
            else:
                changes[field.name] = getattr(defaults, field.name)
        return replace(self, **changes)

    # Label values in edit-panel order.
    def as_dict(self):
        return {field.name: getattr(self, field.name) for field in fields(self)}

#endregion === Labels ===

#region === Saving and Loading Labels ===

# Loads the host label settings, filling in defaults for anything missing or unusable.
def load_labels():
    try:
        if not SETTINGS_PATH.exists():
            log.info(f"No settings.json found at '{SETTINGS_PATH}', using default labels.")
            return LabelConfig()

        with open(SETTINGS_PATH, "r", encoding="utf-8") as f:
            settings = json.load(f)
        labels = settings.get("labels") if isinstance(settings, dict) else None
        if not isinstance(labels, dict):
            log.warning(f"Settings at '{SETTINGS_PATH}' have no usable 'labels' section, using default labels.")
            return LabelConfig()

        defaulted_values = set()
        for field in fields(LabelConfig):
            value = labels.get(field.name)
            if not isinstance(value, str) or not value.strip():
                defaulted_values.add(f"labels.{field.name}")

        loaded = LabelConfig().merged(labels)
        if defaulted_values:
            log.warning(f"Successfully loaded labels from '{SETTINGS_PATH}', but with missing values that were defaulted: {', '.join(sorted(defaulted_values))}")
        else:
            log.info(f"Successfully loaded labels from '{SETTINGS_PATH}'.")
        return loaded
    # Fall back to the defaults in case of error, but warn in log
    except (json.JSONDecodeError, OSError, UnicodeDecodeError):
        log.warning("Ran into an error while trying to load settings.json, falling back to default labels.", exc_info=True)
        return LabelConfig()

# Writes the given labels to SETTINGS_PATH.
def save_labels(labels: LabelConfig):
    settings = {
        "meta": {"saved_at": now_iso()},
        "labels": labels.as_dict(),
    }
    with open(SETTINGS_PATH, "w", encoding="utf-8") as f:
        json.dump(settings, f, indent=2)
    log.info(f"Successfully saved labels to '{SETTINGS_PATH}'")

#endregion === Saving and Loading Labels ===
