import os
import json
import copy
import logging

SETTINGS_FILE = "techsolve_settings.json"
DEFAULTS = {"theme": "dark", "history": []}
THEMES = ("light", "dark")


class MemorySettingsStore:
    """Key-value settings kept in memory; used headless and in tests."""

    def __init__(self, initial=None):
        self.logger = logging.getLogger(__name__)
        self.data = copy.deepcopy(initial) if initial else {}
        self.saves = 0

    def load(self):
        settings = copy.deepcopy(DEFAULTS)
        settings.update(copy.deepcopy(self.data))
        return settings

    def save(self, settings):
        self.data = copy.deepcopy(settings)
        self.saves += 1


class JsonSettingsStore:
    """Settings persisted to a JSON file. Missing keys fall back to DEFAULTS."""

    def __init__(self, settings_file=SETTINGS_FILE):
        self.logger = logging.getLogger(__name__)
        self.settings_file = settings_file

    def load(self):
        defaults = copy.deepcopy(DEFAULTS)
        try:
            if os.path.exists(self.settings_file):
                with open(self.settings_file, 'r') as f: loaded_settings = json.load(f)
                if not isinstance(loaded_settings, dict):
                    raise ValueError(f"expected a JSON object, got {type(loaded_settings).__name__}")
                for key, value in defaults.items():
                    if key not in loaded_settings: loaded_settings[key] = value
                if loaded_settings["theme"] not in THEMES:
                    self.logger.warning(f"Unknown theme '{loaded_settings['theme']}', using '{DEFAULTS['theme']}'")
                    loaded_settings["theme"] = DEFAULTS["theme"]
                self.logger.info(f"Settings loaded from {self.settings_file}")
                return loaded_settings
            return defaults
        except (OSError, ValueError) as e:
            self.logger.error(f"Error loading settings, using defaults: {e}")
            return defaults

    def save(self, settings):
        try:
            with open(self.settings_file, 'w') as f:
                json.dump(settings, f, indent=4)
            self.logger.info(f"Settings saved to {self.settings_file}")
        except (OSError, TypeError) as e:
            self.logger.error(f"Error saving settings: {e}")
