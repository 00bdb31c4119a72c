import os
import json
import copy
import random

SETTINGS_FILE = "editorcore_settings.json"

DEFAULT_SETTINGS = {
    "default_play_mode": "sequential",
    "history_max_count": 100,
    "history_completion_threshold": 0.95,
    "shuffle_seed": None,
    "debug": False,
}


def load_settings(path=SETTINGS_FILE):
    defaults = copy.deepcopy(DEFAULT_SETTINGS)
    if not os.path.exists(path):
        return defaults
    try:
        with open(path, "r") as f: settings = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        print(f"Error loading settings from {path}: {e}")
        return defaults
    if not isinstance(settings, dict):
        print(f"Error loading settings from {path}: expected a JSON object")
        return defaults
    for key, value in defaults.items():
        if key not in settings: settings[key] = value
    return settings


def save_settings(settings, path=SETTINGS_FILE):
    try:
        with open(path, "w") as f: json.dump(settings, f, indent=4)
    except IOError as e:
        print(f"Error saving settings: {e}")
        return False
    return True


def make_rng(settings):
    seed = settings.get("shuffle_seed")
    if isinstance(seed, int) and not isinstance(seed, bool):
        return random.Random(seed)
    return random.Random()
