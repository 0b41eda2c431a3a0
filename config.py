"""Shared constants and path configuration for Shareful."""

import json
import os

_SETTINGS_FILE = os.environ.get(
    "SHAREFUL_SETTINGS", os.path.expanduser("~/.config/shareful/settings.json")
)
_DEFAULT_SHARES_DIR = os.path.join(os.getcwd(), "shares")


def _read_setting(*keys, default=None):
    """Read a nested setting from the global settings file."""
    try:
        with open(_SETTINGS_FILE) as f:
            data = json.load(f)
        for k in keys:
            data = data[k]
        return data
    except (FileNotFoundError, json.JSONDecodeError, KeyError, TypeError):
        return default


SHARES_DIR = _read_setting("shares_dir", default=_DEFAULT_SHARES_DIR)
SHARE_FILENAME = "SHARE.md"
MAX_WORKERS = _read_setting("max_workers", default=8)
PORT = _read_setting("port", default=4250)
