"""Settings for the distro-detect command.

Settings come from an optional JSON file (--config) and are overridden by
command-line flags. Recognised keys:
    {
        "format": "text",
        "fields": ["id", "version"],
        "fsroot": "/mnt/image",
        "verbose": false,
        "log_format": "text"
    }
"""

import json


class SettingsError(ValueError):
    """Raised when a settings file cannot be used."""
    pass


class DetectSettings:
    """Typed accessor for settings loaded from a JSON object."""

    def __init__(self, data: dict = None):
        self._data = data or {}

    @classmethod
    def from_file(cls, path: str) -> "DetectSettings":
        try:
            with open(path, "r") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise SettingsError(f"unable to load settings file ({path}): {e}") from e
        if not isinstance(data, dict):
            raise SettingsError(f"settings file ({path}) must contain a JSON object")
        return cls(data)

    def string(self, key: str, default: str = "") -> str:
        """Get a string value. Returns default if the key was not provided."""
        val = self._data.get(key)
        if val is None:
            return default
        return str(val)

    def boolean(self, key: str, default: bool = False) -> bool:
        """Get a boolean value. Accepts true/1/yes as truthy strings."""
        val = self._data.get(key)
        if val is None:
            return default
        if isinstance(val, bool):
            return val
        if isinstance(val, str):
            return val.lower() in ("true", "1", "yes")
        return bool(val)

    def string_list(self, key: str, default: list = None) -> list:
        """Get a list of strings. A string value is split on commas."""
        val = self._data.get(key)
        if val is None:
            return default
        if isinstance(val, str):
            return [part for part in val.split(",") if part.strip()]
        return [str(v) for v in val]
