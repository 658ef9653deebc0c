"""Tests for DetectSettings."""

import json
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from distrodetect.settings import DetectSettings, SettingsError


class TestAccessors:
    def test_string(self):
        s = DetectSettings({"format": "json", "count": 3})
        assert s.string("format") == "json"
        assert s.string("count") == "3"
        assert s.string("missing", "text") == "text"

    def test_boolean(self):
        s = DetectSettings({"a": True, "b": "yes", "c": "no", "d": 0})
        assert s.boolean("a") is True
        assert s.boolean("b") is True
        assert s.boolean("c") is False
        assert s.boolean("d") is False
        assert s.boolean("missing", True) is True

    def test_string_list(self):
        s = DetectSettings({"list": ["id", "name"], "csv": "id,,version"})
        assert s.string_list("list") == ["id", "name"]
        assert s.string_list("csv") == ["id", "version"]
        assert s.string_list("missing") is None


class TestFromFile:
    def test_load(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"format": "json-one-line", "verbose": True}))
        s = DetectSettings.from_file(str(path))
        assert s.string("format") == "json-one-line"
        assert s.boolean("verbose")

    def test_missing_file(self, tmp_path):
        with pytest.raises(SettingsError, match="unable to load settings file"):
            DetectSettings.from_file(str(tmp_path / "missing.json"))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("{not json")
        with pytest.raises(SettingsError):
            DetectSettings.from_file(str(path))

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("[1, 2]")
        with pytest.raises(SettingsError, match="must contain a JSON object"):
            DetectSettings.from_file(str(path))

    def test_is_value_error(self):
        assert issubclass(SettingsError, ValueError)
