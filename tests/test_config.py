"""Tests for parameter files."""

import json

import pytest

from radioscope.config import load_params, save_params
from radioscope.core.params import ParameterSet


class TestLoadParams:
    def test_flat_object(self, tmp_path):
        path = tmp_path / "p.json"
        path.write_text(json.dumps({"amplitude": 80, "waveCount": 4}))
        params = load_params(path)
        assert params.amplitude == 80
        assert params.wave_count == 4

    def test_params_section(self, tmp_path):
        path = tmp_path / "p.json"
        path.write_text(json.dumps({"params": {"glow": 25}, "notes": "demo"}))
        assert load_params(path).glow == 25

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_params(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(ValueError, match="Invalid JSON"):
            load_params(path)

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2, 3]")
        with pytest.raises(ValueError):
            load_params(path)

    def test_flag_strings(self, tmp_path):
        path = tmp_path / "p.json"
        path.write_text(json.dumps({"powerOn": "false", "textMode": "true"}))
        params = load_params(path)
        assert params.power_on is False
        assert params.text_mode is True

    def test_wrong_value_type(self, tmp_path):
        path = tmp_path / "p.json"
        path.write_text(json.dumps({"amplitude": "loud"}))
        with pytest.raises(ValueError):
            load_params(path)


class TestSaveParams:
    def test_saved_file_loads_back(self, tmp_path):
        params = ParameterSet(amplitude=33, color_mode="spectrum", text_input="RADIO")
        path = save_params(params, tmp_path / "nested" / "p.json")
        assert path.exists()
        assert load_params(path) == params

    def test_wrapped_in_params_section(self, tmp_path):
        path = save_params(ParameterSet(), tmp_path / "p.json")
        assert "params" in json.loads(path.read_text())
