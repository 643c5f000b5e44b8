"""Tests for engine configuration loading."""
from pathlib import Path

import pytest

from drift.config import DEFAULT_CONFIG_PATH, EngineConfig, load_config_yaml
from drift.errors import ConfigurationError


class TestEngineConfig:

    def test_defaults(self):
        config = EngineConfig()

        assert config.slot_volume_split == {1: 0.50, 2: 0.30, 3: 0.20}
        assert config.forgiveness_threshold == 0.10
        assert config.session_cap == 0.20
        assert config.readiness_multipliers == {'great': 1.00, 'okay': 0.90, 'rough': 0.80}

    def test_split_must_sum_to_one(self):
        with pytest.raises(ConfigurationError):
            EngineConfig(slot_volume_split={1: 0.5, 2: 0.3, 3: 0.3})

    def test_inverted_rep_range(self):
        with pytest.raises(ConfigurationError):
            EngineConfig(slot_rep_ranges={1: (8, 5), 2: (8, 12), 3: (12, 15)})

    def test_missing_readiness_level(self):
        with pytest.raises(ConfigurationError):
            EngineConfig(readiness_multipliers={'great': 1.0, 'okay': 0.9})

    @pytest.mark.parametrize("rpe,week,expected", [
        (5, 1, 0.05), (7, 4, 0.025), (9, 2, 0.0), (5, 5, 0.025), (9, 12, 0.0),
    ])
    def test_overload_increase(self, rpe, week, expected):
        assert EngineConfig().overload_increase(rpe, week) == expected


class TestYamlLoading:

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_config_yaml(tmp_path / 'nope.yaml') == {}
        assert EngineConfig.from_yaml(tmp_path / 'nope.yaml') == EngineConfig()

    def test_bundled_config_matches_defaults(self):
        assert DEFAULT_CONFIG_PATH.exists()
        assert EngineConfig.from_yaml(DEFAULT_CONFIG_PATH) == EngineConfig()

    def test_overrides(self, tmp_path):
        path = tmp_path / 'engine.yaml'
        path.write_text(
            "drift:\n"
            "  forgiveness_threshold: 0.05\n"
            "  session_cap: 0.25\n"
            "readiness:\n"
            "  great: 1.0\n"
            "  okay: 0.85\n"
            "  rough: 0.7\n"
        )
        config = EngineConfig.from_yaml(path)

        assert config.forgiveness_threshold == 0.05
        assert config.session_cap == 0.25
        assert config.readiness_multipliers['okay'] == 0.85
        assert config.slot_volume_split == {1: 0.50, 2: 0.30, 3: 0.20}

    def test_env_var_path(self, tmp_path, monkeypatch):
        path = tmp_path / 'custom.yaml'
        path.write_text("overload:\n  deload_frequency: 5\n")
        monkeypatch.setenv('DRIFT_CONFIG', str(path))

        assert EngineConfig.from_yaml().deload_frequency == 5

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / 'bad.yaml'
        path.write_text("- just\n- a list\n")
        with pytest.raises(ConfigurationError):
            load_config_yaml(Path(path))
