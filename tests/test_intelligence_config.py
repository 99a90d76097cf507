"""
Tests for intelligence configuration loading and saving.
"""

from pathlib import Path

import pytest
import yaml

from clavix.config import IntelligenceConfig, load_config, save_config
from clavix.intelligence import ConfigError, OptimizationMode


def write_yaml(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.dump(data), encoding="utf-8")
    return path


class TestIntelligenceConfig:
    def test_defaults(self):
        config = IntelligenceConfig()
        assert config.default_mode == OptimizationMode.FAST
        assert config.disabled_patterns == []
        assert config.pattern_settings == {}
        assert config.verbose_pattern_logs is False

    def test_round_trip(self):
        config = IntelligenceConfig(
            default_mode=OptimizationMode.DEEP,
            disabled_patterns=["ambiguity-detector"],
            pattern_settings={"edge-case-identifier": {"max_edge_cases": 3}},
            verbose_pattern_logs=True,
        )
        assert IntelligenceConfig.from_dict(config.to_dict()) == config

    def test_from_empty(self):
        assert IntelligenceConfig.from_dict(None) == IntelligenceConfig()
        assert IntelligenceConfig.from_dict({}) == IntelligenceConfig()

    @pytest.mark.parametrize(
        "data",
        [
            {"intelligence": ["not", "a", "mapping"]},
            {"intelligence": {"default_mode": "turbo"}},
            {"intelligence": {"disabled_patterns": "ambiguity-detector"}},
            {"intelligence": {"pattern_settings": {"edge-case-identifier": 3}}},
        ],
    )
    def test_invalid_shapes(self, data):
        with pytest.raises(ConfigError):
            IntelligenceConfig.from_dict(data)


class TestLoadConfig:
    def test_defaults_when_nothing_exists(self, tmp_path):
        assert load_config(working_dir=tmp_path) == IntelligenceConfig()

    def test_global_config(self, tmp_path, isolated_home):
        write_yaml(isolated_home / ".clavix" / "config.yaml", {"intelligence": {"default_mode": "deep"}})
        assert load_config(working_dir=tmp_path).default_mode == OptimizationMode.DEEP

    def test_project_overrides_global(self, tmp_path, isolated_home):
        project = tmp_path / "project"
        write_yaml(isolated_home / ".clavix" / "config.yaml", {"intelligence": {"default_mode": "deep"}})
        write_yaml(project / ".clavix" / "config.yaml", {"intelligence": {"default_mode": "fast"}})
        assert load_config(working_dir=project).default_mode == OptimizationMode.FAST

    def test_unreadable_project_config_falls_back(self, tmp_path, isolated_home, caplog):
        project = tmp_path / "project"
        (project / ".clavix").mkdir(parents=True)
        (project / ".clavix" / "config.yaml").write_text("intelligence: [unclosed\n", encoding="utf-8")
        write_yaml(isolated_home / ".clavix" / "config.yaml", {"intelligence": {"default_mode": "deep"}})

        assert load_config(working_dir=project).default_mode == OptimizationMode.DEEP
        assert "Ignoring unreadable config" in caplog.text

    def test_explicit_path_wins(self, tmp_path, isolated_home):
        write_yaml(isolated_home / ".clavix" / "config.yaml", {"intelligence": {"default_mode": "fast"}})
        explicit = write_yaml(tmp_path / "custom.yaml", {"intelligence": {"default_mode": "deep"}})
        assert load_config(working_dir=tmp_path, config_path=explicit).default_mode == OptimizationMode.DEEP

    def test_explicit_path_errors_are_raised(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(config_path=tmp_path / "missing.yaml")

        broken = tmp_path / "broken.yaml"
        broken.write_text("intelligence: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(config_path=broken)

    def test_empty_file_gives_defaults(self, tmp_path):
        empty = tmp_path / "empty.yaml"
        empty.write_text("", encoding="utf-8")
        assert load_config(config_path=empty) == IntelligenceConfig()


class TestSaveConfig:
    def test_save_global(self, isolated_home):
        config = IntelligenceConfig(default_mode=OptimizationMode.DEEP, disabled_patterns=["conciseness-filter"])
        path = save_config(config)
        assert path == isolated_home / ".clavix" / "config.yaml"
        assert load_config() == config

    def test_save_project(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        path = save_config(IntelligenceConfig(verbose_pattern_logs=True), global_config=False)
        assert path == tmp_path / ".clavix" / "config.yaml"
        assert yaml.safe_load(path.read_text(encoding="utf-8")) == {
            "intelligence": {
                "default_mode": "fast",
                "disabled_patterns": [],
                "pattern_settings": {},
                "verbose_pattern_logs": True,
            }
        }
