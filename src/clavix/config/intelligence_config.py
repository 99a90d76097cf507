"""
Intelligence configuration for clavix.

Controls the default optimization mode and which patterns run with which settings.
Uses hierarchical loading: ./.clavix/config.yaml -> ~/.clavix/config.yaml -> defaults
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ..intelligence.exceptions import ConfigError
from ..intelligence.types import OptimizationMode

logger = logging.getLogger(__name__)

CONFIG_DIR = ".clavix"
CONFIG_FILE = "config.yaml"


@dataclass
class IntelligenceConfig:
    """Prompt intelligence configuration."""

    default_mode: OptimizationMode = OptimizationMode.FAST
    disabled_patterns: List[str] = field(default_factory=list)
    # pattern id -> settings overrides, validated when the registry is built
    pattern_settings: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    verbose_pattern_logs: bool = False

    def to_dict(self) -> dict:
        """Convert to dictionary format."""
        return {
            "intelligence": {
                "default_mode": self.default_mode.value,
                "disabled_patterns": list(self.disabled_patterns),
                "pattern_settings": {k: dict(v) for k, v in self.pattern_settings.items()},
                "verbose_pattern_logs": self.verbose_pattern_logs,
            }
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "IntelligenceConfig":
        """
        Create IntelligenceConfig from dictionary.

        Raises:
            ConfigError: if a value has the wrong shape
        """
        intelligence = (data or {}).get("intelligence") or {}
        if not isinstance(intelligence, dict):
            raise ConfigError("'intelligence' section must be a mapping")

        try:
            default_mode = OptimizationMode(intelligence.get("default_mode", "fast"))
        except ValueError as e:
            raise ConfigError(f"Invalid default_mode: {e}") from e

        disabled = intelligence.get("disabled_patterns") or []
        settings = intelligence.get("pattern_settings") or {}
        if not isinstance(disabled, list):
            raise ConfigError("disabled_patterns must be a list of pattern ids")
        if not isinstance(settings, dict) or not all(isinstance(v, dict) for v in settings.values()):
            raise ConfigError("pattern_settings must map pattern ids to settings mappings")

        return cls(
            default_mode=default_mode,
            disabled_patterns=[str(p) for p in disabled],
            pattern_settings={str(k): dict(v) for k, v in settings.items()},
            verbose_pattern_logs=bool(intelligence.get("verbose_pattern_logs", False)),
        )


def _read_config_file(path: Path) -> IntelligenceConfig:
    with open(path, encoding="utf-8") as f:
        return IntelligenceConfig.from_dict(yaml.safe_load(f))


def load_config(
    working_dir: Optional[Path] = None, config_path: Optional[Path] = None
) -> IntelligenceConfig:
    """
    Load configuration with hierarchical override system.

    Priority (highest to lowest):
    1. Explicit file passed on the command line
    2. Project-specific: ./.clavix/config.yaml
    3. User-global: ~/.clavix/config.yaml
    4. Defaults

    Args:
        working_dir: Project working directory (for project-specific config)
        config_path: Explicit configuration file

    Returns:
        IntelligenceConfig instance

    Raises:
        ConfigError: if the explicit file cannot be read or parsed
    """
    if config_path is not None:
        try:
            return _read_config_file(Path(config_path))
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read config file {config_path}: {e}") from e

    candidates = []
    if working_dir:
        candidates.append(Path(working_dir) / CONFIG_DIR / CONFIG_FILE)
    candidates.append(Path.home() / CONFIG_DIR / CONFIG_FILE)

    for candidate in candidates:
        if not candidate.exists():
            continue
        try:
            return _read_config_file(candidate)
        except (OSError, yaml.YAMLError, ConfigError) as e:
            logger.warning("Ignoring unreadable config %s: %s", candidate, e)

    return IntelligenceConfig()


def save_config(config: IntelligenceConfig, global_config: bool = True) -> Path:
    """
    Save configuration to file.

    Args:
        config: IntelligenceConfig to save
        global_config: If True, save to ~/.clavix/config.yaml
                      If False, save to ./.clavix/config.yaml

    Returns:
        Path where config was saved
    """
    base = Path.home() if global_config else Path.cwd()
    config_path = base / CONFIG_DIR / CONFIG_FILE

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)

    return config_path
