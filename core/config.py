"""
Configuration Management - YAML-based configuration with environment overrides
=============================================================================

This module handles all configuration aspects including:
- Loading from YAML files
- Environment variable overrides
- Default values
- Configuration validation
"""

import os
import yaml
from pathlib import Path
from typing import Any, Dict, Optional
from dataclasses import dataclass, field, asdict

from .exceptions import ConfigError


@dataclass
class EngineConfig:
    """
    Response engine configuration.

    Controls which rule set the engine is built from and how
    randomness and rule reloading behave.
    """
    # Rule set source; empty means the bundled DOCTOR script
    rules_path: str = ""

    # Fixed seed for phrase selection (None = nondeterministic)
    seed: Optional[int] = None

    # Reloading rules from a URL
    fetch_timeout: float = 10.0
    persist_rules: bool = True

    def validate(self) -> None:
        """Validate engine configuration parameters."""
        if self.fetch_timeout <= 0:
            raise ConfigError(f"fetch_timeout must be positive, got {self.fetch_timeout}")

        if self.seed is not None and not isinstance(self.seed, int):
            raise ConfigError(f"seed must be an integer, got {self.seed!r}")

        if self.rules_path and not Path(self.rules_path).expanduser().exists():
            raise ConfigError(
                f"Rules file not found: {self.rules_path}",
                {"path": self.rules_path}
            )


@dataclass
class UIConfig:
    """
    User interface configuration.

    Controls settings for the interactive prompt, the terminal UI
    and the web API server.
    """
    # Web API settings
    web_host: str = "127.0.0.1"
    web_port: int = 8080
    web_debug: bool = False

    # Interactive prompt
    prompt: str = "> "

    def validate(self) -> None:
        """Validate UI configuration."""
        if self.web_port < 1 or self.web_port > 65535:
            raise ConfigError(f"Invalid web port: {self.web_port}")


@dataclass
class Config:
    """
    Main configuration container.

    Aggregates all configuration sections into a single object
    and provides methods for loading, saving, and validating.
    """
    # Application settings
    app_name: str = "ELIZA Responder"
    version: str = "1.0.0"
    debug: bool = False

    # Configuration sections
    engine: EngineConfig = field(default_factory=EngineConfig)
    ui: UIConfig = field(default_factory=UIConfig)

    # Paths (set at runtime)
    config_dir: str = ""
    data_dir: str = ""
    log_dir: str = ""

    def validate(self) -> None:
        """
        Validate all configuration sections.

        Raises:
            ConfigError: If any configuration section is invalid
        """
        self.engine.validate()
        self.ui.validate()

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "app_name": self.app_name,
            "version": self.version,
            "debug": self.debug,
            "engine": asdict(self.engine),
            "ui": asdict(self.ui),
        }


def get_default_config_dir() -> Path:
    """
    Get the default configuration directory path.

    Returns:
        Path to the configuration directory
    """
    if "ELIZA_CONFIG_DIR" in os.environ:
        return Path(os.environ["ELIZA_CONFIG_DIR"])

    if "XDG_CONFIG_HOME" in os.environ:
        return Path(os.environ["XDG_CONFIG_HOME"]) / "eliza-responder"

    return Path.home() / ".config" / "eliza-responder"


def get_default_data_dir() -> Path:
    """
    Get the default data directory path.

    Returns:
        Path to the data directory
    """
    if "ELIZA_DATA_DIR" in os.environ:
        return Path(os.environ["ELIZA_DATA_DIR"])

    if "XDG_DATA_HOME" in os.environ:
        return Path(os.environ["XDG_DATA_HOME"]) / "eliza-responder"

    return Path.home() / ".local" / "share" / "eliza-responder"


def load_config(config_path: Optional[str] = None, load_env: bool = True) -> Config:
    """
    Load configuration from YAML file with environment variable overrides.

    This function loads configuration in the following order:
    1. Default values from dataclass
    2. Values from YAML file
    3. Environment variable overrides

    Args:
        config_path: Path to configuration file (optional)
        load_env: Whether to load environment variable overrides

    Returns:
        Config object with loaded values

    Raises:
        ConfigError: If configuration is invalid or cannot be loaded
    """
    config = Config()

    config.config_dir = str(get_default_config_dir())
    config.data_dir = str(get_default_data_dir())
    config.log_dir = str(Path(config.data_dir) / "logs")

    if config_path:
        yaml_path = Path(config_path)
        if not yaml_path.exists():
            raise ConfigError("Config file not found", {"path": str(yaml_path)})
    else:
        yaml_path = Path(config.config_dir) / "config.yaml"

    if yaml_path.exists():
        try:
            with open(yaml_path, "r", encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse config file: {e}", {"path": str(yaml_path)})
        except IOError as e:
            raise ConfigError(f"Failed to read config file: {e}", {"path": str(yaml_path)})

        if not isinstance(yaml_config, dict):
            raise ConfigError("Config file must contain a mapping", {"path": str(yaml_path)})

        _apply_yaml_config(config, yaml_config)

    if load_env:
        _apply_env_overrides(config)

    config.validate()

    return config


def _apply_yaml_config(config: Config, yaml_config: Dict[str, Any]) -> None:
    """
    Apply YAML configuration values to Config object.

    Unknown keys are ignored.

    Args:
        config: Config object to update
        yaml_config: Dictionary of configuration values from YAML
    """
    for key in ("app_name", "version", "debug", "config_dir", "data_dir", "log_dir"):
        if key in yaml_config:
            setattr(config, key, yaml_config[key])

    for section in ("engine", "ui"):
        values = yaml_config.get(section) or {}
        section_obj = getattr(config, section)
        for key, value in values.items():
            if hasattr(section_obj, key):
                setattr(section_obj, key, value)


def _apply_env_overrides(config: Config) -> None:
    """
    Apply environment variable overrides to Config object.

    Environment variables follow the pattern: ELIZA_SECTION_KEY
    For example: ELIZA_ENGINE_SEED, ELIZA_UI_WEB_PORT

    Args:
        config: Config object to update
    """
    env_mappings = {
        # Engine settings
        "ELIZA_ENGINE_RULES_PATH": ("engine", "rules_path"),
        "ELIZA_ENGINE_SEED": ("engine", "seed", int),
        "ELIZA_ENGINE_FETCH_TIMEOUT": ("engine", "fetch_timeout", float),
        "ELIZA_ENGINE_PERSIST_RULES": ("engine", "persist_rules", bool),

        # UI settings
        "ELIZA_UI_WEB_HOST": ("ui", "web_host"),
        "ELIZA_UI_WEB_PORT": ("ui", "web_port", int),
        "ELIZA_UI_WEB_DEBUG": ("ui", "web_debug", bool),
    }

    for env_var, mapping in env_mappings.items():
        value = os.environ.get(env_var)
        if value is None:
            continue

        section, key = mapping[0], mapping[1]
        converter = mapping[2] if len(mapping) > 2 else str

        if converter == bool:
            converted = value.lower() in ("true", "1", "yes", "on")
        else:
            try:
                converted = converter(value)
            except ValueError:
                raise ConfigError(f"Invalid value for {env_var}: {value!r}")

        setattr(getattr(config, section), key, converted)


def save_config(config: Config, config_path: Optional[str] = None) -> None:
    """
    Save configuration to YAML file.

    Args:
        config: Config object to save
        config_path: Path to save configuration (optional)

    Raises:
        ConfigError: If configuration cannot be saved
    """
    if config_path:
        yaml_path = Path(config_path)
    else:
        yaml_path = Path(config.config_dir) / "config.yaml"

    yaml_path.parent.mkdir(parents=True, exist_ok=True)

    try:
        with open(yaml_path, "w", encoding="utf-8") as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
    except IOError as e:
        raise ConfigError(f"Failed to save config file: {e}", {"path": str(yaml_path)})
