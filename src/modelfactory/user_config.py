"""
modelfactory User Configuration

Hierarchical config system with global defaults + local overrides:
- Global: ~/.modelfactory/config.json (cross-project settings)
- Local: .modelfactory/config.json (project-specific overrides)
- build.yaml: builder options of the Dart build integration

Config structure:
{
  "type_defaults": {            // Global default per rendered type string
    "String": "'lorem'",
    "DateTime": "DateTime(2024, 1, 1)"
  },
  "generator": {
    "respect_gitignore": true
  }
}

build.yaml is read the way build_runner lays it out:

targets:
  $default:
    builders:
      model_factory|model_factory:
        options:
          defaults:
            String: "'lorem'"
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from modelfactory.logging_config import logger
from modelfactory.schemas import drop_malformed_entries


# Default configuration
DEFAULT_CONFIG = {
    "type_defaults": {},
    "generator": {
        "respect_gitignore": True,
    },
}

# Keys under builder `options` that hold type defaults
BUILD_YAML_DEFAULTS_KEYS = ("defaults", "type_defaults")


def parse_build_yaml_defaults(data: Any) -> Dict[str, Any]:
    """
    Collect type defaults from every builder's options in a build.yaml document.

    Args:
        data: Parsed YAML document.

    Returns:
        Raw type-default mapping (values are validated later).
    """
    result: Dict[str, Any] = {}
    if not isinstance(data, dict):
        return result

    targets = data.get("targets")
    if not isinstance(targets, dict):
        return result

    for target in targets.values():
        builders = target.get("builders") if isinstance(target, dict) else None
        if not isinstance(builders, dict):
            continue
        for builder in builders.values():
            options = builder.get("options") if isinstance(builder, dict) else None
            if not isinstance(options, dict):
                continue
            for key in BUILD_YAML_DEFAULTS_KEYS:
                defaults = options.get(key)
                if isinstance(defaults, dict):
                    result.update(defaults)

    return result


class UserConfig:
    """
    Manages hierarchical user configuration.

    Load order (with override):
    1. Default config (hardcoded)
    2. Global config (~/.modelfactory/config.json)
    3. Local config (.modelfactory/config.json)
    4. build.yaml builder options (type defaults only)
    """

    def __init__(self, project_root: Optional[Path] = None, global_config_path: Optional[Path] = None):
        """
        Initialize config manager.

        Args:
            project_root: Project root directory (defaults to CWD)
            global_config_path: Override for the global config file (used by tests)
        """
        self.project_root = project_root or Path.cwd()
        self.global_config_path = global_config_path or Path.home() / ".modelfactory" / "config.json"
        self.local_config_path = self.project_root / ".modelfactory" / "config.json"
        self.build_yaml_path = self.project_root / "build.yaml"

        self._config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """
        Load configuration with hierarchical override.

        Returns:
            Merged configuration dictionary
        """
        config = self._deep_merge({}, DEFAULT_CONFIG)

        for label, path in (("global", self.global_config_path), ("local", self.local_config_path)):
            if not path.exists():
                continue
            try:
                with open(path, 'r') as f:
                    loaded = json.load(f)
                if not isinstance(loaded, dict):
                    logger.warning(f"Ignoring {label} config at {path}: top level must be an object")
                    continue
                config = self._deep_merge(config, loaded)
                logger.debug(f"Loaded {label} config from {path}")
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Failed to load {label} config: {e}")

        if self.build_yaml_path.exists():
            try:
                with open(self.build_yaml_path, 'r') as f:
                    build_defaults = parse_build_yaml_defaults(yaml.safe_load(f))
                if build_defaults:
                    config = self._deep_merge(config, {"type_defaults": build_defaults})
                    logger.debug(f"Loaded {len(build_defaults)} type default(s) from {self.build_yaml_path}")
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Failed to load build.yaml: {e}")

        return config

    def _deep_merge(self, base: Dict, override: Dict) -> Dict:
        """
        Deep merge two dictionaries, with override taking precedence.
        """
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            elif isinstance(value, dict):
                result[key] = self._deep_merge({}, value)
            else:
                result[key] = value

        return result

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a config value by dot-separated key.

        Examples:
            config.get("generator.respect_gitignore")  # True
        """
        value = self._config

        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def get_type_defaults(self) -> Dict[str, str]:
        """
        The global (type-level) override map.

        Entries whose key or value is not a string are dropped.
        """
        return drop_malformed_entries(self.get("type_defaults", {}), source="type_defaults")

    def set_type_default(self, type_str: str, code: str, is_global: bool = False) -> bool:
        """
        Persist a type default. Type strings are stored as a single key, so
        they may contain dots or generics.
        """
        return self._set_and_save(["type_defaults", type_str], code, is_global=is_global)

    def _set_and_save(self, keys, value: Any, is_global: bool) -> bool:
        """
        Set a config value and save to the appropriate file.

        Returns:
            True if successful, False otherwise
        """
        config_path = self.global_config_path if is_global else self.local_config_path

        if config_path.exists():
            try:
                with open(config_path, 'r') as f:
                    config = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.error(f"Failed to load config from {config_path}: {e}")
                return False
        else:
            config = {}

        current = config
        for k in keys[:-1]:
            if not isinstance(current.get(k), dict):
                current[k] = {}
            current = current[k]

        current[keys[-1]] = value

        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(config_path, 'w') as f:
                json.dump(config, f, indent=2)

            self._config = self._load_config()

            logger.info(f"Saved {'global' if is_global else 'local'} config: {'.'.join(keys)}={value}")
            return True
        except OSError as e:
            logger.error(f"Failed to save config to {config_path}: {e}")
            return False

    def get_all(self) -> Dict[str, Any]:
        """Get the entire merged configuration."""
        return self._deep_merge({}, self._config)

