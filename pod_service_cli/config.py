"""Configuration management for CLI."""

import os
import yaml
from pathlib import Path
from typing import Optional, Dict, Any


class ConfigError(Exception):
    """Raised when configuration operations fail."""

    pass


def _read_yaml_mapping(path: Path, what: str) -> Dict[str, Any]:
    """Read a YAML file that must hold a single mapping. An empty file is {}."""
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to read {what} from {path}: {e}")
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{what.capitalize()} file {path} must contain a mapping")
    return data


class Config:
    """
    CLI settings: the pod service URL and its API key.

    Values come from ~/.pod-service/config.yaml, and the POD_SERVICE_*
    environment variables override them. Keys may be written with dashes
    (service-url); anything other than the known settings is rejected.
    """

    DEFAULT_CONFIG_DIR = Path.home() / ".pod-service"
    DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"

    # Known settings and the environment variables that override them
    ENV_VARS = {
        "service_url": "POD_SERVICE_URL",
        "api_key": "POD_SERVICE_API_KEY",
    }

    def __init__(self, config_file: Optional[Path] = None):
        self.config_file = config_file or self.DEFAULT_CONFIG_FILE
        self._config: Dict[str, str] = {}
        if self.config_file.exists():
            stored = _read_yaml_mapping(self.config_file, "config")
            # Settings from older versions are dropped on the next save
            self._config = {k: v for k, v in stored.items() if k in self.ENV_VARS}

    @classmethod
    def normalize_key(cls, key: str) -> str:
        """Map a user-supplied key to its setting name, e.g. service-url -> service_url."""
        name = key.strip().lower().replace("-", "_")
        if name not in cls.ENV_VARS:
            known = ", ".join(k.replace("_", "-") for k in cls.ENV_VARS)
            raise ConfigError(f"Unknown configuration key '{key}' (expected one of: {known})")
        return name

    def _save(self):
        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, "w") as f:
                yaml.safe_dump(self._config, f, default_flow_style=False)
            # Owner read/write only, the file may hold an API key
            self.config_file.chmod(0o600)
        except OSError as e:
            raise ConfigError(f"Failed to save config to {self.config_file}: {e}")

    def get(self, key: str) -> Optional[str]:
        """
        Get a configuration value.

        Environment variables take precedence over the config file.
        """
        name = self.normalize_key(key)
        env_value = os.environ.get(self.ENV_VARS[name])
        if env_value:
            return env_value
        return self._config.get(name)

    def set(self, key: str, value: str) -> str:
        """Store a value and return the setting name it was stored under."""
        name = self.normalize_key(key)
        self._config[name] = value
        self._save()
        return name

    def get_all(self) -> Dict[str, str]:
        result = dict(self._config)
        for name, env_var in self.ENV_VARS.items():
            env_value = os.environ.get(env_var)
            if env_value:
                result[name] = env_value
        return result

    def delete(self, key: str) -> str:
        name = self.normalize_key(key)
        if name in self._config:
            del self._config[name]
            self._save()
        return name


def load_pod_spec_file(path: Path) -> Dict[str, Any]:
    """
    Read a pod spec from a YAML file.

    Args:
        path: File with a single mapping (name, namespace, image, ports, ...)

    Returns:
        The mapping, ready to send as a request body
    """
    data = _read_yaml_mapping(path, "pod spec")
    if not data:
        raise ConfigError(f"Pod spec file {path} is empty")
    return data
