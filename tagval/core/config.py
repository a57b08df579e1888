"""Manages configuration for tagval.

This module is responsible for loading, managing, and saving the engine's
configuration settings. It aggregates settings from default values, TOML files,
and environment variables, providing a unified interface for accessing them.
"""

import copy
import logging
import os
from pathlib import Path
from typing import Dict, Any, Optional

try:
    import tomllib  # Available in Python 3.11+
except ImportError:
    import tomli as tomllib  # Fallback for Python versions < 3.11

import tomli_w

# The default path for the user-specific global configuration file.
USER_CONFIG_PATH = Path.home() / ".config" / "tagval" / "config.toml"

# The project-level configuration file, looked up in the working directory.
PROJECT_CONFIG_NAME = "tagval.toml"

EMAIL_PATTERN = r"^[A-Za-z0-9_.+-]+@[A-Za-z0-9-]+\.[A-Za-z0-9.-]+$"

logger = logging.getLogger(__name__)


class Config:
    """Handles the configuration for tagval.

    This class loads configuration from multiple sources with a defined
    precedence:
    1.  Default values (lowest precedence).
    2.  Project-specific `tagval.toml` file.
    3.  User-level `~/.config/tagval/config.toml` file.
    4.  A custom configuration file specified at runtime.
    5.  Environment variables (highest precedence).

    A `Config` is only read by the engine, never written, so one instance
    can be shared by validators running on different threads.

    Attributes:
        DEFAULT_CONFIG (Dict[str, Any]): A dictionary containing the default
            configuration values.
    """

    DEFAULT_CONFIG = {
        "metadata_key": "validate",  # Dataclass metadata key holding rule strings.
        "fallback_metadata_keys": ["binding"],
        "name_key": "json",  # Dataclass metadata key holding the JSON key name.
        "hoist_required": True,  # Absent + "required" anywhere in the rule fails.
        "recurse_sequences": True,
        "colors": True,
        "verbose": False,
        "predicates": {
            "email": {
                "pattern": EMAIL_PATTERN,
            },
        },
    }

    def __init__(self, config_path: Optional[Path] = None, load: bool = True) -> None:
        """Initializes the configuration manager.

        Args:
            config_path (Optional[Path]): An optional path to a specific
                configuration file to load. If provided, it takes precedence
                over default file locations.
            load (bool): When False, only the defaults are used and no file
                or environment variable is consulted.
        """
        self.config = copy.deepcopy(self.DEFAULT_CONFIG)
        if load:
            self._load_config(config_path)

    @classmethod
    def defaults(cls) -> "Config":
        """Returns a configuration holding only the default values."""
        return cls(load=False)

    def _load_config(self, config_path: Optional[Path] = None) -> None:
        """Loads configuration from files and environment variables.

        Args:
            config_path (Optional[Path]): A specific config file path.
        """
        if config_path:
            self._load_file_config(Path(config_path))
        else:
            self._load_default_configs()

        self._load_env_config()

    def _load_default_configs(self) -> None:
        """Loads configs from standard locations if they exist."""
        project_config = Path.cwd() / PROJECT_CONFIG_NAME
        if project_config.exists():
            self._load_file_config(project_config)

        if USER_CONFIG_PATH.exists():
            self._load_file_config(USER_CONFIG_PATH)

    def _merge_configs(self, base: Dict[str, Any], new: Dict[str, Any]) -> None:
        """Recursively merges a new config dict into a base dict.

        Args:
            base (Dict[str, Any]): The base configuration dictionary.
            new (Dict[str, Any]): The new configuration to merge in.
        """
        for key, value in new.items():
            if isinstance(value, dict) and key in base and isinstance(base[key], dict):
                self._merge_configs(base[key], value)
            else:
                base[key] = value

    def _load_file_config(self, config_path: Path) -> None:
        """Loads and merges configuration from a TOML file.

        A file that cannot be read or parsed is reported and skipped.

        Args:
            config_path (Path): The path to the TOML configuration file.
        """
        try:
            with open(config_path, "rb") as f:
                file_config = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning(f"Could not load config from {config_path}: {e}")
            return
        self._merge_configs(self.config, file_config)

    def _load_env_config(self) -> None:
        """Loads and merges configuration from environment variables."""
        env_mapping = {
            "TAGVAL_METADATA_KEY": "metadata_key",
            "TAGVAL_FALLBACK_METADATA_KEYS": "fallback_metadata_keys",
            "TAGVAL_NAME_KEY": "name_key",
            "TAGVAL_HOIST_REQUIRED": "hoist_required",
            "TAGVAL_RECURSE_SEQUENCES": "recurse_sequences",
            "TAGVAL_EMAIL_PATTERN": "predicates.email.pattern",
            "TAGVAL_COLORS": "colors",
            "TAGVAL_VERBOSE": "verbose",
        }

        for env_var, config_key in env_mapping.items():
            value = os.getenv(env_var)
            if value is not None:
                self._set_nested_key(config_key, value)

    def _set_nested_key(self, key_path: str, value: str) -> None:
        """Sets a value in the config dict using a dot-separated path.

        This method correctly parses and casts values from environment
        variables, which are always strings.

        Args:
            key_path (str): The dot-separated key (e.g., "predicates.email.pattern").
            value (str): The string value from the environment variable.
        """
        keys = key_path.split('.')
        target_config = self.config
        for key in keys[:-1]:
            if key not in target_config or not isinstance(target_config[key], dict):
                target_config[key] = {}
            target_config = target_config[key]

        leaf_key = keys[-1]

        # Type casting based on the key
        if leaf_key in ["hoist_required", "recurse_sequences", "colors", "verbose"]:
            target_config[leaf_key] = value.lower() in ("true", "1", "yes", "on")
        elif leaf_key in ["fallback_metadata_keys"]:
            target_config[leaf_key] = [v.strip() for v in value.split(",") if v.strip()]
        else:
            target_config[leaf_key] = value

    def get(self, key: str, default: Any = None) -> Any:
        """Retrieves a configuration value using a dot-separated key.

        Args:
            key (str): The dot-separated key (e.g., "predicates.email.pattern").
            default (Any): The default value to return if the key is not found.

        Returns:
            Any: The configuration value or the default.
        """
        keys = key.split('.')
        value = self.config
        try:
            for k in keys:
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def set(self, key: str, value: Any) -> None:
        """Sets a configuration value in memory.

        Args:
            key (str): The dot-separated key (e.g., "hoist_required").
            value (Any): The value to set.
        """
        keys = key.split('.')
        target_config = self.config
        for k in keys[:-1]:
            target_config = target_config.setdefault(k, {})
        target_config[keys[-1]] = value

    def _get_user_config(self) -> Dict[str, Any]:
        """Loads and returns the contents of the user config file.

        Returns:
            Dict[str, Any]: The user configuration dictionary, or an empty
            dict if the file doesn't exist or fails to parse.
        """
        if not USER_CONFIG_PATH.exists():
            return {}
        try:
            with open(USER_CONFIG_PATH, "rb") as f:
                return tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError):
            return {}

    def save_user_config(self) -> None:
        """Saves the current configuration to the user config file.

        This method persists settings that differ from the defaults, allowing
        users to maintain their customizations across sessions.

        Raises:
            IOError: If the configuration file cannot be written.
        """
        user_config = self._get_user_config()

        for key, value in self.config.items():
            if key not in self.DEFAULT_CONFIG or value != self.DEFAULT_CONFIG[key]:
                user_config[key] = value

        try:
            USER_CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
            with open(USER_CONFIG_PATH, "wb") as f:
                tomli_w.dump(user_config, f)
        except OSError as e:
            raise IOError(f"Failed to save configuration to {USER_CONFIG_PATH}: {e}") from e

    @staticmethod
    def reset_user_config() -> bool:
        """Deletes the user config file.

        Returns:
            bool: True if a file was removed, False if there was none.
        """
        if not USER_CONFIG_PATH.exists():
            return False
        USER_CONFIG_PATH.unlink()
        return True

    def __str__(self) -> str:
        """Returns a string representation of the configuration.

        Returns:
            str: A string showing the current configuration state.
        """
        return f"Config({self.config})"
