"""Manages configuration for validity.

This module is responsible for loading, managing, and saving the engine's
configuration settings. It aggregates settings from default values, TOML
files, and environment variables, providing a unified interface for
accessing them.
"""

import copy
import os
import sys
from pathlib import Path
from typing import Dict, Any, Optional

try:
    import tomllib  # Available in Python 3.11+
except ImportError:
    import tomli as tomllib  # Fallback for Python versions < 3.11

import tomli_w

# The default path for the user-specific global configuration file.
USER_CONFIG_PATH = Path.home() / ".config" / "validity" / "config.toml"

# The project-level configuration file, looked up in the working directory.
PROJECT_CONFIG_NAME = "validity.toml"

MALFORMED_SPEC_POLICIES = ("skip", "fail")


class Config:
    """Handles the configuration for the validity engine.

    This class loads configuration from multiple sources with a defined
    precedence:
    1.  Default values (lowest precedence).
    2.  Project-specific `validity.toml` file.
    3.  User-level `~/.config/validity/config.toml` file.
    4.  A custom configuration file specified at runtime.
    5.  Environment variables (highest precedence).

    Attributes:
        DEFAULT_CONFIG (Dict[str, Any]): A dictionary containing the default
            configuration values.
    """

    DEFAULT_CONFIG: Dict[str, Any] = {
        "verbose": False,
        "colors": True,
        "malformed_spec": "skip",  # Can be "skip" or "fail".
        "malformed_spec_message": "This field has an invalid validation configuration.",
        "field_tags": ["input"],
        "attributes": {
            "validate": "data-validate",
            "error": "data-error",
        },
        "markup": {
            "error_class": "has-error",
            "label_class": "control-label",
        },
        "rules": {
            "date": {
                "formats": ["%m/%d/%Y", "%Y/%m/%d", "%d %B %Y", "%B %d, %Y", "%b %d, %Y", "%d %b %Y"],
            },
            "URL": {
                "protocols": ["http", "https", "ftp"],
                "require_protocol": False,
            },
        },
    }

    def __init__(self, config_path: Optional[Path] = None, load_files: bool = True) -> None:
        """Initializes the configuration manager.

        Args:
            config_path (Optional[Path]): An optional path to a specific
                configuration file to load. If provided, it takes precedence
                over default file locations.
            load_files (bool): If False, only defaults and environment
                variables are used. Useful for embedding and tests.
        """
        self.config = copy.deepcopy(self.DEFAULT_CONFIG)
        self._load_config(config_path, load_files)

    def _load_config(self, config_path: Optional[Path] = None, load_files: bool = True) -> None:
        """Loads configuration from files and environment variables.

        Args:
            config_path (Optional[Path]): A specific config file path.
            load_files (bool): Whether the default file locations are read.
        """
        if config_path:
            self._load_file_config(Path(config_path))
        elif load_files:
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

        Args:
            config_path (Path): The path to the TOML configuration file.
        """
        try:
            with open(config_path, "rb") as f:
                file_config = tomllib.load(f)
                self._merge_configs(self.config, file_config)
        except (OSError, tomllib.TOMLDecodeError) as e:
            print(f"Warning: Could not load config from {config_path}: {e}", file=sys.stderr)

    def _load_env_config(self) -> None:
        """Loads and merges configuration from environment variables."""
        env_mapping = {
            "VALIDITY_VERBOSE": "verbose",
            "VALIDITY_COLORS": "colors",
            "VALIDITY_MALFORMED_SPEC": "malformed_spec",
            "VALIDITY_MALFORMED_SPEC_MESSAGE": "malformed_spec_message",
            "VALIDITY_FIELD_TAGS": "field_tags",
            "VALIDITY_VALIDATE_ATTRIBUTE": "attributes.validate",
            "VALIDITY_ERROR_ATTRIBUTE": "attributes.error",
            "VALIDITY_ERROR_CLASS": "markup.error_class",
            "VALIDITY_LABEL_CLASS": "markup.label_class",
        }

        for env_var, config_key in env_mapping.items():
            value = os.getenv(env_var)
            if value is None:
                continue
            try:
                self.set_from_string(config_key, value)
            except ValueError as e:
                print(f"Warning: Ignoring {env_var}: {e}", file=sys.stderr)

    def set_from_string(self, key: str, value: str) -> None:
        """Sets a value given as text, casting it to the type the key holds.

        Environment variables and command-line arguments are always strings.
        Booleans accept "true/1/yes/on" and "false/0/no/off". List settings
        are comma separated.

        Args:
            key (str): The dot-separated key (e.g., "markup.error_class").
            value (str): The raw text.

        Raises:
            ValueError: If the text is not valid for the key.
        """
        keys = key.split('.')
        parent = self.get('.'.join(keys[:-1])) if len(keys) > 1 else self.config
        if parent is not None and not isinstance(parent, dict):
            raise ValueError(f"'{'.'.join(keys[:-1])}' is a value, not a section")

        current = self.get(key)
        leaf_key = keys[-1]
        text = value.strip()

        if isinstance(current, bool) or (current is None and text.lower() in ("true", "false")):
            lowered = text.lower()
            if lowered in ("true", "1", "yes", "on"):
                cast: Any = True
            elif lowered in ("false", "0", "no", "off"):
                cast = False
            else:
                raise ValueError(f"expected a boolean for '{key}', got '{value}'")
        elif isinstance(current, list):
            cast = [v.strip() for v in text.split(",") if v.strip()]
            if leaf_key == "field_tags":
                cast = [v.lower() for v in cast]
        elif leaf_key == "malformed_spec":
            cast = text.lower()
            if cast not in MALFORMED_SPEC_POLICIES:
                raise ValueError(f"invalid malformed_spec policy '{value}'")
        elif isinstance(current, dict):
            raise ValueError(f"'{key}' is a section, not a value")
        else:
            cast = value

        self.set(key, cast)

    def get(self, key: str, default: Any = None) -> Any:
        """Retrieves a configuration value using a dot-separated key.

        Args:
            key (str): The dot-separated key (e.g., "attributes.validate").
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
            key (str): The dot-separated key (e.g., "markup.error_class").
            value (Any): The value to set.
        """
        keys = key.split('.')
        target_config = self.config
        for k in keys[:-1]:
            target_config = target_config.setdefault(k, {})
        target_config[keys[-1]] = value

    def malformed_spec_policy(self) -> str:
        """Returns how fields with an undecodable validation spec are treated.

        Returns:
            str: "skip" or "fail". Unknown values fall back to "skip".
        """
        policy = self.get("malformed_spec", "skip")
        return policy if policy in MALFORMED_SPEC_POLICIES else "skip"

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
            if key in self.DEFAULT_CONFIG and value != self.DEFAULT_CONFIG[key]:
                user_config[key] = value
            elif key not in self.DEFAULT_CONFIG:
                user_config[key] = value

        try:
            USER_CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
            with open(USER_CONFIG_PATH, "wb") as f:
                tomli_w.dump(user_config, f)
        except OSError as e:
            raise IOError(f"Failed to save configuration to {USER_CONFIG_PATH}: {e}")

    @staticmethod
    def reset_user_config() -> bool:
        """Deletes the user config file so the defaults apply again.

        Returns:
            bool: True if a file was removed, False if there was none.

        Raises:
            IOError: If the file exists but cannot be removed.
        """
        if not USER_CONFIG_PATH.exists():
            return False
        try:
            USER_CONFIG_PATH.unlink()
        except OSError as e:
            raise IOError(f"Failed to remove {USER_CONFIG_PATH}: {e}")
        return True

    def __str__(self) -> str:
        """Returns a string representation of the configuration.

        Returns:
            str: A string showing the current configuration state.
        """
        return f"Config({self.config})"
