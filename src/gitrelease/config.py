"""Configuration management for gitrelease.

Loads configuration from platform-appropriate location and provides access to
settings throughout the application.

Config file locations:
- Linux: ~/.config/gitrelease/gitrelease.yml
- macOS: ~/Library/Application Support/gitrelease/gitrelease.yml
- Windows: C:\\Users\\<user>\\AppData\\Local\\gitrelease\\gitrelease.yml

Example:

    timeout: 20
    tag_prefix: "php-"
    providers:
      gitlab:
        api_url: https://gitlab.example.com/api/v4
"""

import copy
import logging
import os
from typing import Any, Dict, Optional

import yaml
from appdirs import user_config_dir

log = logging.getLogger(__name__)

# Default configuration values
DEFAULT_CONFIG: Dict[str, Any] = {
    # Seconds to wait for each API request
    "timeout": 10,
    # Literal text every version tag starts with, e.g. php-8.2.26
    "tag_prefix": "php-",
    # Page size requested from page-numbered tag listings
    "per_page": 100,
    "default_provider": "github",
    "providers": {
        "github": {"api_url": None},
        "gitlab": {"api_url": None},
        "bitbucket": {"api_url": None},
    },
}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


# Checks applied to the top-level keys of a loaded config file
_VALIDATORS = {
    "timeout": lambda value: _is_number(value) and value > 0,
    "tag_prefix": lambda value: isinstance(value, str),
    "per_page": lambda value: isinstance(value, int) and not isinstance(value, bool) and value > 0,
    "default_provider": lambda value: isinstance(value, str) and bool(value),
    "providers": lambda value: isinstance(value, dict),
}

# Singleton instance
_config_instance: Optional["Config"] = None


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence.

    Args:
        base: Base dictionary with default values.
        override: Dictionary with values to override.

    Returns:
        Merged dictionary.
    """
    result = copy.deepcopy(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def resolve_token(explicit: Optional[str], env_var: Optional[str]) -> Optional[str]:
    """Pick the access token for one invocation.

    An explicitly passed token wins over the environment variable; an empty
    string counts as not given.

    Args:
        explicit: Token from a command-line flag or API argument.
        env_var: Name of the provider's environment variable.

    Returns:
        The token, or None when neither source has one.
    """
    if explicit:
        log.info("Using API token passed explicitly.")
        return explicit
    if env_var:
        token = os.getenv(env_var)
        if token:
            log.info("Using API token from %s.", env_var)
            return token
        log.info("No API token found in environment variable %s.", env_var)
    return None


class Config:
    """Configuration manager for gitrelease.

    Loads configuration from platform-appropriate location and provides
    access to settings. Uses singleton pattern for global access.
    """

    APP_NAME = "gitrelease"
    CONFIG_FILENAME = "gitrelease.yml"

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration.

        Args:
            config_path: Optional path to config file. If None, uses default location.
        """
        self._config: Dict[str, Any] = copy.deepcopy(DEFAULT_CONFIG)
        self._config_path = config_path or self._get_default_config_path()
        self._loaded = False

    def _get_default_config_path(self) -> str:
        config_dir = user_config_dir(self.APP_NAME)
        return os.path.join(config_dir, self.CONFIG_FILENAME)

    def load(self) -> "Config":
        """Load configuration from file.

        Returns:
            Self for chaining.
        """
        if self._loaded:
            return self

        if os.path.exists(self._config_path):
            try:
                with open(self._config_path, "r", encoding="utf-8") as f:
                    user_config = yaml.safe_load(f) or {}
                if not isinstance(user_config, dict):
                    raise yaml.YAMLError("top level of the config must be a mapping")
                self._config = deep_merge(DEFAULT_CONFIG, user_config)
                self._validate()
                log.info("Loaded configuration from %s", self._config_path)
            except (IOError, yaml.YAMLError) as e:
                log.warning("Error loading config file %s: %s", self._config_path, e)
                self._config = copy.deepcopy(DEFAULT_CONFIG)
        else:
            log.debug("No config file found at %s, using defaults", self._config_path)

        self._loaded = True
        return self

    def _validate(self) -> None:
        """Replace mistyped values with their defaults, warning about each."""
        for key, is_valid in _VALIDATORS.items():
            value = self._config.get(key)
            if not is_valid(value):
                log.warning(
                    "Invalid value %r for %s in %s, using default %r",
                    value,
                    key,
                    self._config_path,
                    DEFAULT_CONFIG[key],
                )
                self._config[key] = copy.deepcopy(DEFAULT_CONFIG[key])

        providers = self._config["providers"]
        for provider, settings in list(providers.items()):
            if not isinstance(settings, dict):
                log.warning("Ignoring settings of provider %s in %s: not a mapping", provider, self._config_path)
                providers[provider] = copy.deepcopy(DEFAULT_CONFIG["providers"].get(provider, {}))
                continue
            api_url = settings.get("api_url")
            if api_url is not None and not isinstance(api_url, str):
                log.warning("Ignoring api_url %r of provider %s in %s", api_url, provider, self._config_path)
                settings["api_url"] = None

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by dot-separated key.

        Args:
            key: Dot-separated key path (e.g., "providers.gitlab.api_url").
            default: Default value if key not found.

        Returns:
            Configuration value or default.
        """
        self.load()
        value = self._config
        for part in key.split("."):
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                return default
        return value

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value by dot-separated key.

        This only affects the runtime configuration, not the file.
        """
        self.load()
        parts = key.split(".")
        config = self._config
        for part in parts[:-1]:
            if part not in config:
                config[part] = {}
            config = config[part]
        config[parts[-1]] = value

    @property
    def timeout(self) -> float:
        """Get the per-request timeout in seconds."""
        return self.get("timeout", 10)

    @property
    def tag_prefix(self) -> str:
        """Get the literal prefix shared by version tags."""
        return self.get("tag_prefix", "php-")

    @property
    def per_page(self) -> int:
        """Get the page size for page-numbered tag listings."""
        return self.get("per_page", 100)

    @property
    def default_provider(self) -> str:
        """Get the provider used when none is given."""
        return self.get("default_provider", "github")

    def api_url(self, provider: str) -> Optional[str]:
        """Get the configured API base URL override for a provider."""
        return self.get(f"providers.{provider}.api_url")


def get_config(config_path: Optional[str] = None) -> Config:
    """Get the global configuration instance.

    Args:
        config_path: Optional path to config file. Only used on first call.

    Returns:
        The global Config instance.
    """
    global _config_instance  # pylint: disable=global-statement
    if _config_instance is None:
        _config_instance = Config(config_path)
    return _config_instance


def reset_config() -> None:
    """Reset the global configuration instance.

    Useful for testing.
    """
    global _config_instance  # pylint: disable=global-statement
    _config_instance = None
