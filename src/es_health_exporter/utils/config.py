"""Configuration management for the exporter."""

import os
import yaml
from typing import Dict, Any, Optional


class Config:
    """Configuration manager for the Elasticsearch health exporter."""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration.

        Args:
            config_path: Path to configuration file (YAML)
        """
        self.config_path = config_path
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self):
        """Load configuration from file and environment variables."""
        # Load from file if provided
        if self.config_path and os.path.exists(self.config_path):
            with open(self.config_path, "r") as f:
                self._config = yaml.safe_load(f) or {}

            if not isinstance(self._config, dict):
                raise ValueError(
                    f"Configuration file {self.config_path} must contain a mapping"
                )

        # Override with environment variables
        self._load_env_variables()

        # Set defaults
        self._set_defaults()

    def _section(self, name: str) -> Dict[str, Any]:
        """Return a top-level section, treating an empty one as missing.

        Raises:
            ValueError: If the section is present but not a mapping
        """
        section = self._config.get(name)
        if section is None:
            section = self._config[name] = {}
        elif not isinstance(section, dict):
            raise ValueError(f"Configuration section '{name}' must be a mapping")
        return section

    def _load_env_variables(self):
        """Load configuration from environment variables."""
        # Elasticsearch
        if os.getenv("ES_HEALTH_EXPORTER_ES_URL"):
            self._section("elasticsearch")["url"] = os.getenv(
                "ES_HEALTH_EXPORTER_ES_URL"
            )

        if os.getenv("ES_HEALTH_EXPORTER_TIMEOUT"):
            self._section("elasticsearch")["timeout"] = float(
                os.getenv("ES_HEALTH_EXPORTER_TIMEOUT")
            )

        # API
        if os.getenv("ES_HEALTH_EXPORTER_API_HOST"):
            self._section("api")["host"] = os.getenv("ES_HEALTH_EXPORTER_API_HOST")

        if os.getenv("ES_HEALTH_EXPORTER_API_PORT"):
            self._section("api")["port"] = int(os.getenv("ES_HEALTH_EXPORTER_API_PORT"))

        # Logging
        if os.getenv("ES_HEALTH_EXPORTER_LOG_LEVEL"):
            self._section("logging")["level"] = os.getenv(
                "ES_HEALTH_EXPORTER_LOG_LEVEL"
            )

    def _set_defaults(self):
        """Set default configuration values."""
        # Elasticsearch defaults
        elasticsearch = self._section("elasticsearch")
        elasticsearch.setdefault("url", "http://localhost:9200")
        elasticsearch.setdefault("timeout", 5.0)
        elasticsearch.setdefault("verify", True)

        # Metric naming defaults
        metrics = self._section("metrics")
        metrics.setdefault("namespace", "elasticsearch")
        metrics.setdefault("subsystem", "cluster_health")

        # API defaults
        api = self._section("api")
        api.setdefault("host", "0.0.0.0")  # nosec B104
        api.setdefault("port", 9114)
        api.setdefault("debug", False)

        # Logging defaults
        log_settings = self._section("logging")
        log_settings.setdefault("level", "INFO")
        log_settings.setdefault(
            "format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key.

        Args:
            key: Configuration key (supports dot notation, e.g., 'elasticsearch.url')
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split(".")
        value = self._config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
            else:
                return default

            if value is None:
                return default

        return value

    def set(self, key: str, value: Any):
        """Set configuration value.

        Args:
            key: Configuration key (supports dot notation)
            value: Value to set
        """
        keys = key.split(".")
        config = self._config

        for k in keys[:-1]:
            config = config.setdefault(k, {})

        config[keys[-1]] = value

    def collector_config(self) -> Dict[str, Any]:
        """Build the configuration dictionary for a cluster health collector."""
        return {
            "timeout": self.get("elasticsearch.timeout"),
            "namespace": self.get("metrics.namespace"),
            "subsystem": self.get("metrics.subsystem"),
        }

    def to_dict(self) -> Dict[str, Any]:
        """Get configuration as dictionary.

        Returns:
            Configuration dictionary
        """
        return self._config.copy()


def load_config(config_path: Optional[str] = None) -> Config:
    """Load configuration from file or defaults.

    Args:
        config_path: Path to configuration file

    Returns:
        Config instance
    """
    return Config(config_path)
