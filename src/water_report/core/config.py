"""
Configuration module for the water compliance report system.

Loads configuration from JSON file and environment variables.
"""

import json
import os
from typing import Dict, Any, Optional
from pathlib import Path

from . import constants


class Config:
    """Configuration manager for the application."""

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_file: Path to configuration JSON file. If None, uses CONFIG_FILE env var
                        or defaults to 'config.json'
        """
        self.config_file = config_file or os.getenv("CONFIG_FILE", "config.json")
        self.config: Dict[str, Any] = {}
        self._load_config()
        self._override_from_env()
        self._validate_config()

    def _load_config(self) -> None:
        """Load configuration from JSON file."""
        config_path = Path(self.config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_file}")

        with open(config_path, "r", encoding="utf-8") as f:
            self.config = json.load(f)

    def _override_from_env(self) -> None:
        """Override configuration with environment variables."""
        if os.getenv("API_BASE_URL"):
            self.config.setdefault("api", {})["base_url"] = os.getenv("API_BASE_URL")

        if os.getenv("API_KEY"):
            self.config.setdefault("api", {})["key"] = os.getenv("API_KEY")

        if os.getenv("REPORT_TIMEZONE"):
            self.config.setdefault("processing", {})["timezone"] = os.getenv("REPORT_TIMEZONE")

        if os.getenv("ENVIRONMENT"):
            self.config["environment"] = os.getenv("ENVIRONMENT")

    def _validate_config(self) -> None:
        """Validate that required configuration keys are present."""
        required_config = {
            "api": ["base_url", "timeout", "max_retries"],
            "processing": ["timezone"],
        }

        missing_sections = [
            section for section in required_config if section not in self.config
        ]
        if missing_sections:
            raise ValueError(
                f"Missing required configuration sections: {', '.join(missing_sections)}"
            )

        missing_keys = []
        for section, keys in required_config.items():
            for key in keys:
                if key not in self.config[section]:
                    missing_keys.append(f"{section}.{key}")

        if missing_keys:
            raise ValueError(
                f"Missing required configuration keys: {', '.join(missing_keys)}"
            )

        if self.points_per_page < 1:
            raise ValueError("report.points_per_page must be at least 1")

        if self.capture_timeout <= 0:
            raise ValueError("export.capture_timeout must be positive")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by key (supports dot notation).

        Args:
            key: Configuration key (e.g., 'api.base_url')
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split(".")
        value = self.config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default

        return value

    @property
    def api_base_url(self) -> str:
        """Get API base URL."""
        return self.get("api.base_url", "")

    @property
    def api_key(self) -> Optional[str]:
        """Get API key sent with every request."""
        return self.get("api.key")

    @property
    def api_timeout(self) -> int:
        """Get API timeout in seconds."""
        return self.get("api.timeout", 30)

    @property
    def api_max_retries(self) -> int:
        """Get maximum API retry attempts."""
        return self.get("api.max_retries", 3)

    @property
    def api_verify_ssl(self) -> bool:
        """Get API SSL verification setting."""
        return self.get("api.verify_ssl", True)

    @property
    def timezone(self) -> str:
        """Get timezone used to bucket readings into calendar days."""
        return self.get("processing.timezone", constants.DEFAULT_TIMEZONE)

    @property
    def points_per_page(self) -> int:
        """Get number of collection points per grid page."""
        return self.get("report.points_per_page", constants.DEFAULT_POINTS_PER_PAGE)

    @property
    def max_nonconformity_rows(self) -> int:
        """Get row cap for non-conformity tables."""
        return self.get(
            "report.max_nonconformity_rows", constants.DEFAULT_MAX_NONCONFORMITY_ROWS
        )

    @property
    def max_table_rows(self) -> int:
        """Get row cap for the measurement table page."""
        return self.get("report.max_table_rows", constants.DEFAULT_MAX_TABLE_ROWS)

    @property
    def include_measurement_table(self) -> bool:
        """Check if the measurement table page should be produced."""
        return self.get("report.include_measurement_table", True)

    @property
    def capture_timeout(self) -> float:
        """Get per-page capture wait bound in seconds."""
        return self.get("export.capture_timeout", constants.DEFAULT_CAPTURE_TIMEOUT)

    @property
    def poll_interval(self) -> float:
        """Get polling interval while waiting for a page to stabilize."""
        return self.get("export.poll_interval", constants.DEFAULT_POLL_INTERVAL)

    @property
    def output_directory(self) -> str:
        """Get directory where exported page trees are written."""
        return self.get("output.directory", "reports")

    def __repr__(self) -> str:
        """String representation of config."""
        return f"Config(file={self.config_file}, env={self.get('environment')})"
