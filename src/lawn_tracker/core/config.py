"""
Configuration module for the lawn tracker.

Loads configuration from JSON file and environment variables.
"""

import json
import os
from typing import Dict, Any, Optional
from pathlib import Path


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
        # Weather provider
        weather_key = os.getenv("OPENWEATHER_API_KEY") or os.getenv("WEATHER_API_KEY")
        if weather_key:
            self.config.setdefault("weather", {})["api_key"] = weather_key

        if os.getenv("WEATHER_BASE_URL"):
            self.config.setdefault("weather", {})["base_url"] = os.getenv("WEATHER_BASE_URL")

        # Soil document analyzer
        if os.getenv("OPENAI_API_KEY"):
            self.config.setdefault("soil_analyzer", {})["api_key"] = os.getenv("OPENAI_API_KEY")

        # Storage
        if os.getenv("LAWN_STORAGE_PATH"):
            self.config.setdefault("storage", {})["path"] = os.getenv("LAWN_STORAGE_PATH")

        # Environment
        if os.getenv("ENVIRONMENT"):
            self.config["environment"] = os.getenv("ENVIRONMENT")

    def _validate_config(self) -> None:
        """Validate that required configuration keys are present."""
        required_config = {
            "weather": ["base_url"],
            "soil_analyzer": ["base_url", "model"],
            "storage": ["path"],
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

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by key (supports dot notation).

        Args:
            key: Configuration key (e.g., 'weather.base_url')
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
    def weather_base_url(self) -> str:
        """Get weather API base URL."""
        return self.get("weather.base_url", "")

    @property
    def weather_api_key(self) -> Optional[str]:
        """Get weather API key."""
        return self.get("weather.api_key")

    @property
    def weather_country_code(self) -> str:
        """Get default country code for postal code lookups."""
        return self.get("weather.country_code", "US")

    @property
    def weather_timeout(self) -> int:
        """Get weather API timeout in seconds."""
        return self.get("weather.timeout", 30)

    @property
    def weather_max_retries(self) -> int:
        """Get maximum weather API retry attempts."""
        return self.get("weather.max_retries", 3)

    @property
    def analyzer_base_url(self) -> str:
        """Get soil analyzer API base URL."""
        return self.get("soil_analyzer.base_url", "")

    @property
    def analyzer_api_key(self) -> Optional[str]:
        """Get soil analyzer API key."""
        return self.get("soil_analyzer.api_key")

    @property
    def analyzer_model(self) -> str:
        """Get soil analyzer model name."""
        return self.get("soil_analyzer.model", "gpt-4o")

    @property
    def analyzer_max_tokens(self) -> int:
        """Get soil analyzer completion token limit."""
        return self.get("soil_analyzer.max_tokens", 500)

    @property
    def analyzer_temperature(self) -> float:
        """Get soil analyzer sampling temperature."""
        return self.get("soil_analyzer.temperature", 0.1)

    @property
    def analyzer_timeout(self) -> int:
        """Get soil analyzer timeout in seconds."""
        return self.get("soil_analyzer.timeout", 60)

    @property
    def storage_path(self) -> str:
        """Get path of the JSON state file."""
        return self.get("storage.path", "lawn_data.json")

    @property
    def timezone(self) -> str:
        """Get processing timezone."""
        return self.get("processing.timezone", "UTC")

    def __repr__(self) -> str:
        """String representation of config."""
        return f"Config(file={self.config_file}, env={self.get('environment')})"
