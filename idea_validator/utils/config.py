"""Configuration management for Idea Validator."""

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class DatabaseConfig(BaseModel):
    """Database configuration."""

    url: str = "sqlite:///data/db/validator.db"
    echo: bool = False


class StorageConfig(BaseModel):
    """Key-value storage configuration."""

    backend: str = "sql"  # "sql" or "memory"
    history_limit: int = 10
    min_idea_length: int = 50


class OpportunityConfig(BaseModel):
    """Opportunity metric configuration.

    Every field defaults to the values the heatmap was designed around;
    overriding them changes the chart for all stored ideas.
    """

    keywords: Dict[str, List[str]] = Field(
        default_factory=lambda: {
            "market_size": ["market", "industry", "billion", "million", "large", "growing"],
            "growth_rate": ["growth", "increasing", "trend", "rising", "expanding", "potential"],
            "competition_intensity": [
                "competition",
                "competitive",
                "competitors",
                "saturated",
                "crowded",
            ],
        }
    )
    weights: Dict[str, int] = Field(
        default_factory=lambda: {
            "market_size": 15,
            "growth_rate": 15,
            "competition_intensity": 12,
        }
    )
    offsets: Dict[str, int] = Field(
        default_factory=lambda: {
            "market_size": 20,
            "growth_rate": 20,
            "competition_intensity": 25,
        }
    )
    easy_below: int = 35
    medium_below: int = 65
    colors: Dict[str, str] = Field(
        default_factory=lambda: {"easy": "#7FE0C3", "medium": "#6BA4FF", "hard": "#FF6B8A"}
    )


class APIConfig(BaseModel):
    """API configuration."""

    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "text"  # "text" or "json"
    file: str = "data/logs/validator.log"
    rotation: str = "10 MB"
    retention: str = "30 days"


class Config(BaseModel):
    """Main configuration model."""

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    opportunity: OpportunityConfig = Field(default_factory=OpportunityConfig)
    api: APIConfig = Field(default_factory=APIConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class Settings(BaseSettings):
    """Environment-based settings."""

    # Database
    database_url: str = ""

    # Storage
    storage_backend: str = ""

    # Logging
    log_level: str = ""

    # API
    api_host: str = ""
    api_port: int = 0

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "IDEA_VALIDATOR_",
        "extra": "ignore",
    }


class ConfigManager:
    """Configuration manager for loading and merging config sources."""

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize configuration manager.

        Args:
            config_path: Path to YAML configuration file
        """
        load_dotenv()

        if config_path is None:
            config_path = Path(__file__).parent.parent.parent / "config" / "config.yaml"

        self.config_path = Path(config_path)
        self.yaml_config = self._load_yaml()

        self.env_settings = Settings()

        self.config = self._merge_config()

    def _load_yaml(self) -> Dict[str, Any]:
        """Load YAML configuration file."""
        if not self.config_path.exists():
            return {}

        with open(self.config_path, "r") as f:
            return yaml.safe_load(f) or {}

    def _merge_config(self) -> Config:
        """Merge YAML config with environment variables."""
        merged = self.yaml_config.copy()

        # Environment variables win over the YAML file
        if self.env_settings.database_url:
            merged.setdefault("database", {})["url"] = self.env_settings.database_url

        if self.env_settings.storage_backend:
            merged.setdefault("storage", {})["backend"] = self.env_settings.storage_backend

        if self.env_settings.log_level:
            merged.setdefault("logging", {})["level"] = self.env_settings.log_level

        if self.env_settings.api_host:
            merged.setdefault("api", {})["host"] = self.env_settings.api_host

        if self.env_settings.api_port:
            merged.setdefault("api", {})["port"] = self.env_settings.api_port

        return Config(**merged)


# Global config instance
_config_manager: Optional[ConfigManager] = None


def get_config() -> Config:
    """Get global configuration instance."""
    return get_config_manager().config


def get_config_manager() -> ConfigManager:
    """Get configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager
