"""Configuration management for trackswitch."""

import os
import re
from pathlib import Path
from typing import Any, List, Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from trackswitch.exceptions import ConfigError

DEFAULT_VIDEO_EXTENSIONS = ["mp4", "mkv", "avi", "mov", "flv", "wmv", "webm"]


class BackendConfig(BaseModel):
    """Media backend configuration."""

    mode: Literal["local", "process"] = Field(
        default="local", description="Run the backend in-process or as a child process"
    )
    ffprobe_path: str = Field(default="ffprobe", description="ffprobe executable")
    ffmpeg_path: str = Field(default="ffmpeg", description="ffmpeg executable")
    command: List[str] = Field(
        default_factory=lambda: ["trackswitch-backend"],
        description="Backend command argv (process mode)",
    )
    probe_timeout_seconds: int = Field(default=30, description="ffprobe timeout")
    switch_timeout_seconds: int = Field(default=3600, description="ffmpeg remux timeout")

    @field_validator("command")
    @classmethod
    def validate_command(cls, v: List[str]) -> List[str]:
        """Validate the backend command is not empty."""
        if not v:
            raise ValueError("Backend command must not be empty")
        return v

    @field_validator("probe_timeout_seconds", "switch_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        """Validate timeouts are positive."""
        if v <= 0:
            raise ValueError("Timeout must be positive")
        return v


class UIConfig(BaseModel):
    """Presentation shell configuration."""

    language: str = Field(default="zh", description="Display language")
    fallback_language: str = Field(default="zh", description="Fallback display language")
    video_extensions: List[str] = Field(
        default_factory=lambda: list(DEFAULT_VIDEO_EXTENSIONS),
        description="Extensions offered by the file picker",
    )
    include_language_in_output: bool = Field(
        default=True, description="Append the track language to output file names"
    )
    unknown_language: str = Field(
        default="unknown", description="Language tag used when a track has none"
    )

    @field_validator("video_extensions")
    @classmethod
    def normalize_extensions(cls, v: List[str]) -> List[str]:
        """Strip leading dots and lowercase extensions."""
        normalized = [ext.lower().lstrip(".") for ext in v]
        if not all(normalized):
            raise ValueError("Video extensions must not be empty")
        return normalized


class LoggingConfig(BaseModel):
    """Logging configuration."""

    format: str = Field(default="text", description="Log format (json or text)")
    level: str = Field(default="warning", description="Log level")
    output: Optional[str] = Field(default=None, description="Optional log file path")

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate log format."""
        if v not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        if v.lower() not in ("debug", "info", "warning", "error", "critical"):
            raise ValueError("Invalid log level")
        return v.lower()


class Config(BaseModel):
    """Main configuration model."""

    backend: BackendConfig = Field(
        default_factory=BackendConfig, description="Backend configuration"
    )
    ui: UIConfig = Field(default_factory=UIConfig, description="Shell configuration")
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """Load configuration from YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ConfigError: If the file is not valid YAML
            pydantic.ValidationError: If a value is invalid
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        try:
            with open(path, encoding="utf-8") as f:
                raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

        if raw_config is None:
            raw_config = {}

        raw_config = cls._substitute_env_vars(raw_config)

        return cls(**raw_config)

    @staticmethod
    def _substitute_env_vars(obj: Any) -> Any:
        """Recursively replace ${VAR_NAME} with os.environ['VAR_NAME'].

        Raises:
            ConfigError: If a referenced variable is not set
        """
        if isinstance(obj, dict):
            return {key: Config._substitute_env_vars(value) for key, value in obj.items()}
        elif isinstance(obj, list):
            return [Config._substitute_env_vars(item) for item in obj]
        elif isinstance(obj, str):
            pattern = r"\$\{([^}]+)\}"

            def replace_var(match):
                var_name = match.group(1)
                value = os.environ.get(var_name)
                if value is None:
                    raise ConfigError(
                        f"Environment variable '{var_name}' not found "
                        f"(referenced in configuration)"
                    )
                return value

            return re.sub(pattern, replace_var, obj)
        else:
            return obj

    @classmethod
    def from_defaults(cls) -> "Config":
        """Create configuration with default values."""
        return cls()


def load_config(path: Optional[str | Path] = None) -> Config:
    """Load configuration from file or use defaults.

    Args:
        path: Optional path to configuration file. If None, uses defaults.

    Returns:
        Config instance
    """
    if path is None:
        return Config.from_defaults()

    return Config.from_yaml(path)
