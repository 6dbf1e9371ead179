"""Configuration settings using Pydantic for validation."""

import os
import re
import threading
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_POLLING_INTERVAL = 15


class AWSConfig(BaseModel):
    """AWS SDK configuration."""
    model_config = ConfigDict(frozen=True)

    region: Optional[str] = Field(default=None, description="AWS region (falls back to the SDK default chain)")

    # AWS credentials (optional - use IAM roles in production)
    access_key_id: Optional[str] = Field(default=None, description="AWS access key ID")
    secret_access_key: Optional[str] = Field(default=None, description="AWS secret access key")

    # LocalStack overrides for local development
    endpoint_url: Optional[str] = Field(default=None, description="Custom endpoint URL (LocalStack)")

    connect_timeout_seconds: int = Field(default=10, description="SDK connect timeout")
    read_timeout_seconds: int = Field(default=30, description="SDK read timeout")
    max_attempts: int = Field(default=3, description="SDK-level attempts per API call")


class MetricsConfig(BaseModel):
    """CloudWatch publishing configuration."""
    model_config = ConfigDict(frozen=True)

    namespace: str = Field(default="CustomAZMetrics", description="CloudWatch namespace")
    batch_size: int = Field(default=20, ge=1, le=20, description="Records per PutMetricData call")
    enable_asg: bool = Field(default=True, description="Publish Auto Scaling group metrics")
    enable_rds: bool = Field(default=True, description="Publish DB cluster metrics")


class LoggingConfig(BaseModel):
    """Logging configuration."""
    model_config = ConfigDict(frozen=True)

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="json", description="Log format: json or text")
    output: str = Field(default="stdout", description="Log output destination")

    @field_validator('level')
    @classmethod
    def validate_level(cls, v):
        level = v.upper()
        if level not in ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator('format')
    @classmethod
    def validate_format(cls, v):
        if v.lower() not in ['json', 'text']:
            raise ValueError("Log format must be 'json' or 'text'")
        return v.lower()


class MonitorSettings(BaseSettings):
    """Main monitor settings, read once at startup and never mutated."""
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    service_name: str = Field(default="az-metrics-monitor", description="Service name")
    polling_interval: int = Field(
        default=DEFAULT_POLLING_INTERVAL,
        description="Seconds to sleep between poll cycles"
    )

    aws: AWSConfig = Field(default_factory=AWSConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator('polling_interval', mode='before')
    @classmethod
    def default_invalid_interval(cls, v):
        """Fall back to the default for missing, unparsable or out-of-range values."""
        try:
            interval = int(str(v).strip())
        except (TypeError, ValueError):
            return DEFAULT_POLLING_INTERVAL
        if interval < 1 or interval > threading.TIMEOUT_MAX:
            return DEFAULT_POLLING_INTERVAL
        return interval


def substitute_env_vars(obj: Any) -> Any:
    """
    Recursively substitute environment variables in configuration objects.

    Supports syntax:
    - ${VAR_NAME} - Required variable (raises error if not found)
    - ${VAR_NAME:-default} - Optional variable with default value

    Args:
        obj: Configuration object (dict, list, string, or other)

    Returns:
        Object with environment variables substituted

    Raises:
        ValueError: If required environment variable is not found
    """
    if isinstance(obj, dict):
        return {key: substitute_env_vars(value) for key, value in obj.items()}
    elif isinstance(obj, list):
        return [substitute_env_vars(item) for item in obj]
    elif isinstance(obj, str):
        def replace_env_var(match):
            var_expr = match.group(1)

            if ':-' in var_expr:
                var_name, default_value = var_expr.split(':-', 1)
                return os.getenv(var_name.strip(), default_value)

            var_name = var_expr.strip()
            value = os.getenv(var_name)
            if value is None:
                raise ValueError(f"Required environment variable '{var_name}' is not set")
            return value

        return re.sub(r'\$\{([^}]+)\}', replace_env_var, obj)
    else:
        return obj


def load_settings(config_file: Optional[str] = None) -> MonitorSettings:
    """
    Load settings from an optional YAML file and environment variables.

    Values given in the file are passed as init arguments, so they win over
    environment variables for the same field.

    Args:
        config_file: Path to YAML configuration file

    Returns:
        MonitorSettings: Validated configuration object

    Raises:
        ValueError: If required environment variables are missing
        FileNotFoundError: If config file doesn't exist
    """
    if config_file and os.path.exists(config_file):
        import yaml

        with open(config_file, 'r') as f:
            raw_config = yaml.safe_load(f) or {}

        config_data = substitute_env_vars(raw_config)
        return MonitorSettings(**config_data)

    elif config_file:
        raise FileNotFoundError(f"Configuration file not found: {config_file}")

    return MonitorSettings()
