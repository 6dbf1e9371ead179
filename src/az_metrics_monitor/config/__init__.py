"""Configuration loading and AWS client setup."""

from .settings import AWSConfig, LoggingConfig, MetricsConfig, MonitorSettings, load_settings

__all__ = ["AWSConfig", "LoggingConfig", "MetricsConfig", "MonitorSettings", "load_settings"]
