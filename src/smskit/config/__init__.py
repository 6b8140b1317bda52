"""Config – 12-factor settings, loaders, and service wiring."""

from smskit.config.app import AppConfig, build_rate_limiter, build_registry
from smskit.config.settings import (
    AwsSnsSettings,
    DotenvSettingsLoader,
    EnvSettingsLoader,
    LoggingSettings,
    PlivoSettings,
    RateLimitSettings,
    SecuritySettings,
    ServerSettings,
    Settings,
    SettingsLoader,
    TwilioSettings,
    parse_provider_limits,
)
from smskit.config.validation import ConfigError, InvalidSettingValueError, MissingRequiredSettingError

__all__ = [
    "AppConfig",
    "AwsSnsSettings",
    "ConfigError",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "LoggingSettings",
    "MissingRequiredSettingError",
    "PlivoSettings",
    "RateLimitSettings",
    "SecuritySettings",
    "ServerSettings",
    "Settings",
    "SettingsLoader",
    "TwilioSettings",
    "build_rate_limiter",
    "build_registry",
    "parse_provider_limits",
]
