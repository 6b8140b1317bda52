"""Config settings – 12-factor env-based configuration."""
from smskit.config.settings.base import Settings
from smskit.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader, env_key
from smskit.config.settings.sections import (
    AwsSnsSettings,
    LoggingSettings,
    PlivoSettings,
    RateLimitSettings,
    SecuritySettings,
    ServerSettings,
    TwilioSettings,
    parse_provider_limits,
)

__all__ = [
    "AwsSnsSettings",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "LoggingSettings",
    "PlivoSettings",
    "RateLimitSettings",
    "SecuritySettings",
    "ServerSettings",
    "Settings",
    "SettingsLoader",
    "TwilioSettings",
    "env_key",
    "parse_provider_limits",
]
