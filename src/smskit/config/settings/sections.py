"""Config settings – one dataclass per configuration section."""
from __future__ import annotations

import dataclasses

from smskit.application.rate_limit import ProviderRateLimit
from smskit.config.settings.base import Settings
from smskit.config.validation import InvalidSettingValueError
from smskit.observability.logging import parse_level

__all__ = [
    "AwsSnsSettings",
    "LoggingSettings",
    "PlivoSettings",
    "RateLimitSettings",
    "SecuritySettings",
    "ServerSettings",
    "TwilioSettings",
    "parse_provider_limits",
]

_LOG_FORMATS = ("json", "pretty")


@dataclasses.dataclass(frozen=True)
class ServerSettings(Settings):
    """``timeout_seconds`` bounds every outbound carrier HTTP request."""

    _prefix = "SMSKIT_SERVER"

    host: str = "0.0.0.0"
    port: int = 3000
    timeout_seconds: int = 30

    def _validate(self) -> None:
        if not 0 < self.port < 65536:
            raise InvalidSettingValueError(self._env("port"), self.port, "must be between 1 and 65535")
        if self.timeout_seconds <= 0:
            raise InvalidSettingValueError(self._env("timeout_seconds"), self.timeout_seconds, "must be positive")


@dataclasses.dataclass(frozen=True)
class SecuritySettings(Settings):
    """Global switch: ``verify_signatures=false`` disables every carrier's
    signature check regardless of its own setting."""

    _prefix = "SMSKIT_SECURITY"

    verify_signatures: bool = True
    max_body_size: int = 1024 * 1024

    def _validate(self) -> None:
        if self.max_body_size <= 0:
            raise InvalidSettingValueError(self._env("max_body_size"), self.max_body_size, "must be positive")


@dataclasses.dataclass(frozen=True)
class LoggingSettings(Settings):
    _prefix = "SMSKIT_LOG"

    level: str = "info"
    format: str = "json"

    def _validate(self) -> None:
        try:
            parse_level(self.level)
        except ValueError as exc:
            raise InvalidSettingValueError(self._env("level"), self.level, str(exc)) from exc
        if self.format not in _LOG_FORMATS:
            raise InvalidSettingValueError(self._env("format"), self.format, f"expected one of {_LOG_FORMATS}")


@dataclasses.dataclass(frozen=True)
class RateLimitSettings(Settings):
    """``per_provider`` uses ``"twilio=1/60,plivo=10/60"`` (requests/seconds)."""

    _prefix = "SMSKIT_RATE_LIMIT"

    enabled: bool = True
    max_requests: int = 100
    window_seconds: int = 60
    per_provider: str = ""

    def _validate(self) -> None:
        if self.max_requests <= 0:
            raise InvalidSettingValueError(self._env("max_requests"), self.max_requests, "must be positive")
        if self.window_seconds <= 0:
            raise InvalidSettingValueError(self._env("window_seconds"), self.window_seconds, "must be positive")
        self.provider_limits()

    def provider_limits(self) -> dict[str, ProviderRateLimit]:
        return parse_provider_limits(self.per_provider, setting=self._env("per_provider"))


def parse_provider_limits(value: str, *, setting: str = "per_provider") -> dict[str, ProviderRateLimit]:
    """Parse ``"name=requests/seconds"`` entries separated by commas."""
    limits: dict[str, ProviderRateLimit] = {}
    for entry in value.split(","):
        entry = entry.strip()
        if not entry:
            continue
        name, sep, quota = entry.partition("=")
        requests, slash, seconds = quota.partition("/")
        name = name.strip().lower()
        if not sep or not slash or not name:
            raise InvalidSettingValueError(setting, entry, "expected 'provider=requests/seconds'")
        try:
            limits[name] = ProviderRateLimit(int(requests), float(seconds))
        except ValueError as exc:
            raise InvalidSettingValueError(setting, entry, str(exc)) from exc
    return limits


@dataclasses.dataclass(frozen=True)
class PlivoSettings(Settings):
    _prefix = "SMSKIT_PLIVO"

    auth_id: str
    auth_token: str
    callback_url: str | None = None
    base_url: str = "https://api.plivo.com"
    verify_signatures: bool = True


@dataclasses.dataclass(frozen=True)
class TwilioSettings(Settings):
    _prefix = "SMSKIT_TWILIO"

    account_sid: str
    auth_token: str
    callback_url: str | None = None
    base_url: str = "https://api.twilio.com"
    verify_signatures: bool = True


@dataclasses.dataclass(frozen=True)
class AwsSnsSettings(Settings):
    """Credentials are optional: without them the default AWS credential
    chain applies.  The section counts as configured once a region is set."""

    _prefix = "SMSKIT_AWS_SNS"

    region: str
    access_key_id: str | None = None
    secret_access_key: str | None = None

    def _validate(self) -> None:
        if bool(self.access_key_id) != bool(self.secret_access_key):
            raise InvalidSettingValueError(
                self._env("secret_access_key"), "[REDACTED]", "access key id and secret must be set together"
            )
