"""Config – AppConfig composition and wiring of the core services."""
from __future__ import annotations

import dataclasses
from typing import Any, TypeVar

from smskit.adapters.aws_sns import AwsSnsClient
from smskit.adapters.plivo import PlivoClient
from smskit.adapters.twilio import TwilioClient
from smskit.application.rate_limit import LocalTokenBucketRateLimiter, RateLimitConfig
from smskit.application.webhooks import InboundRegistry
from smskit.config.settings import (
    AwsSnsSettings,
    EnvSettingsLoader,
    LoggingSettings,
    PlivoSettings,
    RateLimitSettings,
    SecuritySettings,
    ServerSettings,
    Settings,
    TwilioSettings,
    env_key,
)
from smskit.config.validation import MissingRequiredSettingError
from smskit.kernel.time import Clock
from smskit.observability.logging import get_logger

__all__ = ["AppConfig", "build_rate_limiter", "build_registry"]

logger = get_logger(__name__)

T = TypeVar("T", bound=Settings)


@dataclasses.dataclass(frozen=True)
class AppConfig:
    """All settings sections.  Carrier sections are ``None`` when the
    environment does not configure them."""

    server: ServerSettings = dataclasses.field(default_factory=ServerSettings)
    security: SecuritySettings = dataclasses.field(default_factory=SecuritySettings)
    logging: LoggingSettings = dataclasses.field(default_factory=LoggingSettings)
    rate_limit: RateLimitSettings = dataclasses.field(default_factory=RateLimitSettings)
    plivo: PlivoSettings | None = None
    twilio: TwilioSettings | None = None
    aws_sns: AwsSnsSettings | None = None

    @classmethod
    def load(cls, loader: EnvSettingsLoader | None = None) -> "AppConfig":
        """Read every section through *loader* (environment by default).

        A carrier section whose variables are all absent is skipped; one
        that is partially configured raises
        :class:`MissingRequiredSettingError`.
        """
        loader = loader or EnvSettingsLoader()
        config = cls(
            server=loader.load(ServerSettings),
            security=loader.load(SecuritySettings),
            logging=loader.load(LoggingSettings),
            rate_limit=loader.load(RateLimitSettings),
            plivo=_load_optional(loader, PlivoSettings),
            twilio=_load_optional(loader, TwilioSettings),
            aws_sns=_load_optional(loader, AwsSnsSettings),
        )
        logger.debug("config_loaded", providers=config.configured_providers())
        return config

    def configured_providers(self) -> list[str]:
        names = {"plivo": self.plivo, "twilio": self.twilio, "aws-sns": self.aws_sns}
        return [name for name, section in names.items() if section is not None]

    def to_log_dict(self) -> dict[str, Any]:
        return {
            field.name: section.to_log_dict()
            for field in dataclasses.fields(self)
            if (section := getattr(self, field.name)) is not None
        }


def _load_optional(loader: EnvSettingsLoader, settings_class: type[T]) -> T | None:
    if not loader.configured(settings_class):
        return None
    return loader.load(settings_class)


def _callback_url(section: PlivoSettings | TwilioSettings, verify: bool) -> str | None:
    if verify and not section.callback_url:
        raise MissingRequiredSettingError(env_key(type(section), "callback_url"))
    return section.callback_url or None


def build_registry(config: AppConfig) -> InboundRegistry:
    """Register one adapter per configured carrier and freeze the registry."""
    registry = InboundRegistry()
    global_verify = config.security.verify_signatures

    if config.plivo is not None:
        verify = global_verify and config.plivo.verify_signatures
        registry.register(
            PlivoClient(
                config.plivo.auth_id,
                config.plivo.auth_token,
                base_url=config.plivo.base_url,
                callback_url=_callback_url(config.plivo, verify),
                verify_signatures=verify,
                timeout=config.server.timeout_seconds,
            )
        )

    if config.twilio is not None:
        verify = global_verify and config.twilio.verify_signatures
        registry.register(
            TwilioClient(
                config.twilio.account_sid,
                config.twilio.auth_token,
                base_url=config.twilio.base_url,
                callback_url=_callback_url(config.twilio, verify),
                verify_signatures=verify,
                timeout=config.server.timeout_seconds,
            )
        )

    if config.aws_sns is not None:
        registry.register(
            AwsSnsClient(
                config.aws_sns.region,
                config.aws_sns.access_key_id,
                config.aws_sns.secret_access_key,
            )
        )

    for provider in registry:
        adapter = registry.get(provider)
        if adapter is not None and not adapter.verifies_signatures:
            logger.warning("signature_verification_disabled", provider=provider)

    if not len(registry):
        logger.warning("no_providers_configured")
    return registry.freeze()


def build_rate_limiter(config: AppConfig, *, clock: Clock | None = None) -> LocalTokenBucketRateLimiter:
    settings = config.rate_limit
    limits = RateLimitConfig(
        max_requests=settings.max_requests,
        window_seconds=settings.window_seconds,
        enabled=settings.enabled,
        per_provider=settings.provider_limits(),
    )
    return LocalTokenBucketRateLimiter(limits, clock=clock)
