"""Config settings – EnvSettingsLoader, DotenvSettingsLoader."""
from __future__ import annotations

import abc
import dataclasses
import os
from collections.abc import Mapping
from typing import Any, TypeVar

from smskit.config.settings.base import Settings
from smskit.config.validation import ConfigError, InvalidSettingValueError, MissingRequiredSettingError

T = TypeVar("T", bound=Settings)

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


class SettingsLoader(abc.ABC):
    """Port: load settings from an external source."""

    @abc.abstractmethod
    def load(self, settings_class: type[T]) -> T: ...


def env_key(settings_class: type[Settings], field_name: str) -> str:
    prefix = getattr(settings_class, "_prefix", "").upper()
    return f"{prefix}_{field_name}".upper().lstrip("_")


class EnvSettingsLoader(SettingsLoader):
    """Load settings from OS environment variables.

    Each field reads ``{_prefix}_{FIELD}``; *environ* defaults to
    :data:`os.environ` and can be replaced in tests.
    """

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = environ

    @property
    def environ(self) -> Mapping[str, str]:
        return os.environ if self._environ is None else self._environ

    def configured(self, settings_class: type[Settings]) -> bool:
        """``True`` when at least one of the class's variables is set."""
        environ = self.environ
        return any(
            env_key(settings_class, field.name) in environ
            for field in dataclasses.fields(settings_class)  # type: ignore[arg-type]
        )

    def load(self, settings_class: type[T]) -> T:
        environ = self.environ
        kwargs: dict[str, Any] = {}

        for field in dataclasses.fields(settings_class):  # type: ignore[arg-type]
            key = env_key(settings_class, field.name)
            raw = environ.get(key)

            if raw is None or (raw == "" and field.default is dataclasses.MISSING):
                if (
                    field.default is dataclasses.MISSING
                    and field.default_factory is dataclasses.MISSING  # type: ignore[misc]
                ):
                    raise MissingRequiredSettingError(key)
                continue

            try:
                kwargs[field.name] = self._coerce(raw, field.type)
            except ValueError as exc:
                raise InvalidSettingValueError(key, raw, str(exc)) from exc

        try:
            return settings_class(**kwargs)
        except ConfigError:
            raise
        except Exception as exc:
            raise ConfigError(f"Failed to load settings: {exc}", cause=exc) from exc

    def _coerce(self, value: str, type_hint: Any) -> Any:  # noqa: PLR0911
        origin = getattr(type_hint, "__origin__", None)
        if type_hint is bool or type_hint == "bool":
            lowered = value.strip().lower()
            if lowered in _TRUE:
                return True
            if lowered in _FALSE:
                return False
            raise ValueError("expected a boolean")
        if type_hint is int or type_hint == "int":
            return int(value)
        if type_hint is float or type_hint == "float":
            return float(value)
        if origin is list:
            return [v.strip() for v in value.split(",") if v.strip()]
        return value


class DotenvSettingsLoader(EnvSettingsLoader):
    """Load settings from a ``.env`` file then fall back to the environment."""

    def __init__(self, env_file: str = ".env", override: bool = False) -> None:
        super().__init__()
        self._env_file = env_file
        self._override = override
        self._loaded = False

    def _load_file(self) -> None:
        if self._loaded:
            return
        try:
            from dotenv import load_dotenv  # type: ignore[import-untyped]
        except ImportError as exc:
            raise ImportError("Install 'smskit[dotenv]' to use DotenvSettingsLoader") from exc
        load_dotenv(self._env_file, override=self._override)
        self._loaded = True

    def configured(self, settings_class: type[Settings]) -> bool:
        self._load_file()
        return super().configured(settings_class)

    def load(self, settings_class: type[T]) -> T:
        self._load_file()
        return super().load(settings_class)


__all__ = ["DotenvSettingsLoader", "EnvSettingsLoader", "SettingsLoader", "env_key"]
