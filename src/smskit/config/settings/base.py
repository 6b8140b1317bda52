"""Config settings – Settings base class."""
from __future__ import annotations

import dataclasses
from typing import Any, ClassVar

from smskit.observability.logging import SensitiveFieldsFilter

_redactor = SensitiveFieldsFilter()


@dataclasses.dataclass(frozen=True)
class Settings:
    """Base class for one environment-driven settings section.

    Subclasses set ``_prefix``; each field is read from
    ``{_prefix}_{FIELD}``.  ``_validate`` runs after construction and
    raises :class:`~smskit.config.validation.InvalidSettingValueError`.
    """

    _prefix: ClassVar[str] = ""

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Override to add cross-field validation."""

    def _env(self, field_name: str) -> str:
        return f"{self._prefix}_{field_name}".upper()

    def to_log_dict(self) -> dict[str, Any]:
        """Field values with credentials masked, for startup logging."""
        return _redactor.redact(dataclasses.asdict(self))


__all__ = ["Settings"]
