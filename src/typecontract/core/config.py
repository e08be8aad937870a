# src/typecontract/core/config.py
"""
Configuration schema and loading for typecontract.

Uses Pydantic for validation and PyYAML for file loading.
Settings are frozen (immutable) after construction.

The active settings supply defaults whenever a definition call
(define_contract, define_table, ...) leaves an option as None.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from typecontract.contracts.enums import ViolationPolicy, parse_violation_policy
from typecontract.contracts.errors import ContractConfigError

# Top-level YAML key holding typecontract settings when the file is shared
# with other tools. Files without it are read from the top level.
SETTINGS_SECTION = "typecontract"


class TypeContractSettings(BaseModel):
    """Library-wide defaults.

    Example YAML:
        typecontract:
          validate_on_access: true
          on_violation: warning
          allow_missing: false
    """

    model_config = {"frozen": True, "extra": "forbid"}

    validate_on_access: bool = Field(
        default=False,
        description="Re-validate contract properties on every read",
    )
    allow_extra_properties: bool = Field(
        default=False,
        description="Let contract instances store undeclared properties unchecked",
    )
    elementwise_predicates: bool = Field(
        default=False,
        description="Apply bare callables to each element instead of the whole value",
    )
    freeze_column_count: bool = Field(
        default=True,
        description="Forbid adding or removing table columns after creation",
    )
    allow_missing: bool = Field(
        default=True,
        description="Allow missing cells (None/NaN/NA) in typed tables",
    )
    on_violation: ViolationPolicy = Field(
        default=ViolationPolicy.ERROR,
        description="What batched table validation does with problems: error, warning, silent",
    )

    @field_validator("on_violation", mode="before")
    @classmethod
    def parse_on_violation(cls, v: Any) -> ViolationPolicy:
        """Accept any casing and the 'warn' alias."""
        if not isinstance(v, str):
            raise ValueError(f"on_violation must be a string, got {type(v).__name__}")
        return parse_violation_policy(v)


class TableOptions(BaseModel):
    """Validated options of one typed table definition.

    Built by define_table(); unset options come from the active settings.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    freeze_column_count: bool
    allow_missing: bool
    on_violation: ViolationPolicy
    row_callback: Callable[[dict[str, Any]], Any] | None = None

    @field_validator("on_violation", mode="before")
    @classmethod
    def parse_on_violation(cls, v: Any) -> ViolationPolicy:
        if not isinstance(v, str):
            raise ValueError(f"on_violation must be a string, got {type(v).__name__}")
        return parse_violation_policy(v)

    @classmethod
    def resolve(
        cls,
        *,
        freeze_column_count: bool | None = None,
        allow_missing: bool | None = None,
        on_violation: ViolationPolicy | str | None = None,
        row_callback: Callable[[dict[str, Any]], Any] | None = None,
    ) -> TableOptions:
        """Fill unset options from the active settings and validate.

        Raises:
            ContractConfigError: If any option is invalid
        """
        settings = get_settings()
        raw = {
            "freeze_column_count": settings.freeze_column_count if freeze_column_count is None else freeze_column_count,
            "allow_missing": settings.allow_missing if allow_missing is None else allow_missing,
            "on_violation": settings.on_violation if on_violation is None else on_violation,
            "row_callback": row_callback,
        }
        try:
            return cls.model_validate(raw)
        except ValidationError as e:
            raise ContractConfigError(f"Invalid table options: {e}") from e


# =============================================================================
# Active settings
# =============================================================================

_active_settings = TypeContractSettings()


def get_settings() -> TypeContractSettings:
    """Return the settings currently used for definition defaults."""
    return _active_settings


def configure(settings: TypeContractSettings | Mapping[str, Any] | None = None, **overrides: Any) -> TypeContractSettings:
    """Replace the active settings.

    Args:
        settings: New settings (or a mapping of fields); None keeps the current ones
        **overrides: Individual fields to change on top of settings

    Returns:
        The new active settings

    Raises:
        ContractConfigError: If the resulting settings are invalid
    """
    global _active_settings

    if settings is None:
        base = _active_settings.model_dump()
    elif isinstance(settings, TypeContractSettings):
        base = settings.model_dump()
    else:
        base = dict(settings)
    base.update(overrides)
    _active_settings = settings_from_dict(base)
    return _active_settings


def reset_settings() -> TypeContractSettings:
    """Restore built-in defaults."""
    global _active_settings

    _active_settings = TypeContractSettings()
    return _active_settings


@contextmanager
def override_settings(**overrides: Any) -> Iterator[TypeContractSettings]:
    """Temporarily change active settings inside a with-block."""
    previous = get_settings()
    try:
        yield configure(**overrides)
    finally:
        configure(previous)


def settings_from_dict(data: Mapping[str, Any]) -> TypeContractSettings:
    """Create settings from a dict with a clear error on failure.

    Raises:
        ContractConfigError: If data is not a mapping or has invalid fields
    """
    if not isinstance(data, Mapping):
        raise ContractConfigError(f"Invalid typecontract settings: expected a mapping, got {type(data).__name__}")
    try:
        return TypeContractSettings.model_validate(dict(data))
    except ValidationError as e:
        raise ContractConfigError(f"Invalid typecontract settings: {e}") from e


def load_settings(path: str | Path) -> TypeContractSettings:
    """Load settings from a YAML file.

    The file may hold the settings at the top level or under a
    'typecontract:' section. An empty file yields the defaults.

    Raises:
        FileNotFoundError: If path does not exist
        ContractConfigError: If the YAML is malformed or the settings are invalid
    """
    path = Path(path)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ContractConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return TypeContractSettings()
    if isinstance(data, dict) and SETTINGS_SECTION in data:
        data = data[SETTINGS_SECTION] or {}
    return settings_from_dict(data)
