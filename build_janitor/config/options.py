"""Cleanup options.

``CleanupOptions`` is an immutable value fixed when the orchestrator is
constructed. Runtime state (ledger, latches, lifecycle state) lives on the
orchestrator, never on the options object.
"""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from build_janitor.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "build-janitor"

# Option names accepted by earlier releases, mapped to their replacement
LEGACY_OPTIONS: dict[str, str] = {
    "allow_external": "allow_outside_boundary",
    "allowExternal": "allow_outside_boundary",
    "root": "boundary",
    "exclude": "!negated clean patterns",
    "watch": "clean_after_every_build_patterns",
}


class CleanupOptions(BaseModel):
    """Configuration for a cleanup orchestrator."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    dry_run: bool = Field(
        default=False,
        description="Simulate the removal of files",
    )
    verbose: bool = Field(
        default=False,
        description="Log every removed path (always on in dry-run mode)",
    )
    remove_stale_assets_automatically: bool = Field(
        default=True,
        description="Remove assets of the previous build that the current build no longer emits",
    )
    protect_current_assets: bool = Field(
        default=True,
        description="Never remove assets emitted by the current build",
    )
    clean_once_before_build_patterns: tuple[str, ...] = Field(
        default=("**/*",),
        description="Patterns removed once, before the first successful build",
    )
    clean_after_every_build_patterns: tuple[str, ...] = Field(
        default=(),
        description="Patterns removed after every successful build",
    )
    allow_outside_boundary: bool = Field(
        default=False,
        description="Allow removal outside the boundary (requires an explicit dry_run choice)",
    )
    boundary: Optional[Path] = Field(
        default=None,
        description="Outer limit of deletion (defaults to the build output directory)",
    )
    ledger_file: Optional[Path] = Field(
        default=None,
        description="Persist the asset ledger here (relative to the output directory)",
    )
    namespace: str = Field(
        default=DEFAULT_NAMESPACE,
        description="Prefix for log lines and error messages",
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_unset_dry_run(cls, data: Any) -> Any:
        # dry_run=None means "not chosen", the same as leaving it out
        if isinstance(data, Mapping) and "dry_run" in data and data["dry_run"] is None:
            data = {key: value for key, value in data.items() if key != "dry_run"}
        return data

    @model_validator(mode="after")
    def _apply_safety_defaults(self) -> "CleanupOptions":
        # runs on coerced values; the model is frozen, so fields are set directly
        if self.allow_outside_boundary and "dry_run" not in self.model_fields_set:
            logger.warning(
                f"{self.namespace}: allow_outside_boundary "
                f"requires dry_run=False to be explicitly set. Enabling dry mode"
            )
            object.__setattr__(self, "dry_run", True)

        if self.dry_run:
            object.__setattr__(self, "verbose", True)
        return self

    @field_validator("boundary")
    @classmethod
    def _boundary_is_absolute(cls, value: Optional[Path]) -> Optional[Path]:
        if value is not None and not value.is_absolute():
            raise ValueError("boundary must be an absolute path")
        return value

    @field_validator("namespace")
    @classmethod
    def _namespace_not_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("namespace must not be empty")
        return value

    @classmethod
    def coerce(cls, value: Any = None) -> "CleanupOptions":
        """Build options from ``None``, a mapping or an existing instance.

        Raises:
            ConfigurationError: For non-mapping values, legacy option names
                or values that fail validation
        """
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        if not isinstance(value, Mapping):
            raise ConfigurationError(
                f"{DEFAULT_NAMESPACE} only accepts an options mapping, "
                f"got {type(value).__name__}"
            )

        namespace = value.get("namespace") or DEFAULT_NAMESPACE
        for name, replacement in LEGACY_OPTIONS.items():
            if name in value:
                raise ConfigurationError(
                    f"{namespace}: `{name}` option no longer supported. Use `{replacement}`"
                )

        try:
            return cls.model_validate(dict(value))
        except ValidationError as e:
            raise ConfigurationError(f"{namespace}: invalid options: {e}") from e

    def to_dict(self) -> dict:
        """Convert to a JSON-friendly dictionary."""
        return self.model_dump(mode="json")
