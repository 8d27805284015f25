"""Load cleanup options from a project configuration file.

Options are read from ``.build-janitor.json`` in the project directory.
Keys may use the snake_case names of ``CleanupOptions`` or their camelCase
equivalents (including the legacy asset option names). Environment variables with
the ``BUILD_JANITOR_`` prefix override the file; explicit overrides (for
example CLI flags) override both.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from build_janitor.config.options import CleanupOptions
from build_janitor.errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".build-janitor.json"

CAMEL_CASE_KEYS: dict[str, str] = {
    "dry": "dry_run",
    "dryRun": "dry_run",
    "cleanStaleWebpackAssets": "remove_stale_assets_automatically",
    "removeStaleAssetsAutomatically": "remove_stale_assets_automatically",
    "protectWebpackAssets": "protect_current_assets",
    "protectCurrentAssets": "protect_current_assets",
    "cleanOnceBeforeBuildPatterns": "clean_once_before_build_patterns",
    "cleanAfterEveryBuildPatterns": "clean_after_every_build_patterns",
    "dangerouslyAllowCleanPatternsOutsideProject": "allow_outside_boundary",
    "allowOutsideBoundary": "allow_outside_boundary",
    "ledgerFile": "ledger_file",
}


class JanitorSettings(BaseSettings):
    """Environment overrides."""

    model_config = SettingsConfigDict(
        env_prefix="BUILD_JANITOR_",
        case_sensitive=False,
        extra="ignore",
    )

    dry_run: Optional[bool] = Field(default=None, description="Force dry-run on or off")
    verbose: Optional[bool] = Field(default=None, description="Force verbose logging")
    config_file: Optional[Path] = Field(default=None, description="Alternative config file")


def normalize_keys(raw: dict[str, Any]) -> dict[str, Any]:
    """Map camelCase option names onto ``CleanupOptions`` field names."""
    return {CAMEL_CASE_KEYS.get(key, key): value for key, value in raw.items()}


def read_config_file(config_file: Path) -> dict[str, Any]:
    """Read a JSON options file.

    Raises:
        ConfigurationError: If the file is unreadable or not a JSON object
    """
    try:
        raw = json.loads(config_file.read_text())
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Error loading config from {config_file}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigurationError(f"{config_file} must contain a JSON object")
    return normalize_keys(raw)


def load_cleanup_options(
    project_dir: str | Path,
    config_file: Optional[str | Path] = None,
    overrides: Optional[dict[str, Any]] = None,
    settings: Optional[JanitorSettings] = None,
) -> CleanupOptions:
    """Load options for a project.

    Args:
        project_dir: Directory searched for ``.build-janitor.json``
        config_file: Explicit config file (takes precedence over the default)
        overrides: Values applied last; ``None`` values are ignored
        settings: Environment settings (read from the environment if omitted)

    Returns:
        Validated CleanupOptions

    Raises:
        ConfigurationError: For unreadable files or invalid option values
    """
    settings = settings or JanitorSettings()
    project_dir = Path(project_dir)

    if config_file is not None:
        path = Path(config_file)
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {path}")
    elif settings.config_file is not None:
        path = settings.config_file
    else:
        path = project_dir / CONFIG_FILE_NAME

    data: dict[str, Any] = {}
    if path.exists():
        data = read_config_file(path)
        logger.info(f"Loaded cleanup options from {path}")

    for key in ("dry_run", "verbose"):
        value = getattr(settings, key)
        if value is not None:
            data[key] = value

    for key, value in (overrides or {}).items():
        if value is not None:
            data[key] = value

    return CleanupOptions.coerce(data)
