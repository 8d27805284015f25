"""Tests for loading options from .build-janitor.json."""

import json

import pytest

from build_janitor.config import CONFIG_FILE_NAME, JanitorSettings, load_cleanup_options
from build_janitor.errors import ConfigurationError


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Remove BUILD_JANITOR_* variables inherited from the shell."""
    for name in ("BUILD_JANITOR_DRY_RUN", "BUILD_JANITOR_VERBOSE", "BUILD_JANITOR_CONFIG_FILE"):
        monkeypatch.delenv(name, raising=False)


def write_config(directory, data) -> None:
    (directory / CONFIG_FILE_NAME).write_text(json.dumps(data))


class TestLoadCleanupOptions:
    """Tests for load_cleanup_options."""

    def test_missing_file_gives_defaults(self, tmp_path):
        options = load_cleanup_options(tmp_path)

        assert options.dry_run is False
        assert options.clean_once_before_build_patterns == ("**/*",)

    def test_snake_case_keys(self, tmp_path):
        write_config(tmp_path, {"clean_after_every_build_patterns": ["*.tmp"], "verbose": True})

        options = load_cleanup_options(tmp_path)

        assert options.clean_after_every_build_patterns == ("*.tmp",)
        assert options.verbose is True

    def test_camel_case_keys(self, tmp_path):
        """Test camelCase option names are understood."""
        write_config(
            tmp_path,
            {
                "dry": True,
                "cleanStaleWebpackAssets": False,
                "protectWebpackAssets": False,
                "cleanOnceBeforeBuildPatterns": [],
                "cleanAfterEveryBuildPatterns": ["!keep/**"],
            },
        )

        options = load_cleanup_options(tmp_path)

        assert options.dry_run is True
        assert options.remove_stale_assets_automatically is False
        assert options.protect_current_assets is False
        assert options.clean_once_before_build_patterns == ()
        assert options.clean_after_every_build_patterns == ("!keep/**",)

    def test_dangerous_override_without_dry_choice(self, tmp_path):
        write_config(tmp_path, {"dangerouslyAllowCleanPatternsOutsideProject": True})

        options = load_cleanup_options(tmp_path)

        assert options.allow_outside_boundary is True
        assert options.dry_run is True

    def test_environment_override(self, tmp_path, monkeypatch):
        """Test BUILD_JANITOR_DRY_RUN overrides the file."""
        write_config(tmp_path, {"dry_run": False})
        monkeypatch.setenv("BUILD_JANITOR_DRY_RUN", "true")

        options = load_cleanup_options(tmp_path)

        assert options.dry_run is True

    def test_explicit_settings(self, tmp_path):
        options = load_cleanup_options(tmp_path, settings=JanitorSettings(verbose=True))

        assert options.verbose is True

    def test_overrides_win_and_none_is_ignored(self, tmp_path):
        """Test explicit overrides beat file and environment; None means unset."""
        write_config(tmp_path, {"verbose": True, "dry_run": True})

        options = load_cleanup_options(
            tmp_path,
            overrides={"verbose": None, "protect_current_assets": False},
            settings=JanitorSettings(dry_run=False),
        )

        assert options.verbose is True
        assert options.dry_run is False
        assert options.protect_current_assets is False

    def test_explicit_config_file(self, tmp_path):
        config = tmp_path / "janitor.json"
        config.write_text(json.dumps({"namespace": "custom"}))

        options = load_cleanup_options(tmp_path / "elsewhere", config_file=config)

        assert options.namespace == "custom"

    def test_explicit_config_file_missing(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_cleanup_options(tmp_path, config_file=tmp_path / "missing.json")

    def test_malformed_json(self, tmp_path):
        (tmp_path / CONFIG_FILE_NAME).write_text("{dry: true")

        with pytest.raises(ConfigurationError, match="Error loading config"):
            load_cleanup_options(tmp_path)

    def test_non_object_json(self, tmp_path):
        (tmp_path / CONFIG_FILE_NAME).write_text("[]")

        with pytest.raises(ConfigurationError, match="must contain a JSON object"):
            load_cleanup_options(tmp_path)

    def test_legacy_key_in_file(self, tmp_path):
        write_config(tmp_path, {"allowExternal": True})

        with pytest.raises(ConfigurationError, match="allow_outside_boundary"):
            load_cleanup_options(tmp_path)
