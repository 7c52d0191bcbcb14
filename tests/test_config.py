"""Tests for layered configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from alpinekit.config import (
    AlpineKitSettings,
    AssetSettings,
    SelectSettings,
    ServerSettings,
    ToastSettings,
    _deep_merge,
    _find_config_files,
    clear_settings,
    get_settings,
    reload_settings,
)


class TestDefaults:
    """Built-in defaults."""

    def test_select_defaults(self) -> None:
        settings = SelectSettings()
        assert settings.searchable is True
        assert settings.select_all_text == "Select All"
        assert settings.single_placeholder == "Select option"
        assert settings.multiple_placeholder == "Select options"

    def test_toast_defaults(self) -> None:
        settings = ToastSettings()
        assert settings.position == "top-right"
        assert settings.default_duration == 3000
        assert settings.default_sound is None

    def test_asset_src(self) -> None:
        assert AssetSettings().alpine_src() == (
            "https://cdn.jsdelivr.net/npm/alpinejs@3.14.1/dist/cdn.min.js"
        )

    def test_server_port_bounds(self) -> None:
        with pytest.raises(ValueError):
            ServerSettings(port=0)


class TestEnvironment:
    """Environment variable overrides."""

    def test_env_overrides_section(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ALPINEKIT_TOAST__POSITION", "bottom-left")
        monkeypatch.setenv("ALPINEKIT_TOAST__DEFAULT_DURATION", "4500")
        settings = AlpineKitSettings()
        assert settings.toast.position == "bottom-left"
        assert settings.toast.default_duration == 4500

    def test_env_bool(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ALPINEKIT_ASSET__TAILWIND", "false")
        assert AlpineKitSettings().asset.tailwind is False

    def test_env_outranks_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "alpinekit.toml").write_text(
            '[toast]\nposition = "bottom-left"\ndefault_duration = 5000\n', encoding="utf-8"
        )
        monkeypatch.setenv("ALPINEKIT_TOAST__POSITION", "top-left")
        settings = AlpineKitSettings()
        assert settings.toast.position == "top-left"
        assert settings.toast.default_duration == 5000

    def test_env_fills_fields_missing_from_toml(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "alpinekit.toml").write_text(
            '[server]\nhost = "0.0.0.0"\n', encoding="utf-8"
        )
        monkeypatch.setenv("ALPINEKIT_SERVER__PORT", "9200")
        settings = AlpineKitSettings()
        assert settings.server.host == "0.0.0.0"
        assert settings.server.port == 9200

    def test_explicit_values_outrank_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ALPINEKIT_SELECT__SEARCH_PLACEHOLDER", "From env")
        settings = AlpineKitSettings(select={"search_placeholder": "Explicit"})
        assert settings.select.search_placeholder == "Explicit"


class TestTomlFiles:
    """TOML configuration files."""

    def test_project_toml(self, tmp_path: Path) -> None:
        (tmp_path / "alpinekit.toml").write_text(
            '[select]\nsearch_placeholder = "Filter..."\n', encoding="utf-8"
        )
        settings = AlpineKitSettings()
        assert settings.select.search_placeholder == "Filter..."
        assert settings.select.no_results_text == "No results found"

    def test_pyproject_section(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text(
            '[project]\nname = "x"\n\n[tool.alpinekit.toast]\nposition = "top-left"\n',
            encoding="utf-8",
        )
        assert AlpineKitSettings().toast.position == "top-left"

    def test_project_toml_overrides_pyproject(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text(
            '[tool.alpinekit.toast]\nposition = "top-left"\nz_index_class = "z-30"\n',
            encoding="utf-8",
        )
        (tmp_path / "alpinekit.toml").write_text(
            '[toast]\nposition = "bottom-center"\n', encoding="utf-8"
        )
        settings = AlpineKitSettings()
        assert settings.toast.position == "bottom-center"
        assert settings.toast.z_index_class == "z-30"

    def test_config_file_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        custom = tmp_path / "custom.toml"
        custom.write_text('[log]\nlevel = "DEBUG"\n', encoding="utf-8")
        monkeypatch.setenv("ALPINEKIT_CONFIG_FILE", str(custom))
        assert custom in _find_config_files()
        assert AlpineKitSettings().log.level == "DEBUG"

    def test_invalid_toml_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "alpinekit.toml").write_text("[select\nbroken", encoding="utf-8")
        assert AlpineKitSettings().select.search_placeholder == "Search..."

    def test_no_files(self) -> None:
        assert _find_config_files() == []


class TestDeepMerge:
    """Tests for _deep_merge."""

    def test_nested_merge(self) -> None:
        base = {"a": {"x": 1, "y": 2}, "b": 1}
        merged = _deep_merge(base, {"a": {"y": 3}, "c": 4})
        assert merged == {"a": {"x": 1, "y": 3}, "b": 1, "c": 4}
        assert base == {"a": {"x": 1, "y": 2}, "b": 1}


class TestExport:
    """TOML/env export and display."""

    def test_to_toml_sections(self) -> None:
        output = AlpineKitSettings().to_toml()
        for section in ("[select]", "[toast]", "[asset]", "[log]", "[server]"):
            assert section in output
        assert 'position = "top-right"' in output
        assert "enable_sound = false" in output
        assert "default_sound" not in output

    def test_to_toml_escapes_strings(self) -> None:
        output = AlpineKitSettings(select={"search_placeholder": 'Say "hi"'}).to_toml()
        assert 'search_placeholder = "Say \\"hi\\""' in output

    def test_to_env(self) -> None:
        output = AlpineKitSettings().to_env()
        assert 'export ALPINEKIT_TOAST__DEFAULT_DURATION="3000"' in output
        assert 'export ALPINEKIT_SELECT__SEARCHABLE="true"' in output

    def test_show(self) -> None:
        output = AlpineKitSettings().show()
        assert "alpinekit Configuration" in output
        assert "Toast" in output
        assert "default_duration" in output


class TestCache:
    """Cached global settings."""

    def test_cached_instance(self) -> None:
        assert get_settings() is get_settings()

    def test_clear_and_reload(self, monkeypatch: pytest.MonkeyPatch) -> None:
        first = get_settings()
        monkeypatch.setenv("ALPINEKIT_SERVER__PORT", "9000")
        assert get_settings().server.port == first.server.port
        clear_settings()
        assert get_settings().server.port == 9000
        assert reload_settings() is not first
