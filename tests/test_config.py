"""
Tests for configuration loading, merging and validation.
"""

import json

import pytest
import yaml

from bundlecxx.config import (
    BundleConfig,
    ConfigurationError,
    ConfigurationManager,
    RestorePolicy,
    SymbolSourceKind,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, workdir):
    """Isolate tests from BUNDLECXX_* variables and config files in the cwd."""
    import os

    for key in list(os.environ):
        if key.startswith("BUNDLECXX_"):
            monkeypatch.delenv(key)
    monkeypatch.setattr(ConfigurationManager, "DEFAULT_CONFIG_PATHS", ["bundlecxx.json"])


class TestDefaults:
    def test_default_values(self):
        config = BundleConfig.default()
        assert config.tools_settings.amalgamate_command == "amalgamate"
        assert config.tools_settings.symbol_source == SymbolSourceKind.LIBCLANG
        assert config.rename_settings.backup_suffix == ".bak"
        assert config.bundle_settings.restore_policy == RestorePolicy.ALWAYS
        assert config.bundle_settings.symbols_suffix == "_symbols.csv"

    def test_load_without_sources_gives_defaults(self):
        assert BundleConfig.load().to_dict() == BundleConfig.default().to_dict()

    def test_newline_property(self):
        config = BundleConfig.default()
        config.rename_settings.line_ending = "crlf"
        assert config.rename_settings.newline == "\r\n"


class TestLoading:
    def test_yaml_file(self, workdir):
        path = workdir / "custom.yaml"
        path.write_text(
            yaml.dump(
                {
                    "tools": {"symbol_source": "executable", "list_symbols_path": "bin/ls.exe"},
                    "bundle": {"restore_policy": "on_success", "merge_timeout": 60},
                }
            )
        )

        config = BundleConfig.load(str(path))

        assert config.tools_settings.symbol_source == SymbolSourceKind.EXECUTABLE
        assert config.tools_settings.list_symbols_path == "bin/ls.exe"
        assert config.bundle_settings.restore_policy == RestorePolicy.ON_SUCCESS
        assert config.bundle_settings.merge_timeout == 60

    def test_default_file_is_discovered(self, workdir):
        (workdir / "bundlecxx.json").write_text(json.dumps({"rename": {"backup_suffix": ".orig"}}))
        assert BundleConfig.load().rename_settings.backup_suffix == ".orig"

    def test_env_overrides_file(self, workdir, monkeypatch):
        path = workdir / "c.json"
        path.write_text(json.dumps({"tools": {"amalgamate_command": "from-file"}}))
        monkeypatch.setenv("BUNDLECXX_AMALGAMATE_COMMAND", "from-env")
        monkeypatch.setenv("BUNDLECXX_LINE_ENDING", "CRLF")

        config = BundleConfig.load(str(path))

        assert config.tools_settings.amalgamate_command == "from-env"
        assert config.rename_settings.line_ending == "crlf"

    def test_invalid_env_value_is_ignored(self, monkeypatch):
        monkeypatch.setenv("BUNDLECXX_RESTORE_POLICY", "sometimes")
        monkeypatch.setenv("BUNDLECXX_MERGE_TIMEOUT", "soon")
        config = BundleConfig.load()
        assert config.bundle_settings.restore_policy == RestorePolicy.ALWAYS
        assert config.bundle_settings.merge_timeout is None

    def test_missing_file_raises(self, workdir):
        with pytest.raises(ConfigurationError, match="not found"):
            BundleConfig.load(str(workdir / "absent.json"))

    def test_malformed_file_raises(self, workdir):
        path = workdir / "bad.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            BundleConfig.load(str(path))

    def test_to_file_and_back(self, workdir):
        config = BundleConfig.default()
        config.bundle_settings.restore_policy = RestorePolicy.ON_SUCCESS
        config.to_file(str(workdir / "out.yaml"), "yaml")

        loaded = BundleConfig.from_file(str(workdir / "out.yaml"))

        assert loaded.to_dict() == config.to_dict()


class TestValidation:
    @pytest.mark.parametrize(
        "data, message",
        [
            ({"tools": {"symbol_source": "regex"}}, "symbol_source"),
            ({"tools": {"amalgamate_command": ""}}, "amalgamate_command"),
            ({"rename": {"backup_suffix": " "}}, "backup_suffix"),
            ({"rename": {"line_ending": "cr"}}, "line_ending"),
            ({"bundle": {"restore_policy": "never"}}, "restore_policy"),
            ({"bundle": {"merge_timeout": -1}}, "merge_timeout"),
        ],
    )
    def test_invalid_values(self, data, message):
        with pytest.raises(ConfigurationError, match=message):
            ConfigurationManager.validate_config(data)

    def test_merge_configs_is_deep(self):
        merged = ConfigurationManager.merge_configs(
            {"tools": {"a": 1, "b": 2}}, {"tools": {"b": 3}}, {}
        )
        assert merged == {"tools": {"a": 1, "b": 3}}

    def test_summary_mentions_policy(self):
        assert "Restore policy: always" in BundleConfig.default().get_config_summary()
