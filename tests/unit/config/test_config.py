from pathlib import Path

import pytest

from gitconductor.config import (
    DEFAULT_CONFIG,
    Config,
    ConfigLoadError,
    ConfigSourceName,
    LogFormat,
    LogLevel,
    deep_merge,
    discover_sources,
    get_git_dir,
    parse_env_vars,
    parse_string_value,
    safe_load_config,
    set_nested_key,
)


class TestParseStringValue:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("TRUE", True),
            ("false", False),
            ("42", 42),
            ("1.5", 1.5),
            ('["a", "b"]', ["a", "b"]),
            ('{"k": 1}', {"k": 1}),
            ("[broken", "[broken"),
            ("git", "git"),
        ],
    )
    def test_inference(self, value: str, expected: object) -> None:
        assert parse_string_value(value) == expected


class TestDeepMerge:
    def test_nested_override_keeps_siblings(self) -> None:
        merged = deep_merge({"git": {"a": 1, "b": 2}}, {"git": {"b": 3}})
        assert merged == {"git": {"a": 1, "b": 3}}

    def test_inputs_untouched(self) -> None:
        base = {"git": {"a": [1]}}
        merged = deep_merge(base, {})
        merged["git"]["a"].append(2)
        assert base == {"git": {"a": [1]}}

    def test_set_nested_key_replaces_scalars(self) -> None:
        data: dict[str, object] = {"git": "oops"}
        set_nested_key(data, "git.executable", "git2")
        assert data == {"git": {"executable": "git2"}}


class TestParseEnvVars:
    def test_nested_keys(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITCONDUCTOR_GIT__RENAME_SIMILARITY", "70")
        monkeypatch.setenv("GITCONDUCTOR_LOGGING__LEVEL", "debug")
        parsed = parse_env_vars()
        assert parsed["git"] == {"rename_similarity": 70}
        assert parsed["logging"]["level"] == "debug"

    def test_control_variables_are_not_config_keys(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("GITCONDUCTOR_STRICT_CONFIG", "1")
        monkeypatch.setenv("GITCONDUCTOR_DEBUG", "1")
        monkeypatch.setenv("GITCONDUCTOR_LOG_LEVEL", "warning")
        parsed = parse_env_vars()
        assert not {"strict_config", "debug", "log_level"} & parsed.keys()

    def test_string_settings_are_not_type_inferred(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("GITCONDUCTOR_GIT__NO_EDITOR_COMMAND", "true")
        monkeypatch.setenv("GITCONDUCTOR_GIT__EXECUTABLE", "007")
        monkeypatch.setenv("GITCONDUCTOR_LOGGING__FILE", "1.10")
        monkeypatch.setenv("GITCONDUCTOR_GIT__FETCH_WORKERS", "3")
        parsed = parse_env_vars()
        assert parsed["git"] == {
            "no_editor_command": "true",
            "executable": "007",
            "fetch_workers": 3,
        }
        assert parsed["logging"] == {"file": "1.10"}


class TestConfig:
    def test_defaults(self) -> None:
        config = Config.from_dict({})
        assert config.git.executable == "git"
        assert config.git.rename_similarity == 50
        assert config.git.fetch_workers == 2
        assert config.logging.level is LogLevel.INFO
        assert config.logging.format is LogFormat.JSON

    def test_invalid_values_fall_back(self) -> None:
        config = Config.from_dict(
            {
                "logging": {"level": "loud", "format": "xml"},
                "git": {"rename_similarity": 500, "fetch_workers": 0},
            }
        )
        assert config.logging.level is LogLevel.INFO
        assert config.logging.format is LogFormat.JSON
        assert config.git.rename_similarity == 50
        assert config.git.fetch_workers == 2

    def test_boolean_like_strings_stay_strings(self) -> None:
        config = Config.from_dict({"git": {"no_editor_command": True}})
        assert config.git.no_editor_command == "true"

    def test_get(self) -> None:
        config = Config.from_dict({"git": {"executable": "/opt/git"}})
        assert config.get("git.executable") == "/opt/git"
        assert config.get("git.missing", "fallback") == "fallback"

    def test_to_dict_without_defaults(self) -> None:
        config = Config.from_dict({"git": {"rename_similarity": 80}})
        assert config.to_dict(include_defaults=False) == {"git": {"rename_similarity": 80}}
        assert config.to_dict()["logging"] == DEFAULT_CONFIG["logging"]

    def test_to_toml(self) -> None:
        config = Config.from_dict({"git": {"rename_similarity": 80}})
        assert config.to_toml() == "[git]\nrename_similarity = 80\n"

    def test_from_file(self, tmp_path: Path) -> None:
        path = tmp_path / "c.toml"
        _ = path.write_text('[git]\nexecutable = "git-custom"\n')

        config = Config.from_file(path)

        assert config.git.executable == "git-custom"
        assert config.sources[0].path == path

    def test_from_file_parse_error(self, tmp_path: Path) -> None:
        path = tmp_path / "c.toml"
        _ = path.write_text("[git\n")
        with pytest.raises(ConfigLoadError) as exc_info:
            _ = Config.from_file(path)
        assert exc_info.value.path == path


class TestConfigLoad:
    def test_precedence(
        self,
        monkeypatch: pytest.MonkeyPatch,
        isolated_environment: Path,
        tmp_path: Path,
    ) -> None:
        user_config = isolated_environment / "config.toml"
        _ = user_config.write_text(
            '[git]\nexecutable = "user-git"\nrename_similarity = 60\nfetch_workers = 3\n'
        )
        git_dir = tmp_path / "repo" / ".git"
        git_dir.mkdir(parents=True)
        _ = (git_dir / "gitconductor.toml").write_text(
            "[git]\nrename_similarity = 70\nfetch_workers = 4\n"
        )
        monkeypatch.setattr(
            "gitconductor.config._discovery.get_git_dir", lambda _path: git_dir
        )
        monkeypatch.setenv("GITCONDUCTOR_GIT__FETCH_WORKERS", "5")

        config = Config.load(repo_path=tmp_path / "repo")

        assert config.git.executable == "user-git"
        assert config.git.rename_similarity == 70
        assert config.git.fetch_workers == 5

    def test_env_string_setting_loads(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITCONDUCTOR_GIT__NO_EDITOR_COMMAND", "true")

        config = Config.load()

        assert config.git.no_editor_command == "true"
        assert config.get("git.no_editor_command") == "true"

    def test_cli_overrides_win(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITCONDUCTOR_LOGGING__LEVEL", "warning")
        config = Config.load(
            include_cli=True, cli_overrides={"logging": {"level": "debug"}}
        )
        assert config.logging.level is LogLevel.DEBUG

    def test_discover_sources_order(self) -> None:
        sources = discover_sources(include_cli=True, cli_overrides={})
        assert [s.name for s in sources] == [
            ConfigSourceName.CLI,
            ConfigSourceName.ENV,
            ConfigSourceName.USER,
            ConfigSourceName.DEFAULT,
        ]
        assert sources[0].exists is False

    def test_get_git_dir_outside_repository(self, tmp_path: Path) -> None:
        assert get_git_dir(tmp_path) is None


class TestSafeLoadConfig:
    def test_broken_file_falls_back(
        self, isolated_environment: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        _ = (isolated_environment / "config.toml").write_text("not = [valid")

        config, error = safe_load_config()

        assert error is not None
        assert "Failed to load config" in error
        assert config.git.executable == "git"
        assert "Warning:" in capsys.readouterr().err

    def test_strict_mode_exits(
        self, isolated_environment: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _ = (isolated_environment / "config.toml").write_text("not = [valid")
        monkeypatch.setenv("GITCONDUCTOR_STRICT_CONFIG", "1")
        with pytest.raises(SystemExit) as exc_info:
            _ = safe_load_config()
        assert exc_info.value.code == 1

    def test_missing_explicit_file_exits(self, tmp_path: Path) -> None:
        with pytest.raises(SystemExit):
            _ = safe_load_config(config_path=tmp_path / "absent.toml")
