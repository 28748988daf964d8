"""
Unit tests for settings loading.
"""

from pathlib import Path

import pytest

from linehaul.config.settings import Settings, get_settings, load_config_file


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """No config-related environment and no config file in the cwd."""
    for name in ("LINEHAUL_LOG", "LINEHAUL_LOG_STYLE", "LINEHAUL_CONFIG"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def write_config(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


class TestSettings:
    """Tests for the Settings dataclass."""

    def test_defaults(self):
        settings = Settings()

        assert settings.log_level == "debug"
        assert settings.log_style == "readable"
        assert settings.ignored_user_agents == []
        assert settings.validate() == []

    def test_from_dict(self):
        settings = Settings.from_dict(
            {
                "logging": {"level": "info", "style": "JSON"},
                "user_agents": {"ignored": ["^internal-probe/"]},
            }
        )

        assert settings.log_level == "info"
        assert settings.log_style == "json"
        assert settings.ignored_user_agents == ["^internal-probe/"]

    def test_from_dict_empty_sections(self):
        """Sections present but empty fall back to defaults."""
        settings = Settings.from_dict({"logging": None, "user_agents": None})
        assert settings == Settings()

    def test_validate_style(self):
        errors = Settings(log_style="xml").validate()

        assert len(errors) == 1
        assert "log_style" in errors[0]

    def test_validate_empty_level(self):
        assert Settings(log_level="  ").validate() == ["log_level must not be empty"]

    def test_validate_patterns(self):
        errors = Settings(ignored_user_agents=["ok", ""]).validate()
        assert len(errors) == 1

    def test_validate_invalid_regex(self):
        """Patterns must compile, so the parser can be built from them."""
        errors = Settings(ignored_user_agents=["^ok/", "(unclosed"]).validate()

        assert len(errors) == 1
        assert "(unclosed" in errors[0]

    def test_to_dict(self):
        assert Settings(ignored_user_agents=["x"]).to_dict() == {
            "log_level": "debug",
            "log_style": "readable",
            "ignored_user_agents": ["x"],
        }


class TestFromEnv:
    """Tests for environment-based settings."""

    def test_env_values(self, clean_env, monkeypatch):
        monkeypatch.setenv("LINEHAUL_LOG", "warn,linehaul.pipeline=trace")
        monkeypatch.setenv("LINEHAUL_LOG_STYLE", "JSON")

        settings = Settings.from_env()

        assert settings.log_level == "warn,linehaul.pipeline=trace"
        assert settings.log_style == "json"

    def test_env_defaults(self, clean_env):
        assert Settings.from_env() == Settings()


class TestLoadConfigFile:
    """Tests for load_config_file function."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config_file(tmp_path / "missing.yaml")

    def test_empty_file(self, tmp_path):
        assert load_config_file(write_config(tmp_path / "empty.yaml", "")) == {}

    def test_not_a_mapping(self, tmp_path):
        with pytest.raises(ValueError, match="mapping"):
            load_config_file(write_config(tmp_path / "list.yaml", "- a\n- b\n"))


class TestGetSettings:
    """Tests for get_settings function."""

    def test_yaml_file(self, clean_env):
        path = write_config(
            clean_env / "custom.yaml",
            "logging:\n  level: info\n  style: json\n"
            "user_agents:\n  ignored:\n    - '^my-monitor/'\n",
        )

        settings = get_settings(str(path))

        assert settings.log_level == "info"
        assert settings.log_style == "json"
        assert settings.ignored_user_agents == ["^my-monitor/"]

    def test_default_path_in_cwd(self, clean_env):
        write_config(clean_env / "linehaul.yaml", "logging:\n  style: json\n")
        assert get_settings().log_style == "json"

    def test_config_path_from_env(self, clean_env, monkeypatch):
        path = write_config(clean_env / "other.yaml", "logging:\n  level: error\n")
        monkeypatch.setenv("LINEHAUL_CONFIG", str(path))

        assert get_settings().log_level == "error"

    def test_env_level_overrides_file(self, clean_env, monkeypatch):
        path = write_config(clean_env / "custom.yaml", "logging:\n  level: info\n")
        monkeypatch.setenv("LINEHAUL_LOG", "trace")

        assert get_settings(str(path)).log_level == "trace"

    def test_no_file_uses_env(self, clean_env, monkeypatch):
        monkeypatch.setenv("LINEHAUL_LOG", "info")
        assert get_settings().log_level == "info"

    def test_broken_yaml_falls_back(self, clean_env, caplog):
        path = write_config(clean_env / "broken.yaml", "logging: [unclosed\n")

        settings = get_settings(str(path))

        assert settings == Settings()
        assert "falling back to environment variables" in caplog.text

    def test_cached(self, clean_env):
        assert get_settings() is get_settings()
