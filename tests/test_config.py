"""Tests for settings loading."""

from goesctl.config import GoesCtlSettings, get_settings, reset_settings


class TestSettings:
    def test_empty_by_default(self):
        settings = GoesCtlSettings()
        assert settings.download == {}
        assert settings.imagery == {}
        assert settings.pipeline == {}

    def test_yaml_file(self, tmp_path):
        # tests run from tmp_path, where the default config.yml is looked up
        (tmp_path / ".env").write_text("")
        (tmp_path / "config.yml").write_text("download:\n  timeout: 12\nimagery:\n  satellite: west\n")
        settings = GoesCtlSettings()
        assert settings.download == {"timeout": 12}
        assert settings.imagery == {"satellite": "west"}

    def test_environment_overrides_yaml(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("")
        (tmp_path / "config.yml").write_text("pipeline:\n  stride_minutes: 30\n")
        monkeypatch.setenv("GOESCTL_PIPELINE", '{"stride_minutes": 60}')
        assert GoesCtlSettings().pipeline == {"stride_minutes": 60}

    def test_singleton(self):
        first = get_settings()
        assert get_settings() is first
        reset_settings()
        assert get_settings() is not first
