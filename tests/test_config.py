"""Tests for configuration loading."""

import pytest

from gitcast.core.config import Settings, load_settings

ENV_VARS = [
    "GITHUB_TOKEN", "GITHUB_API_URL", "GITCAST_GENERATOR", "GEMINI_API_KEY", "GOOGLE_API_KEY",
    "GITCAST_MODEL", "OLLAMA_MODEL", "OLLAMA_BASE_URL", "LANGFUSE_PUBLIC_KEY", "GITCAST_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        # set first so teardown also removes values loaded from .env
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)


class TestConfiguration:
    def test_defaults(self):
        s = load_settings("nonexistent_config.toml")
        assert s == Settings()
        assert s.model == "gemini-2.5-flash"
        assert s.date_format == "%d/%m/%Y"
        assert s.github_token is None

    def test_config_file(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text(
            '[github]\ntimeout = 5\n'
            '[generator]\nkind = "ollama"\nollama_model = "qwen2.5"\n'
            '[prompt]\ndate_format = "%Y-%m-%d"\n'
            '[session]\nbatch_size = 10\n'
            '[speech]\nrate = 1.5\n'
            '[logging]\nlevel = "info"\n',
            encoding="utf-8",
        )
        s = load_settings(str(path))
        assert s.github_timeout == 5.0
        assert s.generator_kind == "ollama"
        assert s.ollama_model == "qwen2.5"
        assert s.date_format == "%Y-%m-%d"
        assert s.batch_size == 10
        assert s.speech_rate == 1.5
        assert s.log_level == "INFO"

    def test_environment_wins(self, tmp_path, monkeypatch):
        path = tmp_path / "config.toml"
        path.write_text('[generator]\nmodel = "from-file"\n', encoding="utf-8")
        monkeypatch.setenv("GITCAST_MODEL", "from-env")
        monkeypatch.setenv("GITHUB_TOKEN", "ghp_x")
        monkeypatch.setenv("GOOGLE_API_KEY", "g-key")
        s = load_settings(str(path))
        assert s.model == "from-env"
        assert s.github_token == "ghp_x"
        assert s.gemini_api_key == "g-key"

    def test_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("GEMINI_API_KEY=from-dotenv\n", encoding="utf-8")
        s = load_settings()
        assert s.gemini_api_key == "from-dotenv"

    def test_langfuse_key_enables_tracing(self, monkeypatch):
        monkeypatch.setenv("LANGFUSE_PUBLIC_KEY", "pk")
        assert load_settings().tracing is True
