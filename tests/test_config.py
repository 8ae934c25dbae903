from taskmanager.config import DEFAULT_KNOWN_NAMES, Settings


def test_defaults(monkeypatch):
    for name in ("GEMINI_API_KEY", "GEMINI_MODEL", "USER_TIMEZONE", "KNOWN_NAMES", "SENTRY_DSN"):
        monkeypatch.delenv(name, raising=False)

    config = Settings(_env_file=None)

    assert config.gemini_api_key == ""
    assert config.gemini_model == "gemini-2.0-flash"
    assert config.user_timezone == "UTC"
    assert config.known_names == DEFAULT_KNOWN_NAMES
    assert config.has_gemini is False
    assert config.has_sentry is False


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "secret")
    monkeypatch.setenv("USER_TIMEZONE", "Asia/Kolkata")
    monkeypatch.setenv("KNOWN_NAMES", '["Priya", "Omar"]')
    monkeypatch.setenv("SENTRY_DSN", "https://key@sentry.example/1")

    config = Settings(_env_file=None)

    assert config.has_gemini is True
    assert config.user_timezone == "Asia/Kolkata"
    assert config.known_names == ["Priya", "Omar"]
    assert config.has_sentry is True


def test_env_file(tmp_path, monkeypatch):
    monkeypatch.delenv("GEMINI_MODEL", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("GEMINI_MODEL=gemini-1.5-pro\nLOG_LEVEL=DEBUG\n")

    config = Settings(_env_file=env_file)

    assert config.gemini_model == "gemini-1.5-pro"
    assert config.log_level == "DEBUG"
