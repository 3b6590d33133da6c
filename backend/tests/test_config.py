from backend.config import DEFAULT_JWT_SECRET, MAX_UPLOAD_BYTES, Config

ENV_KEYS = [
    "PORT", "DATABASE_URL", "JWT_SECRET", "MEDIA_DIR", "CORS_ORIGINS",
    "PASSWORD_TIME_COST", "MAX_UPLOAD_BYTES", "LOG_LEVEL",
]


def test_defaults(monkeypatch, caplog):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)

    config = Config.from_env()

    assert config.port == 8080
    assert config.jwt_secret == DEFAULT_JWT_SECRET
    assert config.media_dir == "./media"
    assert config.cors_origins == ["*"]
    assert config.max_upload_bytes == MAX_UPLOAD_BYTES
    assert "JWT_SECRET is not set" in caplog.text


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PORT", "9090")
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db:5432/tracker")
    monkeypatch.setenv("JWT_SECRET", "s3cret")
    monkeypatch.setenv("MEDIA_DIR", "/var/media")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.org, https://b.org")
    monkeypatch.setenv("PASSWORD_TIME_COST", "4")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    config = Config.from_env()

    assert config.port == 9090
    assert config.database_url == "postgresql://u:p@db:5432/tracker"
    assert config.jwt_secret == "s3cret"
    assert config.media_dir == "/var/media"
    assert config.cors_origins == ["https://a.org", "https://b.org"]
    assert config.password_time_cost == 4
    assert config.log_level == "DEBUG"
