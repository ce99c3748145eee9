from redis_todo.settings import get_settings

ENV_VARS = [
    "REDIS_HOST",
    "REDIS_PORT",
    "STORE_BACKEND",
    "APP_HOST",
    "APP_PORT",
    "CORS_ALLOW_ORIGINS",
    "APP_ENV",
    "LOG_LEVEL",
]


def clear_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults(monkeypatch):
    clear_env(monkeypatch)
    settings = get_settings()
    assert settings.redis_host == "localhost"
    assert settings.redis_port == 6379
    assert settings.store_backend == "redis"
    assert settings.app_port == 3001
    assert settings.cors_allow_origins == ["*"]
    assert settings.app_env == "development"
    assert settings.log_level == "INFO"


def test_overrides(monkeypatch):
    clear_env(monkeypatch)
    monkeypatch.setenv("REDIS_HOST", "cache.internal")
    monkeypatch.setenv("REDIS_PORT", "6380")
    monkeypatch.setenv("STORE_BACKEND", "Memory")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://a.test, http://b.test")
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    settings = get_settings()
    assert settings.redis_host == "cache.internal"
    assert settings.redis_port == 6380
    assert settings.store_backend == "memory"
    assert settings.cors_allow_origins == ["http://a.test", "http://b.test"]
    assert settings.app_env == "production"
    assert settings.log_level == "DEBUG"


def test_invalid_values_fall_back(monkeypatch):
    clear_env(monkeypatch)
    monkeypatch.setenv("REDIS_PORT", "not-a-port")
    monkeypatch.setenv("APP_PORT", "70000")
    monkeypatch.setenv("STORE_BACKEND", "sqlite")
    settings = get_settings()
    assert settings.redis_port == 6379
    assert settings.app_port == 3001
    assert settings.store_backend == "redis"
