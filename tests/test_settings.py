import pytest

from config import get_settings_module
from src.participation_tracker.participation_tracker.common.logging_config import build_logging_config


@pytest.mark.parametrize(
    "env, expected",
    [
        ("production", "config.production"),
        ("PROD", "config.production"),
        ("testing", "config.testing"),
        ("test", "config.testing"),
        ("development", "config.development"),
        ("anything-else", "config.development"),
    ],
)
def test_app_env_selects_settings_module(monkeypatch, env, expected):
    monkeypatch.setenv("APP_ENV", env)

    assert get_settings_module() == expected


def test_default_is_development(monkeypatch):
    monkeypatch.delenv("APP_ENV", raising=False)

    assert get_settings_module() == "config.development"


def test_testing_settings_use_separate_database():
    from config import testing

    assert testing.TESTING is True
    assert testing.DB_CONFIG["database"]
    assert set(testing.DB_CONFIG) == {"host", "port", "user", "password", "database"}


def test_logging_config_levels():
    config = build_logging_config("debug")

    assert config["root"]["level"] == "DEBUG"
    assert config["handlers"]["console"]["level"] == "DEBUG"
    assert config["loggers"]["mysql.connector"]["level"] == "WARNING"
