"""Tests for configuration resolution."""

from registration_gate.core.settings import Settings


def test_database_url_is_used_as_configured() -> None:
    cfg = Settings(SECRET_KEY="x", DATABASE_URL="postgresql+asyncpg://u:p@db/app")

    assert cfg.effective_database_url == "postgresql+asyncpg://u:p@db/app"
    assert not hasattr(cfg, "database_url_sync")


def test_testing_database_override() -> None:
    cfg = Settings(
        SECRET_KEY="x",
        DATABASE_URL="sqlite:///./registration.db",
        TEST_DATABASE_URL="sqlite://",
        USE_TEST_DATABASE=True,
    )

    assert cfg.effective_database_url == "sqlite://"


def test_delivery_mode_defaults_by_environment() -> None:
    assert Settings(SECRET_KEY="x", ENVIRONMENT="development").effective_delivery_mode == "echo"
    assert Settings(SECRET_KEY="x", ENVIRONMENT="production").effective_delivery_mode == "transport"
