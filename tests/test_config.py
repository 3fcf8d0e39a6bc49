import pytest
from pydantic import ValidationError

from erpdesk.core.config import Settings


def test_development_defaults() -> None:
    s = Settings(app_env="development")

    assert s.is_production is False
    assert s.stock_default_page_size == 10
    assert s.stock_summary_cache_ttl == 300


def test_migration_url_prefers_direct_connection() -> None:
    s = Settings(database_url="postgresql+asyncpg://pooled/db", database_url_direct="postgresql+asyncpg://direct/db")

    assert s.migration_database_url == "postgresql+asyncpg://direct/db"


def test_production_requires_secret_key() -> None:
    with pytest.raises(ValidationError, match="app_secret_key"):
        Settings(app_env="production", admin_password="strong-password")


def test_production_requires_admin_password() -> None:
    with pytest.raises(ValidationError, match="admin_password"):
        Settings(app_env="production", app_secret_key="a-real-secret")


def test_production_with_secrets() -> None:
    s = Settings(app_env="production", app_secret_key="a-real-secret", admin_password="strong-password")

    assert s.is_production is True


def test_production_rejects_debug() -> None:
    with pytest.raises(ValidationError, match="app_debug"):
        Settings(
            app_env="production",
            app_secret_key="a-real-secret",
            admin_password="strong-password",
            app_debug=True,
        )


def test_log_level_is_normalized() -> None:
    assert Settings(app_log_level="debug").app_log_level == "DEBUG"

    with pytest.raises(ValidationError, match="Unknown log level"):
        Settings(app_log_level="chatty")


def test_default_page_size_within_max() -> None:
    with pytest.raises(ValidationError, match="cannot exceed"):
        Settings(stock_default_page_size=50, stock_max_page_size=20)
