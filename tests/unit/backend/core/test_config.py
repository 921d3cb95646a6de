"""
Unit Tests for Configuration Management.

Black box tests against the public interface of config.py.
Tests run against the real project YAML configs; secrets come from the
environment set up in the root conftest.
Failure scenarios use tmp_path to create controlled filesystems.
"""

import pytest

from articlehub.backend.core.config import (
    AppConfig,
    Settings,
    find_project_root,
    get_app_config,
    get_database_url,
    get_settings,
    load_yaml_config,
    validate_project_root,
)
from articlehub.backend.core.config_schema import (
    ApplicationSchema,
    DatabaseSchema,
    FeaturesSchema,
    LoggingSchema,
    SecuritySchema,
)

CONFIG_FILES = [
    "application.yaml",
    "database.yaml",
    "logging.yaml",
    "features.yaml",
    "security.yaml",
]


@pytest.fixture(autouse=True)
def _clear_config_cache():
    """Clear lru_cache between tests so each test gets a fresh load."""
    get_settings.cache_clear()
    get_app_config.cache_clear()
    yield
    get_settings.cache_clear()
    get_app_config.cache_clear()


# =============================================================================
# find_project_root
# =============================================================================


class TestFindProjectRoot:
    """Tests for .project_root marker discovery."""

    def test_finds_root_from_project_directory(self):
        root = find_project_root()
        assert (root / ".project_root").exists()
        assert (root / "config" / "settings").is_dir()

    def test_raises_when_no_marker_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(RuntimeError, match="Project root not found"):
            find_project_root()


class TestValidateProjectRoot:
    def test_exits_when_marker_missing(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with pytest.raises(SystemExit):
            validate_project_root()


# =============================================================================
# load_yaml_config
# =============================================================================


class TestLoadYamlConfig:
    """Tests for YAML file loading from config/settings/."""

    def test_loads_all_config_files(self):
        for filename in CONFIG_FILES:
            data = load_yaml_config(filename)
            assert isinstance(data, dict), f"{filename} did not return a dict"
            assert data, f"{filename} returned empty dict"

    def test_application_yaml_has_telegram_section(self):
        data = load_yaml_config("application.yaml")
        assert "admin_chat_id" in data["telegram"]
        assert "admin_user_ids" in data["telegram"]

    def test_raises_for_nonexistent_file(self):
        with pytest.raises(FileNotFoundError, match="Configuration file not found"):
            load_yaml_config("does_not_exist.yaml")

    def test_returns_empty_dict_for_empty_yaml(self, tmp_path, monkeypatch):
        (tmp_path / ".project_root").touch()
        settings_dir = tmp_path / "config" / "settings"
        settings_dir.mkdir(parents=True)
        (settings_dir / "empty.yaml").write_text("")
        monkeypatch.chdir(tmp_path)

        assert load_yaml_config("empty.yaml") == {}


# =============================================================================
# Settings (secrets)
# =============================================================================


class TestSettings:
    """Tests for secrets loaded through pydantic-settings."""

    def test_reads_bot_tokens_from_environment(self, monkeypatch):
        monkeypatch.setenv("ADMIN_BOT_TOKEN", "1:admin")
        monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "2:support")

        settings = get_settings()

        assert settings.admin_bot_token == "1:admin"
        assert settings.telegram_bot_token == "2:support"

    def test_missing_secret_fails_validation(self, monkeypatch):
        from pydantic import ValidationError as PydanticValidationError

        monkeypatch.delenv("ADMIN_BOT_TOKEN", raising=False)
        with pytest.raises(PydanticValidationError):
            Settings(_env_file=None)


# =============================================================================
# AppConfig
# =============================================================================


class TestAppConfig:
    """Tests for validated YAML configuration loading."""

    def test_sections_return_typed_schemas(self):
        config = AppConfig()
        assert isinstance(config.application, ApplicationSchema)
        assert isinstance(config.database, DatabaseSchema)
        assert isinstance(config.logging, LoggingSchema)
        assert isinstance(config.features, FeaturesSchema)
        assert isinstance(config.security, SecuritySchema)

    def test_telegram_settings_have_attribute_access(self):
        telegram = AppConfig().application.telegram
        assert isinstance(telegram.admin_chat_id, int)
        assert isinstance(telegram.admin_user_ids, list)
        assert telegram.users_per_page > 0
        assert telegram.admin_webhook_path.startswith("/")

    def test_rejects_yaml_with_missing_required_fields(self, tmp_path, monkeypatch):
        (tmp_path / ".project_root").touch()
        settings_dir = tmp_path / "config" / "settings"
        settings_dir.mkdir(parents=True)
        (settings_dir / "application.yaml").write_text("name: 'Incomplete'")
        for filename in CONFIG_FILES[1:]:
            (settings_dir / filename).write_text("placeholder: true")
        monkeypatch.chdir(tmp_path)

        with pytest.raises(ValueError, match="Invalid configuration"):
            AppConfig()

    def test_rejects_yaml_with_unknown_fields(self):
        from pydantic import ValidationError as PydanticValidationError

        data = load_yaml_config("application.yaml")
        data["unknown_field"] = "oops"
        with pytest.raises(PydanticValidationError, match="Extra inputs are not permitted"):
            ApplicationSchema(**data)


class TestCachedAccessors:
    def test_settings_are_cached(self):
        assert get_settings() is get_settings()

    def test_app_config_is_cached(self):
        assert get_app_config() is get_app_config()


# =============================================================================
# URL builders
# =============================================================================


class TestGetDatabaseUrl:
    """Tests for database URL construction."""

    def test_async_url_uses_asyncpg_driver(self):
        assert get_database_url(async_driver=True).startswith("postgresql+asyncpg://")

    def test_sync_url_uses_postgresql_driver(self):
        url = get_database_url(async_driver=False)
        assert url.startswith("postgresql://")

    def test_url_contains_config_values_and_password(self):
        url = get_database_url()
        db = get_app_config().database
        assert f"@{db.host}:{db.port}/{db.name}" in url
        assert f":{get_settings().db_password}@" in url

    def test_sqlite_url_uses_file_path(self):
        get_app_config().database.driver = "sqlite"
        get_app_config().database.name = "data/articlehub.db"

        assert get_database_url() == "sqlite+aiosqlite:///data/articlehub.db"
        assert get_database_url(async_driver=False) == "sqlite:///data/articlehub.db"
