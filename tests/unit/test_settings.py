"""Tests for Settings, storage selection and logging setup."""

import logging
from logging.handlers import RotatingFileHandler

import pytest
from pydantic import ValidationError

from docspace.components.namespace import storage_provider
from docspace.components.namespace.redis_storage import NamespaceRedisStorage
from docspace.components.namespace.sql_storage import NamespaceSqlStorage
from docspace.components.namespace.storage import namespace_memory_storage
from docspace.db.mysql import close_db
from docspace.settings import Settings, settings
from docspace.utils import get_logger, setup_logging
from docspace.utils import logging as logging_utils


class TestSettingsValues:
    """Settings defaults and validation."""

    def test_defaults(self):
        """Engine defaults match the documented values."""
        s = Settings(_env_file=None)
        assert s.storage_backend == "memory"
        assert s.cascade_max_workers == 8
        assert s.max_upload_bytes == 50 * 1024 * 1024
        assert s.breadcrumb_root_label == "Home"

    def test_unknown_backend(self):
        """Unknown backend names are rejected at load time."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, storage_backend="cassandra")
        with pytest.raises(ValidationError):
            Settings(_env_file=None, object_storage_backend="ftp")

    def test_worker_bound(self):
        """At least one cascade worker is required."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, cascade_max_workers=0)

    def test_env_override(self, monkeypatch):
        """Environment variables override defaults case-insensitively."""
        monkeypatch.setenv("BREADCRUMB_ROOT_LABEL", "Accueil")
        assert Settings(_env_file=None).breadcrumb_root_label == "Accueil"

    def test_database_url(self):
        """Explicit URLs win; the test environment uses in-memory SQLite."""
        assert Settings(_env_file=None, database_url="mysql://u:p@db/ns").get_database_url_auto() == "mysql://u:p@db/ns"
        assert Settings(_env_file=None, environment="test").get_database_url_auto() == "sqlite:///:memory:"

    def test_logs_root(self):
        """Logs live under the workspace root."""
        logs = settings.get_logs_root()
        assert logs.name == "logs"
        assert logs.parent == settings.get_workspace_root()

    def test_s3_configured(self):
        """S3 needs a bucket and both keys."""
        assert not Settings(_env_file=None).is_s3_configured()
        assert Settings(_env_file=None, s3_access_key="ak", s3_secret_key="sk").is_s3_configured()


class TestStorageSelection:
    """get_namespace_storage."""

    def test_memory(self):
        """The memory backend returns the shared in-memory store."""
        assert storage_provider.get_namespace_storage() is namespace_memory_storage
        assert storage_provider.get_storage_type() == "memory"

    def test_redis(self, monkeypatch):
        """storage_backend=redis selects the Redis store."""
        monkeypatch.setattr(settings, "storage_backend", "redis")
        assert isinstance(storage_provider.get_namespace_storage(), NamespaceRedisStorage)
        assert storage_provider.get_storage_type() == "redis"

    def test_sql(self, monkeypatch):
        """storage_backend=sql creates the tables and selects the SQL store."""
        monkeypatch.setattr(settings, "storage_backend", "sql")
        monkeypatch.setattr(settings, "environment", "test")
        monkeypatch.setattr(settings, "debug", False)
        try:
            store = storage_provider.get_namespace_storage()
            assert isinstance(store, NamespaceSqlStorage)
            assert store.list_folders() == []
        finally:
            close_db()

    def test_singleton_reset(self):
        """reset_namespace_storage drops the cached store."""
        storage_provider.get_namespace_storage()
        storage_provider.reset_namespace_storage()
        assert storage_provider._namespace_storage is None


class TestLogging:
    """get_logger / setup_logging."""

    def test_logger_namespace(self):
        """Module loggers live under the docspace parent logger."""
        assert get_logger("tests.sample").name == "docspace.tests.sample"
        assert get_logger("docspace.db").name == "docspace.db"

    def test_setup_logging_adds_rotating_file(self, tmp_path, monkeypatch):
        """setup_logging attaches one rotating file handler per log file."""
        monkeypatch.setattr(logging_utils, "_get_logs_root", lambda: tmp_path)
        root = logging.getLogger(logging_utils.ROOT_LOGGER_NAME)
        before = list(root.handlers)
        try:
            setup_logging("unit")
            setup_logging("unit")
            added = [h for h in root.handlers if h not in before]
            assert len(added) == 1
            assert isinstance(added[0], RotatingFileHandler)
            assert added[0].baseFilename == str(tmp_path / "unit.log")
        finally:
            for handler in root.handlers[:]:
                if handler not in before:
                    root.removeHandler(handler)
                    handler.close()
