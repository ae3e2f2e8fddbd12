"""
Application Settings Management

Central configuration for the namespace engine: storage backend selection,
Redis / SQL connection parameters, object storage credentials, cascade
tuning and logging.

IMPORTANT:
- Secrets must come from environment variables, never from source
- Create a .env.local file for local development
- Production uses system environment variables or a secret manager
"""

from pathlib import Path

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Helper to locate the project root (where .env.local lives)
# docspace/settings.py -> docspace/ -> project root
PROJECT_ROOT = Path(__file__).resolve().parent.parent

ENV_FILE = PROJECT_ROOT / ".env.local"

# Reserved container path for files stored at the top level
ROOT_CONTAINER = "root"

# Path separator for materialized folder paths
PATH_SEPARATOR = "/"

# Longest materialized path; indexed path columns hold 768 utf8mb4
# characters within the 3072-byte InnoDB key limit
MAX_PATH_LENGTH = 768


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ==================== Environment ====================
    # "local-dev" | "test" | "production"
    environment: str = "local-dev"
    debug: bool = True

    # ==================== Namespace store ====================
    # "memory" | "redis" | "sql"
    # - memory: in-process store, single instance only
    # - redis: shared document store, safe for multiple instances
    # - sql: relational tables (SQLite locally, MySQL in production)
    storage_backend: str = "memory"

    # ==================== Redis ====================
    # "fake" | "redis"
    # - fake: in-memory FakeRedis, no external service
    # - redis: real Redis instance
    redis_type: str = "fake"

    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_index: int = 0
    redis_password: str | None = None
    redis_socket_timeout: int = 5
    redis_socket_connect_timeout: int = 5

    # ==================== Database ====================
    # Explicit URL overrides the generated SQLite path
    database_url: str = ""

    mysql_pool_size: int = 10
    mysql_max_overflow: int = 20
    mysql_pool_pre_ping: bool = True

    # ==================== Object storage ====================
    # "memory" | "s3"
    object_storage_backend: str = "memory"

    s3_bucket_name: str = "docspace-files"
    s3_access_key: str = ""
    s3_secret_key: str = ""
    s3_endpoint: str = ""
    s3_region: str = "eu-west-3"
    # Lifetime of presigned download URLs
    s3_url_expiry_seconds: int = 7 * 24 * 60 * 60

    # ==================== Namespace engine ====================
    # Upper bound on concurrent writes issued for one cascade level
    cascade_max_workers: int = 8
    max_upload_bytes: int = 50 * 1024 * 1024  # 50MB
    max_name_length: int = 255
    breadcrumb_root_label: str = "Home"

    # ==================== Paths ====================
    # local-dev: {project_root}/docspace-workspace/
    # test/production: /app/
    workspace_name: str = "docspace-workspace"
    logs_subdir: str = "logs"

    # ==================== Logging ====================
    log_max_bytes: int = 20 * 1024 * 1024  # 20MB
    log_backup_count: int = 5

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode="after")
    def check_backends(self) -> "Settings":
        """Reject unknown backend names early instead of at first use."""
        if self.storage_backend not in ("memory", "redis", "sql"):
            raise ValueError(f"Unknown storage_backend: {self.storage_backend}")
        if self.object_storage_backend not in ("memory", "s3"):
            raise ValueError(f"Unknown object_storage_backend: {self.object_storage_backend}")
        if self.cascade_max_workers < 1:
            raise ValueError("cascade_max_workers must be >= 1")
        return self

    # ==================== Path helpers ====================

    @classmethod
    def get_project_root(cls) -> Path:
        """Absolute path of the project root."""
        return PROJECT_ROOT

    def is_local_dev(self) -> bool:
        """Check if running in local development mode."""
        return self.environment == "local-dev"

    def get_workspace_root(self) -> Path:
        """
        Absolute path of the workspace root

        - local-dev: {project_root}/docspace-workspace/
        - test/production: /app/
        """
        if self.is_local_dev():
            return self.get_project_root() / self.workspace_name
        return Path("/app")

    def get_logs_root(self) -> Path:
        """Absolute path of the logs directory."""
        return self.get_workspace_root() / self.logs_subdir

    def get_database_url_auto(self) -> str:
        """Database URL for the SQL store

        - explicit database_url wins
        - test: in-memory SQLite
        - otherwise: {workspace}/databases/docspace.db

        Returns:
            SQLAlchemy database URL
        """
        if self.database_url:
            return self.database_url

        if self.environment == "test":
            return "sqlite:///:memory:"

        db_dir = self.get_workspace_root() / "databases"
        db_dir.mkdir(parents=True, exist_ok=True)
        return f"sqlite:///{db_dir / 'docspace.db'}"

    def is_s3_configured(self) -> bool:
        """Check whether S3 credentials are complete."""
        return bool(self.s3_bucket_name and self.s3_access_key and self.s3_secret_key)


# Global settings instance
settings = Settings()
