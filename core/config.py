"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for the employee directory happen here. No
module should call os.getenv() or os.environ.get() directly -- import
get_settings() or get_client_settings() instead.

Two settings classes:
  Settings       -- the API server. Owns the token signing secret, the
                    database URL and the HTTP middleware allowlists.
  ClientSettings -- the API client and CLI. Reads EMPDIR_-prefixed variables
                    and never touches SECRET_KEY, so the CLI runs on machines
                    that have no server secret.

Both are lru_cache singletons (the FastAPI pattern for config).

Security notes:
  SECRET_KEY shorter than 32 chars is rejected outright. JWT signing relies on
  key entropy -- a short key weakens every issued token.

  Outside DEBUG mode a missing SECRET_KEY is a hard startup failure. A random
  per-process key would silently invalidate every token on restart.

Layer rule: core/ is the kernel. This module may not import from api/, auth/,
directory/, or client/.
"""

import logging
import secrets
from functools import lru_cache
from pathlib import Path

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("empdir.config")

_ONE_DAY = 24 * 60 * 60


class Settings(BaseSettings):
    """Server settings loaded from environment variables and .env file.

    All fields have defaults so Settings() can be instantiated in test
    environments without a real .env file. Field names map to upper-cased
    environment variables (secret_key -> SECRET_KEY).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False
    # Empty string is the sentinel for "not configured". The model_validator
    # below either generates a dev key or raises, so callers never see "".
    secret_key: str = ""

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    token_expire_seconds: int = _ONE_DAY
    # bcrypt cost factor. Tests lower this to keep the suite fast.
    bcrypt_rounds: int = 12

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    database_url: str = "sqlite:///./employee_directory.db"

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    # JSON lists when set from the environment, e.g.
    # CORS_ORIGINS='["https://directory.example.com"]'
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]
    allowed_hosts: list[str] = ["*"]

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def validate_secret_key(self) -> "Settings":
        """Enforce the SECRET_KEY policy.

        Dev mode (DEBUG=true): auto-generate a random key with a warning.
            Tokens will not survive restart -- acceptable for local dev.

        Production mode (DEBUG=false or not set): refuse to start if
            SECRET_KEY is missing.

        Both modes: reject keys shorter than 32 characters.
        """
        if not self.secret_key:
            if self.debug:
                self.secret_key = secrets.token_hex(32)
                logger.warning("Using auto-generated SECRET_KEY. Tokens will not survive a restart.")
            else:
                raise ValueError(
                    "SECRET_KEY is required in production mode. "
                    "Set SECRET_KEY in your environment or .env file. "
                    "To run in development mode, set DEBUG=true."
                )
        if len(self.secret_key) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters.")
        if self.token_expire_seconds <= 0:
            raise ValueError("TOKEN_EXPIRE_SECONDS must be positive.")
        return self


class ClientSettings(BaseSettings):
    """Settings for the API client and the employee-directory CLI.

    EMPDIR_API_URL    -- base URL of the server, including any path prefix.
    EMPDIR_TOKEN_FILE -- where the bearer token is kept between invocations.
    EMPDIR_TIMEOUT    -- per-request timeout in seconds.
    """

    model_config = SettingsConfigDict(
        env_prefix="EMPDIR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_url: str = "http://localhost:8000"
    token_file: Path = Path.home() / ".employee-directory" / "token"
    timeout: float = 10.0


@lru_cache
def get_settings() -> Settings:
    """Return the server Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()


@lru_cache
def get_client_settings() -> ClientSettings:
    """Return the ClientSettings singleton."""
    return ClientSettings()
