"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for ClientDesk happen here. No module should
call os.getenv() or os.environ.get() directly -- import get_settings() instead,
or better, take the Settings instance that api/main.py stores on app.state.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call. This is
      the official FastAPI dependency injection pattern for config.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. secret_key -> SECRET_KEY). Type coercion and validation are built in.

  Explicit hand-off: the lifespan in api/main.py reads Settings once and hands
      it to the stores and token helpers. Token functions take the secret as a
      parameter rather than reading a module global.

Security notes:
  SECRET_KEY shorter than 32 chars is rejected outright. JWT HMAC signing
  relies on key entropy -- a short key weakens every issued token.

  In production mode (DEBUG not set or false), a missing SECRET_KEY is a hard
  startup failure.

Layer rule: core/ is the kernel. This module may not import from api/, auth/,
or crm/.
"""

import logging
import secrets
from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("clientdesk.config")


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    All fields have defaults so Settings() can be instantiated in test
    environments without a real .env file. The model_validator enforces
    production-safety rules at startup.
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
    log_level: str = "INFO"

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    token_expire_seconds: int = 3600
    bcrypt_rounds: int = 10

    # ------------------------------------------------------------------
    # Database
    # ------------------------------------------------------------------

    database_url: str = "sqlite:///./clientdesk.db"
    # Network databases must be reached over an encrypted transport.
    # Ignored for SQLite.
    database_require_tls: bool = True
    auto_migrate: bool = True

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    host: str = "127.0.0.1"
    port: int = 3000
    cors_origins: list[str] = ["*"]

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"):
            raise ValueError("LOG_LEVEL must be one of CRITICAL, ERROR, WARNING, INFO, DEBUG.")
        return level

    @field_validator("bcrypt_rounds")
    @classmethod
    def validate_bcrypt_rounds(cls, value: int) -> int:
        # bcrypt.gensalt() accepts 4..31
        if not 4 <= value <= 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31.")
        return value

    @field_validator("token_expire_seconds")
    @classmethod
    def validate_token_expiry(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("TOKEN_EXPIRE_SECONDS must be positive.")
        return value

    @model_validator(mode="after")
    def validate_secret_key(self) -> "Settings":
        """Enforce the SECRET_KEY policy.

        Dev mode (DEBUG=true): auto-generate a random key with a warning.
            Issued tokens will not survive a restart -- acceptable for local dev.

        Production mode (DEBUG=false or not set): refuse to start if
            SECRET_KEY is missing.

        Both modes: reject keys shorter than 32 characters.
        """
        if not self.secret_key:
            if self.debug:
                self.secret_key = secrets.token_hex(32)
                logger.warning("Using auto-generated SECRET_KEY. Tokens will not remain valid across restarts.")
            else:
                raise ValueError(
                    "SECRET_KEY is required in production mode. "
                    "Set SECRET_KEY in your environment or .env file. "
                    "To run in development mode, set DEBUG=true."
                )
        if len(self.secret_key) < 32:
            raise ValueError("SECRET_KEY must be at least 32 characters.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()
