"""Unit tests for core/config.py and the connection options in core/database.py.

Covers:
- SECRET_KEY policy: required in production, auto-generated in DEBUG, >= 32 chars
- Defaults: port 3000, 3600 s tokens, bcrypt work factor 10
- BCRYPT_ROUNDS bounds
- Driver options requested for encrypted transport per backend
"""

import pytest
from pydantic import ValidationError

from core.config import Settings
from core.database import connect_args_for

VALID_KEY = "k" * 32


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in ("SECRET_KEY", "PORT", "TOKEN_EXPIRE_SECONDS", "BCRYPT_ROUNDS", "DATABASE_URL"):
        monkeypatch.delenv(var, raising=False)


class TestSecretKeyPolicy:
    def test_missing_key_in_production_fails(self):
        with pytest.raises(ValidationError, match="SECRET_KEY is required"):
            Settings(_env_file=None, debug=False)

    def test_missing_key_in_debug_is_generated(self):
        settings = Settings(_env_file=None, debug=True)
        assert len(settings.secret_key) == 64

    def test_short_key_rejected(self):
        with pytest.raises(ValidationError, match="at least 32"):
            Settings(_env_file=None, debug=False, secret_key="short")

    def test_key_read_from_environment(self, monkeypatch):
        monkeypatch.setenv("SECRET_KEY", VALID_KEY)
        assert Settings(_env_file=None, debug=False).secret_key == VALID_KEY


class TestDefaults:
    def test_defaults(self):
        settings = Settings(_env_file=None, secret_key=VALID_KEY)
        assert settings.port == 3000
        assert settings.token_expire_seconds == 3600
        assert settings.bcrypt_rounds == 10
        assert settings.database_require_tls is True

    def test_port_from_environment(self, monkeypatch):
        monkeypatch.setenv("PORT", "8081")
        assert Settings(_env_file=None, secret_key=VALID_KEY).port == 8081

    @pytest.mark.parametrize("rounds", [3, 32])
    def test_bcrypt_rounds_out_of_range(self, rounds):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, secret_key=VALID_KEY, bcrypt_rounds=rounds)

    def test_non_positive_token_lifetime_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, secret_key=VALID_KEY, token_expire_seconds=0)

    def test_log_level_normalized(self):
        assert Settings(_env_file=None, secret_key=VALID_KEY, log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, secret_key=VALID_KEY, log_level="LOUD")


class TestConnectArgs:
    def test_sqlite_allows_cross_thread_use(self):
        assert connect_args_for("sqlite:///./x.db", require_tls=True) == {"check_same_thread": False}

    def test_postgres_requires_ssl(self):
        assert connect_args_for("postgresql://u:p@db/clients", require_tls=True) == {"sslmode": "require"}

    def test_mssql_requires_encrypt(self):
        url = "mssql+pyodbc://u:p@db/clients?driver=ODBC+Driver+18+for+SQL+Server"
        assert connect_args_for(url, require_tls=True) == {"Encrypt": "yes"}

    def test_tls_not_required(self):
        assert connect_args_for("postgresql://u:p@db/clients", require_tls=False) == {}

    def test_unknown_backend_gets_no_options(self):
        assert connect_args_for("mysql://u:p@db/clients", require_tls=True) == {}
