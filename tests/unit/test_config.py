"""Tests for environment-driven Settings."""

from pathlib import Path

import pytest

from paysync.core.config import Settings

ENV_KEYS = [
    "DATABASE_PATH",
    "STRIPE_SECRET_KEY",
    "STRIPE_WEBHOOK_SECRET",
    "STRIPE_API_VERSION",
    "STRIPE_MAX_NETWORK_RETRIES",
    "DEFAULT_PRODUCT_NAME",
    "ADMIN_TOKEN_SECRET",
    "ADMIN_TOKEN_EXP_MINUTES",
    "CORS_ALLOW_ORIGINS",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.database_path == Path("data/paysync.db").resolve()
        assert settings.stripe_secret_key is None
        assert settings.stripe_webhook_secret is None
        assert settings.stripe_max_network_retries == 2
        assert settings.default_product_name == "default"
        assert settings.admin_token_exp_minutes == 1440
        assert settings.cors_allow_origins == ["*"]

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_test_1")
        monkeypatch.setenv("STRIPE_WEBHOOK_SECRET", "whsec_1")
        monkeypatch.setenv("DEFAULT_PRODUCT_NAME", "pro")
        monkeypatch.setenv("STRIPE_MAX_NETWORK_RETRIES", "0")
        monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://a.test, https://b.test,")

        settings = Settings()

        assert settings.stripe_secret_key == "sk_test_1"
        assert settings.stripe_webhook_secret == "whsec_1"
        assert settings.default_product_name == "pro"
        assert settings.stripe_max_network_retries == 0
        assert settings.cors_allow_origins == ["https://a.test", "https://b.test"]

    def test_invalid_integer(self, monkeypatch):
        monkeypatch.setenv("ADMIN_TOKEN_EXP_MINUTES", "soon")
        with pytest.raises(RuntimeError, match="must be an integer"):
            Settings()
