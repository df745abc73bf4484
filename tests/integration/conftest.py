"""Fixtures for API tests against the FastAPI application."""

import pytest
from fastapi.testclient import TestClient

from paysync.application.services.admin_auth_service import AdminAuthService
from paysync.core.app_factory import create_application
from paysync.core.config import Settings
from paysync.core.container import ApplicationContainer
from paysync.services.stripe_webhooks import StripeWebhookHandler
from paysync.services.subscription_service import SubscriptionService


@pytest.fixture
def settings(monkeypatch, db_path):
    monkeypatch.setenv("DATABASE_PATH", db_path)
    monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_test_123")
    monkeypatch.setenv("STRIPE_WEBHOOK_SECRET", "whsec_test")
    monkeypatch.setenv("ADMIN_TOKEN_SECRET", "test-secret")
    return Settings()


@pytest.fixture
def container(settings, owner_repository, subscription_repository, stripe_service, synchronizer):
    stripe_service.is_connected.return_value = True
    return ApplicationContainer(
        settings=settings,
        owner_repository=owner_repository,
        subscription_repository=subscription_repository,
        stripe_service=stripe_service,
        synchronizer=synchronizer,
        subscription_service=SubscriptionService(subscription_repository, stripe_service, synchronizer),
        webhook_handler=StripeWebhookHandler(synchronizer),
        admin_auth_service=AdminAuthService(secret_key=settings.admin_token_secret),
    )


@pytest.fixture
def client(container):
    with TestClient(create_application(container=container)) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(container):
    token = container.admin_auth_service.issue_token("ops")
    return {"Authorization": f"Bearer {token}"}
