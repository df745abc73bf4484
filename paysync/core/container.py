from dataclasses import dataclass

from ..application.services.admin_auth_service import AdminAuthService
from .config import Settings
from ..infrastructure.repositories.owner_repository import OwnerRepository
from ..infrastructure.repositories.subscription_repository import SubscriptionRepository
from ..services.stripe_service import StripeService
from ..services.stripe_webhooks import StripeWebhookHandler
from ..services.subscription_service import SubscriptionService
from ..services.subscription_sync import SubscriptionSynchronizer


@dataclass(slots=True)
class ApplicationContainer:
    """Dependency registry shared across the FastAPI application lifecycle."""

    settings: Settings
    owner_repository: OwnerRepository
    subscription_repository: SubscriptionRepository
    stripe_service: StripeService
    synchronizer: SubscriptionSynchronizer
    subscription_service: SubscriptionService
    webhook_handler: StripeWebhookHandler
    admin_auth_service: AdminAuthService


def build_container(settings: Settings) -> ApplicationContainer:
    """Wire repositories and services from settings."""
    settings.database_path.parent.mkdir(parents=True, exist_ok=True)
    db_path = str(settings.database_path)

    owner_repository = OwnerRepository(db_path)
    subscription_repository = SubscriptionRepository(db_path)
    stripe_service = StripeService(
        settings.stripe_secret_key,
        api_version=settings.stripe_api_version,
        max_network_retries=settings.stripe_max_network_retries,
    )
    synchronizer = SubscriptionSynchronizer(
        stripe_service,
        owner_repository,
        subscription_repository,
        default_name=settings.default_product_name,
    )
    return ApplicationContainer(
        settings=settings,
        owner_repository=owner_repository,
        subscription_repository=subscription_repository,
        stripe_service=stripe_service,
        synchronizer=synchronizer,
        subscription_service=SubscriptionService(subscription_repository, stripe_service, synchronizer),
        webhook_handler=StripeWebhookHandler(synchronizer),
        admin_auth_service=AdminAuthService(
            secret_key=settings.admin_token_secret,
            token_exp_minutes=settings.admin_token_exp_minutes,
        ),
    )
