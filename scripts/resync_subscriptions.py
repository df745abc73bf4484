import argparse
import sys

from paysync.core.config import Settings
from paysync.core.container import build_container
from paysync.core.logging import configure_logging
from paysync.domain.models import SyncStatus


def main() -> int:
    parser = argparse.ArgumentParser(description="Fetch Stripe subscriptions and reconcile them locally.")
    parser.add_argument("subscription_ids", nargs="+", help="Stripe subscription ids (sub_...)")
    parser.add_argument("--name", help="Local subscription name (defaults to DEFAULT_PRODUCT_NAME)")
    args = parser.parse_args()

    configure_logging()
    container = build_container(Settings())
    if not container.settings.stripe_secret_key:
        raise RuntimeError("Set STRIPE_SECRET_KEY in the environment or in a .env file.")

    failures = 0
    for result in container.synchronizer.sync_many(args.subscription_ids, name=args.name):
        if result.status is SyncStatus.RECONCILED:
            print(f"{result.processor_id}: reconciled (local id {result.subscription.id})")
        elif result.status is SyncStatus.SKIPPED:
            print(f"{result.processor_id}: skipped ({result.reason})")
        else:
            failures += 1
            print(f"{result.processor_id}: failed ({result.error})")

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
