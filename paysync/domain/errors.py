"""Domain errors raised by the reconciliation engine and command adapters."""

from __future__ import annotations

from typing import Optional


class PaysyncError(Exception):
    """Base class for every error raised by paysync."""


class ProcessorError(PaysyncError):
    """A call to a remote payment processor failed."""

    processor = "unknown"

    def __init__(self, message: str, original: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.original = original


class StripeProcessorError(ProcessorError):
    """Wraps a ``stripe.StripeError`` raised by a subscription command."""

    processor = "stripe"

    @classmethod
    def from_stripe_error(cls, error: BaseException) -> "StripeProcessorError":
        message = getattr(error, "user_message", None) or str(error) or error.__class__.__name__
        return cls(message, original=error)


class SubscriptionValidationError(PaysyncError, ValueError):
    """Subscription attributes were rejected before being persisted."""


class SubscriptionNotFoundError(PaysyncError, LookupError):
    """No local subscription matches the given identifier."""


class UnsupportedProcessorError(PaysyncError):
    """No command adapter exists for the subscription's processor."""


class PreconditionError(PaysyncError):
    """A subscription command was issued in a state that does not allow it."""


class GracePeriodError(PreconditionError):
    """Resume was requested outside the cancellation grace period."""


class PauseNotSupportedError(PreconditionError, NotImplementedError):
    """The processor has no concept of paused subscriptions."""
