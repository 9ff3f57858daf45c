"""Stripe payment link adapter."""

from .models import (
    AfterCompletion,
    AfterCompletionType,
    HostedConfirmation,
    LineItem,
    PaymentLinkOptions,
    Redirect,
)
from .provider import StripeProvider

__all__ = [
    "StripeProvider",
    "PaymentLinkOptions",
    "LineItem",
    "AfterCompletion",
    "AfterCompletionType",
    "Redirect",
    "HostedConfirmation",
]
