"""
Cloud Adapters.

Async adapters over two vendor platforms:
- FirebaseProvider: Firestore, Auth, Storage, Realtime Database, Messaging
- StripeProvider: payment link creation

Usage:
    >>> from cloud_adapters import FirebaseProvider, StripeProvider, load_settings
    >>> settings = load_settings("adapters.yaml")
    >>> firebase = FirebaseProvider(settings.firebase)
    >>> payments = StripeProvider(settings=settings.stripe)
"""

__version__ = "1.0.0"

from .exceptions import AdapterError, MessagingNotInitializedError, NoUserSignedInError
from .firebase import AuthUser, FirebaseProvider, SignInError, Subscription
from .payments import PaymentLinkOptions, StripeProvider
from .settings import (
    AdapterSettings,
    FirebaseSettings,
    StripeSettings,
    load_settings,
    parse_settings,
)

__all__ = [
    "__version__",
    # Providers
    "FirebaseProvider",
    "StripeProvider",
    # Settings
    "AdapterSettings",
    "FirebaseSettings",
    "StripeSettings",
    "load_settings",
    "parse_settings",
    # Models
    "AuthUser",
    "Subscription",
    "PaymentLinkOptions",
    # Errors
    "AdapterError",
    "NoUserSignedInError",
    "MessagingNotInitializedError",
    "SignInError",
]
