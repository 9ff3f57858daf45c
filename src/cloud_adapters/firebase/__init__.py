"""
Firebase adapter.

Provides:
- FirebaseProvider: facade over Firestore, Auth, Storage, Realtime Database
  and Cloud Messaging
- get_or_create_app: process-wide firebase_admin app reuse
- The sub-clients, usable on their own with an existing app

Usage:
    >>> from cloud_adapters.firebase import FirebaseProvider, get_or_create_app
    >>> app = get_or_create_app(settings)
    >>> provider = FirebaseProvider(settings, app=app)
"""

from .app import get_or_create_app, build_credential, build_app_options
from .auth import AuthClient, AuthUser, SignInError
from .documents import DocumentStore
from .messaging import MessagingClient, Subscription
from .provider import FirebaseProvider
from .realtime import RealtimeStore
from .storage import BlobStore

__all__ = [
    "FirebaseProvider",
    "get_or_create_app",
    "build_credential",
    "build_app_options",
    "AuthClient",
    "AuthUser",
    "SignInError",
    "DocumentStore",
    "BlobStore",
    "RealtimeStore",
    "MessagingClient",
    "Subscription",
]
