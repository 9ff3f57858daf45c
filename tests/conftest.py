"""
Shared fixtures for adapter tests.

Vendor SDKs are never reached: Firestore is replaced by a small in-memory
async fake, and every other SDK entry point is patched with mocks.
"""

from unittest.mock import MagicMock, patch

import pytest

from fakes import FakeFirestore


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def firebase_config():
    """Firebase settings with messaging support."""
    return {
        "project_id": "demo-project",
        "api_key": "test-api-key",
        "storage_bucket": "demo-project.appspot.com",
        "messaging_sender_id": "1234567890",
        "app_id": "1:1234567890:web:abc123",
    }


@pytest.fixture
def fake_firestore():
    return FakeFirestore()


@pytest.fixture
def mock_bucket():
    bucket = MagicMock()
    bucket.name = "demo-project.appspot.com"
    return bucket


@pytest.fixture
def patched_sdk(fake_firestore, mock_bucket):
    """Patch the firebase_admin factories used while building a provider."""
    app = MagicMock(name="firebase_app")
    with patch(
        "cloud_adapters.firebase.provider.get_or_create_app", return_value=app
    ) as get_app, patch(
        "cloud_adapters.firebase.documents.firestore_async.client",
        return_value=fake_firestore,
    ), patch(
        "cloud_adapters.firebase.storage.storage.bucket", return_value=mock_bucket
    ), patch(
        "cloud_adapters.firebase.messaging.FcmPushClient"
    ) as push_client_cls:
        yield {
            "app": app,
            "get_or_create_app": get_app,
            "firestore": fake_firestore,
            "bucket": mock_bucket,
            "push_client_cls": push_client_cls,
        }
