"""
Firebase Provider.

One object exposing Firestore, Authentication, Cloud Storage, the Realtime
Database and Cloud Messaging for a Firebase project. Each method forwards to
the matching sub-client with minimal reshaping. Vendor errors propagate
unchanged.

Usage:
    >>> from cloud_adapters import FirebaseProvider
    >>> provider = FirebaseProvider({"project_id": "demo", "api_key": "AIza..."})
    >>> doc = await provider.add_document("notes", {"title": "hello"})
    >>> await provider.get_document("notes", doc["id"])
    {'title': 'hello'}
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from ..exceptions import MessagingNotInitializedError
from ..settings import FirebaseSettings
from ..values import Document, JsonValue
from .app import get_or_create_app
from .auth import AuthClient, AuthUser
from .documents import DocumentStore
from .messaging import MessageCallback, MessagingClient, Subscription
from .realtime import RealtimeStore
from .storage import BlobStore, FileContent

logger = logging.getLogger(__name__)


class FirebaseProvider:
    """
    Firebase integration provider.

    Args:
        settings: FirebaseSettings, or a mapping validated into one
        app: Existing firebase_admin app to use. When omitted, the app named
             in settings is reused if registered, otherwise initialized.

    Raises:
        pydantic.ValidationError: If settings are invalid

    Attributes:
        settings: Validated settings
        app: firebase_admin app handle
        documents: Firestore document store
        auth: Authentication client
        storage: Cloud Storage blob store
        database: Realtime Database store
        messaging: Cloud Messaging client, or None if unsupported here
    """

    version = "1.0.0"
    icon = (
        "https://cdn.brandfetch.io/idS725vGg6/w/400/h/400/theme/dark/icon.png"
        "?c=1bxid64Mup7aczewSAYMX&t=1760226348459"
    )
    homepage = "https://firebase.google.com"
    docs = "https://firebase.google.com/docs"

    def __init__(self, settings: Union[FirebaseSettings, Mapping[str, Any]], app: Any = None):
        if not isinstance(settings, FirebaseSettings):
            settings = FirebaseSettings(**settings)
        self.settings = settings

        self.app = app if app is not None else get_or_create_app(settings)

        self.documents = DocumentStore(self.app)
        self.auth = AuthClient(self.app, settings.api_key, self.documents)
        self.storage = BlobStore(self.app, settings.resolved_storage_bucket)
        self.database = RealtimeStore(self.app, settings.resolved_database_url)

        self.messaging: Optional[MessagingClient] = None
        try:
            self.messaging = MessagingClient(settings)
        except Exception as e:
            logger.warning(f"Firebase Messaging not supported in this environment: {e}")

    # ============ FIRESTORE ============

    async def add_document(self, collection: str, data: Dict[str, Any]) -> Document:
        return await self.documents.add(collection, data)

    async def get_document(self, collection: str, doc_id: str) -> Optional[Document]:
        return await self.documents.get(collection, doc_id)

    async def set_document(
        self, collection: str, doc_id: str, data: Dict[str, Any], merge: bool = False
    ) -> Document:
        return await self.documents.set(collection, doc_id, data, merge=merge)

    async def update_document(
        self, collection: str, doc_id: str, data: Dict[str, Any]
    ) -> Document:
        return await self.documents.update(collection, doc_id, data)

    async def delete_document(self, collection: str, doc_id: str) -> bool:
        return await self.documents.delete(collection, doc_id)

    async def list_documents(self, collection: str) -> List[Document]:
        return await self.documents.list(collection)

    # ============ AUTH ============

    @property
    def current_user(self) -> Optional[AuthUser]:
        return self.auth.current_user

    async def create_user(
        self, email: str, password: str, display_name: Optional[str] = None
    ) -> AuthUser:
        return await self.auth.create_user(email, password, display_name)

    async def login_user(self, email: str, password: str) -> AuthUser:
        return await self.auth.login(email, password)

    async def delete_user_account(self) -> bool:
        return await self.auth.delete_current_user()

    def sign_out(self) -> None:
        self.auth.sign_out()

    # ============ STORAGE ============

    async def upload_file(
        self, file_path: str, file_content: FileContent, content_type: Optional[str] = None
    ) -> Dict[str, str]:
        return await self.storage.upload(file_path, file_content, content_type)

    async def get_file_url(self, file_path: str) -> str:
        return await self.storage.get_url(file_path)

    async def delete_file(self, file_path: str) -> bool:
        return await self.storage.delete(file_path)

    # ============ REALTIME DB ============

    async def set_realtime_data(self, path: str, data: Any) -> bool:
        return await self.database.set(path, data)

    async def get_realtime_data(self, path: str) -> Optional[JsonValue]:
        return await self.database.get(path)

    async def delete_realtime_data(self, path: str) -> bool:
        return await self.database.delete(path)

    # ============ CLOUD MESSAGING ============

    def _require_messaging(self) -> MessagingClient:
        if self.messaging is None:
            raise MessagingNotInitializedError()
        return self.messaging

    async def get_messaging_token(self, vapid_key: Optional[str] = None) -> str:
        return await self._require_messaging().get_token(vapid_key)

    async def on_message(self, callback: MessageCallback) -> Subscription:
        return await self._require_messaging().subscribe(callback)

    async def close(self) -> None:
        """
        Stop the messaging listener, if running, and release the sign-in
        HTTP session. The app handle is kept.
        """
        if self.messaging is not None:
            await self.messaging.close()
        self.auth.close()
