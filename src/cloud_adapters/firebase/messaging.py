"""
Firebase Cloud Messaging receiver.

Registers this process as an FCM client with the ``firebase-messaging``
package and fans inbound messages out to subscribed callbacks.

The push client is created lazily. ``get_token`` checks in and registers,
then returns the FCM registration token. ``subscribe`` also starts the
listener. Registration credentials are kept in memory, so the token stays
stable for the process lifetime.
"""

import asyncio
import dataclasses
import logging
from threading import Lock
from typing import Any, Callable, List, Optional

from firebase_messaging import FcmPushClient, FcmRegisterConfig

from ..settings import FirebaseSettings

logger = logging.getLogger(__name__)

MessageCallback = Callable[[dict], Any]


class Subscription:
    """
    Handle for a registered message callback.

    Call ``unsubscribe()`` to stop receiving messages. Unsubscribing twice
    is harmless.
    """

    def __init__(self, client: "MessagingClient", callback: MessageCallback):
        self._client = client
        self.callback = callback
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        if self._active:
            self._active = False
            self._client._remove(self)


class MessagingClient:
    """
    FCM registration and message dispatch for one Firebase project.

    Args:
        settings: Firebase settings; messaging_sender_id and app_id are required
        push_client_factory: Callable building the push client
                             (defaults to firebase_messaging.FcmPushClient)

    Raises:
        ValueError: If the settings lack what FCM registration needs
    """

    def __init__(
        self,
        settings: FirebaseSettings,
        push_client_factory: Optional[Callable[..., Any]] = None,
    ):
        missing = [
            name for name in ("messaging_sender_id", "app_id") if not getattr(settings, name)
        ]
        if missing:
            raise ValueError(f"Cloud Messaging requires: {', '.join(missing)}")

        self._register_config = FcmRegisterConfig(
            project_id=settings.project_id,
            app_id=settings.app_id,
            api_key=settings.api_key,
            messaging_sender_id=settings.messaging_sender_id,
        )
        self._push_client_factory = push_client_factory or FcmPushClient
        self._push_client: Any = None
        self._credentials: Optional[dict] = None
        self._started = False
        self._subscriptions: List[Subscription] = []
        self._lock = Lock()
        # Created on first use so it binds to the running event loop
        self._start_lock: Optional[asyncio.Lock] = None

    @property
    def started(self) -> bool:
        return self._started

    @property
    def subscriptions(self) -> List[Subscription]:
        return list(self._subscriptions)

    def _store_credentials(self, creds: dict) -> None:
        self._credentials = creds

    def _ensure_push_client(self) -> Any:
        if self._push_client is None:
            self._push_client = self._push_client_factory(
                self._dispatch,
                self._register_config,
                self._credentials,
                self._store_credentials,
            )
        return self._push_client

    def _dispatch(
        self, notification: dict, persistent_id: Optional[str] = None, obj: Any = None
    ) -> None:
        """Invoke every active callback with one inbound message, in order."""
        for subscription in self.subscriptions:
            if not subscription.active:
                continue
            try:
                subscription.callback(notification)
            except Exception:
                logger.exception(f"Message callback failed (message {persistent_id})")

    def _remove(self, subscription: Subscription) -> None:
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

    async def get_token(self, vapid_key: Optional[str] = None) -> str:
        """
        Register with FCM and return the registration token.

        Args:
            vapid_key: Web push public key. Only applied before the
                       listener starts; later changes are ignored. A new
                       key drops earlier registration credentials, so the
                       returned token belongs to the new key.
        """
        if vapid_key and vapid_key != self._register_config.vapid_key:
            if self._started:
                logger.warning("Ignoring vapid_key change while the listener is running")
            else:
                self._register_config = dataclasses.replace(
                    self._register_config, vapid_key=vapid_key
                )
                self._push_client = None
                self._credentials = None

        token = await self._ensure_push_client().checkin_or_register()
        logger.debug("Obtained FCM registration token")
        return token

    async def subscribe(self, callback: MessageCallback) -> Subscription:
        """
        Register a callback for inbound messages and start the listener.

        Callbacks receive the message payload dict, once per message in
        arrival order. A callback that raises is logged and does not affect
        the others.

        If registration or listener start-up fails, the error propagates
        and the callback is not registered.
        """
        await self._ensure_started()

        subscription = Subscription(self, callback)
        with self._lock:
            self._subscriptions.append(subscription)
        return subscription

    async def _ensure_started(self) -> None:
        if self._start_lock is None:
            self._start_lock = asyncio.Lock()

        async with self._start_lock:
            # Another subscriber may have started the listener while we waited
            if self._started:
                return
            client = self._ensure_push_client()
            if self._credentials is None:
                await client.checkin_or_register()
            await client.start()
            self._started = True
            logger.info("FCM listener started")

    async def close(self) -> None:
        """Stop the listener. Subscriptions stay registered but receive nothing."""
        if self._started:
            await self._push_client.stop()
            self._started = False
            logger.info("FCM listener stopped")
