"""
Tests for the Cloud Messaging client.

The firebase-messaging push client is replaced by a mock factory, or by a
small fake that registers, starts listeners and delivers like the real one.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from cloud_adapters.firebase.messaging import MessagingClient
from cloud_adapters.settings import FirebaseSettings


@pytest.fixture
def settings(firebase_config):
    return FirebaseSettings(**firebase_config)


@pytest.fixture
def push_client():
    client = MagicMock()
    client.checkin_or_register = AsyncMock(return_value="fcm-token")
    client.start = AsyncMock()
    client.stop = AsyncMock()
    return client


@pytest.fixture
def factory(push_client):
    return MagicMock(return_value=push_client)


@pytest.fixture
def messaging(settings, factory):
    return MessagingClient(settings, push_client_factory=factory)


class FakePushClient:
    """
    Behaves like FcmPushClient for registration and delivery.

    Check-in reuses stored credentials; otherwise it registers and hands the
    new credentials back through ``credentials_updated``. Every ``start()``
    adds a listener, and ``deliver`` runs the callback once per listener.
    """

    def __init__(self, callback, config, credentials, credentials_updated):
        self.callback = callback
        self.config = config
        self.credentials = credentials
        self.credentials_updated = credentials_updated
        self.listeners = 0

    async def checkin_or_register(self):
        await asyncio.sleep(0.01)
        if self.credentials:
            return self.credentials["fcm"]["token"]
        token = f"tok-{self.config.vapid_key or 'default'}"
        self.credentials = {"fcm": {"token": token}}
        self.credentials_updated(self.credentials)
        return token

    async def start(self):
        await asyncio.sleep(0.01)
        self.listeners += 1

    async def stop(self):
        self.listeners = 0

    def deliver(self, notification, persistent_id):
        for _ in range(self.listeners):
            self.callback(notification, persistent_id, None)


@pytest.fixture
def fake_clients():
    return []


@pytest.fixture
def fake_messaging(settings, fake_clients):
    def build(*args):
        client = FakePushClient(*args)
        fake_clients.append(client)
        return client

    return MessagingClient(settings, push_client_factory=build)


class TestMessagingSetup:
    def test_requires_sender_id_and_app_id(self):
        settings = FirebaseSettings(project_id="p", api_key="k")
        with pytest.raises(ValueError, match="messaging_sender_id, app_id"):
            MessagingClient(settings)

    def test_push_client_created_lazily(self, messaging, factory):
        factory.assert_not_called()


class TestGetToken:
    def test_returns_registration_token(self, messaging, factory, push_client):
        assert asyncio.run(messaging.get_token()) == "fcm-token"
        factory.assert_called_once()
        push_client.checkin_or_register.assert_awaited_once()

    def test_vapid_key_applied_to_register_config(self, messaging, factory):
        asyncio.run(messaging.get_token(vapid_key="BPublicKey"))

        register_config = factory.call_args[0][1]
        assert register_config.vapid_key == "BPublicKey"
        assert register_config.project_id == "demo-project"
        assert register_config.messaging_sender_id == "1234567890"

    def test_backend_error_propagates(self, messaging, push_client):
        push_client.checkin_or_register.side_effect = RuntimeError("registration failed")
        with pytest.raises(RuntimeError, match="registration failed"):
            asyncio.run(messaging.get_token())


class TestSubscribe:
    def test_subscribe_starts_listener_once(self, messaging, push_client):
        async def run():
            await messaging.subscribe(lambda message: None)
            await messaging.subscribe(lambda message: None)

        asyncio.run(run())

        assert messaging.started
        push_client.start.assert_awaited_once()
        assert len(messaging.subscriptions) == 2

    def test_messages_dispatched_in_order(self, messaging):
        received = []
        asyncio.run(messaging.subscribe(received.append))

        messaging._dispatch({"n": 1}, "pid-1")
        messaging._dispatch({"n": 2}, "pid-2")

        assert received == [{"n": 1}, {"n": 2}]

    def test_unsubscribe_stops_delivery(self, messaging):
        received = []
        subscription = asyncio.run(messaging.subscribe(received.append))

        subscription.unsubscribe()
        subscription.unsubscribe()
        messaging._dispatch({"n": 1}, "pid-1")

        assert received == []
        assert not subscription.active
        assert messaging.subscriptions == []

    def test_failing_callback_does_not_block_others(self, messaging):
        received = []

        def broken(message):
            raise RuntimeError("boom")

        async def run():
            await messaging.subscribe(broken)
            await messaging.subscribe(received.append)

        asyncio.run(run())
        messaging._dispatch({"n": 1}, "pid-1")

        assert received == [{"n": 1}]

    def test_close_stops_listener(self, messaging, push_client):
        async def run():
            await messaging.subscribe(lambda message: None)
            await messaging.close()

        asyncio.run(run())

        push_client.stop.assert_awaited_once()
        assert not messaging.started

    def test_close_without_listener_is_noop(self, messaging, push_client):
        asyncio.run(messaging.close())
        push_client.stop.assert_not_called()


class TestListenerLifecycle:
    def test_concurrent_subscribers_start_one_listener(self, fake_messaging, fake_clients):
        first, second = [], []

        async def run():
            await asyncio.gather(
                fake_messaging.subscribe(first.append),
                fake_messaging.subscribe(second.append),
            )

        asyncio.run(run())

        assert len(fake_clients) == 1
        assert fake_clients[0].listeners == 1

        fake_clients[0].deliver({"n": 1}, "pid-1")
        assert first == [{"n": 1}]
        assert second == [{"n": 1}]

    def test_failed_start_leaves_no_subscription(self, messaging, push_client):
        received = []
        push_client.checkin_or_register.side_effect = RuntimeError("registration failed")

        with pytest.raises(RuntimeError, match="registration failed"):
            asyncio.run(messaging.subscribe(received.append))

        assert messaging.subscriptions == []
        assert not messaging.started

        push_client.checkin_or_register.side_effect = None
        asyncio.run(messaging.subscribe(lambda message: None))
        messaging._dispatch({"n": 1}, "pid-1")

        assert received == []
        assert len(messaging.subscriptions) == 1

    def test_failed_listener_start_leaves_no_subscription(self, messaging, push_client):
        push_client.start.side_effect = ConnectionError("mcs unreachable")

        with pytest.raises(ConnectionError):
            asyncio.run(messaging.subscribe(lambda message: None))

        assert messaging.subscriptions == []
        assert not messaging.started

    def test_new_vapid_key_registers_again(self, fake_messaging, fake_clients):
        async def run():
            default_token = await fake_messaging.get_token()
            keyed_token = await fake_messaging.get_token(vapid_key="BPublicKey")
            return default_token, keyed_token

        default_token, keyed_token = asyncio.run(run())

        assert default_token == "tok-default"
        assert keyed_token == "tok-BPublicKey"
        assert len(fake_clients) == 2
        assert fake_clients[1].config.vapid_key == "BPublicKey"

    def test_same_vapid_key_reuses_registration(self, fake_messaging, fake_clients):
        async def run():
            await fake_messaging.get_token(vapid_key="BPublicKey")
            return await fake_messaging.get_token(vapid_key="BPublicKey")

        assert asyncio.run(run()) == "tok-BPublicKey"
        assert len(fake_clients) == 1

    def test_vapid_key_ignored_once_listening(self, fake_messaging, fake_clients, caplog):
        async def run():
            await fake_messaging.subscribe(lambda message: None)
            return await fake_messaging.get_token(vapid_key="BPublicKey")

        assert asyncio.run(run()) == "tok-default"
        assert len(fake_clients) == 1
        assert "Ignoring vapid_key change" in caplog.text
