"""Realtime Database key-value access by slash-separated path."""

import logging
from typing import Any, Optional

from firebase_admin import db

from .._async import run_sync
from ..values import JsonValue, ensure_json_value

logger = logging.getLogger(__name__)


class RealtimeStore:
    """
    Node operations on a Realtime Database instance.

    Args:
        app: firebase_admin app
        database_url: Database URL (defaults to the app's databaseURL option)
    """

    def __init__(self, app: Any = None, database_url: Optional[str] = None):
        self._app = app
        self._database_url = database_url

    def reference(self, path: str) -> Any:
        return db.reference(path, app=self._app, url=self._database_url)

    async def set(self, path: str, data: Any) -> bool:
        """Overwrite the node at ``path``."""
        data = ensure_json_value(data)
        await run_sync(self.reference(path).set, data)
        logger.debug(f"Set realtime node: {path}")
        return True

    async def get(self, path: str) -> Optional[JsonValue]:
        """Return the node's value, or None if it does not exist."""
        return await run_sync(self.reference(path).get)

    async def delete(self, path: str) -> bool:
        await run_sync(self.reference(path).delete)
        logger.debug(f"Deleted realtime node: {path}")
        return True
