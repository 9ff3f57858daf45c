"""
Firebase app handle factory.

firebase_admin keeps a process-wide registry of named apps and refuses to
initialize the same name twice. ``get_or_create_app`` returns the registered
app when one exists and initializes it otherwise, so any number of providers
in a process share one handle.

Applications that want explicit ownership can call ``get_or_create_app`` once
at startup and pass the result to each ``FirebaseProvider(app=...)``.
"""

import logging
from threading import Lock
from typing import Any, Dict

import firebase_admin
from firebase_admin import credentials

from ..settings import FirebaseSettings

logger = logging.getLogger(__name__)

GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"

_app_lock = Lock()


def build_credential(settings: FirebaseSettings) -> credentials.Base:
    """
    Build the credential for a Firebase app.

    Uses the service account from settings when one is configured. Otherwise
    it falls back to Application Default Credentials
    (GOOGLE_APPLICATION_CREDENTIALS, gcloud, or the metadata server).
    """
    if settings.has_service_account:
        logger.debug(f"Using service account credentials: {settings.client_email}")
        return credentials.Certificate(
            {
                "type": "service_account",
                "project_id": settings.project_id,
                "client_email": settings.client_email,
                "private_key": settings.private_key,
                "token_uri": GOOGLE_TOKEN_URI,
            }
        )

    logger.debug("Using application default credentials")
    return credentials.ApplicationDefault()


def build_app_options(settings: FirebaseSettings) -> Dict[str, Any]:
    """Translate settings into firebase_admin app options."""
    return {
        "projectId": settings.project_id,
        "storageBucket": settings.resolved_storage_bucket,
        "databaseURL": settings.resolved_database_url,
    }


def get_or_create_app(settings: FirebaseSettings) -> firebase_admin.App:
    """
    Get the Firebase app named in settings, initializing it on first use.

    Thread-safe. A later call with different settings returns the existing
    app unchanged.

    Returns:
        firebase_admin.App instance
    """
    with _app_lock:
        try:
            app = firebase_admin.get_app(settings.app_name)
            logger.debug(f"Reusing existing Firebase app: {settings.app_name}")
            return app
        except ValueError:
            pass

        app = firebase_admin.initialize_app(
            credential=build_credential(settings),
            options=build_app_options(settings),
            name=settings.app_name,
        )
        logger.info(
            f"Initialized Firebase app: {settings.app_name} "
            f"(project: {settings.project_id})"
        )
        return app
