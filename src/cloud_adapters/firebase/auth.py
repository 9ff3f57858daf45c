"""
Firebase Authentication client.

Account management (create, delete) goes through the firebase-admin SDK.
Password sign-in has no admin SDK equivalent, so it calls the Identity
Toolkit REST endpoint with the project's Web API key. That is the endpoint
the Firebase client SDKs use.

The client keeps the most recently created or signed-in user as the
"current user", mirroring a client SDK session.
"""

import logging
from typing import Any, Optional

import requests
from firebase_admin import auth, exceptions
from pydantic import BaseModel, Field

from .._async import run_sync
from ..exceptions import NoUserSignedInError
from .documents import DocumentStore

logger = logging.getLogger(__name__)

SIGN_IN_URL = "https://identitytoolkit.googleapis.com/v1/accounts:signInWithPassword"

USERS_COLLECTION = "users"

INVALID_CREDENTIAL_CODES = frozenset(
    {
        "INVALID_LOGIN_CREDENTIALS",
        "EMAIL_NOT_FOUND",
        "INVALID_PASSWORD",
        "INVALID_EMAIL",
    }
)


class SignInError(exceptions.FirebaseError):
    """
    Password sign-in rejected by the Identity Toolkit backend.

    ``code`` is the backend's error code (e.g. "INVALID_LOGIN_CREDENTIALS",
    "USER_DISABLED", "TOO_MANY_ATTEMPTS_TRY_LATER").
    """

    def __init__(self, code: str, message: str, http_response: Any = None):
        super().__init__(code, message, http_response=http_response)

    @property
    def is_invalid_credentials(self) -> bool:
        return self.code in INVALID_CREDENTIAL_CODES


class AuthUser(BaseModel):
    """
    Handle for a Firebase Auth user.

    Token fields are only populated after password sign-in.
    """

    uid: str = Field(description="Firebase user UID")

    email: Optional[str] = Field(default=None, description="User's email address")

    display_name: Optional[str] = Field(default=None, description="User's display name")

    id_token: Optional[str] = Field(default=None, description="Firebase ID token")

    refresh_token: Optional[str] = Field(default=None, description="Refresh token")

    expires_in: Optional[int] = Field(
        default=None,
        description="ID token lifetime in seconds",
    )

    @classmethod
    def from_record(cls, record: Any) -> "AuthUser":
        """Build from a firebase_admin UserRecord."""
        return cls(uid=record.uid, email=record.email, display_name=record.display_name)

    @classmethod
    def from_sign_in(cls, payload: dict) -> "AuthUser":
        """Build from a signInWithPassword response body."""
        expires_in = payload.get("expiresIn")
        return cls(
            uid=payload["localId"],
            email=payload.get("email"),
            display_name=payload.get("displayName") or None,
            id_token=payload.get("idToken"),
            refresh_token=payload.get("refreshToken"),
            expires_in=int(expires_in) if expires_in is not None else None,
        )


def _sign_in_error(response: requests.Response) -> SignInError:
    """Turn an Identity Toolkit error response into a SignInError."""
    try:
        error = response.json().get("error", {})
    except ValueError:
        error = {}

    # Messages look like "CODE" or "CODE : human readable detail"
    message = error.get("message") or f"HTTP {response.status_code}"
    code = message.split(" : ", 1)[0].strip()
    return SignInError(code, message, http_response=response)


class AuthClient:
    """
    Account operations for one Firebase app.

    Args:
        app: firebase_admin app used for admin calls
        api_key: Web API key used for password sign-in
        documents: Document store for the users/{uid} profile documents
        session: requests.Session for REST calls (created if omitted)
    """

    def __init__(
        self,
        app: Any,
        api_key: str,
        documents: DocumentStore,
        session: Optional[requests.Session] = None,
    ):
        self._app = app
        self._api_key = api_key
        self._documents = documents
        self._owns_session = session is None
        self._session = session or requests.Session()
        self._current_user: Optional[AuthUser] = None

    @property
    def current_user(self) -> Optional[AuthUser]:
        return self._current_user

    def sign_out(self) -> None:
        self._current_user = None

    def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._owns_session:
            self._session.close()

    async def create_user(
        self, email: str, password: str, display_name: Optional[str] = None
    ) -> AuthUser:
        """
        Create an email/password account and make it the current user.

        When ``display_name`` is given it is set on the account and merged
        into the users/{uid} document as ``displayName``.
        """
        record = await run_sync(
            auth.create_user,
            email=email,
            password=password,
            display_name=display_name,
            app=self._app,
        )
        logger.info(f"Created Firebase user: {record.uid}")

        if display_name:
            await self._documents.set(
                USERS_COLLECTION, record.uid, {"displayName": display_name}, merge=True
            )

        self._current_user = AuthUser.from_record(record)
        return self._current_user

    def _sign_in(self, email: str, password: str) -> dict:
        response = self._session.post(
            SIGN_IN_URL,
            params={"key": self._api_key},
            json={"email": email, "password": password, "returnSecureToken": True},
        )
        if not response.ok:
            raise _sign_in_error(response)
        return response.json()

    async def login(self, email: str, password: str) -> AuthUser:
        """
        Sign in with email and password and make the user current.

        Raises:
            SignInError: If the backend rejects the sign-in
        """
        payload = await run_sync(self._sign_in, email, password)
        self._current_user = AuthUser.from_sign_in(payload)
        logger.debug(f"Signed in Firebase user: {self._current_user.uid}")
        return self._current_user

    async def delete_current_user(self) -> bool:
        """
        Delete the current user's account and end the session.

        Raises:
            NoUserSignedInError: If no user is signed in
        """
        user = self._current_user
        if user is None:
            raise NoUserSignedInError()

        await run_sync(auth.delete_user, user.uid, app=self._app)
        self._current_user = None
        logger.info(f"Deleted Firebase user: {user.uid}")
        return True
