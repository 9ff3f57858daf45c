"""
Local exception classes for the cloud adapters.

Every other failure is raised by the vendor SDKs (firebase-admin,
google-cloud, stripe) and passes through the adapters unchanged. The errors
below are the only ones the adapters synthesize themselves, for operations
that cannot reach the backend because local state is missing.

Design Principle:
    exceptions.py (BASE - zero dependencies)
        ^
    settings.py / values.py
        ^
    firebase/, payments/ (adapters with vendor SDKs)
"""

from typing import Optional


class AdapterError(Exception):
    """Base class for errors raised by the adapters themselves."""

    default_message = "Adapter error."

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)


class NoUserSignedInError(AdapterError):
    """
    Raised when an operation needs the current user but no session exists.

    Example:
        >>> provider.sign_out()
        >>> await provider.delete_user_account()
        Traceback (most recent call last):
        ...
        NoUserSignedInError: No user currently signed in.
    """

    default_message = "No user currently signed in."


class MessagingNotInitializedError(AdapterError):
    """
    Raised by messaging operations when the messaging client was not set up.

    The Firebase provider degrades instead of failing when push messaging is
    unavailable. In that case its messaging client stays unset and every
    messaging call raises this error.
    """

    default_message = "Messaging not initialized."
