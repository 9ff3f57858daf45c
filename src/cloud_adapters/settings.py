"""
Adapter Settings Schema for YAML- or environment-based configuration.

Provides Pydantic models for the Firebase and Stripe adapters. Settings are
validated eagerly, so a misconfigured adapter fails at construction rather
than on its first network call.

Example YAML:
    firebase:
      project_id: "${FIREBASE_PROJECT_ID}"
      api_key: "${FIREBASE_API_KEY}"
      client_email: "${FIREBASE_CLIENT_EMAIL:-}"
      private_key: "${FIREBASE_PRIVATE_KEY:-}"
      storage_bucket: "my-project.appspot.com"
      messaging_sender_id: "${FIREBASE_MESSAGING_SENDER_ID:-}"
      app_id: "${FIREBASE_APP_ID:-}"

    stripe:
      api_key: "${STRIPE_API_KEY}"
"""

import os
import re
from pathlib import Path
from typing import Any, ClassVar, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_APP_NAME = "[DEFAULT]"

_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")


def expand_env_vars(value: Any) -> Any:
    """
    Expand environment variables in a value.

    Supports ${VAR} and ${VAR:-default} syntax, recursively through
    dicts and lists. Unset variables without a default expand to "".
    """
    if isinstance(value, str):

        def replacer(match):
            default = match.group(2) if match.group(2) is not None else ""
            return os.environ.get(match.group(1), default)

        return _ENV_VAR_PATTERN.sub(replacer, value)
    elif isinstance(value, dict):
        return {k: expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [expand_env_vars(item) for item in value]
    return value


def _blank_to_none(v):
    if isinstance(v, str):
        v = v.strip()
        return v or None
    return v


class RequiredConfigItem(BaseModel):
    """Describes one configuration option a provider needs."""

    key: str
    data_type: str


class FirebaseSettings(BaseModel):
    """
    Pydantic model for Firebase adapter settings.

    Attributes:
        project_id: Firebase project ID
        api_key: Web API key, used for password sign-in and FCM registration
        client_email: Service account email (with private_key)
        private_key: Service account PEM key (with client_email)
        storage_bucket: Cloud Storage bucket name
        messaging_sender_id: FCM sender ID; messaging is disabled without it
        app_id: Firebase app ID; messaging is disabled without it
        database_url: Realtime Database URL
        app_name: firebase_admin app name to create or reuse

    Example:
        >>> settings = FirebaseSettings(project_id="demo", api_key="AIza...")
        >>> settings.resolved_storage_bucket
        'demo.appspot.com'
    """

    required_config: ClassVar[List[RequiredConfigItem]] = [
        RequiredConfigItem(key="project_id", data_type="string"),
        RequiredConfigItem(key="api_key", data_type="string"),
    ]

    project_id: str = Field(description="Firebase project ID")

    api_key: str = Field(description="Firebase Web API key")

    client_email: Optional[str] = Field(
        default=None,
        description="Service account client email",
    )

    private_key: Optional[str] = Field(
        default=None,
        description="Service account private key (PEM)",
    )

    storage_bucket: Optional[str] = Field(
        default=None,
        description="Storage bucket name. Defaults to <project_id>.appspot.com",
    )

    messaging_sender_id: Optional[str] = Field(
        default=None,
        description="Cloud Messaging sender ID",
    )

    app_id: Optional[str] = Field(
        default=None,
        description="Firebase app ID, required for Cloud Messaging",
    )

    database_url: Optional[str] = Field(
        default=None,
        description="Realtime Database URL. Defaults to the project's default instance",
    )

    app_name: str = Field(
        default=DEFAULT_APP_NAME,
        description="Name of the firebase_admin app to create or reuse",
    )

    @field_validator("project_id", "api_key", "app_name", mode="before")
    @classmethod
    def validate_required_string(cls, v):
        """Reject missing or blank required strings."""
        v = _blank_to_none(v)
        if v is None:
            raise ValueError("must be a non-empty string")
        return v

    @field_validator(
        "client_email",
        "storage_bucket",
        "messaging_sender_id",
        "app_id",
        "database_url",
        mode="before",
    )
    @classmethod
    def validate_optional_string(cls, v):
        """Treat blank strings (e.g. unset ${VAR:-}) as not configured."""
        return _blank_to_none(v)

    @field_validator("private_key", mode="before")
    @classmethod
    def validate_private_key(cls, v):
        """Restore newlines in keys passed through env vars as literal \\n."""
        v = _blank_to_none(v)
        if isinstance(v, str):
            return v.replace("\\n", "\n")
        return v

    @model_validator(mode="after")
    def validate_service_account(self):
        if bool(self.client_email) != bool(self.private_key):
            raise ValueError("client_email and private_key must be provided together")
        return self

    @property
    def has_service_account(self) -> bool:
        return bool(self.client_email and self.private_key)

    @property
    def resolved_storage_bucket(self) -> str:
        return self.storage_bucket or f"{self.project_id}.appspot.com"

    @property
    def resolved_database_url(self) -> str:
        return (
            self.database_url
            or f"https://{self.project_id}-default-rtdb.firebaseio.com"
        )

    @classmethod
    def from_env(cls, prefix: str = "FIREBASE_") -> "FirebaseSettings":
        """
        Build settings from environment variables.

        Reads <prefix>PROJECT_ID, <prefix>API_KEY, <prefix>CLIENT_EMAIL,
        <prefix>PRIVATE_KEY, <prefix>STORAGE_BUCKET,
        <prefix>MESSAGING_SENDER_ID, <prefix>APP_ID and
        <prefix>DATABASE_URL.
        """
        values = {}
        for name in cls.model_fields:
            env_value = os.environ.get(f"{prefix}{name.upper()}")
            if env_value is not None:
                values[name] = env_value
        return cls(**values)


class StripeSettings(BaseModel):
    """Pydantic model for Stripe adapter settings."""

    api_key: str = Field(description="Stripe secret API key")

    @field_validator("api_key", mode="before")
    @classmethod
    def validate_api_key(cls, v):
        v = _blank_to_none(v)
        if v is None:
            raise ValueError("must be a non-empty string")
        return v

    @classmethod
    def from_env(cls, var: str = "STRIPE_API_KEY") -> "StripeSettings":
        return cls(api_key=os.environ.get(var, ""))


class AdapterSettings(BaseModel):
    """Container for both adapters' settings, as loaded from one file."""

    firebase: Optional[FirebaseSettings] = None
    stripe: Optional[StripeSettings] = None


def parse_settings(config: Dict[str, Any]) -> AdapterSettings:
    """
    Parse adapter settings from a configuration dictionary.

    Environment variables in string values are expanded first.

    Raises:
        pydantic.ValidationError: If a section is present but invalid
    """
    return AdapterSettings(**expand_env_vars(config or {}))


def load_settings(path: Union[str, Path]) -> AdapterSettings:
    """
    Load adapter settings from a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the top level of the document is not a mapping
        pydantic.ValidationError: If a section is invalid
    """
    with open(path, encoding="utf-8") as f:
        config = yaml.safe_load(f)

    if config is None:
        config = {}
    if not isinstance(config, dict):
        raise ValueError(
            f"Settings file {path} must contain a mapping, got {type(config).__name__}"
        )
    return parse_settings(config)
