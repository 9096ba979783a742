"""
Credential providers for the Google APIs.

Three strategies are supported, selected once at startup:
- ServiceAccountProvider: service account JSON (GOOGLE_CREDENTIALS_FILE / GOOGLE_CREDENTIALS_JSON)
- InteractiveOAuthProvider: stored authorized-user token (refresh token) from a prior OAuth consent
- AmbientDefaultProvider: Application Default Credentials (gcloud, metadata server, ...)

Precedence (unless GOOGLE_AUTH_MODE forces one):
1. service account credentials configured
2. OAuth token file exists, or GOOGLE_CLIENT_ID is set
3. ambient default credentials
"""
import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, ClassVar

import google.auth
from google.auth.credentials import Credentials
from google.auth.exceptions import DefaultCredentialsError
from google.auth.transport.requests import Request
from google.oauth2 import credentials as user_credentials
from google.oauth2 import service_account

from config import SCOPES
from env_loader import Settings
from lib.common import log
from lib.errors import AUTHENTICATION_REQUIRED_MESSAGE, AuthenticationRequired


class CredentialProvider(ABC):
    """Supplies Google credentials on demand."""

    name: ClassVar[str] = ""

    def __init__(self, scopes: list[str] | None = None) -> None:
        self.scopes = list(scopes or SCOPES)

    @abstractmethod
    def load_credential(self) -> Credentials | None:
        """Return credentials, or None when nothing is stored/configured."""

    def require_credential(self) -> Credentials:
        """Return credentials or raise AuthenticationRequired."""
        creds = self.load_credential()
        if creds is None:
            raise AuthenticationRequired(AUTHENTICATION_REQUIRED_MESSAGE)
        return creds

    def obtain_access_token(self) -> str:
        """Return a valid bearer token, refreshing when needed."""
        creds = self.require_credential()
        if not creds.valid:
            creds.refresh(Request())
        return creds.token


class ServiceAccountProvider(CredentialProvider):
    name = "service_account"

    def __init__(self, info: dict[str, Any] | None, scopes: list[str] | None = None) -> None:
        super().__init__(scopes)
        self.info = info

    def load_credential(self) -> Credentials | None:
        if not self.info:
            return None
        return service_account.Credentials.from_service_account_info(self.info, scopes=self.scopes)


class InteractiveOAuthProvider(CredentialProvider):
    """
    Loads the authorized-user token written after an OAuth consent.

    The token file is the JSON produced by `Credentials.to_json()`. Client
    ID/secret missing from the file are filled from GOOGLE_CLIENT_ID /
    GOOGLE_CLIENT_SECRET.
    """

    name = "oauth"

    def __init__(
        self,
        token_path: Path,
        client_id: str | None = None,
        client_secret: str | None = None,
        scopes: list[str] | None = None,
    ) -> None:
        super().__init__(scopes)
        self.token_path = Path(token_path)
        self.client_id = client_id
        self.client_secret = client_secret

    def load_credential(self) -> Credentials | None:
        if not self.token_path.exists():
            return None
        try:
            info = json.loads(self.token_path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            log(f"cannot read OAuth token file {self.token_path}: {e}")
            return None
        if not isinstance(info, dict) or not info.get("refresh_token"):
            return None
        if self.client_id:
            info.setdefault("client_id", self.client_id)
        if self.client_secret:
            info.setdefault("client_secret", self.client_secret)
        try:
            return user_credentials.Credentials.from_authorized_user_info(info, scopes=self.scopes)
        except ValueError as e:
            log(f"invalid OAuth token file {self.token_path}: {e}")
            return None


class AmbientDefaultProvider(CredentialProvider):
    name = "default"

    def load_credential(self) -> Credentials | None:
        try:
            creds, _project = google.auth.default(scopes=self.scopes)
        except DefaultCredentialsError:
            return None
        return creds


def select_credential_provider(settings: Settings) -> CredentialProvider:
    """Pick the credential provider for this process (see module docstring)."""
    service = ServiceAccountProvider(settings.service_account_info)
    oauth = InteractiveOAuthProvider(
        settings.oauth_token_path,
        client_id=settings.oauth_client_id,
        client_secret=settings.oauth_client_secret,
    )
    ambient = AmbientDefaultProvider()

    forced = {p.name: p for p in (service, oauth, ambient)}
    if settings.auth_mode:
        if settings.auth_mode not in forced:
            raise RuntimeError(
                f"Invalid GOOGLE_AUTH_MODE: {settings.auth_mode} "
                f"(expected one of: {', '.join(forced)})"
            )
        return forced[settings.auth_mode]

    if settings.service_account_info:
        return service
    if settings.oauth_token_path.exists() or settings.oauth_client_id:
        return oauth
    return ambient
