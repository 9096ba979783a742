"""
Server context passed explicitly to the dispatcher and handlers.
Holds the settings and the single lazily-authorized backend client.
"""
from dataclasses import dataclass

from core.auth import CredentialProvider, select_credential_provider
from env_loader import Settings, load_settings
from sheets_client import SheetsClient


@dataclass
class ServerContext:
    settings: Settings
    provider: CredentialProvider
    sheets: SheetsClient

    @classmethod
    def from_settings(cls, settings: Settings) -> "ServerContext":
        provider = select_credential_provider(settings)
        return cls(settings=settings, provider=provider, sheets=SheetsClient(provider))

    @classmethod
    def from_env(cls) -> "ServerContext":
        return cls.from_settings(load_settings())
