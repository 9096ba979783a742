"""
Environment variable loader for the MCP server.
Handles loading credentials and settings from .env file or environment.
"""
import os
import json
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from config import DEFAULT_TOKEN_PATH


# Find .env file (look in current dir and parent dirs)
def _find_env_file() -> Path | None:
    current = Path(__file__).parent
    for _ in range(3):  # Check up to 3 levels up
        env_path = current / ".env"
        if env_path.exists():
            return env_path
        current = current.parent
    return None


_env_file = _find_env_file()
if _env_file:
    load_dotenv(_env_file)


def get_service_account_info() -> dict | None:
    """
    Get Google Service Account credentials, if configured.

    Priority:
    1. GOOGLE_CREDENTIALS_FILE (path to JSON file)
    2. GOOGLE_CREDENTIALS_JSON (JSON string content)

    Returns:
        dict: Parsed credentials dictionary, or None when neither is set

    Raises:
        RuntimeError: If a configured source cannot be read
    """
    # Option 1: File path
    creds_file = os.environ.get("GOOGLE_CREDENTIALS_FILE")
    if creds_file:
        creds_path = Path(creds_file).expanduser()
        if not creds_path.exists():
            raise RuntimeError(f"GOOGLE_CREDENTIALS_FILE not found: {creds_file}")
        with open(creds_path, "r") as f:
            return json.load(f)

    # Option 2: JSON content
    creds_json = os.environ.get("GOOGLE_CREDENTIALS_JSON")
    if creds_json:
        try:
            return json.loads(creds_json)
        except json.JSONDecodeError as e:
            raise RuntimeError(f"Invalid GOOGLE_CREDENTIALS_JSON: {e}")

    return None


def get_oauth_token_path() -> Path:
    """Path of the stored authorized-user token used by interactive OAuth."""
    return Path(os.environ.get("GOOGLE_OAUTH_TOKEN_FILE") or DEFAULT_TOKEN_PATH).expanduser()


def get_oauth_client() -> tuple[str | None, str | None]:
    """OAuth client ID and secret for interactive OAuth."""
    return os.environ.get("GOOGLE_CLIENT_ID") or None, os.environ.get("GOOGLE_CLIENT_SECRET") or None


def get_default_folder_id() -> str | None:
    """Drive folder new spreadsheets are moved into when no folder is given."""
    return os.environ.get("GOOGLE_DRIVE_DEFAULT_FOLDER_ID") or None


def get_auth_mode() -> str | None:
    """Explicit credential provider override: service_account, oauth or default."""
    mode = os.environ.get("GOOGLE_AUTH_MODE", "").strip().lower()
    return mode or None


def get_port() -> int:
    """Get server port from environment."""
    return int(os.environ.get("PORT", "8080"))


def get_transport() -> str:
    """MCP transport: stdio (default) or http."""
    return os.environ.get("MCP_TRANSPORT", "stdio").strip().lower()


def get_allowed_hosts() -> list[str]:
    """Hosts accepted by the HTTP transport's DNS rebinding protection."""
    raw = os.environ.get("MCP_ALLOWED_HOSTS", "")
    hosts = [h.strip() for h in raw.split(",") if h.strip()]
    return hosts or ["localhost:8080", "127.0.0.1:8080"]


@dataclass(frozen=True)
class Settings:
    """Process-wide settings, read once at startup."""
    service_account_info: dict | None = None
    oauth_token_path: Path = field(default_factory=lambda: Path(DEFAULT_TOKEN_PATH).expanduser())
    oauth_client_id: str | None = None
    oauth_client_secret: str | None = None
    default_folder_id: str | None = None
    auth_mode: str | None = None


def load_settings() -> Settings:
    """Build Settings from the environment."""
    client_id, client_secret = get_oauth_client()
    return Settings(
        service_account_info=get_service_account_info(),
        oauth_token_path=get_oauth_token_path(),
        oauth_client_id=client_id,
        oauth_client_secret=client_secret,
        default_folder_id=get_default_folder_id(),
        auth_mode=get_auth_mode(),
    )
