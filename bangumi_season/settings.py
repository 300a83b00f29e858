"""Settings management for bangumi_season."""
import json
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from .bangumi import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT


# ---------------------------------------------------------------------------
# Platform-appropriate settings directory
# ---------------------------------------------------------------------------

def _settings_dir() -> Path:
    """Return the platform settings directory."""
    if sys.platform == "win32":
        base = Path(os.environ.get("APPDATA", Path.home()))
    elif sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    else:
        base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return base / "BangumiSeason"


SETTINGS_FILE = _settings_dir() / "settings.json"


# ---------------------------------------------------------------------------
# Default values for every known key
# ---------------------------------------------------------------------------

DEFAULT_SETTINGS: dict[str, Any] = {
    # Bangumi
    "access_token": "",
    "timeout": DEFAULT_TIMEOUT,
    "user_agent": DEFAULT_USER_AGENT,

    # Behavior
    "use_bangumi_season_title": True,
}


# ---------------------------------------------------------------------------
# SettingsManager -- reads / writes the JSON settings file
# ---------------------------------------------------------------------------

class SettingsManager:
    """Settings store backed by a JSON file.

    Usage:
        mgr = SettingsManager()
        flag = mgr.get("use_bangumi_season_title")
        mgr.set("use_bangumi_season_title", False)
        mgr.save()
    """

    def __init__(self, settings_file: Path | None = None):
        self.settings_file = settings_file or SETTINGS_FILE
        self._data = self._load()

    # -- public API -------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        fallback = DEFAULT_SETTINGS.get(key, default)
        return self._data.get(key, fallback)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def save(self) -> bool:
        try:
            self.settings_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.settings_file, "w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=2, ensure_ascii=False)
            return True
        except IOError:
            return False

    def all(self) -> dict[str, Any]:
        """Return a merged view: defaults + saved values."""
        merged = DEFAULT_SETTINGS.copy()
        merged.update(self._data)
        return merged

    def reload(self) -> None:
        self._data = self._load()

    # -- private ----------------------------------------------------------

    def _load(self) -> dict[str, Any]:
        if self.settings_file.exists():
            try:
                with open(self.settings_file, "r", encoding="utf-8") as f:
                    data = json.load(f)
                if isinstance(data, dict):
                    return data
            except (json.JSONDecodeError, IOError):
                pass
        return {}


def load_access_token(settings: SettingsManager | None = None) -> str | None:
    """
    Load the Bangumi access token.

    Priority:
    1. BANGUMI_ACCESS_TOKEN environment variable
    2. .env file in current directory
    3. .env file in user home directory
    4. ``access_token`` in the settings file

    Returns:
        Token string or None if not configured (anonymous access)
    """
    token = os.environ.get("BANGUMI_ACCESS_TOKEN")
    if token:
        return token

    for env_path in (Path.cwd() / ".env", Path.home() / ".env"):
        if env_path.exists():
            load_dotenv(env_path)
            token = os.environ.get("BANGUMI_ACCESS_TOKEN")
            if token:
                return token

    if settings is not None:
        return settings.get("access_token") or None
    return None


@dataclass
class PluginConfiguration:
    """Resolved configuration consumed by the provider and client."""
    use_bangumi_season_title: bool = True
    access_token: str | None = None
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT

    @classmethod
    def load(cls, settings: SettingsManager | None = None) -> "PluginConfiguration":
        settings = settings or SettingsManager()
        return cls(
            use_bangumi_season_title=bool(settings.get("use_bangumi_season_title")),
            access_token=load_access_token(settings),
            timeout=float(settings.get("timeout")),
            user_agent=settings.get("user_agent"),
        )
