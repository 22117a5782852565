"""Configuration for the bookmarks native messaging host."""
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


# Reported to the extension in reply to OPTIONS
BINARY_VERSION = "5.0.0"

# Browsers cap browser -> host messages (Chrome at 64 MiB)
DEFAULT_MAX_MESSAGE_SIZE = 64 * 1024 * 1024

# Browsers refuse host -> browser messages above 1 MiB
MAX_RESPONSE_SIZE = 1024 * 1024


def get_default_db_path() -> Path:
    """Get the path of buku's bookmarks database.

    Returns:
        Path to bookmarks.db, honouring XDG_DATA_HOME / APPDATA like buku does
    """
    if os.name == "nt":  # Windows
        appdata = os.environ.get("APPDATA")
        base = Path(appdata) if appdata else Path.home() / "AppData" / "Roaming"
    elif os.environ.get("XDG_DATA_HOME"):
        base = Path(os.environ["XDG_DATA_HOME"])
    elif sys.platform == "darwin" or os.name == "posix":
        base = Path.home() / ".local" / "share"
    else:
        raise OSError(f"Unsupported operating system: {os.name}")

    return base / "buku" / "bookmarks.db"


@dataclass
class Config:
    """Main configuration for the native messaging host."""
    db_path: Path = field(default_factory=get_default_db_path)
    max_message_size: int = DEFAULT_MAX_MESSAGE_SIZE  # Bytes, per incoming frame

    @classmethod
    def from_env(cls) -> "Config":
        """Create config from environment variables."""
        db_path_str = os.environ.get("BUKUBROW_DB_PATH")
        db_path = Path(db_path_str).expanduser() if db_path_str else get_default_db_path()

        return cls(
            db_path=db_path,
            max_message_size=int(
                os.environ.get("BUKUBROW_MAX_MESSAGE_SIZE", str(DEFAULT_MAX_MESSAGE_SIZE))
            ),
        )


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global config instance.

    Returns:
        Config loaded from environment
    """
    global _config

    if _config is None:
        _config = Config.from_env()

    return _config
