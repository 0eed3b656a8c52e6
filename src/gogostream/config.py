import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080
DEFAULT_LOG_PATH = "gogostream.log"


def default_videos_dir() -> Path:
    """Returns the user's home directory.

    Falls back to "~" unexpanded when the home directory can't be determined.
    """
    return Path(os.path.expanduser("~"))


class ServerConfig(BaseModel):
    """Server settings, resolved once at startup and immutable afterwards."""

    model_config = ConfigDict(frozen=True)

    host: str = DEFAULT_HOST
    port: int = Field(default=DEFAULT_PORT, ge=0, le=65535)
    # Accepted on the command line but not read by any handler yet.
    videos_dir: Path = Field(default_factory=default_videos_dir)
    log_path: Path = Path(DEFAULT_LOG_PATH)
    log_level: Literal["debug", "info", "warning", "error"] = "info"

    @property
    def address(self) -> str:
        return f"{self.host}:{self.port}"
