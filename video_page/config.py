import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict

# === Defaults (overridable through the environment) ===
DEFAULT_ROOT = "./videos"
DEFAULT_ALLOWED_IP = "192.168.65.1"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080
STATIC_PREFIX = "/videos"


def _env_flag(value: str) -> bool:
    return value.strip().lower() not in ("0", "false", "no", "off", "")


class ServerConfig(BaseModel):
    """Process-wide settings, fixed at startup and handed to the app factory."""

    model_config = ConfigDict(frozen=True)

    serving_root: Path = Path(DEFAULT_ROOT)
    allowed_caller: str = DEFAULT_ALLOWED_IP
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    allow_subpaths: bool = True
    static_prefix: str = STATIC_PREFIX

    @classmethod
    def from_env(cls) -> "ServerConfig":
        return cls(
            serving_root=Path(os.getenv("VIDEO_PAGE_ROOT", DEFAULT_ROOT)),
            allowed_caller=os.getenv("VIDEO_PAGE_ALLOWED_IP", DEFAULT_ALLOWED_IP),
            host=os.getenv("VIDEO_PAGE_HOST", DEFAULT_HOST),
            port=os.getenv("VIDEO_PAGE_PORT", str(DEFAULT_PORT)),
            allow_subpaths=_env_flag(os.getenv("VIDEO_PAGE_SUBPATHS", "1")),
        )
