"""Configuration for Shadow Realms."""

import os
from dataclasses import dataclass
from pathlib import Path

from .engine.loader import DEFAULT_PACK
from .engine.persistence import DEFAULT_SLOT


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.lower() in ("true", "1", "yes")


@dataclass
class Config:
    """Application configuration."""

    database_url: str = "sqlite:///./realms.db"
    host: str = "localhost"
    port: int = 1965
    certfile: Path | None = None
    keyfile: Path | None = None
    log_level: str = "INFO"
    log_file: Path | None = None
    json_logs: bool = False
    hash_fingerprints: bool = True
    content_pack: str = DEFAULT_PACK
    save_slot: str = DEFAULT_SLOT
    save_dir: Path = Path("saves")

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from REALMS_* environment variables."""
        certfile = os.getenv("REALMS_CERTFILE")
        keyfile = os.getenv("REALMS_KEYFILE")
        log_file = os.getenv("REALMS_LOG_FILE")

        return cls(
            database_url=os.getenv("REALMS_DATABASE_URL", cls.database_url),
            host=os.getenv("REALMS_HOST", cls.host),
            port=int(os.getenv("REALMS_PORT", str(cls.port))),
            certfile=Path(certfile) if certfile else None,
            keyfile=Path(keyfile) if keyfile else None,
            log_level=os.getenv("REALMS_LOG_LEVEL", cls.log_level),
            log_file=Path(log_file) if log_file else None,
            json_logs=_env_flag("REALMS_JSON_LOGS", False),
            hash_fingerprints=_env_flag("REALMS_HASH_FINGERPRINTS", True),
            content_pack=os.getenv("REALMS_CONTENT_PACK", cls.content_pack),
            save_slot=os.getenv("REALMS_SAVE_SLOT", cls.save_slot),
            save_dir=Path(os.getenv("REALMS_SAVE_DIR", str(cls.save_dir))),
        )
