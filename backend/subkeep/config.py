import os
from functools import lru_cache
from pathlib import Path
from pydantic import BaseModel

# Data directory: use SUBKEEP_DATA_DIR env var if set (e.g. /data in Docker),
# otherwise fall back to ~/.config/subkeep for local dev
_DEFAULT_DATA_DIR = Path.home() / ".config" / "subkeep"
_DEFAULT_CORS_ORIGINS = "http://localhost:5173,http://127.0.0.1:5173"


class Settings(BaseModel):
    """Runtime settings read from the environment."""
    data_dir: Path
    undo_ttl_seconds: int = 30
    log_level: str = "INFO"
    cors_origins: list[str] = []

    @property
    def database_path(self) -> Path:
        return self.data_dir / "subkeep.db"


def load_settings() -> Settings:
    """Build settings from SUBKEEP_* environment variables."""
    data_dir = os.environ.get("SUBKEEP_DATA_DIR")
    origins = os.environ.get("SUBKEEP_CORS_ORIGINS", _DEFAULT_CORS_ORIGINS)
    return Settings(
        data_dir=Path(data_dir) if data_dir else _DEFAULT_DATA_DIR,
        undo_ttl_seconds=int(os.environ.get("SUBKEEP_UNDO_TTL_SECONDS", "30")),
        log_level=os.environ.get("SUBKEEP_LOG_LEVEL", "INFO").upper(),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
    )


@lru_cache
def get_settings() -> Settings:
    return load_settings()


def ensure_data_dir(settings: Settings) -> None:
    """Ensure the data directory exists."""
    settings.data_dir.mkdir(parents=True, exist_ok=True)
