from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env from the project root so it loads regardless of cwd
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=(str(_ENV_FILE), ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 3457

    # CORS
    cors_origins: str = "*"

    # Storage. Relative paths are resolved against data_dir.
    data_dir: Path = _PROJECT_ROOT / "data"
    config_file: str = "config.json"
    bookings_file: str = "bookings.json"

    # Static booking page
    static_dir: Path = _PROJECT_ROOT / "public"

    # Default range for /api/slots when no end is given
    slot_window_days: int = 14

    smtp_timeout_seconds: float = 10.0

    # Env
    env: str = "development"

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def config_path(self) -> Path:
        return self.data_dir / self.config_file

    @property
    def bookings_path(self) -> Path:
        return self.data_dir / self.bookings_file


settings = Settings()
