import os

# Basic settings helper to read environment configuration.


def _as_bool(val: str | None, default: bool = False) -> bool:
    if val is None:
        return default
    return val.lower() in ("1", "true", "yes", "on")


def _as_list(val: str | None, default: list[str]) -> list[str]:
    if not val:
        return default
    return [item.strip() for item in val.split(",") if item.strip()]


class Settings:
    def __init__(self) -> None:
        # Store backend: "memory" (default) or "sql"
        self.LANDMARK_STORE: str = os.getenv("LANDMARK_STORE", "memory").lower()
        self.DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///landmarks.db")

        self.GEONAMES_USERNAME: str = os.getenv("GEONAMES_USERNAME", "demo")
        self.GEONAMES_BASE_URL: str = os.getenv("GEONAMES_BASE_URL", "http://api.geonames.org")
        self.WIKIPEDIA_BASE_URL: str = os.getenv("WIKIPEDIA_BASE_URL", "https://en.wikipedia.org")
        self.PROVIDER_TIMEOUT_SECONDS: float = float(os.getenv("PROVIDER_TIMEOUT_SECONDS", "10"))

        self.MAX_LANDMARKS_PER_BOUNDS: int = int(os.getenv("MAX_LANDMARKS_PER_BOUNDS", "20"))
        self.BACKFILL_ENABLED: bool = _as_bool(os.getenv("BACKFILL_ENABLED"), True)

        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
        self.CORS_ORIGINS: list[str] = _as_list(os.getenv("CORS_ORIGINS"), ["*"])


settings = Settings()
