"""Centralized configuration — all env vars in one place."""

import os


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
        self.git_sha: str = os.getenv("GIT_SHA", "unknown")
        self.environment: str = os.getenv("ENVIRONMENT", "local")

        # Prophetic backend
        self.prophetic_api_url: str | None = _strip_slash(os.getenv("PROPHETIC_API_URL"))
        self.prophetic_api_token: str | None = os.getenv("PROPHETIC_API_TOKEN")
        self.upstream_timeout: float = float(os.getenv("UPSTREAM_TIMEOUT_SECONDS", "30"))

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def validate(self) -> list[str]:
        """Return list of missing env vars needed to reach the Prophetic backend."""
        required = ["PROPHETIC_API_URL", "PROPHETIC_API_TOKEN"]
        return [var for var in required if not getattr(self, var.lower())]


def _strip_slash(url: str | None) -> str | None:
    return url.rstrip("/") if url else url


settings = Settings()
