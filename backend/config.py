"""Centralized configuration — all env vars in one place."""

import os


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.port: int = int(os.getenv("PORT", "3000"))
        self.cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
        self.git_sha: str = os.getenv("GIT_SHA", "unknown")
        self.environment: str = os.getenv("ENVIRONMENT", "local")

        # ThingSpeak upstream
        self.thingspeak_base_url: str = os.getenv("THINGSPEAK_BASE_URL", "https://api.thingspeak.com")
        self.upstream_max_attempts: int = int(os.getenv("UPSTREAM_MAX_ATTEMPTS", "3"))

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def validate(self) -> list[str]:
        """Return a list of problems with the loaded settings."""
        problems = []
        if not 0 < self.port < 65536:
            problems.append(f"PORT out of range: {self.port}")
        if self.upstream_max_attempts < 1:
            problems.append(f"UPSTREAM_MAX_ATTEMPTS must be >= 1, got {self.upstream_max_attempts}")
        return problems


settings = Settings()
