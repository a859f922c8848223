"""Centralized configuration — all env vars in one place."""

import os


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
        self.git_sha: str = os.getenv("GIT_SHA", "unknown")
        self.environment: str = os.getenv("ENVIRONMENT", "local")

        # OpenParliament upstream
        self.openparliament_base_url: str = os.getenv(
            "OPENPARLIAMENT_BASE_URL", "https://api.openparliament.ca"
        ).rstrip("/")
        self.upstream_timeout: float = float(os.getenv("UPSTREAM_TIMEOUT_SECONDS", "10"))
        self.ballots_timeout: float = float(os.getenv("BALLOTS_TIMEOUT_SECONDS", "8"))
        self.vote_detail_timeout: float = float(os.getenv("VOTE_DETAIL_TIMEOUT_SECONDS", "5"))

        # Voting history pipeline
        self.ballots_page_size: int = int(os.getenv("BALLOTS_PAGE_SIZE", "50"))
        self.enrichment_cap: int = int(os.getenv("ENRICHMENT_CAP", "10"))
        self.voting_history_ttl: int = int(os.getenv("VOTING_HISTORY_TTL_SECONDS", "3600"))

        # Durable cache
        self.database_url: str = os.getenv(
            "DATABASE_URL", "sqlite+aiosqlite:///./parliament_watch.db"
        )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    def validate(self) -> list[str]:
        """Return list of settings that are unusable as configured."""
        problems = []
        if not self.openparliament_base_url.startswith(("http://", "https://")):
            problems.append("OPENPARLIAMENT_BASE_URL")
        if not 0 <= self.enrichment_cap <= 10:
            problems.append("ENRICHMENT_CAP")
        return problems


settings = Settings()
