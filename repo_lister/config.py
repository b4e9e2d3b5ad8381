"""Environment-driven settings for the repository lister."""

import os
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional


@dataclass(frozen=True)
class Settings:
    """Runtime settings. Build with Settings.from_env()."""

    github_token: Optional[str] = None
    github_org: str = "takenet"
    github_api_url: str = "https://api.github.com"
    cache_ttl: timedelta = timedelta(minutes=10)
    host: str = "0.0.0.0"
    port: int = 8080
    home_url: str = "https://github.com/caiquemain/takeablip"
    log_level: str = "INFO"
    output_dir: str = "artifacts"

    @classmethod
    def from_env(cls) -> "Settings":
        """Read settings from environment variables, falling back to defaults."""
        return cls(
            github_token=os.getenv("GITHUB_TOKEN") or None,
            github_org=os.getenv("GITHUB_ORG", "takenet"),
            github_api_url=os.getenv("GITHUB_API_URL", "https://api.github.com"),
            cache_ttl=timedelta(minutes=float(os.getenv("CACHE_TTL_MINUTES", "10"))),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8080")),
            home_url=os.getenv("HOME_URL", "https://github.com/caiquemain/takeablip"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            output_dir=os.getenv("OUTPUT_DIR", "artifacts"),
        )
