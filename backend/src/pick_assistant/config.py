"""Application configuration via pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Settings
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3001
    log_level: str = "INFO"

    # CORS - comma-separated origins (env var: CORS_ORIGINS)
    cors_origins: str = "http://localhost:5173,http://127.0.0.1:5173"

    @computed_field
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # Riot Games API
    riot_api_key: str = ""
    riot_region: str = "europe"  # Regional routing: americas, europe, asia, sea
    riot_platform: str = "euw1"  # Platform routing: na1, euw1, kr, ...
    request_timeout: float = 10.0
    riot_requests_per_second: int = 20
    riot_requests_per_two_minutes: int = 100

    # Static data / legacy aggregated stats provider
    ddragon_base_url: str = "https://ddragon.leagueoflegends.com"
    ugg_base_url: str = "https://stats2.u.gg/lol/1.5"

    # Retry policy (seconds)
    retry_attempts: int = 3
    retry_base_delay: float = 2.0
    batch_fetch_delay: float = 0.05

    # Stats sampling
    stats_source: Literal["sampled", "aggregated"] = "sampled"
    players_to_sample: int = 10
    matches_per_player: int = 20
    ranked_queue_id: int = 420  # Ranked Solo/Duo
    target_sample_size: int = 200
    min_sample_size: int = 30
    min_matchup_sample: int = 10
    min_synergy_sample: int = 5

    # Cache TTLs (seconds)
    entity_stats_ttl: float = 3600
    match_sample_ttl: float = 7200
    matchup_ttl: float = 7200
    leaderboard_ttl: float = 86400
    patch_ttl: float = 86400
    cache_sweep_interval: float = 60

    # Default recommendation weights (normalized per request)
    weight_win_rate: float = 0.40
    weight_popularity: float = 0.10
    weight_counter: float = 0.30
    weight_synergy: float = 0.20
    scoring_batch_size: int = 10
    default_top_n: int = 5

    # Feature flags
    enable_counter_calculation: bool = True
    enable_synergy_calculation: bool = True


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
