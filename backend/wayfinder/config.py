from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Logging
    log_level: str = "INFO"
    log_file: str | None = None

    # Ranking
    ranking_limit: int = 20
    max_radius_meters: float = 15000.0

    # Scoring weights (must sum to 1.0)
    weight_budget_fit: float = 0.35
    weight_preference_match: float = 0.30
    weight_proximity: float = 0.20
    weight_popularity: float = 0.15

    # Parallel scoring
    scoring_workers: int = 1  # 1 = serial
    parallel_scoring_min_candidates: int = 64

    # Route optimizer
    two_opt_iteration_factor: int = 1  # cap = factor * n^2 accepted moves
    optimizer_timeout_seconds: float | None = None

    # Average speeds per travel mode
    walking_speed_kmh: float = 5.0
    driving_speed_kmh: float = 40.0
    transit_speed_kmh: float = 20.0

    # Transport costs
    currency: str = "RON"

    model_config = {
        "env_prefix": "WAYFINDER_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
