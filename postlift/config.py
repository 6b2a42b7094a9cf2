"""Application configuration from environment variables."""

from dataclasses import replace

from pydantic_settings import BaseSettings

from postlift.services.weights import DEFAULT_WEIGHTS, AttributionWeights


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    api_host: str = "0.0.0.0"
    api_port: int = 8000
    debug: bool = False

    log_level: str = "INFO"
    log_format: str = "console"  # "console" or "json"

    # Attribution heuristics (see services/weights.py for the full set)
    baseline_lookback_days: int = DEFAULT_WEIGHTS.baseline_lookback_days
    anomaly_std_ratio: float = DEFAULT_WEIGHTS.anomaly_std_ratio
    anomaly_z_threshold: float = DEFAULT_WEIGHTS.anomaly_z_threshold
    residual_discount: float = DEFAULT_WEIGHTS.residual_discount

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "POSTLIFT_"

    def attribution_weights(self) -> AttributionWeights:
        """Engine weights with the environment overrides applied."""
        return replace(
            DEFAULT_WEIGHTS,
            baseline_lookback_days=self.baseline_lookback_days,
            anomaly_std_ratio=self.anomaly_std_ratio,
            anomaly_z_threshold=self.anomaly_z_threshold,
            residual_discount=self.residual_discount,
        )


settings = Settings()
