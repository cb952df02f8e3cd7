"""Bot settings from the environment and an optional .env file."""

from decimal import Decimal
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from signalcore.models import ScoringConfig


class Settings(BaseSettings):
    """Bot settings. Each field maps to an upper-case environment variable."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Signal gating
    min_confidence_threshold: float = 0.70
    max_signals_per_day: int = 10

    # Risk targets (percent of entry price)
    stop_loss_percentage: float = 5.0
    take_profit_1_percentage: float = 3.0
    take_profit_2_percentage: float = 6.0

    # Technical analysis thresholds
    rsi_oversold_threshold: float = 30
    rsi_overbought_threshold: float = 70
    fear_greed_min_threshold: int = 20
    fear_greed_max_threshold: int = 80
    bb_squeeze_ratio: float = 0.02
    high_volume_ratio: float = 1.5

    # Analysis cycle
    analysis_interval_seconds: int = 900
    timeframe: str = "15m"
    kline_limit: int = 100
    max_concurrent_analyses: int = 4

    # Learning records
    predictor: str = "rule_based"
    learning_enabled: bool = True

    log_level: str = "info"

    def to_scoring_config(self) -> ScoringConfig:
        """Build the core scoring config. Raises ValueError on invalid thresholds."""
        return ScoringConfig(
            min_confidence=Decimal(str(self.min_confidence_threshold)),
            rsi_oversold=Decimal(str(self.rsi_oversold_threshold)),
            rsi_overbought=Decimal(str(self.rsi_overbought_threshold)),
            fear_greed_min=self.fear_greed_min_threshold,
            fear_greed_max=self.fear_greed_max_threshold,
            stop_loss_pct=Decimal(str(self.stop_loss_percentage)),
            take_profit_1_pct=Decimal(str(self.take_profit_1_percentage)),
            take_profit_2_pct=Decimal(str(self.take_profit_2_percentage)),
            bb_squeeze_ratio=Decimal(str(self.bb_squeeze_ratio)),
            high_volume_ratio=Decimal(str(self.high_volume_ratio)),
        )


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings, read once."""
    return Settings()
