"""Scoring configuration model."""

from __future__ import annotations

from decimal import Decimal
from pydantic import BaseModel, Field, model_validator


class RuleWeights(BaseModel):
    """Vote weight of each rule group. Defaults sum to 1.0."""

    rsi: Decimal = Decimal("0.30")
    macd: Decimal = Decimal("0.25")
    bollinger: Decimal = Decimal("0.20")
    sentiment: Decimal = Decimal("0.15")
    trend: Decimal = Decimal("0.10")

    @model_validator(mode="after")
    def _validate(self):
        for name, value in self.model_dump().items():
            if value < 0:
                raise ValueError(f"weight '{name}' must be >= 0, got {value}")
        return self


class ScoringConfig(BaseModel):
    """Thresholds, weights and indicator periods used by the core.

    Nothing in the indicator, feature or scoring code hard-codes these;
    the bot layer builds this model from its settings.
    """

    # Signal gating
    min_confidence: Decimal = Decimal("0.70")
    hold_confidence: Decimal = Decimal("0.1")

    # RSI thresholds
    rsi_oversold: Decimal = Decimal("30")
    rsi_overbought: Decimal = Decimal("70")

    # Fear & Greed thresholds (0-100)
    fear_greed_min: int = 20
    fear_greed_max: int = 80

    # Risk targets, in percent of entry price
    stop_loss_pct: Decimal = Decimal("5.0")
    take_profit_1_pct: Decimal = Decimal("3.0")
    take_profit_2_pct: Decimal = Decimal("6.0")

    # Feature thresholds
    bb_squeeze_ratio: Decimal = Decimal("0.02")  # band width / SMA20
    high_volume_ratio: Decimal = Decimal("1.5")  # last bar volume / average bar volume

    weights: RuleWeights = Field(default_factory=RuleWeights)

    # Indicator periods
    rsi_period: int = Field(default=14, gt=0)
    macd_fast: int = Field(default=12, gt=0)
    macd_slow: int = Field(default=26, gt=0)
    macd_signal: int = Field(default=9, gt=0)
    bb_period: int = Field(default=20, gt=0)
    bb_std_mult: Decimal = Decimal("2")
    stoch_k_period: int = Field(default=14, gt=0)
    stoch_d_period: int = Field(default=3, gt=0)
    williams_period: int = Field(default=14, gt=0)
    range_period: int = Field(default=20, gt=0)  # highest high / lowest low lookback
    volume_period: int = Field(default=20, gt=0)

    @model_validator(mode="after")
    def _validate(self):
        if not (0 <= self.min_confidence <= 1):
            raise ValueError(f"min_confidence must be within [0, 1], got {self.min_confidence}")
        if not (0 <= self.hold_confidence <= 1):
            raise ValueError(f"hold_confidence must be within [0, 1], got {self.hold_confidence}")
        if not (0 <= self.rsi_oversold < self.rsi_overbought <= 100):
            raise ValueError(
                "RSI thresholds must satisfy 0 <= oversold < overbought <= 100, "
                f"got {self.rsi_oversold} / {self.rsi_overbought}"
            )
        if not (0 <= self.fear_greed_min < self.fear_greed_max <= 100):
            raise ValueError(
                "Fear & Greed thresholds must satisfy 0 <= min < max <= 100, "
                f"got {self.fear_greed_min} / {self.fear_greed_max}"
            )
        if not (0 < self.stop_loss_pct < 100):
            raise ValueError(f"stop_loss_pct must be within (0, 100), got {self.stop_loss_pct}")
        if not (0 < self.take_profit_1_pct < self.take_profit_2_pct < 100):
            raise ValueError(
                "take profit percentages must satisfy 0 < tp1 < tp2 < 100, "
                f"got {self.take_profit_1_pct} / {self.take_profit_2_pct}"
            )
        if self.bb_squeeze_ratio <= 0:
            raise ValueError(f"bb_squeeze_ratio must be > 0, got {self.bb_squeeze_ratio}")
        if self.macd_fast >= self.macd_slow:
            raise ValueError(
                f"macd_fast must be shorter than macd_slow, got {self.macd_fast} / {self.macd_slow}"
            )
        return self

    @property
    def min_bars(self) -> int:
        """Shortest window for which every indicator is available."""
        return max(
            self.macd_slow + self.macd_signal - 1,
            self.rsi_period + 1,
            self.bb_period,
            self.stoch_k_period,
            self.williams_period,
            self.range_period,
            self.volume_period,
            2,
        )
