"""Market snapshot and derived indicator/feature models."""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class MarketSnapshot(BaseModel):
    """Current market state for one instrument, as supplied by the data collector."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    price: Decimal = Field(gt=0)
    volume_24h: Decimal = Decimal("0")
    market_cap: Decimal = Decimal("0")
    price_change_1h: Decimal = Decimal("0")  # percent
    price_change_24h: Decimal = Decimal("0")  # percent
    price_change_7d: Decimal = Decimal("0")  # percent
    fear_greed_index: int = Field(default=50, ge=0, le=100)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class IndicatorSet(BaseModel):
    """Technical indicator values computed from one window.

    Every field is present; an incomplete window produces no IndicatorSet
    at all rather than a set with placeholder zeros.
    """

    model_config = ConfigDict(frozen=True)

    rsi: Decimal
    macd_line: Decimal
    macd_signal: Decimal
    macd_histogram: Decimal
    bb_upper: Decimal
    bb_middle: Decimal
    bb_lower: Decimal
    sma20: Decimal
    ema12: Decimal
    ema26: Decimal
    stoch_k: Decimal
    stoch_d: Decimal
    williams_r: Decimal

    # Price action context
    last_close: Decimal
    previous_close: Decimal
    highest_high: Decimal
    lowest_low: Decimal

    # Volume context (bar volumes, not the 24h aggregate)
    last_volume: Decimal
    volume_sma: Decimal


class TrendDirection(str, Enum):
    """Trend derived from price vs SMA20 and the EMA12/EMA26 pair."""

    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class MarketSentiment(str, Enum):
    """Fear & Greed index bucket."""

    EXTREME_FEAR = "extreme_fear"
    FEAR = "fear"
    NEUTRAL = "neutral"
    GREED = "greed"
    EXTREME_GREED = "extreme_greed"


class FeatureVector(BaseModel):
    """Discrete features derived from a snapshot and its indicators."""

    model_config = ConfigDict(frozen=True)

    rsi: Decimal
    macd_histogram: Decimal
    bb_position: Decimal  # 0 = lower band, 1 = upper band
    fear_greed_index: int
    price_change_24h: Decimal
    volume_24h: Decimal
    price_above_sma20: bool
    ema_crossover: bool
    rsi_oversold: bool
    rsi_overbought: bool
    macd_bullish: bool
    bb_squeeze: bool
    high_volume: bool
    trend_direction: TrendDirection
    market_sentiment: MarketSentiment
