"""Feature extraction from a market snapshot and its indicators.

This module is pure business logic with no I/O dependencies.
"""

from decimal import Decimal

from signalcore.models import (
    FeatureVector,
    IndicatorSet,
    MarketSentiment,
    MarketSnapshot,
    ScoringConfig,
    TrendDirection,
)

HALF = Decimal("0.5")


def bb_position(price: Decimal, upper: Decimal, lower: Decimal) -> Decimal:
    """Position of price within the bands: 0 at lower, 1 at upper, 0.5 if degenerate."""
    if upper == lower:
        return HALF
    return (price - lower) / (upper - lower)


def bucket_sentiment(index: int) -> MarketSentiment:
    """Bucket a 0-100 Fear & Greed index. Extremes are checked first."""
    if index <= 20:
        return MarketSentiment.EXTREME_FEAR
    if index <= 40:
        return MarketSentiment.FEAR
    if index >= 80:
        return MarketSentiment.EXTREME_GREED
    if index >= 60:
        return MarketSentiment.GREED
    return MarketSentiment.NEUTRAL


def trend_direction(price_above_sma20: bool, ema_crossover: bool) -> TrendDirection:
    if price_above_sma20 and ema_crossover:
        return TrendDirection.BULLISH
    if not price_above_sma20 and not ema_crossover:
        return TrendDirection.BEARISH
    return TrendDirection.NEUTRAL


class FeatureExtractor:
    """Derive the FeatureVector consumed by scorers and outcome predictors."""

    def __init__(self, config: ScoringConfig | None = None):
        self.config = config or ScoringConfig()

    def is_bb_squeeze(self, indicators: IndicatorSet) -> bool:
        if indicators.sma20 == 0:
            return False
        width = (indicators.bb_upper - indicators.bb_lower) / indicators.sma20
        return width < self.config.bb_squeeze_ratio

    def is_high_volume(self, snapshot: MarketSnapshot, indicators: IndicatorSet) -> bool:
        """Last bar volume against the average bar volume.

        Without bar volume history only a non-zero 24h volume counts.
        """
        if indicators.volume_sma > 0:
            return indicators.last_volume >= indicators.volume_sma * self.config.high_volume_ratio
        return snapshot.volume_24h > 0

    def extract(self, snapshot: MarketSnapshot, indicators: IndicatorSet) -> FeatureVector:
        cfg = self.config
        price = snapshot.price

        above_sma20 = price > indicators.sma20
        crossover = indicators.ema12 > indicators.ema26

        return FeatureVector(
            rsi=indicators.rsi,
            macd_histogram=indicators.macd_histogram,
            bb_position=bb_position(price, indicators.bb_upper, indicators.bb_lower),
            fear_greed_index=snapshot.fear_greed_index,
            price_change_24h=snapshot.price_change_24h,
            volume_24h=snapshot.volume_24h,
            price_above_sma20=above_sma20,
            ema_crossover=crossover,
            rsi_oversold=indicators.rsi < cfg.rsi_oversold,
            rsi_overbought=indicators.rsi > cfg.rsi_overbought,
            macd_bullish=indicators.macd_histogram > 0,
            bb_squeeze=self.is_bb_squeeze(indicators),
            high_volume=self.is_high_volume(snapshot, indicators),
            trend_direction=trend_direction(above_sma20, crossover),
            market_sentiment=bucket_sentiment(snapshot.fear_greed_index),
        )
