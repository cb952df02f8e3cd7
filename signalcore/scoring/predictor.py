"""Rule-based outcome predictor.

Additive scoring over boolean features. Each bullish or bearish cue adds
to its side's score and to a shared confidence that starts at 0.5. A side
that strictly leads with at least 3 points predicts "profit"; anything
else predicts "loss" at half the accumulated confidence.
"""

from decimal import Decimal

from signalcore.models import (
    FeatureVector,
    MarketSentiment,
    PredictedOutcome,
    Prediction,
    TrendDirection,
)
from signalcore.scoring.registry import register_predictor

RULE_BASED_PREDICTOR_NAME = "rule_based"

BASE_CONFIDENCE = Decimal("0.5")
MIN_SCORE = 3
BB_LOW = Decimal("0.2")
BB_HIGH = Decimal("0.8")


@register_predictor(RULE_BASED_PREDICTOR_NAME)
class RuleBasedPredictor:
    """Deterministic heuristic predictor."""

    def __init__(self, min_score: int = MIN_SCORE):
        self.min_score = min_score

    @property
    def name(self) -> str:
        return RULE_BASED_PREDICTOR_NAME

    def predict(self, features: FeatureVector) -> Prediction:
        confidence = BASE_CONFIDENCE

        # (condition, points, confidence increment)
        bullish_cues = [
            (features.rsi_oversold, 2, Decimal("0.15")),
            (features.macd_bullish, 2, Decimal("0.12")),
            (features.bb_position < BB_LOW, 1, Decimal("0.08")),
            (features.market_sentiment == MarketSentiment.EXTREME_FEAR, 2, Decimal("0.10")),
            (features.trend_direction == TrendDirection.BULLISH, 1, Decimal("0.05")),
        ]
        bearish_cues = [
            (features.rsi_overbought, 2, Decimal("0.15")),
            (not features.macd_bullish, 1, Decimal("0.08")),
            (features.bb_position > BB_HIGH, 1, Decimal("0.08")),
            (features.market_sentiment == MarketSentiment.EXTREME_GREED, 2, Decimal("0.10")),
            (features.trend_direction == TrendDirection.BEARISH, 1, Decimal("0.05")),
        ]

        bullish = 0
        for hit, points, increment in bullish_cues:
            if hit:
                bullish += points
                confidence += increment

        bearish = 0
        for hit, points, increment in bearish_cues:
            if hit:
                bearish += points
                confidence += increment

        if (bullish > bearish and bullish >= self.min_score) or (
            bearish > bullish and bearish >= self.min_score
        ):
            outcome = PredictedOutcome.PROFIT
        else:
            outcome = PredictedOutcome.LOSS
            confidence = confidence * BASE_CONFIDENCE

        return Prediction(
            outcome=outcome,
            confidence=min(confidence, Decimal("1")),
            bullish_score=bullish,
            bearish_score=bearish,
            predictor=self.name,
        )
