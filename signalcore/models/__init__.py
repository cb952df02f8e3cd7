"""Core data models."""

from signalcore.models.config import RuleWeights, ScoringConfig
from signalcore.models.kline import Kline, KlineWindow
from signalcore.models.market import (
    FeatureVector,
    IndicatorSet,
    MarketSentiment,
    MarketSnapshot,
    TrendDirection,
)
from signalcore.models.performance import PerformanceMetrics, SymbolAnalytics
from signalcore.models.signal import (
    Action,
    PredictedOutcome,
    Prediction,
    SignalDecision,
)

__all__ = [
    "Action",
    "FeatureVector",
    "IndicatorSet",
    "Kline",
    "KlineWindow",
    "MarketSentiment",
    "MarketSnapshot",
    "PerformanceMetrics",
    "PredictedOutcome",
    "Prediction",
    "RuleWeights",
    "ScoringConfig",
    "SignalDecision",
    "SymbolAnalytics",
    "TrendDirection",
]
