"""Per-instrument analysis pipeline.

Wires the indicator calculator, feature extractor, outcome predictor and
signal scorer together for one immutable window. Holds configuration
only; every call recomputes from the window it is given.

This module is pure business logic with no I/O dependencies.
"""

import logging
from dataclasses import dataclass
from typing import Sequence

from signalcore.features import FeatureExtractor
from signalcore.indicators import IndicatorCalculator
from signalcore.models import (
    FeatureVector,
    IndicatorSet,
    Kline,
    KlineWindow,
    MarketSnapshot,
    Prediction,
    ScoringConfig,
    SignalDecision,
)
from signalcore.scoring import (
    RULE_BASED_PREDICTOR_NAME,
    OutcomePredictor,
    SignalScorer,
    create_predictor,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisResult:
    """Everything one analysis cycle produced for one instrument.

    Attributes:
        symbol: Instrument analyzed.
        indicators: Indicator set, None when the window was too short.
        features: Feature vector, None without indicators.
        prediction: Outcome prediction, None without features.
        decision: Gated signal decision, None when no signal is emitted.
        skipped_reason: Why no decision was emitted, if applicable.
    """

    symbol: str
    indicators: IndicatorSet | None = None
    features: FeatureVector | None = None
    prediction: Prediction | None = None
    decision: SignalDecision | None = None
    skipped_reason: str | None = None


class SignalAnalyzer:
    """Run the full indicator -> feature -> score pipeline."""

    def __init__(
        self,
        config: ScoringConfig | None = None,
        predictor: OutcomePredictor | None = None,
        timeframe: str = "15m",
    ):
        self.config = config or ScoringConfig()
        self.calculator = IndicatorCalculator(self.config)
        self.extractor = FeatureExtractor(self.config)
        self.scorer = SignalScorer(self.config, timeframe=timeframe)
        self.predictor = predictor or create_predictor(RULE_BASED_PREDICTOR_NAME)

    def analyze(
        self,
        klines: KlineWindow | Sequence[Kline],
        snapshot: MarketSnapshot,
        quota_exhausted: bool = False,
    ) -> AnalysisResult:
        """
        Analyze one instrument.

        Args:
            klines: Window of closed bars, oldest first
            snapshot: Current market snapshot
            quota_exhausted: True once today's signal quota is used up

        Returns:
            AnalysisResult; ``decision`` is None when nothing should be emitted
        """
        if isinstance(klines, KlineWindow):
            indicators = self.calculator.calculate_window(klines)
            bars = len(klines)
        else:
            bars = len(klines)
            indicators = self.calculator.calculate(
                [k.high for k in klines],
                [k.low for k in klines],
                [k.close for k in klines],
                [k.volume for k in klines],
            )

        if indicators is None:
            logger.warning(
                f"Insufficient data for technical analysis of {snapshot.symbol}: "
                f"{bars} bars, need at least {self.calculator.min_bars}"
            )
            return AnalysisResult(symbol=snapshot.symbol, skipped_reason="insufficient_data")

        features = self.extractor.extract(snapshot, indicators)
        prediction = self.predictor.predict(features)

        decision = self.scorer.score(snapshot, indicators)
        skipped_reason = None
        if decision.confidence < self.config.min_confidence:
            skipped_reason = "low_confidence"
            decision = None
        elif quota_exhausted:
            skipped_reason = "daily_limit"
            decision = None

        if skipped_reason:
            logger.debug(f"No signal for {snapshot.symbol}: {skipped_reason}")

        return AnalysisResult(
            symbol=snapshot.symbol,
            indicators=indicators,
            features=features,
            prediction=prediction,
            decision=decision,
            skipped_reason=skipped_reason,
        )
