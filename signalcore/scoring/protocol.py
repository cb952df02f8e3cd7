"""Outcome predictor protocol.

Predictors attach an expected outcome to learning records. They are
independent of the SignalScorer and never gate its decisions, so a
statistical model can replace the rule-based one without touching scoring.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from signalcore.models import FeatureVector, Prediction


@runtime_checkable
class OutcomePredictor(Protocol):
    """Protocol that all outcome predictors must implement."""

    @property
    def name(self) -> str:
        """Unique predictor identifier (e.g., 'rule_based')."""
        ...

    def predict(self, features: FeatureVector) -> Prediction:
        """Predict the outcome of a signal taken on these features."""
        ...
