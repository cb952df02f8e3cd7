"""Signal scoring and outcome prediction.

Public API:
- SignalScorer: rule-weighted BUY/SELL/HOLD scorer
- OutcomePredictor: Protocol that outcome predictors must implement
- register_predictor / create_predictor / list_predictors / describe_predictors

Importing this package auto-registers the built-in predictors.
"""

from signalcore.scoring.protocol import OutcomePredictor
from signalcore.scoring.registry import (
    PredictorInfo,
    create_predictor,
    describe_predictors,
    get_predictor_class,
    list_predictors,
    register_predictor,
)
from signalcore.scoring.scorer import (
    RuleVote,
    SignalScorer,
    VoteTally,
    clamp_confidence,
    tally_votes,
)

# Import built-in predictors to trigger auto-registration
from signalcore.scoring.predictor import (  # noqa: E402
    RULE_BASED_PREDICTOR_NAME,
    RuleBasedPredictor,
)

__all__ = [
    "OutcomePredictor",
    "PredictorInfo",
    "RULE_BASED_PREDICTOR_NAME",
    "RuleBasedPredictor",
    "RuleVote",
    "SignalScorer",
    "VoteTally",
    "clamp_confidence",
    "create_predictor",
    "describe_predictors",
    "get_predictor_class",
    "list_predictors",
    "register_predictor",
    "tally_votes",
]
