"""Signal decision and outcome prediction models."""

import hashlib
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Action(str, Enum):
    """Trading action."""

    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"


class PredictedOutcome(str, Enum):
    """Outcome label attached to learning records."""

    PROFIT = "profit"
    LOSS = "loss"


def _generate_signal_id(symbol: str, timeframe: str, signal_time: datetime, action: str) -> str:
    """Generate deterministic signal ID based on signal attributes.

    Re-running an analysis over the same snapshot yields the same ID,
    so a persistence layer can treat inserts as idempotent.
    """
    ts_str = signal_time.strftime("%Y%m%d%H%M%S%f")
    key = f"{symbol}:{timeframe}:{ts_str}:{action}"
    return hashlib.sha256(key.encode()).hexdigest()[:32]


class SignalDecision(BaseModel):
    """Outcome of one analysis cycle for one instrument."""

    model_config = ConfigDict(frozen=True)

    id: str = ""  # Will be set in model_post_init
    symbol: str
    timeframe: str = "15m"
    signal_time: datetime
    action: Action
    confidence: Decimal = Field(ge=0, le=1)
    entry_price: Decimal
    stop_loss: Decimal | None = None
    take_profit_1: Decimal | None = None
    take_profit_2: Decimal | None = None
    reasoning: list[str] = Field(default_factory=list)
    market_conditions: dict[str, Any] = Field(default_factory=dict)

    def model_post_init(self, __context) -> None:
        """Derive the id from symbol, timeframe, time and action when not given."""
        if not self.id:
            object.__setattr__(
                self,
                "id",
                _generate_signal_id(
                    self.symbol, self.timeframe, self.signal_time, self.action.value
                ),
            )

    @property
    def reasoning_text(self) -> str:
        """Triggered rules joined in evaluation order."""
        return "; ".join(self.reasoning)

    @property
    def risk_amount(self) -> Decimal | None:
        """Distance from entry to stop loss, None without a stop."""
        if self.stop_loss is None:
            return None
        if self.action == Action.BUY:
            return self.entry_price - self.stop_loss
        return self.stop_loss - self.entry_price

    @property
    def reward_amount(self) -> Decimal | None:
        """Get the reward amount (distance to the first take profit)."""
        if self.take_profit_1 is None:
            return None
        if self.action == Action.BUY:
            return self.take_profit_1 - self.entry_price
        return self.entry_price - self.take_profit_1


class Prediction(BaseModel):
    """Heuristic outcome prediction for a feature vector."""

    model_config = ConfigDict(frozen=True)

    outcome: PredictedOutcome
    confidence: Decimal = Field(ge=0, le=1)
    bullish_score: int = 0
    bearish_score: int = 0
    predictor: str = ""
