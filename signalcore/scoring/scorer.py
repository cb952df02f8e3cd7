"""Rule-weighted signal scorer.

Five independent rule groups may each cast a BUY or SELL vote with a
fixed weight:

- RSI vs oversold/overbought thresholds
- MACD line vs signal line, confirmed by histogram sign
- Price vs the outer Bollinger Bands
- Fear & Greed index vs min/max thresholds
- Price vs SMA20 combined with the EMA12/EMA26 relationship

The side with more votes wins; confidence is the summed weight of the
winning votes scaled by the winning share of all votes. Ties, including
no votes at all, are HOLD at a fixed low confidence.

This module is pure business logic with no I/O dependencies.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from signalcore.features import bb_position
from signalcore.models import (
    Action,
    IndicatorSet,
    MarketSnapshot,
    ScoringConfig,
    SignalDecision,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class RuleVote:
    """A directional vote cast by one rule group."""

    action: Action
    weight: Decimal
    reason: str


@dataclass(frozen=True)
class VoteTally:
    action: Action
    confidence: Decimal
    buy_votes: int
    sell_votes: int

    @property
    def total_votes(self) -> int:
        return self.buy_votes + self.sell_votes


def clamp_confidence(value: Decimal) -> Decimal:
    return min(max(value, ZERO), ONE)


def tally_votes(votes: list[RuleVote], hold_confidence: Decimal) -> VoteTally:
    """
    Resolve votes into an action and confidence.

    Args:
        votes: Votes in rule evaluation order
        hold_confidence: Confidence reported for HOLD

    Returns:
        VoteTally with confidence clamped to [0, 1]
    """
    buy = [v for v in votes if v.action == Action.BUY]
    sell = [v for v in votes if v.action == Action.SELL]

    if len(buy) == len(sell):
        # Also covers the empty vote list
        return VoteTally(Action.HOLD, clamp_confidence(hold_confidence), len(buy), len(sell))

    winners = buy if len(buy) > len(sell) else sell
    action = Action.BUY if winners is buy else Action.SELL
    weight = sum((v.weight for v in winners), ZERO)
    ratio = Decimal(len(winners)) / Decimal(len(votes))

    return VoteTally(action, clamp_confidence(weight * ratio), len(buy), len(sell))


class SignalScorer:
    """Turn a market snapshot and its indicators into a SignalDecision."""

    def __init__(self, config: ScoringConfig | None = None, timeframe: str = "15m"):
        self.config = config or ScoringConfig()
        self.timeframe = timeframe

    # ------------------------------------------------------------------
    # Rule groups
    # ------------------------------------------------------------------

    def _rsi_vote(self, indicators: IndicatorSet) -> RuleVote | None:
        cfg = self.config
        if indicators.rsi < cfg.rsi_oversold:
            return RuleVote(Action.BUY, cfg.weights.rsi, f"RSI oversold ({indicators.rsi:.2f})")
        if indicators.rsi > cfg.rsi_overbought:
            return RuleVote(Action.SELL, cfg.weights.rsi, f"RSI overbought ({indicators.rsi:.2f})")
        return None

    def _macd_vote(self, indicators: IndicatorSet) -> RuleVote | None:
        weight = self.config.weights.macd
        if indicators.macd_line > indicators.macd_signal and indicators.macd_histogram > 0:
            return RuleVote(Action.BUY, weight, "MACD bullish crossover")
        if indicators.macd_line < indicators.macd_signal and indicators.macd_histogram < 0:
            return RuleVote(Action.SELL, weight, "MACD bearish crossover")
        return None

    def _bollinger_vote(self, price: Decimal, indicators: IndicatorSet) -> RuleVote | None:
        weight = self.config.weights.bollinger
        if price < indicators.bb_lower:
            return RuleVote(Action.BUY, weight, "Price below lower Bollinger Band")
        if price > indicators.bb_upper:
            return RuleVote(Action.SELL, weight, "Price above upper Bollinger Band")
        return None

    def _sentiment_vote(self, fear_greed: int) -> RuleVote | None:
        cfg = self.config
        if fear_greed < cfg.fear_greed_min:
            return RuleVote(Action.BUY, cfg.weights.sentiment, f"Extreme fear in market ({fear_greed})")
        if fear_greed > cfg.fear_greed_max:
            return RuleVote(Action.SELL, cfg.weights.sentiment, f"Extreme greed in market ({fear_greed})")
        return None

    def _trend_vote(self, price: Decimal, indicators: IndicatorSet) -> RuleVote | None:
        weight = self.config.weights.trend
        if price > indicators.sma20 and indicators.ema12 > indicators.ema26:
            return RuleVote(Action.BUY, weight, "Price above SMA20 with bullish EMA crossover")
        if price < indicators.sma20 and indicators.ema12 < indicators.ema26:
            return RuleVote(Action.SELL, weight, "Price below SMA20 with bearish EMA crossover")
        return None

    def evaluate_rules(self, snapshot: MarketSnapshot, indicators: IndicatorSet) -> list[RuleVote]:
        """Evaluate every rule group in fixed order and collect the votes."""
        candidates = [
            self._rsi_vote(indicators),
            self._macd_vote(indicators),
            self._bollinger_vote(snapshot.price, indicators),
            self._sentiment_vote(snapshot.fear_greed_index),
            self._trend_vote(snapshot.price, indicators),
        ]
        return [v for v in candidates if v is not None]

    # ------------------------------------------------------------------
    # Targets
    # ------------------------------------------------------------------

    def price_targets(
        self, action: Action, price: Decimal
    ) -> tuple[Decimal | None, Decimal | None, Decimal | None]:
        """Return (stop_loss, take_profit_1, take_profit_2) for an action."""
        cfg = self.config
        sl = cfg.stop_loss_pct / HUNDRED
        tp1 = cfg.take_profit_1_pct / HUNDRED
        tp2 = cfg.take_profit_2_pct / HUNDRED

        if action == Action.BUY:
            return price * (ONE - sl), price * (ONE + tp1), price * (ONE + tp2)
        if action == Action.SELL:
            return price * (ONE + sl), price * (ONE - tp1), price * (ONE - tp2)
        return None, None, None

    # ------------------------------------------------------------------
    # Decisions
    # ------------------------------------------------------------------

    def score(
        self,
        snapshot: MarketSnapshot,
        indicators: IndicatorSet | None,
    ) -> SignalDecision | None:
        """
        Score a snapshot without gating.

        Args:
            snapshot: Current market snapshot
            indicators: Indicator set for the same instrument, or None when
                the window was too short

        Returns:
            SignalDecision, or None if indicators are unavailable
        """
        if indicators is None:
            logger.debug(f"No indicators for {snapshot.symbol}, refusing to score")
            return None

        votes = self.evaluate_rules(snapshot, indicators)
        tally = tally_votes(votes, self.config.hold_confidence)
        stop_loss, tp1, tp2 = self.price_targets(tally.action, snapshot.price)

        market_conditions = {
            "rsi": indicators.rsi,
            "macd_histogram": indicators.macd_histogram,
            "bb_position": bb_position(snapshot.price, indicators.bb_upper, indicators.bb_lower),
            "fear_greed_index": snapshot.fear_greed_index,
            "price_change_24h": snapshot.price_change_24h,
            "volume_24h": snapshot.volume_24h,
            "buy_signals": tally.buy_votes,
            "sell_signals": tally.sell_votes,
            "total_signals": tally.total_votes,
        }

        return SignalDecision(
            symbol=snapshot.symbol,
            timeframe=self.timeframe,
            signal_time=snapshot.timestamp,
            action=tally.action,
            confidence=tally.confidence,
            entry_price=snapshot.price,
            stop_loss=stop_loss,
            take_profit_1=tp1,
            take_profit_2=tp2,
            reasoning=[v.reason for v in votes],
            market_conditions=market_conditions,
        )

    def generate(
        self,
        snapshot: MarketSnapshot,
        indicators: IndicatorSet | None,
        quota_exhausted: bool = False,
    ) -> SignalDecision | None:
        """
        Score a snapshot and apply the confidence and daily-quota gates.

        Args:
            snapshot: Current market snapshot
            indicators: Indicator set, or None when unavailable
            quota_exhausted: True once today's signal quota is used up

        Returns:
            SignalDecision to emit, or None
        """
        decision = self.score(snapshot, indicators)
        if decision is None:
            return None

        if decision.confidence < self.config.min_confidence:
            logger.debug(
                f"Signal confidence below threshold for {snapshot.symbol}: "
                f"{decision.action.value} {decision.confidence}"
            )
            return None

        if quota_exhausted:
            logger.info(f"Daily signal limit reached, dropping {decision.action.value} for {snapshot.symbol}")
            return None

        logger.info(
            f"{decision.action.value}: {snapshot.symbol} @ {decision.entry_price} "
            f"confidence={decision.confidence:.2f}"
        )
        return decision
