"""Technical indicators for signal generation.

All functions are pure and operate on ``Decimal`` sequences ordered
oldest first. Iterative smoothing (EMA, Wilder RSI) stays in Decimal so
repeated passes over long windows do not accumulate binary rounding error.

Insufficient data is a normal condition: scalar functions return ``None``
and series functions pad the warm-up region with ``None``.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Sequence

from signalcore.models.config import ScoringConfig
from signalcore.models.kline import KlineWindow
from signalcore.models.market import IndicatorSet

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")


@dataclass(frozen=True)
class MacdResult:
    line: Decimal
    signal: Decimal
    histogram: Decimal


@dataclass(frozen=True)
class BollingerBands:
    upper: Decimal
    middle: Decimal
    lower: Decimal


@dataclass(frozen=True)
class StochasticResult:
    k: Decimal
    d: Decimal


def _mean(values: Sequence[Decimal]) -> Decimal:
    return sum(values, ZERO) / Decimal(len(values))


# =============================================================================
# Moving averages
# =============================================================================

def sma_series(values: Sequence[Decimal], period: int) -> list[Decimal | None]:
    """Simple moving average at every index (None during warm-up)."""
    values = list(values)
    result: list[Decimal | None] = [None] * len(values)
    if period <= 0 or len(values) < period:
        return result

    for i in range(period - 1, len(values)):
        result[i] = _mean(values[i - period + 1 : i + 1])
    return result


def sma(values: Sequence[Decimal], period: int) -> Decimal | None:
    """
    Calculate Simple Moving Average of the last ``period`` values.

    Returns:
        SMA value, or None if fewer than ``period`` values are given
    """
    if period <= 0 or len(values) < period:
        return None
    return _mean(list(values)[-period:])


def ema_series(values: Sequence[Decimal], period: int) -> list[Decimal | None]:
    """
    Calculate Exponential Moving Average at every index.

    The value at index ``period - 1`` is the SMA of the first ``period``
    values; later values apply the multiplier ``2 / (period + 1)``.
    The value at index ``i`` therefore equals ``ema(values[:i + 1])``.

    Args:
        values: Sequence of price values
        period: EMA period

    Returns:
        List of EMA values (same length as input, None for warm-up)
    """
    values = list(values)
    result: list[Decimal | None] = [None] * len(values)
    if period <= 0 or len(values) < period:
        return result

    current = _mean(values[:period])
    result[period - 1] = current
    multiplier = Decimal(2) / Decimal(period + 1)

    for i in range(period, len(values)):
        current = (values[i] - current) * multiplier + current
        result[i] = current
    return result


def ema(values: Sequence[Decimal], period: int) -> Decimal | None:
    """Latest EMA value, or None if fewer than ``period`` values are given."""
    if period <= 0 or len(values) < period:
        return None
    return ema_series(values, period)[-1]


# =============================================================================
# Oscillators
# =============================================================================

def rsi(values: Sequence[Decimal], period: int = 14) -> Decimal | None:
    """
    Calculate Relative Strength Index with Wilder smoothing.

    Initial average gain/loss cover the first ``period`` deltas; each
    later delta updates ``avg = (avg * (period - 1) + change) / period``
    on its own track. A zero average loss yields 100.

    Returns:
        RSI in [0, 100], or None if fewer than ``period + 1`` values
    """
    values = list(values)
    if period <= 0 or len(values) < period + 1:
        return None

    gains = ZERO
    losses = ZERO
    for i in range(1, period + 1):
        change = values[i] - values[i - 1]
        if change > 0:
            gains += change
        else:
            losses -= change

    p = Decimal(period)
    avg_gain = gains / p
    avg_loss = losses / p

    for i in range(period + 1, len(values)):
        change = values[i] - values[i - 1]
        gain = change if change > 0 else ZERO
        loss = -change if change < 0 else ZERO
        avg_gain = (avg_gain * (p - 1) + gain) / p
        avg_loss = (avg_loss * (p - 1) + loss) / p

    if avg_loss == 0:
        return HUNDRED

    rs = avg_gain / avg_loss
    return HUNDRED - HUNDRED / (1 + rs)


def macd_history(
    values: Sequence[Decimal],
    fast_period: int = 12,
    slow_period: int = 26,
) -> list[Decimal]:
    """
    MACD line for every prefix long enough for the slow EMA.

    Equivalent to evaluating ``ema(prefix, fast) - ema(prefix, slow)`` for
    each prefix ending at index ``slow_period - 1`` onwards.
    """
    fast = ema_series(values, fast_period)
    slow = ema_series(values, slow_period)
    return [
        f - s
        for f, s in zip(fast, slow)
        if f is not None and s is not None
    ]


def macd(
    values: Sequence[Decimal],
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> MacdResult | None:
    """
    Calculate MACD line, signal line and histogram.

    The signal line is the EMA of the MACD-line history, so it needs
    ``slow_period + signal_period - 1`` values.

    Returns:
        MacdResult, or None if the history is too short for the signal line
    """
    history = macd_history(values, fast_period, slow_period)
    signal = ema(history, signal_period)
    if signal is None:
        return None

    line = history[-1]
    return MacdResult(line=line, signal=signal, histogram=line - signal)


# =============================================================================
# Volatility
# =============================================================================

def standard_deviation(values: Sequence[Decimal], period: int) -> Decimal | None:
    """Population standard deviation of the last ``period`` values."""
    mean = sma(values, period)
    if mean is None:
        return None

    window = list(values)[-period:]
    variance = sum(((v - mean) ** 2 for v in window), ZERO) / Decimal(period)
    return variance.sqrt()


def bollinger_bands(
    values: Sequence[Decimal],
    period: int = 20,
    std_mult: Decimal = Decimal("2"),
) -> BollingerBands | None:
    """
    Calculate Bollinger Bands.

    middle = SMA(period), upper/lower = middle +/- std_mult * stddev.
    A flat window produces three equal bands.
    """
    middle = sma(values, period)
    std = standard_deviation(values, period)
    if middle is None or std is None:
        return None

    return BollingerBands(
        upper=middle + std_mult * std,
        middle=middle,
        lower=middle - std_mult * std,
    )


# =============================================================================
# Range-based oscillators
# =============================================================================

def highest(values: Sequence[Decimal], period: int) -> Decimal | None:
    """Highest value over the trailing ``period`` values."""
    if period <= 0 or len(values) < period:
        return None
    return max(list(values)[-period:])


def lowest(values: Sequence[Decimal], period: int) -> Decimal | None:
    """Lowest value over the trailing ``period`` values."""
    if period <= 0 or len(values) < period:
        return None
    return min(list(values)[-period:])


def _stoch_k_at(
    highs: Sequence[Decimal],
    lows: Sequence[Decimal],
    closes: Sequence[Decimal],
    end: int,
    period: int,
) -> Decimal:
    hh = max(highs[end - period : end])
    ll = min(lows[end - period : end])
    if hh == ll:
        return ZERO
    k = (closes[end - 1] - ll) / (hh - ll) * HUNDRED
    # A close printed outside its own bar range must not leave [0, 100]
    return min(max(k, ZERO), HUNDRED)


def stochastic(
    highs: Sequence[Decimal],
    lows: Sequence[Decimal],
    closes: Sequence[Decimal],
    k_period: int = 14,
    d_period: int = 3,
) -> StochasticResult | None:
    """
    Calculate Stochastic %K and %D.

    %K = (close - lowest low) / (highest high - lowest low) * 100, 0 when
    the range is zero. %D is the SMA of the last ``d_period`` %K values;
    with too little history for that it falls back to %K.
    """
    highs, lows, closes = list(highs), list(lows), list(closes)
    n = min(len(highs), len(lows), len(closes))
    if k_period <= 0 or n < k_period:
        return None
    highs, lows, closes = highs[-n:], lows[-n:], closes[-n:]

    k = _stoch_k_at(highs, lows, closes, n, k_period)
    if d_period <= 1 or n < k_period + d_period - 1:
        return StochasticResult(k=k, d=k)

    k_history = [
        _stoch_k_at(highs, lows, closes, end, k_period)
        for end in range(n - d_period + 1, n + 1)
    ]
    return StochasticResult(k=k, d=_mean(k_history))


def williams_r(
    highs: Sequence[Decimal],
    lows: Sequence[Decimal],
    closes: Sequence[Decimal],
    period: int = 14,
) -> Decimal | None:
    """
    Calculate Williams %R in [-100, 0].

    (highest high - close) / (highest high - lowest low) * -100; 0 when
    the range is zero.
    """
    hh = highest(highs, period)
    ll = lowest(lows, period)
    if hh is None or ll is None or not closes:
        return None
    if hh == ll:
        return ZERO

    value = (hh - closes[-1]) / (hh - ll) * Decimal("-100")
    return min(max(value, -HUNDRED), ZERO)


# =============================================================================
# IndicatorCalculator class
# =============================================================================

class IndicatorCalculator:
    """Calculator for the full indicator set used by the scorer.

    Holds only configuration; every call recomputes from the window it
    is given, so one instance can serve many instruments concurrently.
    """

    def __init__(self, config: ScoringConfig | None = None):
        self.config = config or ScoringConfig()

    @property
    def min_bars(self) -> int:
        return self.config.min_bars

    def calculate(
        self,
        highs: Sequence[Decimal],
        lows: Sequence[Decimal],
        closes: Sequence[Decimal],
        volumes: Sequence[Decimal],
    ) -> IndicatorSet | None:
        """
        Calculate every indicator for the latest bar.

        Args:
            highs: High prices, oldest first
            lows: Low prices
            closes: Close prices
            volumes: Bar volumes

        Returns:
            IndicatorSet, or None if any indicator is unavailable
        """
        cfg = self.config
        if len(closes) < self.min_bars:
            logger.debug(
                "Insufficient data for indicators: %d bars, need %d",
                len(closes),
                self.min_bars,
            )
            return None

        rsi_value = rsi(closes, cfg.rsi_period)
        macd_value = macd(closes, cfg.macd_fast, cfg.macd_slow, cfg.macd_signal)
        bands = bollinger_bands(closes, cfg.bb_period, cfg.bb_std_mult)
        ema_fast = ema(closes, cfg.macd_fast)
        ema_slow = ema(closes, cfg.macd_slow)
        stoch = stochastic(highs, lows, closes, cfg.stoch_k_period, cfg.stoch_d_period)
        williams = williams_r(highs, lows, closes, cfg.williams_period)
        hh = highest(highs, cfg.range_period)
        ll = lowest(lows, cfg.range_period)
        volume_avg = sma(volumes, cfg.volume_period)

        values = [rsi_value, macd_value, bands, ema_fast, ema_slow, stoch, williams, hh, ll, volume_avg]
        if any(v is None for v in values):
            logger.debug("Indicator unavailable for window of %d bars", len(closes))
            return None

        return IndicatorSet(
            rsi=rsi_value,
            macd_line=macd_value.line,
            macd_signal=macd_value.signal,
            macd_histogram=macd_value.histogram,
            bb_upper=bands.upper,
            bb_middle=bands.middle,
            bb_lower=bands.lower,
            sma20=bands.middle,
            ema12=ema_fast,
            ema26=ema_slow,
            stoch_k=stoch.k,
            stoch_d=stoch.d,
            williams_r=williams,
            last_close=closes[-1],
            previous_close=closes[-2],
            highest_high=hh,
            lowest_low=ll,
            last_volume=volumes[-1],
            volume_sma=volume_avg,
        )

    def calculate_window(self, window: KlineWindow) -> IndicatorSet | None:
        """Calculate the indicator set for a kline window."""
        return self.calculate(
            window.highs(), window.lows(), window.closes(), window.volumes()
        )
