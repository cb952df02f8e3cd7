"""Technical indicators (pure math, no I/O)."""

from signalcore.indicators.indicators import (
    BollingerBands,
    IndicatorCalculator,
    MacdResult,
    StochasticResult,
    bollinger_bands,
    ema,
    ema_series,
    highest,
    lowest,
    macd,
    macd_history,
    rsi,
    sma,
    sma_series,
    standard_deviation,
    stochastic,
    williams_r,
)

__all__ = [
    "BollingerBands",
    "IndicatorCalculator",
    "MacdResult",
    "StochasticResult",
    "bollinger_bands",
    "ema",
    "ema_series",
    "highest",
    "lowest",
    "macd",
    "macd_history",
    "rsi",
    "sma",
    "sma_series",
    "standard_deviation",
    "stochastic",
    "williams_r",
]
