"""Aggregate per-symbol signal analytics into overall performance metrics.

Runs at the reporting boundary, so results are floats.
"""

from __future__ import annotations

import logging

import numpy as np

from signalcore.models import PerformanceMetrics, SymbolAnalytics

logger = logging.getLogger(__name__)


def analyze_patterns(analytics: list[SymbolAnalytics]) -> PerformanceMetrics:
    """Compute overall metrics from per-symbol analytics.

    - win rate: profitable / total signals, in percent
    - avg pnl: mean of the per-symbol average PnL
    - accuracy: win rate as a 0-1 fraction
    - avg duration: per-symbol average durations weighted by signal count,
      over the symbols that report one
    """
    if not analytics:
        return PerformanceMetrics()

    totals = np.array([a.total_signals for a in analytics], dtype=np.int64)
    profitable = np.array([a.profitable_signals for a in analytics], dtype=np.int64)
    avg_pnls = np.array([float(a.avg_pnl_percentage) for a in analytics], dtype=np.float64)
    best = max(float(a.best_signal_pnl) for a in analytics)
    worst = min(float(a.worst_signal_pnl) for a in analytics)

    total_signals = int(totals.sum())
    total_profitable = int(profitable.sum())

    win_rate = 0.0
    avg_pnl = 0.0
    if total_signals > 0:
        win_rate = total_profitable / total_signals * 100
        avg_pnl = float(avg_pnls.mean())

    timed = [a for a in analytics if a.avg_duration_minutes is not None and a.total_signals > 0]
    avg_duration = 0.0
    if timed:
        avg_duration = float(
            np.average(
                [float(a.avg_duration_minutes) for a in timed],
                weights=[a.total_signals for a in timed],
            )
        )

    metrics = PerformanceMetrics(
        total_signals=total_signals,
        profitable_signals=total_profitable,
        win_rate=win_rate,
        avg_pnl=avg_pnl,
        best_pnl=best,
        worst_pnl=worst,
        avg_duration=avg_duration,
        accuracy=win_rate / 100,
    )
    logger.info(
        "Pattern analysis completed - Win Rate: %.2f%%, Avg PnL: %.2f%%",
        metrics.win_rate,
        metrics.avg_pnl,
    )
    return metrics
