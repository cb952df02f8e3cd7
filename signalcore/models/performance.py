"""Signal performance models used for pattern analysis."""

from decimal import Decimal
from pydantic import BaseModel


class SymbolAnalytics(BaseModel):
    """Per-symbol aggregate of closed signals, as stored by the persistence layer."""

    symbol: str
    total_signals: int = 0
    profitable_signals: int = 0
    loss_signals: int = 0
    win_rate_percentage: Decimal = Decimal("0")
    avg_pnl_percentage: Decimal = Decimal("0")
    best_signal_pnl: Decimal = Decimal("0")
    worst_signal_pnl: Decimal = Decimal("0")
    avg_confidence: Decimal = Decimal("0")
    avg_duration_minutes: Decimal | None = None


class PerformanceMetrics(BaseModel):
    """Overall metrics across all symbols."""

    total_signals: int = 0
    profitable_signals: int = 0
    win_rate: float = 0.0  # percent
    avg_pnl: float = 0.0  # percent
    best_pnl: float = 0.0
    worst_pnl: float = 0.0
    avg_duration: float = 0.0  # minutes
    accuracy: float = 0.0  # 0-1
