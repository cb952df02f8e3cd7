"""OHLCV bars and the per-instrument analysis window."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class Kline(BaseModel):
    """One closed OHLCV bar."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime  # bar open time, UTC
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal
    volume: Decimal

    @property
    def is_bullish(self) -> bool:
        return self.close > self.open

    @property
    def is_bearish(self) -> bool:
        return self.close < self.open

    @property
    def range_size(self) -> Decimal:
        """High-low spread of the bar."""
        return self.high - self.low


class KlineWindow(BaseModel):
    """Bounded, strictly time-ordered bars for one symbol, oldest first.

    Indicators always read the window from the oldest bar to the newest,
    so out-of-order bars are dropped instead of inserted.
    """

    symbol: str
    timeframe: str = "15m"
    klines: list[Kline] = Field(default_factory=list)
    max_size: int = Field(default=100, gt=0)

    def add(self, kline: Kline) -> bool:
        """
        Append a bar.

        A bar with the newest timestamp replaces the stored one (the
        exchange re-sent a correction); an older bar is ignored.

        Returns:
            True if the window changed
        """
        newest = self.last
        if newest is not None:
            if kline.timestamp < newest.timestamp:
                return False
            if kline.timestamp == newest.timestamp:
                self.klines[-1] = kline
                return True

        self.klines.append(kline)
        overflow = len(self.klines) - self.max_size
        if overflow > 0:
            del self.klines[:overflow]
        return True

    def extend(self, klines: list[Kline]) -> int:
        """Add bars in order; returns how many were accepted."""
        return sum(1 for kline in klines if self.add(kline))

    def snapshot(self) -> "KlineWindow":
        """Independent copy, safe to analyze while this window keeps growing."""
        return self.model_copy(update={"klines": list(self.klines)})

    def has_at_least(self, bars: int) -> bool:
        return len(self.klines) >= bars

    def closes(self) -> list[Decimal]:
        return [bar.close for bar in self.klines]

    def highs(self) -> list[Decimal]:
        return [bar.high for bar in self.klines]

    def lows(self) -> list[Decimal]:
        return [bar.low for bar in self.klines]

    def volumes(self) -> list[Decimal]:
        return [bar.volume for bar in self.klines]

    @property
    def last(self) -> Kline | None:
        return self.klines[-1] if self.klines else None

    def __len__(self) -> int:
        return len(self.klines)
