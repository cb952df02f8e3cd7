"""Analysis cycle orchestration.

Fetching, persistence and notification are injected as async callbacks,
so the same service runs against live collaborators or test doubles.
Each symbol gets its own freshly built window; the only state shared
between concurrent analyses is the watchlist and the daily quota.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Awaitable, Callable

from signalcore.analysis import AnalysisResult, SignalAnalyzer
from signalcore.models import (
    FeatureVector,
    Kline,
    KlineWindow,
    MarketSnapshot,
    Prediction,
    SignalDecision,
)
from signalcore.scoring import create_predictor
from signalbot.config import Settings
from signalbot.notifications import format_signal_message
from signalbot.quota import DailySignalQuota
from signalbot.watchlist import Watchlist

logger = logging.getLogger(__name__)

# Callback type aliases
FetchMarketDataCallback = Callable[[str, str, int], Awaitable[tuple[MarketSnapshot, list[Kline]]]]
SaveSignalCallback = Callable[[SignalDecision], Awaitable[None]]
SaveLearningDataCallback = Callable[[SignalDecision, FeatureVector, Prediction], Awaitable[None]]
NotifyCallback = Callable[[str, SignalDecision], Awaitable[None]]
SignalCallback = Callable[[SignalDecision], Awaitable[None]]


@dataclass
class CycleReport:
    """Outcome of one analysis cycle."""

    started_at: datetime
    analyzed: int = 0
    signals: list[SignalDecision] = field(default_factory=list)
    skipped: dict[str, str] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)


class SignalBotService:
    """Run analysis cycles over the watchlist."""

    def __init__(
        self,
        analyzer: SignalAnalyzer,
        watchlist: Watchlist,
        quota: DailySignalQuota,
        fetch_market_data: FetchMarketDataCallback,
        save_signal: SaveSignalCallback | None = None,
        save_learning_data: SaveLearningDataCallback | None = None,
        notify: NotifyCallback | None = None,
        timeframe: str = "15m",
        kline_limit: int = 100,
        max_concurrency: int = 4,
        learning_enabled: bool = True,
        analysis_interval_seconds: float = 900,
    ):
        self.analyzer = analyzer
        self.watchlist = watchlist
        self.quota = quota
        self.timeframe = timeframe
        self.kline_limit = kline_limit
        self.max_concurrency = max(1, max_concurrency)
        self.learning_enabled = learning_enabled
        self.analysis_interval_seconds = analysis_interval_seconds

        self._fetch_market_data = fetch_market_data
        self._save_signal = save_signal
        self._save_learning_data = save_learning_data
        self._notify = notify

        self._callbacks: list[SignalCallback] = []
        self._emit_lock = asyncio.Lock()
        self.last_cycle_time: datetime | None = None
        self._running = False

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        watchlist: Watchlist,
        fetch_market_data: FetchMarketDataCallback,
        **callbacks,
    ) -> "SignalBotService":
        config = settings.to_scoring_config()
        analyzer = SignalAnalyzer(
            config,
            predictor=create_predictor(settings.predictor),
            timeframe=settings.timeframe,
        )
        return cls(
            analyzer=analyzer,
            watchlist=watchlist,
            quota=DailySignalQuota(settings.max_signals_per_day),
            fetch_market_data=fetch_market_data,
            timeframe=settings.timeframe,
            kline_limit=settings.kline_limit,
            max_concurrency=settings.max_concurrent_analyses,
            learning_enabled=settings.learning_enabled,
            analysis_interval_seconds=settings.analysis_interval_seconds,
            **callbacks,
        )

    def on_signal(self, callback: SignalCallback) -> None:
        """Register callback for new signals."""
        if callback not in self._callbacks:
            self._callbacks.append(callback)

    def off_signal(self, callback: SignalCallback) -> None:
        """Unregister callback for new signals."""
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    # ------------------------------------------------------------------
    # Cycle
    # ------------------------------------------------------------------

    async def run_cycle(self) -> CycleReport:
        """Analyze every active watchlist symbol once."""
        report = CycleReport(started_at=datetime.now(timezone.utc))
        self.last_cycle_time = report.started_at

        if self.quota.is_exhausted():
            logger.info("Daily signal limit reached, skipping analysis")
            return report

        symbols = self.watchlist.active_symbols()
        logger.info(f"Running market analysis for {len(symbols)} symbols")

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def run_one(symbol: str) -> None:
            async with semaphore:
                await self._analyze_symbol(symbol, report)

        await asyncio.gather(*(run_one(symbol) for symbol in symbols))

        logger.info(
            f"Market analysis completed. Analyzed: {report.analyzed}, "
            f"signals: {len(report.signals)}, errors: {len(report.errors)}"
        )
        return report

    async def _analyze_symbol(self, symbol: str, report: CycleReport) -> None:
        try:
            snapshot, klines = await self._fetch_market_data(symbol, self.timeframe, self.kline_limit)
        except Exception as e:
            logger.error(f"Failed to fetch market data for {symbol}: {e}")
            report.errors[symbol] = str(e)
            return

        try:
            window = KlineWindow(symbol=symbol, timeframe=self.timeframe, max_size=self.kline_limit)
            window.extend(klines)

            # Quota check and record happen together so concurrent symbols
            # cannot overshoot the daily limit.
            async with self._emit_lock:
                result = self.analyzer.analyze(window, snapshot, quota_exhausted=self.quota.is_exhausted())
                if result.decision is not None:
                    self.quota.record()
        except Exception as e:
            logger.error(f"Failed to analyze {symbol}: {e}")
            report.errors[symbol] = str(e)
            return

        report.analyzed += 1
        if result.decision is None:
            report.skipped[symbol] = result.skipped_reason or "no_signal"
            return

        report.signals.append(result.decision)
        await self._emit(result)

    async def _emit(self, result: AnalysisResult) -> None:
        decision = result.decision

        if self._save_signal:
            try:
                await self._save_signal(decision)
            except Exception as e:
                logger.error(f"Failed to save signal {decision.id} for {decision.symbol}: {e}")

        if self.learning_enabled and self._save_learning_data and result.features is not None:
            try:
                await self._save_learning_data(decision, result.features, result.prediction)
            except Exception as e:
                logger.error(f"Failed to save learning data for {decision.symbol}: {e}")

        if self._notify:
            try:
                await self._notify(format_signal_message(decision), decision)
            except Exception as e:
                logger.error(f"Failed to send signal notification for {decision.symbol}: {e}")

        for callback in self._callbacks:
            try:
                await callback(decision)
            except Exception as e:
                logger.error(f"Signal callback error: {e}")

        logger.info(f"Signal generated and sent for {decision.symbol}")

    async def run_forever(self, stop: asyncio.Event | None = None, interval_seconds: float | None = None) -> None:
        """Run a cycle every ``interval_seconds`` until ``stop`` is set."""
        stop = stop or asyncio.Event()
        if interval_seconds is None:
            interval_seconds = self.analysis_interval_seconds
        self._running = True
        logger.info(f"Signal bot started, analysis every {interval_seconds}s")
        try:
            while not stop.is_set():
                try:
                    await self.run_cycle()
                except Exception as e:
                    logger.error(f"Analysis cycle failed: {e}", exc_info=True)
                try:
                    await asyncio.wait_for(stop.wait(), timeout=interval_seconds)
                except asyncio.TimeoutError:
                    pass
        finally:
            self._running = False
            logger.info("Signal bot stopped")

    def status(self) -> dict:
        return {
            "is_running": self._running,
            "last_analysis_time": self.last_cycle_time,
            "total_signals_today": self.quota.count,
            "monitored_cryptos": len(self.watchlist.active_symbols()),
            "max_signals_per_day": self.quota.max_per_day,
        }
