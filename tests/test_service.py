"""Tests for the analysis cycle service."""

import asyncio
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from signalbot.config import Settings
from signalbot.quota import DailySignalQuota
from signalbot.service import CycleReport, SignalBotService
from signalbot.watchlist import Watchlist, WatchlistEntry
from signalcore.analysis import SignalAnalyzer
from signalcore.models import Action, Kline, MarketSnapshot, ScoringConfig

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _make_klines(n: int = 40) -> list[Kline]:
    p = Decimal("100")
    return [
        Kline(
            timestamp=T0 + timedelta(minutes=15 * i),
            open=p,
            high=p,
            low=p,
            close=p,
            volume=Decimal("10"),
        )
        for i in range(n)
    ]


def _make_fetch(bars: int = 40, fail: set[str] | None = None) -> AsyncMock:
    """Fetch callback returning flat market data; flat windows score SELL at 0.30."""
    fail = fail or set()

    async def fetch(symbol: str, timeframe: str, limit: int):
        if symbol in fail:
            raise ConnectionError(f"{symbol} unavailable")
        snapshot = MarketSnapshot(symbol=symbol, price=Decimal("100"), timestamp=T0)
        return snapshot, _make_klines(bars)

    return AsyncMock(side_effect=fetch)


def _make_service(
    symbols=("BTC", "ETH"),
    max_per_day: int = 10,
    min_confidence: str = "0.3",
    fetch: AsyncMock | None = None,
    **kwargs,
) -> SignalBotService:
    analyzer = SignalAnalyzer(ScoringConfig(min_confidence=Decimal(min_confidence)))
    watchlist = Watchlist([WatchlistEntry(symbol=s) for s in symbols])
    quota = DailySignalQuota(max_per_day, today=lambda: date(2024, 1, 1))
    return SignalBotService(
        analyzer=analyzer,
        watchlist=watchlist,
        quota=quota,
        fetch_market_data=fetch or _make_fetch(),
        **kwargs,
    )


class TestRunCycle:
    @pytest.mark.asyncio
    async def test_emits_signal_per_symbol(self):
        save_signal = AsyncMock()
        notify = AsyncMock()
        service = _make_service(save_signal=save_signal, notify=notify)

        report = await service.run_cycle()

        assert isinstance(report, CycleReport)
        assert report.analyzed == 2
        assert {d.symbol for d in report.signals} == {"BTC", "ETH"}
        assert all(d.action == Action.SELL for d in report.signals)
        assert save_signal.await_count == 2
        assert notify.await_count == 2
        message, decision = notify.await_args.args
        assert "CRYPTO SIGNAL" in message
        assert decision.symbol in message
        assert service.quota.count == 2

    @pytest.mark.asyncio
    async def test_fetch_arguments(self):
        fetch = _make_fetch()
        service = _make_service(symbols=("BTC",), fetch=fetch, timeframe="1h", kline_limit=50)

        await service.run_cycle()
        fetch.assert_awaited_once_with("BTC", "1h", 50)

    @pytest.mark.asyncio
    async def test_quota_limits_signals(self):
        service = _make_service(symbols=("BTC", "ETH", "SOL"), max_per_day=1, max_concurrency=3)

        report = await service.run_cycle()

        assert len(report.signals) == 1
        assert sorted(report.skipped.values()) == ["daily_limit", "daily_limit"]
        assert service.quota.count == 1

    @pytest.mark.asyncio
    async def test_exhausted_quota_skips_cycle(self):
        fetch = _make_fetch()
        service = _make_service(max_per_day=0, fetch=fetch)

        report = await service.run_cycle()

        assert report.analyzed == 0
        fetch.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_fetch_failure_isolated(self):
        service = _make_service(fetch=_make_fetch(fail={"BTC"}))

        report = await service.run_cycle()

        assert "BTC" in report.errors
        assert "unavailable" in report.errors["BTC"]
        assert [d.symbol for d in report.signals] == ["ETH"]

    @pytest.mark.asyncio
    async def test_malformed_payload_isolated(self):
        async def fetch(symbol: str, timeframe: str, limit: int):
            snapshot = MarketSnapshot(symbol=symbol, price=Decimal("100"), timestamp=T0)
            if symbol == "ETH":
                return snapshot, [{"close": "100"}]
            return snapshot, _make_klines()

        service = _make_service(fetch=AsyncMock(side_effect=fetch))

        report = await service.run_cycle()

        assert "ETH" in report.errors
        assert report.analyzed == 1
        assert [d.symbol for d in report.signals] == ["BTC"]
        assert service.quota.count == 1

    @pytest.mark.asyncio
    async def test_insufficient_data(self):
        service = _make_service(fetch=_make_fetch(bars=10))

        report = await service.run_cycle()

        assert report.signals == []
        assert report.skipped == {"BTC": "insufficient_data", "ETH": "insufficient_data"}
        assert service.quota.count == 0

    @pytest.mark.asyncio
    async def test_low_confidence(self):
        notify = AsyncMock()
        service = _make_service(min_confidence="0.7", notify=notify)

        report = await service.run_cycle()

        assert set(report.skipped.values()) == {"low_confidence"}
        notify.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_disabled_symbols_not_analyzed(self):
        fetch = _make_fetch()
        service = _make_service(fetch=fetch)
        service.watchlist.set_enabled("ETH", False)

        await service.run_cycle()
        fetch.assert_awaited_once()


class TestCallbacks:
    @pytest.mark.asyncio
    async def test_save_failure_does_not_block_notify(self):
        save_signal = AsyncMock(side_effect=RuntimeError("db down"))
        notify = AsyncMock()
        service = _make_service(symbols=("BTC",), save_signal=save_signal, notify=notify)

        report = await service.run_cycle()

        assert len(report.signals) == 1
        notify.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_notify_failure_logged(self):
        notify = AsyncMock(side_effect=RuntimeError("chat api down"))
        service = _make_service(symbols=("BTC",), notify=notify)

        report = await service.run_cycle()
        assert len(report.signals) == 1

    @pytest.mark.asyncio
    async def test_learning_data_saved(self):
        save_learning_data = AsyncMock()
        service = _make_service(symbols=("BTC",), save_learning_data=save_learning_data)

        await service.run_cycle()

        decision, features, prediction = save_learning_data.await_args.args
        assert decision.symbol == "BTC"
        assert features.rsi == Decimal("100")
        assert prediction.predictor == "rule_based"

    @pytest.mark.asyncio
    async def test_learning_disabled(self):
        save_learning_data = AsyncMock()
        service = _make_service(
            symbols=("BTC",),
            save_learning_data=save_learning_data,
            learning_enabled=False,
        )

        await service.run_cycle()
        save_learning_data.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_signal_listeners(self):
        listener = AsyncMock()
        failing = AsyncMock(side_effect=RuntimeError("boom"))
        service = _make_service(symbols=("BTC",))
        service.on_signal(failing)
        service.on_signal(listener)
        service.on_signal(listener)

        await service.run_cycle()
        listener.assert_awaited_once()

        service.off_signal(listener)
        service.quota = DailySignalQuota(10)
        await service.run_cycle()
        listener.assert_awaited_once()


class TestRunForever:
    @pytest.mark.asyncio
    async def test_stops_when_event_set(self):
        stop = asyncio.Event()
        service = _make_service(symbols=("BTC",))

        async def stop_after_signal(decision):
            assert service.status()["is_running"] is True
            stop.set()

        service.on_signal(stop_after_signal)
        await asyncio.wait_for(service.run_forever(stop, interval_seconds=60), timeout=5)

        assert service.quota.count == 1
        assert service.status()["is_running"] is False

    @pytest.mark.asyncio
    async def test_cycle_error_does_not_stop_loop(self):
        stop = asyncio.Event()
        service = _make_service(symbols=("BTC",))
        calls = 0

        async def flaky_cycle():
            nonlocal calls
            calls += 1
            if calls == 1:
                raise RuntimeError("unexpected")
            stop.set()
            return CycleReport(started_at=T0)

        service.run_cycle = flaky_cycle
        await asyncio.wait_for(service.run_forever(stop, interval_seconds=0), timeout=5)
        assert calls == 2


class TestServiceSetup:
    def test_from_settings(self):
        settings = Settings(
            _env_file=None,
            max_signals_per_day=5,
            timeframe="1h",
            kline_limit=60,
            max_concurrent_analyses=2,
            learning_enabled=False,
        )
        service = SignalBotService.from_settings(settings, Watchlist(), _make_fetch())

        assert service.quota.max_per_day == 5
        assert service.timeframe == "1h"
        assert service.kline_limit == 60
        assert service.max_concurrency == 2
        assert service.learning_enabled is False
        assert service.analysis_interval_seconds == 900
        assert service.analyzer.scorer.timeframe == "1h"

    @pytest.mark.asyncio
    async def test_status(self):
        service = _make_service()
        assert service.status()["last_analysis_time"] is None

        await service.run_cycle()
        status = service.status()

        assert status["last_analysis_time"] is not None
        assert status["total_signals_today"] == 2
        assert status["monitored_cryptos"] == 2
        assert status["max_signals_per_day"] == 10
