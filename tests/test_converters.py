"""Tests for payload converters."""

from datetime import datetime, timezone
from decimal import Decimal

from signalcore.models import (
    Action,
    FeatureVector,
    IndicatorSet,
    MarketSentiment,
    PredictedOutcome,
    Prediction,
    SignalDecision,
    TrendDirection,
)
from signalcore.models.converters import (
    datetime_to_ms,
    decision_to_dict,
    features_to_dict,
    indicators_to_dict,
    ms_to_datetime,
    parse_binance_klines,
    prediction_to_dict,
)


def _binance_row(open_time_ms: int, close: str = "100.5"):
    return [
        open_time_ms, "100.0", "101.0", "99.0", close, "12.5",
        open_time_ms + 899_999, "1250.0", 42, "6.0", "600.0", "0",
    ]


class TestTimestamps:
    def test_ms_round_trip(self):
        dt = datetime(2024, 1, 1, 12, 30, tzinfo=timezone.utc)
        assert ms_to_datetime(datetime_to_ms(dt)) == dt

    def test_epoch(self):
        assert ms_to_datetime(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)


class TestParseBinanceKlines:
    def test_parse_rows(self):
        rows = [_binance_row(1_704_067_200_000), _binance_row(1_704_068_100_000, "101.25")]
        klines = parse_binance_klines(rows)

        assert len(klines) == 2
        assert klines[0].timestamp == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert klines[0].open == Decimal("100.0")
        assert klines[0].high == Decimal("101.0")
        assert klines[0].low == Decimal("99.0")
        assert klines[0].volume == Decimal("12.5")
        assert klines[1].close == Decimal("101.25")

    def test_skips_short_and_malformed_rows(self):
        rows = [
            [1_704_067_200_000, "100", "101"],
            [1_704_067_200_000, "abc", "101", "99", "100", "1"],
            _binance_row(1_704_068_100_000),
        ]
        klines = parse_binance_klines(rows)
        assert len(klines) == 1
        assert klines[0].close == Decimal("100.5")

    def test_skips_out_of_range_open_time(self):
        rows = [_binance_row(10**20), _binance_row(1_704_068_100_000)]
        klines = parse_binance_klines(rows)
        assert len(klines) == 1
        assert klines[0].timestamp == datetime(2024, 1, 1, 0, 15, tzinfo=timezone.utc)

    def test_empty(self):
        assert parse_binance_klines([]) == []


class TestStoragePayloads:
    def test_decision_to_dict(self):
        decision = SignalDecision(
            symbol="ETH",
            signal_time=datetime(2024, 1, 1, tzinfo=timezone.utc),
            action=Action.SELL,
            confidence=Decimal("0.75"),
            entry_price=Decimal("2000"),
            stop_loss=Decimal("2100"),
            reasoning=["RSI overbought (75.00)", "MACD bearish crossover"],
            market_conditions={"rsi": Decimal("75"), "fear_greed_index": 85},
        )
        data = decision_to_dict(decision)

        assert data["id"] == decision.id
        assert data["action"] == "SELL"
        assert data["confidence"] == 0.75
        assert data["entry_price"] == 2000.0
        assert data["take_profit_1"] is None
        assert data["signal_time"] == "2024-01-01T00:00:00+00:00"
        assert data["reasoning"] == ["RSI overbought (75.00)", "MACD bearish crossover"]
        assert data["reasoning_text"] == "RSI overbought (75.00); MACD bearish crossover"
        assert data["market_conditions"] == {"rsi": 75.0, "fear_greed_index": 85}

    def test_features_to_dict(self):
        features = FeatureVector(
            rsi=Decimal("25.5"),
            macd_histogram=Decimal("-0.1"),
            bb_position=Decimal("0.1"),
            fear_greed_index=15,
            price_change_24h=Decimal("-3.2"),
            volume_24h=Decimal("1000"),
            price_above_sma20=False,
            ema_crossover=False,
            rsi_oversold=True,
            rsi_overbought=False,
            macd_bullish=False,
            bb_squeeze=False,
            high_volume=True,
            trend_direction=TrendDirection.BEARISH,
            market_sentiment=MarketSentiment.EXTREME_FEAR,
        )
        data = features_to_dict(features)

        assert data["rsi"] == 25.5
        assert data["rsi_oversold"] is True
        assert data["trend_direction"] == "bearish"
        assert data["market_sentiment"] == "extreme_fear"

    def test_prediction_to_dict(self):
        prediction = Prediction(
            outcome=PredictedOutcome.PROFIT,
            confidence=Decimal("0.8"),
            bullish_score=5,
            predictor="rule_based",
        )
        assert prediction_to_dict(prediction) == {
            "outcome": "profit",
            "confidence": 0.8,
            "bullish_score": 5,
            "bearish_score": 0,
            "predictor": "rule_based",
        }

    def test_indicators_to_dict(self):
        fields = {name: Decimal("1.5") for name in IndicatorSet.model_fields}
        data = indicators_to_dict(IndicatorSet(**fields))

        assert set(data) == set(IndicatorSet.model_fields)
        assert all(value == 1.5 for value in data.values())
