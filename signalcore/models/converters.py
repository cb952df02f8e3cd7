"""Converters between raw exchange payloads, core models and storage dicts.

Core models use:
- Decimal for precision
- datetime for time handling
- Enum for type safety

Storage/notification payloads use float, ISO timestamps and plain strings.
Conversion to float happens here and nowhere else in the core.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Iterable, Sequence

from signalcore.models.kline import Kline
from signalcore.models.market import FeatureVector, IndicatorSet
from signalcore.models.signal import Prediction, SignalDecision

logger = logging.getLogger(__name__)


# =============================================================================
# Timestamp conversion helpers
# =============================================================================

def ms_to_datetime(ms: float) -> datetime:
    """Convert a Unix timestamp in milliseconds to UTC datetime."""
    return datetime.fromtimestamp(float(ms) / 1000, tz=timezone.utc)


def datetime_to_ms(dt: datetime) -> int:
    """Convert datetime to Unix milliseconds."""
    return int(dt.timestamp() * 1000)


# =============================================================================
# Exchange payloads
# =============================================================================

def parse_binance_klines(rows: Iterable[Sequence[Any]]) -> list[Kline]:
    """Parse Binance ``/api/v3/klines`` rows into Klines.

    Each row is ``[open_time_ms, open, high, low, close, volume, ...]``
    with prices as strings. Short or malformed rows are skipped.

    Args:
        rows: Raw kline rows, oldest first

    Returns:
        List of Kline models in input order
    """
    klines: list[Kline] = []
    skipped = 0

    for row in rows:
        if len(row) < 6:
            skipped += 1
            continue
        try:
            klines.append(
                Kline(
                    timestamp=ms_to_datetime(row[0]),
                    open=Decimal(str(row[1])),
                    high=Decimal(str(row[2])),
                    low=Decimal(str(row[3])),
                    close=Decimal(str(row[4])),
                    volume=Decimal(str(row[5])),
                )
            )
        except (InvalidOperation, TypeError, ValueError, OverflowError, OSError) as e:
            skipped += 1
            logger.warning("Skipping malformed kline row %r: %s", row, e)

    if skipped:
        logger.debug("Parsed %d klines, skipped %d rows", len(klines), skipped)
    return klines


# =============================================================================
# Storage payloads
# =============================================================================

def _plain(value: Any) -> Any:
    """Convert Decimal/Enum/datetime values into JSON-friendly primitives."""
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def indicators_to_dict(indicators: IndicatorSet) -> dict[str, Any]:
    """Convert an IndicatorSet to a float dict for storage."""
    return _plain(indicators.model_dump())


def features_to_dict(features: FeatureVector) -> dict[str, Any]:
    """Convert a FeatureVector to the learning-record features payload."""
    return _plain(features.model_dump())


def prediction_to_dict(prediction: Prediction) -> dict[str, Any]:
    """Convert a Prediction to a storage dict."""
    return _plain(prediction.model_dump())


def decision_to_dict(decision: SignalDecision) -> dict[str, Any]:
    """Convert a SignalDecision to a storage dict.

    ``reasoning`` is kept as a list; ``reasoning_text`` carries the
    joined form for stores that only accept text.
    """
    data = _plain(decision.model_dump())
    data["reasoning_text"] = decision.reasoning_text
    return data
