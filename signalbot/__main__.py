"""CLI entry point for offline signal analysis.

Usage:
    python -m signalbot analyze --klines btc_15m.json --snapshot btc_snapshot.json
    python -m signalbot analyze --klines btc_15m.json --snapshot btc_snapshot.json --json
    python -m signalbot watchlist --config watchlist.yaml
    python -m signalbot predictors
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from signalcore.analysis import SignalAnalyzer
from signalcore.models import MarketSnapshot
from signalcore.models.converters import decision_to_dict, parse_binance_klines
from signalcore.scoring import create_predictor, describe_predictors
from signalbot.config import get_settings
from signalbot.logs import configure_logging
from signalbot.notifications import format_signal_message
from signalbot.watchlist import load_watchlist

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="signalbot",
        description="Rule-based crypto signal analysis",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m signalbot analyze --klines btc_15m.json --snapshot btc_snapshot.json
  python -m signalbot watchlist --config watchlist.yaml
        """,
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose logging",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    analyze = commands.add_parser("analyze", help="Analyze one instrument from saved market data")
    analyze.add_argument(
        "--klines",
        type=Path,
        required=True,
        help="JSON file with Binance kline rows, oldest first",
    )
    analyze.add_argument(
        "--snapshot",
        type=Path,
        required=True,
        help="JSON file with the market snapshot",
    )
    analyze.add_argument(
        "--json",
        action="store_true",
        help="Print the decision as JSON instead of a chat message",
    )

    watchlist = commands.add_parser("watchlist", help="Show the configured watchlist")
    watchlist.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to watchlist.yaml (default: ./watchlist.yaml)",
    )

    commands.add_parser("predictors", help="List registered outcome predictors")
    return parser.parse_args(argv)


def cmd_analyze(args: argparse.Namespace) -> int:
    settings = get_settings()
    try:
        config = settings.to_scoring_config()
        predictor = create_predictor(settings.predictor)
    except ValidationError as e:
        logger.error("Invalid scoring configuration: %s", e)
        return 2
    except KeyError as e:
        logger.error("Invalid predictor setting: %s", e)
        return 2

    try:
        rows = json.loads(args.klines.read_text())
        if not isinstance(rows, list):
            raise TypeError(f"expected a JSON array of klines, got {type(rows).__name__}")
        snapshot = MarketSnapshot(**json.loads(args.snapshot.read_text()))
    except (OSError, TypeError, ValueError) as e:
        logger.error("Failed to load market data: %s", e)
        return 2

    klines = parse_binance_klines(rows)
    analyzer = SignalAnalyzer(
        config,
        predictor=predictor,
        timeframe=settings.timeframe,
    )
    result = analyzer.analyze(klines, snapshot)

    if result.decision is None:
        print(f"No signal for {snapshot.symbol}: {result.skipped_reason}")
        return 1

    if args.json:
        print(json.dumps(decision_to_dict(result.decision), indent=2))
    else:
        print(format_signal_message(result.decision))
    return 0


def cmd_watchlist(args: argparse.Namespace) -> int:
    watchlist = load_watchlist(args.config)
    for entry in watchlist.entries():
        status = "on " if entry.enabled else "off"
        print(f"[{status}] {entry.symbol:<8} {entry.name}")
    return 0


def cmd_predictors(args: argparse.Namespace) -> int:
    active = get_settings().predictor
    for name, description in describe_predictors().items():
        marker = "*" if name == active else " "
        print(f"{marker} {name:<16} {description}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        settings = get_settings()
    except ValidationError as e:
        configure_logging("info", verbose=args.verbose)
        logger.error("Invalid settings: %s", e)
        return 2
    configure_logging(settings.log_level, verbose=args.verbose)

    if args.command == "analyze":
        return cmd_analyze(args)
    if args.command == "predictors":
        return cmd_predictors(args)
    return cmd_watchlist(args)


if __name__ == "__main__":
    sys.exit(main())
