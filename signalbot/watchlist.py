"""Watchlist of monitored instruments, loaded from watchlist.yaml.

The watchlist is an explicit registry owned by whoever builds it and
handed to the service; chat commands and the analysis cycle share the
same instance.
"""

import logging
import threading
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

logger = logging.getLogger(__name__)


class WatchlistEntry(BaseModel):
    """A monitored instrument."""

    symbol: str
    name: str = ""
    enabled: bool = True

    @field_validator("symbol")
    @classmethod
    def _normalize_symbol(cls, value: str) -> str:
        value = value.strip().upper()
        if not value:
            raise ValueError("symbol must not be empty")
        return value


DEFAULT_ENTRIES: list[WatchlistEntry] = [
    WatchlistEntry(symbol="BTC", name="Bitcoin"),
    WatchlistEntry(symbol="ETH", name="Ethereum"),
    WatchlistEntry(symbol="BNB", name="Binance Coin"),
    WatchlistEntry(symbol="ADA", name="Cardano"),
    WatchlistEntry(symbol="SOL", name="Solana"),
    WatchlistEntry(symbol="DOT", name="Polkadot"),
    WatchlistEntry(symbol="MATIC", name="Polygon"),
    WatchlistEntry(symbol="AVAX", name="Avalanche"),
    WatchlistEntry(symbol="LINK", name="Chainlink"),
    WatchlistEntry(symbol="ATOM", name="Cosmos"),
]


class Watchlist:
    """Lock-guarded mutable registry of watchlist entries, in insertion order."""

    def __init__(self, entries: list[WatchlistEntry] | None = None):
        self._lock = threading.Lock()
        self._entries: dict[str, WatchlistEntry] = {}
        for entry in entries if entries is not None else DEFAULT_ENTRIES:
            self._entries[entry.symbol] = entry

    def add(self, symbol: str, name: str = "") -> bool:
        """Add a symbol. Returns False if it is already present."""
        entry = WatchlistEntry(symbol=symbol, name=name)
        with self._lock:
            if entry.symbol in self._entries:
                return False
            self._entries[entry.symbol] = entry
        logger.info("Added %s to watchlist", entry.symbol)
        return True

    def remove(self, symbol: str) -> bool:
        """Remove a symbol. Returns False if it was not present."""
        with self._lock:
            removed = self._entries.pop(symbol.strip().upper(), None)
        if removed:
            logger.info("Removed %s from watchlist", removed.symbol)
        return removed is not None

    def set_enabled(self, symbol: str, enabled: bool) -> bool:
        key = symbol.strip().upper()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return False
            self._entries[key] = entry.model_copy(update={"enabled": enabled})
        return True

    def entries(self) -> list[WatchlistEntry]:
        with self._lock:
            return list(self._entries.values())

    def active_symbols(self) -> list[str]:
        """Symbols to analyze in the next cycle."""
        with self._lock:
            return [e.symbol for e in self._entries.values() if e.enabled]

    def __contains__(self, symbol: str) -> bool:
        with self._lock:
            return symbol.strip().upper() in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class WatchlistConfig(BaseModel):
    """Top-level watchlist.yaml configuration."""

    symbols: list[WatchlistEntry] = []


def load_watchlist(path: Path | None = None) -> Watchlist:
    """Load the watchlist from a YAML file.

    Falls back to the default coin list if the file doesn't exist or
    lists no symbols. A ``.env`` next to the file is loaded into
    ``os.environ`` so Settings can pick it up.
    """
    config_path = path or Path("watchlist.yaml")

    load_dotenv(config_path.parent / ".env", override=False)

    if not config_path.exists():
        logger.info("No watchlist found at %s, using defaults", config_path)
        return Watchlist()

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    config = WatchlistConfig(**raw)
    if not config.symbols:
        logger.info("Watchlist at %s is empty, using defaults", config_path)
        return Watchlist()

    watchlist = Watchlist(config.symbols)
    logger.info(
        "Loaded watchlist: %d symbols (%d enabled)",
        len(watchlist),
        len(watchlist.active_symbols()),
    )
    return watchlist
