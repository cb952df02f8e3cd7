"""Tests for the watchlist registry and its YAML loader."""

import textwrap

import pytest
from pydantic import ValidationError

from signalbot.watchlist import (
    DEFAULT_ENTRIES,
    Watchlist,
    WatchlistEntry,
    load_watchlist,
)


class TestWatchlistEntry:
    def test_symbol_normalized(self):
        assert WatchlistEntry(symbol=" btc ").symbol == "BTC"

    def test_empty_symbol_rejected(self):
        with pytest.raises(ValidationError):
            WatchlistEntry(symbol="  ")


class TestWatchlist:
    def test_defaults(self):
        watchlist = Watchlist()
        assert len(watchlist) == len(DEFAULT_ENTRIES) == 10
        assert watchlist.active_symbols()[:2] == ["BTC", "ETH"]

    def test_add_and_remove(self):
        watchlist = Watchlist([])

        assert watchlist.add("doge", "Dogecoin") is True
        assert watchlist.add("DOGE") is False
        assert "doge" in watchlist
        assert watchlist.remove("Doge") is True
        assert watchlist.remove("DOGE") is False
        assert len(watchlist) == 0

    def test_set_enabled(self):
        watchlist = Watchlist([WatchlistEntry(symbol="BTC"), WatchlistEntry(symbol="ETH")])

        assert watchlist.set_enabled("eth", False) is True
        assert watchlist.active_symbols() == ["BTC"]
        assert len(watchlist) == 2
        assert watchlist.set_enabled("XRP", True) is False

    def test_insertion_order(self):
        watchlist = Watchlist([WatchlistEntry(symbol="SOL"), WatchlistEntry(symbol="BTC")])
        watchlist.add("ADA")
        assert [e.symbol for e in watchlist.entries()] == ["SOL", "BTC", "ADA"]


class TestLoadWatchlist:
    def test_missing_file_uses_defaults(self, tmp_path):
        watchlist = load_watchlist(tmp_path / "watchlist.yaml")
        assert len(watchlist) == 10

    def test_empty_file_uses_defaults(self, tmp_path):
        path = tmp_path / "watchlist.yaml"
        path.write_text("")
        assert len(load_watchlist(path)) == 10

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "watchlist.yaml"
        path.write_text(textwrap.dedent("""\
            symbols:
              - symbol: btc
                name: Bitcoin
              - symbol: SOL
                name: Solana
                enabled: false
              - symbol: eth
        """))
        watchlist = load_watchlist(path)

        assert len(watchlist) == 3
        assert watchlist.active_symbols() == ["BTC", "ETH"]
        assert watchlist.entries()[0].name == "Bitcoin"

    def test_invalid_yaml_entry(self, tmp_path):
        path = tmp_path / "watchlist.yaml"
        path.write_text("symbols:\n  - symbol: ''\n")
        with pytest.raises(ValidationError):
            load_watchlist(path)
