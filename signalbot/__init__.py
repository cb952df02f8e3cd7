"""Bot layer around the signal core: settings, watchlist, quota and cycle orchestration."""
