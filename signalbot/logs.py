"""Logging setup for bot entry points."""

import logging

_NOISY_LOGGERS = ("asyncio", "httpx", "httpcore")


def configure_logging(level: str = "info", verbose: bool = False) -> None:
    """Configure root logging once for a process.

    Args:
        level: Level name from settings (e.g. "info", "debug")
        verbose: Force DEBUG regardless of ``level``
    """
    resolved = logging.DEBUG if verbose else getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=resolved,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    logging.getLogger().setLevel(resolved)

    # Reduce noise from third-party libraries
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
