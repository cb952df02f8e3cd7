"""Core signal logic: indicators, features, scoring and models.

This package contains pure business logic with no I/O dependencies
(no database, network or chat access). Market data comes in as plain
models and signal decisions go out as plain models; the bot layer
(signalbot/) owns fetching, persistence and notification.
"""
