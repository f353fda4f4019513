from __future__ import annotations


class SizeWatchError(Exception):
    """Base class for errors raised by sizewatch."""


class ConfigError(SizeWatchError):
    pass


class FetchError(SizeWatchError):
    """Page could not be retrieved: transport failure or navigation timeout."""


class ExtractionError(SizeWatchError):
    """Page was retrieved but the tracked variant is missing from it."""


class NotificationError(SizeWatchError):
    pass
