"""Errors raised by the distribution scheduler."""


class DistributionError(Exception):
    """Base class for scheduler errors."""


class ConfigurationError(DistributionError):
    """Participation is missing or was initialized with invalid data."""


class QueueEmptyError(DistributionError):
    """A lead was dispatched before today's queue was built."""
