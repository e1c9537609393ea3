"""Custom exceptions for the permit data source."""


class PermitSourceError(Exception):
    """Raised when a permit dataset cannot be fetched or decoded."""
