"""Ingest exception hierarchy."""


class IngestError(Exception):
    """Base exception for fatal ingest failures."""


class ExtractReadError(IngestError):
    """Raised when an extract file cannot be opened or read."""


class DictionaryLoadError(IngestError):
    """Raised when reference dictionaries cannot be fetched from the store."""


class StoreError(IngestError):
    """Raised when the document store rejects a write."""
