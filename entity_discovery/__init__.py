"""
entity-discovery

Streams a JSON array of documents, deduplicates the entities they describe and
emits the ones not yet present in an OpenSearch index as NDJSON.
"""

__version__ = "1.0.0"


class EntityDiscoveryError(Exception):
    """Base class for all errors raised by this package."""
    pass


__all__ = ["EntityDiscoveryError", "__version__"]
