"""
Deduplication pipeline components.

Keeps one subdocument per entity id, the first one seen in the input stream.
"""

from .buffer import DedupBuffer, entity_key

__all__ = ['DedupBuffer', 'entity_key']
