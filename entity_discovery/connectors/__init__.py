"""
Connectors to external services.
"""

from .opensearch import LookupServiceError, OpenSearchLookupClient

__all__ = ['LookupServiceError', 'OpenSearchLookupClient']
