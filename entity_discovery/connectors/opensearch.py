"""
OpenSearch / Elasticsearch lookup connector.

Answers one question per entity id: does the target index already hold a
record whose target field matches it?
"""

from typing import Any
from urllib.parse import quote

import httpx
from loguru import logger

from entity_discovery.config import LookupSettings, settings as app_settings
from entity_discovery.utils.http import (
    DEFAULT_HEADERS,
    HTTPError,
    build_retrying,
    raise_for_status,
)


class LookupServiceError(HTTPError):
    """Raised when the lookup service cannot answer a query."""
    pass


class OpenSearchLookupClient:
    """
    Single-field match lookups against one index.

    Use as a context manager so the underlying HTTP client is closed:

        with OpenSearchLookupClient(uri, "proveedores", "nit") as client:
            existing = client.find_entity("900123456")
    """

    def __init__(
        self,
        uri: str,
        index: str,
        field: str,
        lookup_settings: LookupSettings | None = None,
        http_client: httpx.Client | None = None,
    ):
        """
        Initialize the client.

        Args:
            uri: Base URL of the cluster (credentials may be embedded)
            index: Index that stores the entities
            field: Index field matched against the entity id
            lookup_settings: Timeout/retry/TLS settings (defaults to app settings)
            http_client: Optional pre-built HTTP client (used by tests)
        """
        self.uri = uri
        self.index = index
        self.field = field
        self.settings = lookup_settings or app_settings.lookup

        self._http_client = http_client
        self._owns_client = http_client is None

        logger.debug(f"Initialized lookup client for {uri} index={index} field={field}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self) -> None:
        if self._owns_client and self._http_client is not None:
            self._http_client.close()
            self._http_client = None

    @property
    def http_client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.Client(
                base_url=self.uri,
                timeout=self.settings.request_timeout,
                verify=self.settings.verify_certs,
                headers=DEFAULT_HEADERS,
                follow_redirects=True,
            )
            self._owns_client = True
        return self._http_client

    @property
    def search_path(self) -> str:
        return f"{quote(self.index, safe=',*')}/_search"

    def build_query(self, entity_id: str) -> dict[str, Any]:
        return {"query": {"match": {self.field: entity_id}}}

    def _search(self, body: dict[str, Any]) -> dict[str, Any]:
        response = self.http_client.post(self.search_path, json=body)
        raise_for_status(response)
        try:
            return response.json()
        except ValueError as e:
            raise LookupServiceError(
                f"Invalid JSON from {response.request.url}: {e}",
                status_code=response.status_code,
                response=response,
            ) from e

    def find_entity(self, entity_id: str) -> dict[str, Any] | None:
        """
        Find the stored record for an entity id.

        Returns:
            The first hit's _source, or None when nothing matches

        Raises:
            LookupServiceError: If the service fails after all retries
        """
        body = self.build_query(entity_id)
        retrying = build_retrying(self.settings.max_retries, self.settings.retry_delay)

        try:
            result = retrying(self._search, body)
        except LookupServiceError:
            raise
        except (httpx.HTTPError, HTTPError) as e:
            status_code = getattr(e, "status_code", None)
            raise LookupServiceError(
                f"Lookup for {entity_id!r} in {self.index}.{self.field} failed: {e}",
                status_code=status_code,
            ) from e

        hits = []
        if isinstance(result, dict) and isinstance(result.get("hits"), dict):
            found = result["hits"].get("hits")
            if isinstance(found, list):
                hits = found
        if not hits:
            logger.debug(f"No existing entity for {entity_id!r}")
            return None

        logger.debug(f"Entity {entity_id!r} already exists ({len(hits)} hits)")
        # A hit without _source still counts as existing
        first = hits[0] if isinstance(hits[0], dict) else {}
        return first.get("_source") or {}
