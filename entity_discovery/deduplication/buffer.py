"""
First-write-wins deduplication of input documents by entity id.
"""

import json
from collections.abc import Iterable, Iterator
from typing import Any

from loguru import logger

from entity_discovery.parsers.jsonpath import JSONPath, compile_path


def entity_key(value: Any) -> str | None:
    """
    Turn an extracted id into a dedup key.

    Strings are used as-is; numbers and booleans use their JSON text ("12",
    "true"), integral floats as integers (1e2 -> "100"). null, empty strings
    and objects/arrays cannot act as an id.
    """
    if value is None or isinstance(value, (dict, list)):
        return None
    if isinstance(value, str):
        return value or None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return json.dumps(value)


class DedupBuffer:
    """
    Ordered id -> subdocument table.

    Filled by ingest() while the input is read, then iterated (read-only) by the
    emit stage. Iteration order is the order in which ids were first seen.
    """

    def __init__(self, id_path: JSONPath | str, doc_path: JSONPath | str | None = None):
        self.id_path = compile_path(id_path) if isinstance(id_path, str) else id_path
        if isinstance(doc_path, str):
            doc_path = compile_path(doc_path)
        self.doc_path = doc_path

        self._table: dict[str, Any] = {}

        self.documents_seen = 0
        self.documents_without_id = 0
        self.duplicates_dropped = 0

    def ingest(self, doc: Any) -> bool:
        """
        Add one input document.

        Returns:
            True if the document introduced a new id
        """
        self.documents_seen += 1

        id_matches = self.id_path.find(doc)
        key = entity_key(id_matches[0]) if id_matches else None
        if key is None:
            self.documents_without_id += 1
            return False

        if key in self._table:
            self.duplicates_dropped += 1
            return False

        # A present id without a subdocument still takes its slot
        payload = None
        if self.doc_path is not None:
            doc_matches = self.doc_path.find(doc)
            if doc_matches:
                payload = doc_matches[0]

        self._table[key] = payload
        return True

    def ingest_all(self, docs: Iterable[Any]) -> "DedupBuffer":
        for doc in docs:
            self.ingest(doc)
        logger.info(
            f"Buffered {len(self):,} unique ids from {self.documents_seen:,} documents "
            f"({self.duplicates_dropped:,} duplicates, {self.documents_without_id:,} without id)"
        )
        return self

    def entries(self) -> Iterator[tuple[str, Any]]:
        return iter(self._table.items())

    def get(self, key: str, default: Any = None) -> Any:
        return self._table.get(key, default)

    def __contains__(self, key: object) -> bool:
        return key in self._table

    def __len__(self) -> int:
        return len(self._table)

    def __iter__(self) -> Iterator[str]:
        return iter(self._table)
