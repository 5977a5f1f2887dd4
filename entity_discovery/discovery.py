"""
Entity discovery run.

Phase 1 reads the input array and fills a DedupBuffer. Phase 2 walks the
buffer in first-seen order, looks every id up in the target index (one
request at a time) and writes a target record for each id that is not there.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, BinaryIO, Protocol, TextIO

from loguru import logger

from entity_discovery.config import RunOptions
from entity_discovery.deduplication import DedupBuffer
from entity_discovery.normalizers import build_entity_record
from entity_discovery.parsers import compile_path, iter_documents


class EntityLookup(Protocol):
    def find_entity(self, entity_id: str) -> dict[str, Any] | None: ...


@dataclass
class DiscoveryResult:
    """Counters for a discovery run."""
    documents_read: int = 0
    documents_without_id: int = 0
    duplicates_dropped: int = 0
    unique_ids: int = 0
    entities_existing: int = 0
    entities_emitted: int = 0
    started_at: datetime | None = None
    completed_at: datetime | None = None

    @property
    def duration_seconds(self) -> float | None:
        """Calculate duration in seconds."""
        if self.started_at and self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None


def collect_entities(stream: BinaryIO, buffer: DedupBuffer) -> DedupBuffer:
    """Phase 1: stream the input array into the buffer."""
    return buffer.ingest_all(iter_documents(stream))


def emit_new_entities(
    buffer: DedupBuffer,
    lookup: EntityLookup,
    out: TextIO,
    result: DiscoveryResult | None = None,
) -> DiscoveryResult:
    """
    Phase 2: write a target record for every buffered id missing from the index.

    Lookups run strictly in buffer order; a lookup error propagates and stops
    the run, leaving already written lines in place.
    """
    result = result or DiscoveryResult()

    for entity_id, subdoc in buffer.entries():
        if lookup.find_entity(entity_id) is not None:
            result.entities_existing += 1
            continue

        record = build_entity_record(entity_id, subdoc)
        out.write(record.to_json_line())
        out.flush()
        result.entities_emitted += 1

    return result


def run_discovery(
    stream: BinaryIO,
    out: TextIO,
    options: RunOptions,
    lookup: EntityLookup,
) -> DiscoveryResult:
    """
    Run both phases.

    Args:
        stream: Binary input holding one JSON array
        out: Text output for the NDJSON records
        options: Validated run options (JSONPath rules)
        lookup: Client answering whether an id already exists

    Returns:
        DiscoveryResult with the run counters
    """
    result = DiscoveryResult(started_at=datetime.now())

    buffer = DedupBuffer(
        compile_path(options.id_source_field),
        compile_path(options.id_source_doc) if options.id_source_doc else None,
    )
    collect_entities(stream, buffer)

    result.documents_read = buffer.documents_seen
    result.documents_without_id = buffer.documents_without_id
    result.duplicates_dropped = buffer.duplicates_dropped
    result.unique_ids = len(buffer)

    logger.info(f"Looking up {len(buffer):,} ids in {options.target_index}.{options.target_field}")
    emit_new_entities(buffer, lookup, out, result)

    result.completed_at = datetime.now()
    logger.info(
        f"Emitted {result.entities_emitted:,} new entities "
        f"({result.entities_existing:,} already indexed)"
    )
    return result
