"""
Streaming reader for a top-level JSON array.

Elements are built one at a time from ijson parse events, so memory use is
bounded by the largest element rather than by the length of the array.
"""

from typing import Any, BinaryIO, Iterator

import ijson
from ijson.common import ObjectBuilder
from loguru import logger

from entity_discovery import EntityDiscoveryError


_CONTAINER_START = ("start_map", "start_array")
_CONTAINER_END = ("end_map", "end_array")


class MalformedInputError(EntityDiscoveryError):
    """Raised when the input is not a well-formed top-level JSON array."""
    pass


def _events(stream: BinaryIO) -> Iterator[tuple[str, str, Any]]:
    """ijson events with parser errors mapped onto MalformedInputError."""
    try:
        yield from ijson.parse(stream, use_float=True)
    except ijson.JSONError as e:
        raise MalformedInputError(f"Invalid JSON input: {e}") from e


def iter_documents(stream: BinaryIO) -> Iterator[Any]:
    """
    Lazily yield the elements of the JSON array read from a byte stream.

    Args:
        stream: Binary file-like object (e.g. sys.stdin.buffer)

    Yields:
        One JSON value per array element, in array order

    Raises:
        MalformedInputError: If the input is empty, not valid JSON, or its
            top-level value is not an array. Elements already yielded stay yielded.
    """
    events = _events(stream)

    first = next(events, None)
    if first is None:
        raise MalformedInputError("Empty input: expected a JSON array")
    _, event, _ = first
    if event != "start_array":
        raise MalformedInputError(f"Top-level JSON value must be an array, got {event}")

    count = 0
    for prefix, event, value in events:
        if prefix == "" and event == "end_array":
            break

        if event in _CONTAINER_START:
            builder = ObjectBuilder()
            depth = 0
            while True:
                builder.event(event, value)
                if event in _CONTAINER_START:
                    depth += 1
                elif event in _CONTAINER_END:
                    depth -= 1
                    if depth == 0:
                        break
                try:
                    prefix, event, value = next(events)
                except StopIteration:
                    raise MalformedInputError("Unexpected end of input inside an array element") from None
            yield builder.value
        else:
            yield value
        count += 1
    else:
        raise MalformedInputError("Unexpected end of input: unterminated array")

    # Drain so trailing garbage after the array is reported
    for _ in events:
        raise MalformedInputError("Unexpected data after the top-level array")

    logger.debug(f"Read {count:,} documents from input")
