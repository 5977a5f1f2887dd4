#!/usr/bin/env python3
"""
Entity discovery - command line entry point

Reads a JSON array of documents on stdin and writes, as NDJSON on stdout, the
entities they describe that are not yet present in the target index.

Usage:
    cat awards.json | python -m entity_discovery.main \\
        -i '$.awards[0].suppliers[0].identifier.id' \\
        -d '$.awards[0].suppliers[0]' \\
        -t proveedores -f nit > nuevos.ndjson
"""

import click
from loguru import logger
from rich.console import Console
from rich.table import Table

from entity_discovery.config import ConfigurationError, RunOptions, settings
from entity_discovery.connectors import LookupServiceError, OpenSearchLookupClient
from entity_discovery.discovery import DiscoveryResult, run_discovery
from entity_discovery.parsers import MalformedInputError, PathSyntaxError, compile_path


console = Console(stderr=True)


def create_lookup_client(options: RunOptions) -> OpenSearchLookupClient:
    """Build the lookup client for a run."""
    return OpenSearchLookupClient(
        options.uri,
        options.target_index,
        options.target_field,
        lookup_settings=settings.lookup,
    )


def print_summary(result: DiscoveryResult) -> None:
    table = Table(title="Entity Discovery Summary")
    table.add_column("Documents")
    table.add_column("Without id")
    table.add_column("Duplicates")
    table.add_column("Unique ids")
    table.add_column("Existing")
    table.add_column("Emitted")
    table.add_column("Duration")

    duration = f"{result.duration_seconds:.1f}s" if result.duration_seconds is not None else "-"
    table.add_row(
        str(result.documents_read),
        str(result.documents_without_id),
        str(result.duplicates_dropped),
        str(result.unique_ids),
        str(result.entities_existing),
        f"[green]{result.entities_emitted}[/green]",
        duration,
    )
    console.print(table)


@click.command()
@click.option("--uri", "-u", "uri", default=settings.lookup.uri, show_default=True,
              help="OpenSearch URI")
@click.option("--idSourceField", "-i", "id_source_field", help="JSONPath of the document field holding the id")
@click.option("--idSourceDoc", "-d", "id_source_doc", help="JSONPath of the entity subdocument")
@click.option("--targetIndex", "-t", "target_index", help="Index that stores entities")
@click.option("--targetField", "-f", "target_field", help="Index field to query with the id")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--log-file", "log_file", type=click.Path(dir_okay=False), help="Also log to this file (rotated)")
@click.option("--summary", is_flag=True, help="Print a run summary table on stderr")
def cli(uri, id_source_field, id_source_doc, target_index, target_field, debug, log_file, summary):
    """Emit entities from stdin that are missing from the target index."""
    if debug or log_file:
        from entity_discovery.utils.logging import setup_logging
        setup_logging(level="DEBUG" if debug else None, log_file=log_file)

    options = RunOptions(
        uri=uri,
        id_source_field=id_source_field,
        id_source_doc=id_source_doc,
        target_index=target_index,
        target_field=target_field,
    )
    try:
        options.validate_required()
        compile_path(options.id_source_field)
        if options.id_source_doc:
            compile_path(options.id_source_doc)
    except ConfigurationError as e:
        raise click.UsageError(f"ERROR: {e}")
    except PathSyntaxError as e:
        raise click.UsageError(f"ERROR: Invalid path expression: {e}")

    stdin = click.get_binary_stream("stdin")
    stdout = click.get_text_stream("stdout")

    try:
        with create_lookup_client(options) as client:
            result = run_discovery(stdin, stdout, options, client)
    except MalformedInputError as e:
        logger.error(f"Malformed input: {e}")
        raise click.ClickException(f"Malformed input: {e}")
    except LookupServiceError as e:
        logger.error(f"Lookup failed, aborting: {e}")
        raise click.ClickException(f"Lookup failed: {e}")

    if summary:
        print_summary(result)


if __name__ == "__main__":
    cli()
