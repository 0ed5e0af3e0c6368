"""
Handler — Serverless entry point.

    migrator(event, context) -> True

Steps:
  1. Validate the event (connections for both roles, run parameters)
  2. Open the source and destination sessions (fatal if a repository is invalid)
  3. Run the orchestrator over the modification window
  4. Log the run tally

True is returned whenever the run finished; individual resources that failed
are only visible in the logged tally. Fatal errors are logged and re-raised.
"""

import logging
from typing import Any, Dict, Optional

from .exceptions import MigratorError
from .logging_setup import get_run_logger
from .orchestrator import SyncOrchestrator
from .results import RunSummary
from .session import open_session
from .sync_config import ConnectionConfig, SyncParameters


def run_migration(event: Dict[str, Any], logger: Optional[logging.Logger] = None) -> RunSummary:
    """Validate the event, open both sessions and run the orchestrator.

    Raises:
        ConfigurationError: If the event is invalid.
        RepositoryNotFoundError: If either repository cannot be resolved.
        ConverterUnavailableError: If the destination cannot convert EAD.
    """
    logger = logger or get_run_logger()

    source_config = ConnectionConfig.from_event("source", event)
    destination_config = ConnectionConfig.from_event("destination", event)
    params = SyncParameters.from_event(event)

    source = open_session(source_config, logger)
    destination = open_session(destination_config, logger)

    logger.info("using source: %s", source.base_uri)
    logger.info("using destination: %s", destination.base_uri)
    logger.info("using modified since: %s", params.modified_since)
    logger.info("using id generator: %s", params.id_generator)
    logger.info("using existing record policy: %s", params.policy)
    if params.target_record_uris:
        logger.info("using target record uris: %s", ", ".join(params.target_record_uris))
    if params.dry_run:
        logger.info("dry run: no destination records will be deleted or imported")

    summary = SyncOrchestrator(source, destination, params, logger=logger).run()

    logger.info(
        "run complete: %d considered, %d migrated, %d skipped, %d failed",
        summary.considered,
        summary.migrated,
        summary.skipped,
        summary.failed,
    )
    if summary.partial:
        logger.error("some resources were not migrated: %s", dict(summary.reasons))
    return summary


def migrator(event: Dict[str, Any], context: Any = None) -> bool:
    """Serverless handler; returns True unless a fatal error is raised."""
    logger = get_run_logger(getattr(context, "aws_request_id", None))
    try:
        run_migration(event, logger)
    except MigratorError as e:
        logger.error("%s", e)
        raise
    return True
