"""
Sync Orchestrator — Per-resource pipeline from source to destination.

For every resource the source lists for the modification window, the
orchestrator runs these steps in order, stopping at the first one that
returns a skip:

  1. FILTER          publish must be true; URI must be in the allow-list (if any)
  2. IDENTIFY        derive the matching identifier (smushed / four_part)
  3. RECONCILE       look up existing destination copies; skip policy stops here
  4. FETCH           EAD XML export from the source
  5. PRE-TRANSFORM   XML rewrite rules
  6. CONVERT         EAD -> jsonmodel JSON on the destination
  7. POST-TRANSFORM  JSON rewrite rules
  8. DELETE          remove matched destination copies (replace policy)
  9. IMPORT          batch_imports on the destination

Resources are processed one at a time and share no state. A problem with one
resource is logged, counted in the RunSummary and the loop moves on. Only
ConverterUnavailableError (and RepositoryNotFoundError, raised before the
orchestrator is built) end the run.

Typical usage:
    orchestrator = SyncOrchestrator(source, destination, params, logger=logger)
    summary = orchestrator.run()
"""

import logging
from typing import Any, Dict, Optional

from .archivesspace_client import ArchivesSpaceClient, uri_to_id
from .converter import convert_record
from .exceptions import FatalSyncError
from .fetcher import retrieve_resource_description
from .identifiers import get_id_generator
from .importer import import_record
from .reconciler import Reconciler
from .results import (
    CONVERT_FAILED,
    FETCH_FAILED,
    IDENTIFIER_FAILED,
    IMPORT_FAILED,
    NOT_PUBLISHED,
    NOT_TARGETED,
    UNEXPECTED_ERROR,
    RunSummary,
    StepResult,
)
from .sync_config import SyncParameters
from .transforms import POST_CONVERSION, PRE_CONVERSION, TransformationPipeline, default_pipeline


class SyncOrchestrator:
    """Drives the resource pipeline for one run.

    Attributes:
        source: Client pinned to the source repository.
        destination: Client pinned to the destination repository.
        params: Run parameters (window, id strategy, allow-list, policy).
        pipeline: Transformation rules for both payload stages.
        reconciler: Existing-record policy bound to the destination.
    """

    def __init__(
        self,
        source: ArchivesSpaceClient,
        destination: ArchivesSpaceClient,
        params: SyncParameters,
        pipeline: Optional[TransformationPipeline] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.source = source
        self.destination = destination
        self.params = params
        self.pipeline = pipeline or default_pipeline()
        self.logger = logger or logging.getLogger(__name__)
        self.id_generator = get_id_generator(params.id_generator)
        self.reconciler = Reconciler(
            destination,
            skip_existing=params.skip_existing,
            dry_run=params.dry_run,
            logger=self.logger,
        )

    def run(self) -> RunSummary:
        """Process every candidate resource.

        Returns:
            The run tally. Per-resource failures are counted, not raised.

        Raises:
            ConverterUnavailableError: If the destination cannot convert EAD.
            requests.RequestException: If the source listing itself fails.
        """
        summary = RunSummary()

        for resource in self.source.resources(self.params.modified_since):
            summary.considered += 1
            try:
                result = self.process(resource)
            except FatalSyncError:
                raise
            except Exception:
                self.logger.exception(
                    "[source] unexpected error processing %s", resource.get("uri")
                )
                result = StepResult.skip(UNEXPECTED_ERROR)

            if result.is_ok:
                summary.record_migrated()
            else:
                summary.record_skip(result.reason)

        return summary

    def select(self, resource: Dict[str, Any]) -> StepResult:
        """FILTER step."""
        if not resource.get("publish"):
            return StepResult.skip(NOT_PUBLISHED)
        targets = self.params.target_record_uris
        if targets and resource.get("uri") not in targets:
            return StepResult.skip(NOT_TARGETED)
        return StepResult.ok(resource)

    def identify(self, resource: Dict[str, Any]) -> StepResult:
        """IDENTIFY step."""
        try:
            return StepResult.ok(self.id_generator(resource))
        except KeyError as e:
            self.logger.error(
                "[source] resource %s is missing identifier part %s", resource.get("uri"), e
            )
            return StepResult.skip(IDENTIFIER_FAILED)

    def process(self, resource: Dict[str, Any]) -> StepResult:
        """Run all steps for one resource and return the final result."""
        selected = self.select(resource)
        if not selected.is_ok:
            return selected

        identified = self.identify(resource)
        if not identified.is_ok:
            return identified
        identifier = identified.value
        uri = resource["uri"]
        self.logger.info(
            "[source] using resource %s (%s): %s", identifier, resource.get("title"), uri
        )

        existing = self.reconciler.lookup(identifier)
        if not existing.is_ok:
            return existing

        record = retrieve_resource_description(self.source, uri_to_id(uri), self.logger)
        if record is None:
            return StepResult.skip(FETCH_FAILED)
        record = self.pipeline.apply(record, PRE_CONVERSION)

        converted = convert_record(self.destination, record, identifier, self.logger)
        if converted is None:
            return StepResult.skip(CONVERT_FAILED)
        converted = self.pipeline.apply(converted, POST_CONVERSION)

        cleared = self.reconciler.clear(identifier, existing.value)
        if not cleared.is_ok:
            return cleared

        if self.params.dry_run:
            self.logger.info("[destination] [dry run] would import resource %s", identifier)
            return StepResult.ok(identifier)

        if not import_record(self.destination, converted, identifier, self.logger):
            return StepResult.skip(IMPORT_FAILED)
        return StepResult.ok(identifier)
