"""
aspace-migrator — Copy recently modified ArchivesSpace resources between instances.

Modules, leaves first:

  settings.py             Defaults, endpoint paths and export options.
  exceptions.py           Fatal vs. configuration error classes.
  archivesspace_client.py HTTP client (login, repository scope, pagination).
  sync_config.py          Event / .env parsing into ConnectionConfig and SyncParameters.
  session.py              Log in and pin a client to a repository.
  modification_window.py  modified_since cutoff.
  identifiers.py          Matching identifier strategies (smushed, four_part).
  fetcher.py              EAD XML export retrieval and normalization.
  transforms.py           Pre/post conversion payload rewrite rules.
  converter.py            EAD -> jsonmodel JSON via the destination plugin.
  reconciler.py           Find / delete existing destination copies.
  importer.py             batch_imports submission.
  results.py              StepResult and RunSummary.
  orchestrator.py         The per-resource pipeline.
  handler.py              Serverless migrator(event, context) entry point.
"""

__version__ = "0.1.0"

from .archivesspace_client import ArchivesSpaceClient, uri_to_id
from .exceptions import (
    ConfigurationError,
    ConverterUnavailableError,
    FatalSyncError,
    MigratorError,
    RepositoryNotFoundError,
)
from .handler import migrator, run_migration
from .identifiers import ID_GENERATORS, four_part, get_id_generator, smushed
from .modification_window import modified_since
from .orchestrator import SyncOrchestrator
from .results import RunSummary, StepResult
from .sync_config import ConnectionConfig, SyncParameters, event_from_env
from .transforms import POST_CONVERSION, PRE_CONVERSION, TransformationPipeline, default_pipeline
