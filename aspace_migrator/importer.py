"""Importer - Submits converted JSON to the destination batch_imports endpoint."""

import json
import logging
from typing import Optional

import requests

from .archivesspace_client import ArchivesSpaceClient
from .settings import BATCH_IMPORT_PATH


def _import_errors(body: str) -> list:
    """Collect "errors" entries from a batch_imports response body.

    The endpoint answers with a JSON array of status messages; a failed import
    still returns 200 and reports the problem in an {"errors": [...]} entry.
    """
    try:
        messages = json.loads(body)
    except ValueError:
        return []
    if isinstance(messages, dict):
        messages = [messages]
    if not isinstance(messages, list):
        return []
    return [m["errors"] for m in messages if isinstance(m, dict) and m.get("errors")]


def import_record(
    client: ArchivesSpaceClient,
    record: str,
    identifier: str,
    logger: Optional[logging.Logger] = None,
) -> bool:
    """POST batch_imports with the converted record.

    No retry is attempted; a failure is logged and reported as False so the
    orchestrator can move on.
    """
    logger = logger or logging.getLogger(__name__)
    logger.info("[destination] importing resource %s: %s", identifier, client.base_uri)

    try:
        response = client.post(BATCH_IMPORT_PATH, record)
        response.raise_for_status()
    except requests.RequestException as e:
        logger.error("[destination] error importing resource %s: %s", identifier, e)
        return False

    errors = _import_errors(response.text)
    if errors:
        logger.error("[destination] error importing resource %s: %s", identifier, errors)
        return False
    return True
