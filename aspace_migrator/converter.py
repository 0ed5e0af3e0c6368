"""
Converter — Turns EAD XML into importable JSON on the destination instance.

Uses the destination's jsonmodel_from_format plugin:

    POST /plugins/jsonmodel_from_format/resource/ead   (body: EAD XML)
    Response: a JSON array of jsonmodel records ready for batch_imports

The plugin route is registered at the system level, not under a repository,
so the destination client's repository scope is cleared for the call and put
back afterwards (even if the request raises).

Two failure modes are distinguished from the error body, not the status:
  - {"error": "Sinatra::NotFound"}: the plugin is not installed. Nothing can be
    migrated, so ConverterUnavailableError is raised and the run stops.
  - anything else: logged, None returned, the resource is skipped.
"""

import logging
from typing import Any, Optional

import requests

from .archivesspace_client import ArchivesSpaceClient
from .exceptions import ConverterUnavailableError
from .settings import CONVERTER_MISSING_ERROR, CONVERTER_PATH


def _error_of(response: requests.Response) -> Optional[Any]:
    """Return the "error" value of a JSON error body, if there is one."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        return body.get("error")
    return None


def convert_record(
    client: ArchivesSpaceClient,
    record: str,
    identifier: str,
    logger: Optional[logging.Logger] = None,
) -> Optional[str]:
    """Convert one EAD document to jsonmodel JSON.

    Args:
        client: Destination client.
        record: EAD XML (already pre-transformed).
        identifier: Matching identifier, for log messages.
        logger: Run logger.

    Returns:
        The JSON text returned by the converter, or None on a recoverable error.

    Raises:
        ConverterUnavailableError: If the plugin is not installed.
    """
    logger = logger or logging.getLogger(__name__)
    logger.info("[destination] converting resource %s to importable json", identifier)

    try:
        with client.scoped(None):
            response = client.post(CONVERTER_PATH, record, content_type="text/xml")
    except requests.RequestException as e:
        logger.error("[destination] error converting resource %s to json: %s", identifier, e)
        return None

    if not response.ok:
        if _error_of(response) == CONVERTER_MISSING_ERROR:
            logger.error("[destination] jsonmodel_from_format plugin is not installed")
            raise ConverterUnavailableError(
                "jsonmodel_from_format plugin is not installed", role="destination"
            )
        logger.error(
            "[destination] error converting resource %s to json: %s",
            identifier,
            response.text,
        )
        return None

    return response.text
