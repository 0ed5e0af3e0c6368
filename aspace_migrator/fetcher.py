"""
Fetcher — Retrieves the EAD XML export of a single source resource.

GET resource_descriptions/{id}.xml with fixed export options:
unpublished content excluded, digital object links included, numbered
<c> components, no PDF rendering. The body is parsed and re-serialized with
lxml so downstream steps always see normalized, well-formed XML.

A failed fetch never ends the run: the error is logged, None is returned and
the orchestrator moves on to the next resource.
"""

import logging
from typing import Optional

import requests
from lxml import etree

from .archivesspace_client import ArchivesSpaceClient
from .settings import EAD_EXPORT_PARAMS

_PARSER = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=True)


def normalize_xml(payload: bytes) -> str:
    """Parse and re-serialize an XML document (UTF-8, with declaration).

    Raises:
        lxml.etree.XMLSyntaxError: If the payload is not well-formed.
    """
    root = etree.fromstring(payload, parser=_PARSER)
    return etree.tostring(root, xml_declaration=True, encoding="UTF-8").decode("utf-8")


def retrieve_resource_description(
    client: ArchivesSpaceClient,
    resource_id: str,
    logger: Optional[logging.Logger] = None,
) -> Optional[str]:
    """Fetch and normalize the EAD export for one resource.

    Args:
        client: Source client, scoped to the source repository.
        resource_id: Numeric resource id (last segment of the resource URI).
        logger: Run logger.

    Returns:
        The normalized XML text, or None if the request or parse failed.
    """
    logger = logger or logging.getLogger(__name__)
    path = f"resource_descriptions/{resource_id}.xml"
    try:
        response = client.get(path, params=EAD_EXPORT_PARAMS)
        response.raise_for_status()
        return normalize_xml(response.content)
    except (requests.RequestException, etree.XMLSyntaxError, ValueError) as e:
        logger.error("[source] error retrieving %s: %s", path, e)
        return None
