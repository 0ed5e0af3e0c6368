"""
Reconciler — Finds and clears existing destination copies of a resource.

ArchivesSpace has no overlay for imported resources: batch_imports always
creates a new record. To keep a single destination copy per source resource,
any record already matching the identifier is either left alone (skip policy)
or deleted right before the fresh copy is imported (replace policy).

Endpoints:
    GET    find_by_id/resources?identifier[]=["MS.123"]
    Response: {"resources": [{"ref": "/repositories/2/resources/5"}]}

    DELETE resources/{id}

Delete and import are separate requests. If the run dies between them, the
destination is missing that resource until the next run migrates it again.
"""

import logging
from typing import List, Optional

import requests

from .archivesspace_client import ArchivesSpaceClient, uri_to_id
from .results import DELETE_FAILED, EXISTS_IN_DESTINATION, LOOKUP_FAILED, StepResult
from .settings import FIND_BY_ID_PATH


def find_existing_records(client: ArchivesSpaceClient, identifier: str) -> List[str]:
    """Return the refs of every destination resource matching `identifier`.

    Raises:
        requests.RequestException: On transport or HTTP errors.
        ValueError: If the response body is not JSON.
    """
    response = client.get(FIND_BY_ID_PATH, params={"identifier[]": identifier})
    response.raise_for_status()
    return [resource["ref"] for resource in response.json().get("resources", [])]


def find_existing_record(client: ArchivesSpaceClient, identifier: str) -> Optional[str]:
    """Return the first matching ref, or None."""
    refs = find_existing_records(client, identifier)
    return refs[0] if refs else None


def remove_record(client: ArchivesSpaceClient, ref: str) -> None:
    """DELETE resources/{id} for the given ref.

    Raises:
        requests.RequestException: On transport or HTTP errors.
    """
    response = client.delete(f"resources/{uri_to_id(ref)}")
    response.raise_for_status()


class Reconciler:
    """Applies the existing-record policy for one run.

    Attributes:
        client: Destination client.
        skip_existing: True for skip policy, False for replace policy.
        dry_run: Log deletes without issuing them.
    """

    def __init__(
        self,
        client: ArchivesSpaceClient,
        skip_existing: bool = False,
        dry_run: bool = False,
        logger: Optional[logging.Logger] = None,
    ):
        self.client = client
        self.skip_existing = skip_existing
        self.dry_run = dry_run
        self.logger = logger or logging.getLogger(__name__)

    def lookup(self, identifier: str) -> StepResult:
        """Find existing copies; ok(refs) to continue, skip when policy says so."""
        try:
            refs = find_existing_records(self.client, identifier)
        except (requests.RequestException, ValueError, KeyError) as e:
            self.logger.error("[destination] error finding resource %s: %s", identifier, e)
            return StepResult.skip(LOOKUP_FAILED)

        if refs and self.skip_existing:
            self.logger.info(
                "[destination] skipping resource %s, already exists: %s",
                identifier,
                ", ".join(refs),
            )
            return StepResult.skip(EXISTS_IN_DESTINATION)
        return StepResult.ok(refs)

    def clear(self, identifier: str, refs: List[str]) -> StepResult:
        """Delete every matched destination copy before import."""
        for ref in refs:
            if self.dry_run:
                self.logger.info("[destination] [dry run] would delete resource %s: %s", identifier, ref)
                continue
            self.logger.info("[destination] deleting resource %s: %s", identifier, ref)
            try:
                remove_record(self.client, ref)
            except requests.RequestException as e:
                self.logger.error("[destination] error deleting resource %s (%s): %s", identifier, ref, e)
                return StepResult.skip(DELETE_FAILED)
        return StepResult.ok(refs)
