"""
Session — Opens an authenticated client pinned to one repository.

The target repository is selected either by numeric id (verified with
GET /repositories/{id}) or by repository code (looked up in GET /repositories).
If neither resolves, the run must not continue: writing to the wrong scope, or
no scope at all, would corrupt every later request, so RepositoryNotFoundError
is raised and never swallowed.
"""

import logging
from typing import Optional

from .archivesspace_client import ArchivesSpaceClient
from .exceptions import RepositoryNotFoundError
from .sync_config import ConnectionConfig


def resolve_repository(client: ArchivesSpaceClient, connection: ConnectionConfig) -> Optional[str]:
    """Return the repository path ("repositories/2") or None if it cannot be resolved."""
    if connection.repo_id is not None:
        repository = f"repositories/{connection.repo_id}"
        return repository if client.repository_exists(repository) else None

    for repo in client.repositories():
        if repo.get("repo_code") == connection.repo_code:
            return repo["uri"].lstrip("/")
    return None


def open_session(connection: ConnectionConfig, logger: Optional[logging.Logger] = None) -> ArchivesSpaceClient:
    """Log in to an instance and pin the client to the configured repository.

    Args:
        connection: Connection settings for the source or destination.
        logger: Run logger.

    Returns:
        A logged-in client with base_repo set.

    Raises:
        RepositoryNotFoundError: If the repository id/code does not resolve.
        requests.RequestException: If login or the repository lookup fails.
    """
    logger = logger or logging.getLogger(__name__)
    role = connection.role

    client = ArchivesSpaceClient(
        connection.url,
        connection.username,
        connection.password,
        page_size=connection.page_size,
        throttle=connection.throttle,
        timeout=connection.timeout,
        verify_ssl=connection.verify_ssl,
    )
    client.login()
    logger.debug("[%s] logged in to %s as %s", role, client.base_uri, connection.username)

    repository = resolve_repository(client, connection)
    if not repository:
        selector = connection.repo_id if connection.repo_id is not None else connection.repo_code
        message = f"invalid repository: {selector}"
        logger.error("[%s] %s", role, message)
        raise RepositoryNotFoundError(message, role=role)

    client.base_repo = repository
    logger.info("[%s] using repository: %s/%s", role, client.base_uri, repository)
    return client
