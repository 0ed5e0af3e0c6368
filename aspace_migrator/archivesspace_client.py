"""
ArchivesSpace API Client — Handles authentication and API calls to one instance.

This module is responsible for all HTTP communication with an ArchivesSpace
backend. The migrator creates two clients per run, one for the source and one
for the destination instance.

Authentication flow:
    POST /users/{username}/login?password=...
    Response: {"session": "9528190655b979f0...", "user": {...}}

    The session token is then attached as an X-ArchivesSpace-Session header
    to all subsequent requests.

Repository scope:
    Most endpoints live below a repository (e.g. /repositories/2/resources).
    The client keeps the selected repository in `base_repo` and prefixes it
    to every relative path. Paths starting with "/" are sent as-is. Some
    capabilities (the jsonmodel_from_format converter) sit above any single
    repository; use `scoped(None)` to clear the prefix for those calls.

Pipeline context:
    session.open_session() builds and pins the client, then every pipeline
    step (fetcher, converter, reconciler, importer) goes through it.
"""

import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

import requests

from .settings import DEFAULT_SETTINGS, SESSION_HEADER


class ArchivesSpaceClient:
    """Client for the ArchivesSpace backend REST API.

    Manages a requests.Session with the session token injected after login.
    Request helpers (get/post/delete) return the raw response so callers can
    inspect error bodies; the listing helpers raise on HTTP errors.

    Attributes:
        base_uri: Backend URL (trailing slash stripped).
        username: ArchivesSpace username.
        password: ArchivesSpace password.
        base_repo: Current repository scope, e.g. "repositories/2" (None = unscoped).
        page_size: Page size used by paginated listings.
        throttle: Seconds to sleep between paginated requests.
        timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        base_uri: str,
        username: str,
        password: str,
        page_size: int = DEFAULT_SETTINGS["PAGE_SIZE"],
        throttle: float = DEFAULT_SETTINGS["THROTTLE"],
        timeout: float = DEFAULT_SETTINGS["TIMEOUT"],
        verify_ssl: bool = True,
    ):
        self.base_uri = base_uri.rstrip("/")
        self.username = username
        self.password = password
        self.base_repo: Optional[str] = None
        self.page_size = page_size
        self.throttle = throttle
        self.timeout = timeout
        self._token = None
        self._session = requests.Session()
        self._session.verify = verify_ssl

    def login(self) -> str:
        """Obtain a session token and attach it to the HTTP session.

        Returns:
            The session token string.

        Raises:
            requests.HTTPError: If the credentials are rejected.
        """
        url = f"{self.base_uri}/users/{self.username}/login"
        response = self._session.post(
            url, params={"password": self.password}, timeout=self.timeout
        )
        response.raise_for_status()

        self._token = response.json()["session"]
        self._session.headers.update({SESSION_HEADER: self._token})
        return self._token

    def url_for(self, path: str) -> str:
        """Resolve a path against the base URI and the current repository scope."""
        if path.startswith("/"):
            return f"{self.base_uri}{path}"
        if self.base_repo:
            return f"{self.base_uri}/{self.base_repo}/{path}"
        return f"{self.base_uri}/{path}"

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        return self._session.get(self.url_for(path), params=params, timeout=self.timeout)

    def post(
        self,
        path: str,
        data: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
        content_type: str = "application/json",
    ) -> requests.Response:
        headers = {"Content-Type": content_type}
        body = data.encode("utf-8") if isinstance(data, str) else data
        return self._session.post(
            self.url_for(path), data=body, params=params, headers=headers, timeout=self.timeout
        )

    def delete(self, path: str) -> requests.Response:
        return self._session.delete(self.url_for(path), timeout=self.timeout)

    @contextmanager
    def scoped(self, base_repo: Optional[str]) -> Iterator["ArchivesSpaceClient"]:
        """Temporarily replace the repository scope.

        The previous scope is restored when the block exits, whether it
        returns normally or raises.
        """
        previous = self.base_repo
        self.base_repo = base_repo
        try:
            yield self
        finally:
            self.base_repo = previous

    def repositories(self) -> List[Dict[str, Any]]:
        """List every repository on the instance (GET /repositories)."""
        response = self.get("/repositories")
        response.raise_for_status()
        return response.json()

    def repository_exists(self, repository: str) -> bool:
        """Check that GET /{repository} succeeds, e.g. "repositories/2"."""
        response = self.get(f"/{repository.lstrip('/')}")
        return response.ok

    def resources(self, modified_since: int = 0) -> Iterator[Dict[str, Any]]:
        """Lazily yield resources in the current repository, page by page.

        Calls GET resources?page=N&page_size=M&modified_since=T until the
        last page reported by the backend has been read.

        Args:
            modified_since: Unix timestamp; 0 means every resource.

        Yields:
            Resource JSON dicts.

        Raises:
            requests.HTTPError: If a page request fails.
        """
        page = 1
        while True:
            response = self.get(
                "resources",
                params={
                    "page": page,
                    "page_size": self.page_size,
                    "modified_since": str(modified_since),
                },
            )
            response.raise_for_status()
            result = response.json()

            for resource in result.get("results", []):
                yield resource

            last_page = result.get("last_page", page)
            if page >= last_page:
                return
            page += 1
            if self.throttle:
                time.sleep(self.throttle)

    @property
    def token(self) -> Optional[str]:
        """The current session token, or None if not yet logged in."""
        return self._token


def uri_to_id(uri: str) -> str:
    """Return the trailing id segment of a record URI ("/repositories/2/resources/5" -> "5")."""
    return uri.rstrip("/").split("/")[-1]
