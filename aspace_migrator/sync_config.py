"""
Sync Config — Turns an invocation event into validated run configuration.

The migrator is driven by a flat event dict (a serverless event, a JSON file
passed to run.py, or environment variables loaded from a .env file):

  source_url, source_username, source_password,
  source_repo_id | source_repo_code
  destination_url, destination_username, destination_password,
  destination_repo_id | destination_repo_code
  recent_only                 bool, default false
  id_generator                "smushed" (default) | "four_part"
  source_target_record_uris   list of source resource URIs (optional allow-list)
  destination_skip_existing   bool, default false (false = delete and reimport)
  dry_run                     bool, default false
  page_size, throttle, timeout

Everything is validated here, before any connection is opened, so a bad
id_generator name or a missing password fails the run up front.
"""

import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlparse

from dotenv import load_dotenv

from .exceptions import ConfigurationError
from .identifiers import ID_GENERATORS
from .modification_window import modified_since
from .settings import DEFAULT_SETTINGS

ROLES = ("source", "destination")

# Environment variable -> event key, for .env driven runs
ENV_EVENT_KEYS = {
    f"{role.upper()}_{field.upper()}": f"{role}_{field}"
    for role in ROLES
    for field in ("url", "username", "password", "repo_id", "repo_code")
}
ENV_EVENT_KEYS.update({
    "RECENT_ONLY": "recent_only",
    "ID_GENERATOR": "id_generator",
    "SOURCE_TARGET_RECORD_URIS": "source_target_record_uris",
    "DESTINATION_SKIP_EXISTING": "destination_skip_existing",
    "DRY_RUN": "dry_run",
    "PAGE_SIZE": "page_size",
    "THROTTLE": "throttle",
    "TIMEOUT": "timeout",
})


def as_bool(value: Any, default: bool = False) -> bool:
    """Interpret event/env booleans; strings compare against "true"."""
    if value is None or value == "":
        return default
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


def as_list(value: Any) -> List[str]:
    """Accept a list or a comma-separated string."""
    if not value:
        return []
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return [str(item) for item in value]


@dataclass(frozen=True)
class ConnectionConfig:
    """Connection settings for one ArchivesSpace instance.

    Attributes:
        role: "source" or "destination" (used in log and error messages).
        url: Backend URL.
        username: ArchivesSpace username.
        password: ArchivesSpace password.
        repo_id: Numeric repository id, if the repository is chosen by id.
        repo_code: Repository code, if the repository is chosen by code.
        verify_ssl: True for https URLs.
    """

    role: str
    url: str
    username: str
    password: str
    repo_id: Optional[str] = None
    repo_code: Optional[str] = None
    page_size: int = DEFAULT_SETTINGS["PAGE_SIZE"]
    throttle: float = DEFAULT_SETTINGS["THROTTLE"]
    timeout: float = DEFAULT_SETTINGS["TIMEOUT"]
    verify_ssl: bool = True

    @classmethod
    def from_event(cls, role: str, event: Dict[str, Any]) -> "ConnectionConfig":
        """Build the config for `role`, collecting every missing field.

        Raises:
            ConfigurationError: If url, username, password or a repository
                selector is missing, or a numeric option is not a number.
        """
        problems = []
        values = {}
        for field in ("url", "username", "password"):
            values[field] = event.get(f"{role}_{field}") or ""
            if not values[field]:
                problems.append(f"{role}_{field} is required")

        repo_id = event.get(f"{role}_repo_id")
        repo_code = event.get(f"{role}_repo_code")
        if repo_id in (None, "") and not repo_code:
            problems.append(f"{role}_repo_id or {role}_repo_code is required")

        try:
            page_size = int(event.get("page_size") or DEFAULT_SETTINGS["PAGE_SIZE"])
            throttle = float(event.get("throttle") or DEFAULT_SETTINGS["THROTTLE"])
            timeout = float(event.get("timeout") or DEFAULT_SETTINGS["TIMEOUT"])
        except (TypeError, ValueError) as e:
            problems.append(f"invalid numeric option: {e}")
            page_size, throttle, timeout = 0, 0, 0

        if problems:
            raise ConfigurationError(problems)

        return cls(
            role=role,
            url=values["url"],
            username=values["username"],
            password=values["password"],
            repo_id=None if repo_id in (None, "") else str(repo_id),
            repo_code=repo_code or None,
            page_size=page_size,
            throttle=throttle,
            timeout=timeout,
            verify_ssl=urlparse(values["url"]).scheme == "https",
        )


@dataclass(frozen=True)
class SyncParameters:
    """Immutable parameters for a single run.

    Attributes:
        modified_since: Unix timestamp lower bound for source resources (0 = all).
        id_generator: Name of the matching identifier strategy.
        target_record_uris: Source URIs to migrate; empty means all eligible.
        skip_existing: Leave a matched destination resource alone (skip policy)
            instead of deleting and reimporting it (replace policy).
        dry_run: Log deletes and imports without issuing them.
    """

    modified_since: int = 0
    id_generator: str = DEFAULT_SETTINGS["ID_GENERATOR"]
    target_record_uris: Tuple[str, ...] = ()
    skip_existing: bool = DEFAULT_SETTINGS["SKIP_EXISTING"]
    dry_run: bool = DEFAULT_SETTINGS["DRY_RUN"]

    @classmethod
    def from_event(cls, event: Dict[str, Any], now: Optional[datetime] = None) -> "SyncParameters":
        """Build run parameters from an event.

        Raises:
            ConfigurationError: If id_generator names an unknown strategy.
        """
        id_generator = event.get("id_generator") or DEFAULT_SETTINGS["ID_GENERATOR"]
        if id_generator not in ID_GENERATORS:
            known = ", ".join(sorted(ID_GENERATORS))
            raise ConfigurationError(
                f"id_generator must be one of: {known} (got '{id_generator}')"
            )

        recent_only = as_bool(event.get("recent_only"), DEFAULT_SETTINGS["RECENT_ONLY"])
        return cls(
            modified_since=modified_since(recent_only, now),
            id_generator=id_generator,
            target_record_uris=tuple(as_list(event.get("source_target_record_uris"))),
            skip_existing=as_bool(
                event.get("destination_skip_existing"), DEFAULT_SETTINGS["SKIP_EXISTING"]
            ),
            dry_run=as_bool(event.get("dry_run"), DEFAULT_SETTINGS["DRY_RUN"]),
        )

    @property
    def policy(self) -> str:
        return "skip" if self.skip_existing else "replace"


def event_from_env(env_file: str = "./.env") -> Dict[str, Any]:
    """Build an event dict from environment variables.

    If `env_file` exists it is loaded via python-dotenv first (without
    overriding variables already set in the process environment).

    Args:
        env_file: Path to a .env file.

    Returns:
        An event dict containing only the keys that are set.
    """
    env_path = Path(env_file)
    if env_path.exists():
        load_dotenv(env_path)

    event = {}
    for env_key, event_key in ENV_EVENT_KEYS.items():
        value = os.getenv(env_key)
        if value not in (None, ""):
            event[event_key] = value
    return event
