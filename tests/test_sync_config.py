"""Tests for aspace_migrator.sync_config."""

import os
from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from aspace_migrator.exceptions import ConfigurationError
from aspace_migrator.sync_config import (
    ConnectionConfig,
    SyncParameters,
    as_bool,
    as_list,
    event_from_env,
)

_BASE_EVENT = {
    "source_url": "https://source.test/api",
    "source_username": "reader",
    "source_password": "r-secret",
    "source_repo_code": "MAIN",
    "destination_url": "http://localhost:8089",
    "destination_username": "admin",
    "destination_password": "admin",
    "destination_repo_id": 2,
}


# ---------------------------------------------------------------------------
# ConnectionConfig
# ---------------------------------------------------------------------------

def test_connection_from_event():
    config = ConnectionConfig.from_event("source", _BASE_EVENT)
    assert config.role == "source"
    assert config.url == "https://source.test/api"
    assert config.repo_code == "MAIN"
    assert config.repo_id is None
    assert config.verify_ssl is True
    assert config.page_size == 50


def test_connection_repo_id_is_string():
    config = ConnectionConfig.from_event("destination", _BASE_EVENT)
    assert config.repo_id == "2"
    assert config.verify_ssl is False


def test_connection_numeric_options():
    event = dict(_BASE_EVENT, page_size="10", throttle="0.25", timeout=5)
    config = ConnectionConfig.from_event("source", event)
    assert config.page_size == 10
    assert config.throttle == 0.25
    assert config.timeout == 5.0


def test_connection_reports_every_problem():
    event = {"source_url": "https://source.test"}
    with pytest.raises(ConfigurationError) as exc_info:
        ConnectionConfig.from_event("source", event)
    problems = exc_info.value.problems
    assert "source_username is required" in problems
    assert "source_password is required" in problems
    assert "source_repo_id or source_repo_code is required" in problems
    assert len(problems) == 3


def test_connection_invalid_page_size():
    with pytest.raises(ConfigurationError, match="invalid numeric option"):
        ConnectionConfig.from_event("source", dict(_BASE_EVENT, page_size="lots"))


# ---------------------------------------------------------------------------
# SyncParameters
# ---------------------------------------------------------------------------

def test_parameters_defaults():
    params = SyncParameters.from_event(_BASE_EVENT)
    assert params.modified_since == 0
    assert params.id_generator == "smushed"
    assert params.target_record_uris == ()
    assert params.skip_existing is False
    assert params.dry_run is False
    assert params.policy == "replace"


def test_parameters_from_event():
    now = datetime(2024, 6, 2, tzinfo=timezone.utc)
    event = dict(
        _BASE_EVENT,
        recent_only=True,
        id_generator="four_part",
        source_target_record_uris=["/repositories/2/resources/1"],
        destination_skip_existing="TRUE",
    )
    params = SyncParameters.from_event(event, now=now)
    assert params.modified_since == int(datetime(2024, 6, 1, tzinfo=timezone.utc).timestamp())
    assert params.id_generator == "four_part"
    assert params.target_record_uris == ("/repositories/2/resources/1",)
    assert params.skip_existing is True
    assert params.policy == "skip"


def test_parameters_unknown_id_generator():
    with pytest.raises(ConfigurationError, match="id_generator"):
        SyncParameters.from_event(dict(_BASE_EVENT, id_generator="guess"))


def test_parameters_are_immutable():
    params = SyncParameters()
    with pytest.raises(AttributeError):
        params.skip_existing = True


# ---------------------------------------------------------------------------
# Value helpers
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("value,expected", [
    (True, True), (False, False), ("true", True), ("True", True),
    ("false", False), ("yes", False), (None, False), ("", False), (1, True),
])
def test_as_bool(value, expected):
    assert as_bool(value) is expected


def test_as_bool_default():
    assert as_bool(None, default=True) is True


def test_as_list():
    assert as_list(None) == []
    assert as_list("") == []
    assert as_list("/a/1, /a/2,") == ["/a/1", "/a/2"]
    assert as_list(["/a/1"]) == ["/a/1"]


# ---------------------------------------------------------------------------
# event_from_env
# ---------------------------------------------------------------------------

def test_event_from_env_reads_dotenv(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "SOURCE_URL=https://source.test\n"
        "SOURCE_REPO_CODE=MAIN\n"
        "DESTINATION_REPO_ID=4\n"
        "RECENT_ONLY=true\n"
        "SOURCE_TARGET_RECORD_URIS=/repositories/2/resources/1,/repositories/2/resources/2\n"
    )
    with patch.dict(os.environ, {}, clear=True):
        event = event_from_env(str(env_file))

    assert event["source_url"] == "https://source.test"
    assert event["source_repo_code"] == "MAIN"
    assert event["destination_repo_id"] == "4"
    assert event["recent_only"] == "true"
    params = SyncParameters.from_event(event)
    assert len(params.target_record_uris) == 2
    assert "source_password" not in event


def test_event_from_env_without_file_uses_environment():
    with patch.dict(os.environ, {"DESTINATION_SKIP_EXISTING": "true", "DRY_RUN": ""}, clear=True):
        event = event_from_env("/nonexistent/.env")
    assert event == {"destination_skip_existing": "true"}
