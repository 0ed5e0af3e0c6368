"""Tests for aspace_migrator.converter.convert_record().

The converter must always run unscoped and always hand the destination client
back with its repository scope restored.
"""

import pytest
import requests

from aspace_migrator.converter import convert_record
from aspace_migrator.exceptions import ConverterUnavailableError, FatalSyncError

from http_mocks import make_client, mock_response

CONVERTER_URL = "https://dest.test/plugins/jsonmodel_from_format/resource/ead"


@pytest.fixture
def destination():
    return make_client(base_uri="https://dest.test", base_repo="repositories/2")


def test_convert_success(destination):
    scopes = []

    def post(url, **kwargs):
        scopes.append(destination.base_repo)
        return mock_response(text='[{"jsonmodel_type":"resource","publish":false}]')

    destination._session.post.side_effect = post

    result = convert_record(destination, "<ead/>", '["MS123"]')

    assert result == '[{"jsonmodel_type":"resource","publish":false}]'
    args, kwargs = destination._session.post.call_args
    assert args[0] == CONVERTER_URL
    assert kwargs["data"] == b"<ead/>"
    assert kwargs["headers"] == {"Content-Type": "text/xml"}
    assert scopes == [None]
    assert destination.base_repo == "repositories/2"


def test_convert_plugin_missing_is_fatal(destination):
    destination._session.post.return_value = mock_response(404, json_data={"error": "Sinatra::NotFound"})

    with pytest.raises(ConverterUnavailableError) as exc_info:
        convert_record(destination, "<ead/>", '["MS123"]')

    assert isinstance(exc_info.value, FatalSyncError)
    assert destination.base_repo == "repositories/2"


def test_convert_other_error_returns_none(destination, caplog):
    destination._session.post.return_value = mock_response(
        400, json_data={"error": "Invalid EAD: missing unittitle"}
    )

    with caplog.at_level("ERROR"):
        assert convert_record(destination, "<ead/>", '["MS123"]') is None

    assert "missing unittitle" in caplog.text
    assert destination.base_repo == "repositories/2"


def test_convert_non_json_error_returns_none(destination):
    destination._session.post.return_value = mock_response(502, text="<html>Bad Gateway</html>")
    assert convert_record(destination, "<ead/>", '["MS123"]') is None
    assert destination.base_repo == "repositories/2"


def test_convert_transport_error_restores_scope(destination):
    destination._session.post.side_effect = requests.Timeout("read timed out")
    assert convert_record(destination, "<ead/>", '["MS123"]') is None
    assert destination.base_repo == "repositories/2"


def test_convert_unexpected_error_restores_scope(destination):
    destination._session.post.side_effect = RuntimeError("unexpected")
    with pytest.raises(RuntimeError):
        convert_record(destination, "<ead/>", '["MS123"]')
    assert destination.base_repo == "repositories/2"
