"""Tests for aspace_migrator.fetcher."""

import os

import pytest
import requests
from lxml import etree

from aspace_migrator.fetcher import normalize_xml, retrieve_resource_description

from http_mocks import make_client, mock_response

FIXTURES_DIR = os.path.join(os.path.dirname(__file__), "fixtures")


def load_ead_fixture():
    with open(os.path.join(FIXTURES_DIR, "resource_ead.xml"), "rb") as f:
        return f.read()


def test_normalize_xml():
    xml = normalize_xml(b'<ead>\n  <archdesc level="collection"/>\n</ead>')
    assert xml.startswith("<?xml")
    assert "UTF-8" in xml
    assert '<archdesc level="collection"/>' in xml


def test_normalize_xml_rejects_malformed():
    with pytest.raises(etree.XMLSyntaxError):
        normalize_xml(b"<ead><archdesc></ead>")


def test_retrieve_uses_export_options():
    client = make_client()
    client._session.get.return_value = mock_response(content=load_ead_fixture())

    xml = retrieve_resource_description(client, "15")

    args, kwargs = client._session.get.call_args
    assert args[0] == "https://aspace.test/repositories/2/resource_descriptions/15.xml"
    assert kwargs["params"] == {
        "include_unpublished": "false",
        "include_daos": "true",
        "numbered_cs": "true",
        "print_pdf": "false",
    }
    assert "<unitid>MS123</unitid>" in xml
    assert 'level="other level"' in xml


def test_retrieve_http_error_returns_none():
    client = make_client()
    client._session.get.return_value = mock_response(404, json_data={"error": "Resource not found"})
    assert retrieve_resource_description(client, "15") is None


def test_retrieve_transport_error_returns_none():
    client = make_client()
    client._session.get.side_effect = requests.ConnectionError("connection reset")
    assert retrieve_resource_description(client, "15") is None


def test_retrieve_parse_error_returns_none(caplog):
    client = make_client()
    client._session.get.return_value = mock_response(content=b"<ead><unclosed></ead>")
    with caplog.at_level("ERROR"):
        assert retrieve_resource_description(client, "15") is None
    assert "resource_descriptions/15.xml" in caplog.text
