"""Tests for document loading."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import httpx
import pytest

from apigen.errors import MalformedDocument, SourceError
from apigen.loader import is_url, load_document, load_source, parse_document

PETSTORE = Path(__file__).parent / "fixtures" / "petstore.json"


class TestIsUrl:
    def test_https(self):
        assert is_url("https://api.example.com/swagger.json")

    def test_http(self):
        assert is_url("http://localhost:8080/v2/api-docs")

    def test_relative_path(self):
        assert not is_url("spec/swagger.json")

    def test_absolute_path(self):
        assert not is_url("/tmp/swagger.json")

    def test_windows_drive(self):
        assert not is_url("C:\\specs\\swagger.json")


class TestLoadSource:
    """Test reading document text from files and URLs."""

    def test_reads_file(self):
        assert '"swagger": "2.0"' in load_source(str(PETSTORE))

    def test_missing_file(self, tmp_path):
        missing = tmp_path / "missing.json"
        with pytest.raises(SourceError) as exc:
            load_source(str(missing))
        assert exc.value.source == str(missing)

    @patch("apigen.loader.httpx.get")
    def test_fetches_url(self, mock_get):
        resp = MagicMock()
        resp.text = '{"paths": {}}'
        mock_get.return_value = resp

        text = load_source("https://api.example.com/swagger.json")

        assert text == '{"paths": {}}'
        mock_get.assert_called_once()
        assert mock_get.call_args.args[0] == "https://api.example.com/swagger.json"
        resp.raise_for_status.assert_called_once()

    @patch("apigen.loader.httpx.get")
    def test_network_failure(self, mock_get):
        mock_get.side_effect = httpx.ConnectError("connection refused")
        with pytest.raises(SourceError, match="Failed to fetch data from URL"):
            load_source("https://api.example.com/swagger.json")

    @patch("apigen.loader.httpx.get")
    def test_http_error_status(self, mock_get):
        request = httpx.Request("GET", "https://api.example.com/swagger.json")
        response = httpx.Response(404, request=request)
        mock_get.return_value = response
        with pytest.raises(SourceError, match="HTTP 404"):
            load_source("https://api.example.com/swagger.json")


class TestParseDocument:
    def test_invalid_json_reports_position(self):
        with pytest.raises(MalformedDocument) as exc:
            parse_document('{"paths": {,}}')
        assert exc.value.line == 1
        assert exc.value.column is not None

    def test_non_object_root(self):
        with pytest.raises(MalformedDocument):
            parse_document("[]")

    def test_load_document(self):
        doc = load_document(str(PETSTORE))
        assert "models.Pet" in doc.definitions
