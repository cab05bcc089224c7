"""Load and decode a Swagger 2.0 document.

The source is either an http(s) URL, fetched with httpx, or a local path.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from urllib.parse import urlparse

import httpx

from .errors import MalformedDocument, SourceError
from .model import Document, decode_document

logger = logging.getLogger(__name__)

FETCH_TIMEOUT = 30.0


def is_url(source: str) -> bool:
    """Check whether a source should be fetched over HTTP."""
    parsed = urlparse(source)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def fetch_source(url: str) -> str:
    """Fetch the document text from a URL."""
    logger.debug("Fetching %s", url)
    try:
        resp = httpx.get(url, timeout=FETCH_TIMEOUT, follow_redirects=True)
        resp.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise SourceError(f"Failed to fetch data from URL: HTTP {e.response.status_code}", url) from e
    except httpx.HTTPError as e:
        raise SourceError(f"Failed to fetch data from URL: {e}", url) from e
    return resp.text


def read_source(path: Path) -> str:
    """Read the document text from a local file."""
    logger.debug("Reading %s", path)
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise SourceError(f"Unable to read file: {e.strerror or e}", str(path)) from e


def load_source(source: str) -> str:
    """Load document text from a URL or a file path."""
    if is_url(source):
        return fetch_source(source)
    return read_source(Path(source))


def parse_document(text: str) -> Document:
    """Parse JSON text into a Document."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedDocument(f"Unable to parse JSON: {e.msg}", line=e.lineno, column=e.colno) from e
    return decode_document(data)


def load_document(source: str) -> Document:
    """Load a Document from a URL or a file path."""
    return parse_document(load_source(source))
