"""Shared fixtures for the generator tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from apigen.model import Document, decode_document

FIXTURES = Path(__file__).parent / "fixtures"
PETSTORE = FIXTURES / "petstore.json"


@pytest.fixture
def petstore_data() -> dict[str, Any]:
    """Raw JSON of the petstore fixture."""
    return json.loads(PETSTORE.read_text(encoding="utf-8"))


@pytest.fixture
def petstore(petstore_data) -> Document:
    """Decoded petstore document."""
    return decode_document(petstore_data)
