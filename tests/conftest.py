"""
Pytest fixtures shared across the test suite.
"""
from datetime import datetime, timezone

import pytest

from models import FeedItem, StructuredRecord


def utc(year, month, day, hour=0):
    return datetime(year, month, day, hour, tzinfo=timezone.utc)


@pytest.fixture
def make_record():
    """Factory for StructuredRecord with sensible defaults."""
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        fields = {
            "id": f"openfda:R-{counter['n']}",
            "classification": "Class II",
            "initiation_date": utc(2024, 1, 10),
            "source_endpoint": "food/enforcement",
        }
        fields.update(overrides)
        return StructuredRecord(**fields)

    return _make


@pytest.fixture
def make_item():
    """Factory for FeedItem with sensible defaults."""
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        fields = {
            "title": "Unrelated announcement",
            "description": "Nothing to see here.",
            "publication_date": utc(2024, 3, 1),
            "link": f"https://example.org/alerts/{counter['n']}",
            "source_name": "USDA FSIS",
        }
        fields.update(overrides)
        return FeedItem(**fields)

    return _make
