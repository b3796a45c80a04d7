"""
Unit test fixtures — factory-built models.
"""

import pytest

from tests.factories.model_factories import make_resource_item, make_hyperlink


@pytest.fixture
def resource_item_data():
    """Return randomized resource item data dict."""
    return make_resource_item()


@pytest.fixture
def hyperlink_data():
    """Return randomized hyperlink data dict."""
    return make_hyperlink()
