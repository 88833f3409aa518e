"""Root conftest: shared drill payload fixtures."""

import copy

import pytest

from tests.fixtures.drill_messages import PASSING_SQUARE, SHORT_CORNER


@pytest.fixture
def passing_square() -> dict:
    """A well-formed drill payload (fresh copy per test)."""
    return copy.deepcopy(PASSING_SQUARE)


@pytest.fixture
def short_corner() -> dict:
    """A set-piece payload with the usual alias and type mistakes."""
    return copy.deepcopy(SHORT_CORNER)
