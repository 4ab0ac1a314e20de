"""Shared fixtures for scanner tests."""

import pytest

from fakes import FakeComparator


@pytest.fixture
def comparator():
    return FakeComparator()
