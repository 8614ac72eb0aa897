import pytest

from adasql.core.session import Session
from tests.utils import FakeBackend


@pytest.fixture
def backend():
    """Fake Data API backend"""
    return FakeBackend()


@pytest.fixture
def session(backend):
    """Session bound to the fake backend, no database selected"""
    return Session(backend)
