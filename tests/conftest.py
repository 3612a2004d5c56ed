"""Pytest configuration for reflection-tools tests."""

import logging

import pytest

from reflection_tools.api.options import OptionsStore

logging.basicConfig(level=logging.DEBUG)


@pytest.fixture
def store() -> OptionsStore:
    return OptionsStore()
