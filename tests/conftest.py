# -*- coding: utf-8 -*-
"""Setup code for testing tvdenoise.

@author: tvdenoise developers
Created on October 16, 2026

"""

import sys

import numpy as np
import pytest

from .base_tests import get_data


def pytest_addoption(parser):
    """Adds additional pytest command line options."""
    if hasattr(sys, '_is_gil_enabled'):  # sys._is_gil_enabled added in Python 3.13
        gil_enabled = sys._is_gil_enabled()
    else:
        gil_enabled = True

    # run threaded tests by default only if the gil is disabled
    parser.addoption(
        "--test_threading",
        action="store",
        default=int(not gil_enabled),
        type=int,
        help='Set to 0 to skip threaded tests for tvdenoise or 1 to run.',
    )


def pytest_collection_modifyitems(config, items):
    """Skips tests based on command line inputs."""
    if not config.getvalue('--test_threading'):
        skip_marker = pytest.mark.skip(reason='threaded tests are slow to run')
        for item in items:
            if 'threaded_test' in item.keywords:
                item.add_marker(skip_marker)


@pytest.fixture
def small_data():
    """A small array of data for testing."""
    return np.arange(10, dtype=float)


@pytest.fixture
def two_level_data():
    """Three points at 1 followed by three points at 5."""
    return np.array([1., 1., 1., 5., 5., 5.])


@pytest.fixture()
def data_fixture():
    """Test fixture for creating x- and y-data for testing."""
    return get_data()


@pytest.fixture()
def no_noise_data_fixture():
    """Test fixture that creates x- and y-data without noise for testing."""
    return get_data(include_noise=False)
