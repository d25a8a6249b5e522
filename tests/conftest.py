# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""Fixtures for tests."""

import os
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

from gradle_resolver.config.defaults import defaults, load_defaults

# We need to pass fixture names as arguments to maintain an order.
# pylint: disable=redefined-outer-name


@pytest.fixture(autouse=True)
def setup_test() -> Generator[None, None, None]:
    """Load the values from the packaged defaults.ini and clear them after each test."""
    load_defaults("")
    yield
    defaults.clear()


@pytest.fixture()
def write_file(tmp_path: Path) -> Callable[[str, str], str]:
    """Return a function that writes a file under ``tmp_path`` and returns its path.

    Parameters
    ----------
    tmp_path : Path
        Depends on the tmp_path fixture.

    Returns
    -------
    Callable[[str, str], str]
        The function taking the path relative to ``tmp_path`` and the content of the file.
    """

    def _write_file(relative_path: str, content: str) -> str:
        path = os.path.join(tmp_path, relative_path)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "w", encoding="utf-8") as file:
            file.write(content)
        return path

    return _write_file
