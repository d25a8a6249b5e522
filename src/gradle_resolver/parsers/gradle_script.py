# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains the in-memory representation of Gradle scripts and helpers to locate them."""

import logging
import os
from dataclasses import dataclass

from gradle_resolver.config.defaults import defaults

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GradleScript:
    """A Gradle script read from the file system.

    ``is_kotlin`` is True for Kotlin DSL scripts (``.kts``) and False for Groovy DSL scripts.
    """

    path: str
    content: str
    is_kotlin: bool


def is_kotlin_script(path: str) -> bool:
    """Return True if the path points to a Kotlin DSL script."""
    return path.endswith(".kts")


def load_gradle_script(path: str) -> GradleScript | None:
    """Read a Gradle script.

    Parameters
    ----------
    path : str
        The path to the script.

    Returns
    -------
    GradleScript | None
        The script, or None if it cannot be read.
    """
    try:
        with open(path, encoding="utf-8") as script_file:
            content = script_file.read()
    except (OSError, UnicodeDecodeError) as error:
        logger.debug("Unable to read the Gradle script %s: %s", path, error)
        return None

    return GradleScript(path=path, content=content, is_kotlin=is_kotlin_script(path))


def find_gradle_script(directory: str, base_name: str) -> str | None:
    """Return the path of the Groovy or, failing that, the Kotlin DSL script with the given base name.

    Parameters
    ----------
    directory : str
        The directory to look into.
    base_name : str
        The name of the script without extension, e.g. ``build`` or ``settings``.

    Returns
    -------
    str | None
        The path of the script, or None if neither exists.
    """
    extensions = (
        defaults.get("gradle", "groovy_extension", fallback=".gradle"),
        defaults.get("gradle", "kotlin_extension", fallback=".gradle.kts"),
    )
    for extension in extensions:
        path = os.path.join(directory, base_name + extension)
        if os.path.isfile(path):
            return path
    return None
