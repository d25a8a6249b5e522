# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module finds the scripts applied from a Gradle script with ``apply from``."""

import logging
import os
import re
from collections.abc import Mapping

from gradle_resolver.parsers.gradle_properties import has_unresolved_reference, resolve_gradle_property
from gradle_resolver.parsers.gradle_scanner import classify_characters, is_keyword_occurrence

logger: logging.Logger = logging.getLogger(__name__)

_QUOTED_PATH = r"(?P<quote>[\"'])(?P<path>(?:(?!(?P=quote)).)+)(?P=quote)"

# apply from: "a.gradle" and apply(from: "a.gradle")
GROOVY_APPLY_FROM = re.compile(r"\bapply(?:[ \t]+|[ \t]*\([ \t]*)from[ \t]*:[ \t]*" + _QUOTED_PATH)
# apply(from = "a.gradle.kts")
KOTLIN_APPLY_FROM = re.compile(r"\bapply[ \t]*\([ \t]*from[ \t]*=[ \t]*" + _QUOTED_PATH)


def collect_applied_scripts(
    content: str,
    is_kotlin: bool,
    properties: Mapping[str, str],
    current_file_path: str,
) -> list[str]:
    """Return the paths of the local scripts applied from a Gradle script.

    Property references in the paths are resolved first. Remote scripts (``http://...`` and other URLs)
    and paths with unresolved references are skipped. Relative paths are resolved against the directory
    of ``current_file_path``. The applied scripts are not scanned: callers decide whether to follow them.

    Parameters
    ----------
    content : str
        The content of the Gradle script.
    is_kotlin : bool
        True if the script uses the Kotlin DSL.
    properties : Mapping[str, str]
        The property table used to resolve references in the paths.
    current_file_path : str
        The path of the script being scanned.

    Returns
    -------
    list[str]
        The normalized paths of the applied scripts, in document order.
    """
    if not content:
        return []

    pattern = KOTLIN_APPLY_FROM if is_kotlin else GROOVY_APPLY_FROM
    kinds = classify_characters(content)
    script_dir = os.path.dirname(current_file_path) if current_file_path else ""

    paths = []
    for match in pattern.finditer(content):
        if not is_keyword_occurrence(content, kinds, match.start(), match.start() + len("apply")):
            continue

        path = resolve_gradle_property(match.group("path").strip(), properties)
        if "://" in path:
            logger.debug("Skipping the remote script %s.", path)
            continue
        if has_unresolved_reference(path):
            logger.debug("Skipping the applied script %s with an unresolved property.", path)
            continue

        if not os.path.isabs(path) and script_dir:
            path = os.path.join(script_dir, path)
        paths.append(os.path.normpath(path))
    return paths
