# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module extracts the Maven coordinates of the artifact built by a Gradle project."""

import logging
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass

from packageurl import PackageURL

from gradle_resolver.config.defaults import defaults
from gradle_resolver.errors import BuildScriptNotFoundError, MissingCoordinateError
from gradle_resolver.parsers.gradle_properties import (
    collect_gradle_properties,
    extract_properties_from_script,
    has_unresolved_reference,
    merge_property_tables,
    resolve_gradle_property,
)
from gradle_resolver.parsers.gradle_scanner import mask_nested_blocks
from gradle_resolver.parsers.gradle_script import GradleScript, find_gradle_script, load_gradle_script
from gradle_resolver.parsers.script_inclusion import collect_applied_scripts
from gradle_resolver.repository.deploy_repository import validate_working_dir

logger: logging.Logger = logging.getLogger(__name__)

COORDINATE_ASSIGNMENT = re.compile(
    r"(?m)^[ \t]*(?:rootProject\.|project\.)?(?P<name>group|version|name|artifactId)[ \t]*=[ \t]*"
    r"(?P<quote>[\"'])(?P<value>(?:(?!(?P=quote)).)*)(?P=quote)"
)
ROOT_PROJECT_NAME = re.compile(
    r"(?m)^[ \t]*rootProject\.name[ \t]*=[ \t]*(?P<quote>[\"'])(?P<value>(?:(?!(?P=quote)).)*)(?P=quote)"
)

COORDINATE_FIELDS = {
    "group": "group",
    "version": "version",
    "name": "artifact",
    "artifactId": "artifact",
}


@dataclass(frozen=True)
class GradleCoordinates:
    """The Maven coordinates of the artifact built by a Gradle project."""

    group: str
    artifact: str
    version: str

    def to_purl(self) -> PackageURL:
        """Return the Package URL of the artifact.

        Returns
        -------
        PackageURL
            The Maven Package URL, e.g. ``pkg:maven/com.example/app@1.0.0``.
        """
        return PackageURL(type="maven", namespace=self.group, name=self.artifact, version=self.version)


def extract_coordinates_from_script(content: str) -> dict[str, str]:
    """Return the coordinates assigned at the top level of a Gradle script.

    Assignments inside blocks, such as ``publications { ... }``, and in comments are ignored. The last
    assignment of a coordinate wins.

    >>> extract_coordinates_from_script('group = "com.example"\\nversion = "1.0"')
    {'group': 'com.example', 'version': '1.0'}
    """
    coordinates: dict[str, str] = {}
    for match in COORDINATE_ASSIGNMENT.finditer(mask_nested_blocks(content)):
        if value := match.group("value").strip():
            coordinates[COORDINATE_FIELDS[match.group("name")]] = value
    return coordinates


def _collect_scripts(build_script: GradleScript, properties: Mapping[str, str]) -> list[GradleScript]:
    """Return the build script followed by the scripts it applies, transitively."""
    scripts = [build_script]
    visited = {os.path.abspath(build_script.path)}
    index = 0
    while index < len(scripts):
        script = scripts[index]
        index += 1
        for applied_path in collect_applied_scripts(script.content, script.is_kotlin, properties, script.path):
            absolute_path = os.path.abspath(applied_path)
            if absolute_path in visited:
                continue
            visited.add(absolute_path)
            if (applied_script := load_gradle_script(applied_path)) is not None:
                scripts.append(applied_script)
    return scripts


def get_gradle_artifact_coordinates(
    working_dir: str,
    properties: Mapping[str, str] | None = None,
) -> GradleCoordinates:
    """Extract the group, artifact id and version of a Gradle project.

    The top-level ``group = "..."``, ``version = "..."`` and ``name = "..."`` (or ``artifactId``,
    ``project.name``, ``rootProject.name``) assignments of the build script are read first. The scripts
    it applies fill in the coordinates it does not assign. Property references in the values are
    resolved against the ``gradle.properties`` files, the ``ext`` properties and ``properties``.

    When a coordinate is still missing, the ``group`` and ``version`` Gradle properties are used, the
    ``rootProject.name`` of the settings script is used for the artifact id and, as a last resort, the
    artifact id is the name of ``working_dir``.

    Parameters
    ----------
    working_dir : str
        The project directory.
    properties : Mapping[str, str] | None
        Additional properties, e.g. from the command line. They take precedence over the others.

    Returns
    -------
    GradleCoordinates
        The coordinates.

    Raises
    ------
    InvalidWorkingDirectoryError
        If ``working_dir`` is empty or is not a directory.
    BuildScriptNotFoundError
        If ``working_dir`` has no build script.
    MissingCoordinateError
        If the group or the version cannot be found.
    """
    validate_working_dir(working_dir)

    build_path = find_gradle_script(working_dir, defaults.get("gradle", "build_script", fallback="build"))
    build_script = load_gradle_script(build_path) if build_path else None
    if build_script is None:
        raise BuildScriptNotFoundError(f"No Gradle build script found in {working_dir}.")

    base_properties = collect_gradle_properties(working_dir)
    override_properties = properties or {}

    coordinates: dict[str, str] = {}
    script_properties: dict[str, str] = {}
    for script in _collect_scripts(build_script, merge_property_tables(base_properties, override_properties)):
        script_properties = merge_property_tables(script_properties, extract_properties_from_script(script.content))
        for field, value in extract_coordinates_from_script(script.content).items():
            coordinates.setdefault(field, value)

    table = merge_property_tables(base_properties, script_properties, override_properties)
    for field, value in list(coordinates.items()):
        resolved = resolve_gradle_property(value, table)
        if has_unresolved_reference(resolved):
            logger.debug("Ignoring the %s %s with an unresolved property.", field, value)
            del coordinates[field]
        else:
            coordinates[field] = resolved

    for field in ("group", "version"):
        if field not in coordinates and table.get(field):
            coordinates[field] = table[field]

    if "artifact" not in coordinates:
        settings_path = find_gradle_script(working_dir, defaults.get("gradle", "settings_script", fallback="settings"))
        settings_script = load_gradle_script(settings_path) if settings_path else None
        if settings_script and (match := ROOT_PROJECT_NAME.search(mask_nested_blocks(settings_script.content))):
            coordinates["artifact"] = resolve_gradle_property(match.group("value").strip(), table)

    missing = [field for field in ("group", "version") if not coordinates.get(field)]
    if missing:
        raise MissingCoordinateError(f"The {' and '.join(missing)} of the project in {working_dir} cannot be found.")

    artifact = coordinates.get("artifact") or os.path.basename(os.path.normpath(os.path.abspath(working_dir)))
    return GradleCoordinates(group=coordinates["group"], artifact=artifact, version=coordinates["version"])
