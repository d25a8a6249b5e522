# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module tests extracting the coordinates of a Gradle project."""

import os
from collections.abc import Callable
from pathlib import Path

import pytest

from gradle_resolver.artifact.coordinates import (
    GradleCoordinates,
    extract_coordinates_from_script,
    get_gradle_artifact_coordinates,
)
from gradle_resolver.errors import BuildScriptNotFoundError, InvalidWorkingDirectoryError, MissingCoordinateError


@pytest.mark.parametrize(
    ("content", "expected"),
    [
        pytest.param(
            'group = "com.example"\nversion = "1.0"',
            {"group": "com.example", "version": "1.0"},
            id="group_and_version",
        ),
        pytest.param(
            "group = 'com.example'\nversion = '1.0.0'\nname = 'my-app'",
            {"group": "com.example", "version": "1.0.0", "artifact": "my-app"},
            id="single_quotes",
        ),
        pytest.param(
            'project.version = "2.0"\nartifactId = "lib"',
            {"version": "2.0", "artifact": "lib"},
            id="project_prefix_and_artifact_id",
        ),
        pytest.param(
            'rootProject.name = "my-app-kts"',
            {"artifact": "my-app-kts"},
            id="root_project_name",
        ),
        pytest.param(
            '// version = "9"\n/* group = "ignored" */\nversion = "1"',
            {"version": "1"},
            id="comments",
        ),
        pytest.param(
            'publishing {\n    publications {\n        version = "9"\n    }\n}\nversion = "1"',
            {"version": "1"},
            id="assignments_inside_blocks",
        ),
        pytest.param('version = "1"\nversion = "2"', {"version": "2"}, id="last_assignment_wins"),
        pytest.param('version = ""', {}, id="empty_value"),
        pytest.param("version = computeVersion()", {}, id="unquoted_value"),
        pytest.param('myversion = "1"\nversionCode = "2"', {}, id="other_names"),
        pytest.param("", {}, id="empty_content"),
    ],
)
def test_extract_coordinates_from_script(content: str, expected: dict[str, str]) -> None:
    """Test extracting the top-level coordinates of a script."""
    assert extract_coordinates_from_script(content) == expected


def test_to_purl() -> None:
    """Test the Package URL of the coordinates."""
    coordinates = GradleCoordinates(group="com.example", artifact="app", version="1.0.0")
    assert coordinates.to_purl().to_string() == "pkg:maven/com.example/app@1.0.0"


@pytest.mark.parametrize(
    ("files", "expected"),
    [
        pytest.param(
            {"build.gradle": "\n\tgroup = 'com.example'\n\tversion = '1.0.0'\n\tname = 'my-app'\n"},
            ("com.example", "my-app", "1.0.0"),
            id="groovy",
        ),
        pytest.param(
            {"build.gradle.kts": '\ngroup = "com.example.kts"\nversion = "2.0.0"\nrootProject.name = "my-app-kts"\n'},
            ("com.example.kts", "my-app-kts", "2.0.0"),
            id="kotlin",
        ),
        pytest.param(
            {
                "build.gradle": 'group = "com.example"\nversion = "${projectVersion}"\n',
                "gradle.properties": "projectVersion=2.0.0\n",
            },
            ("com.example", None, "2.0.0"),
            id="gradle_property_reference",
        ),
        pytest.param(
            {"build.gradle": 'ext.releaseVersion = "3.0.0"\ngroup = "com.example"\nversion = "$releaseVersion"\n'},
            ("com.example", None, "3.0.0"),
            id="ext_property_reference",
        ),
        pytest.param(
            {"build.gradle": "", "gradle.properties": "group=com.properties\nversion=4.0.0\n"},
            ("com.properties", None, "4.0.0"),
            id="gradle_properties_fallback",
        ),
        pytest.param(
            {
                "build.gradle": 'group = "com.example"\nversion = "${unknown}"\n',
                "gradle.properties": "version=5.0.0\n",
            },
            ("com.example", None, "5.0.0"),
            id="unresolved_value_falls_back",
        ),
        pytest.param(
            {
                "build.gradle": 'group = "com.example"\nversion = "1.0.0"\n',
                "settings.gradle": 'rootProject.name = "from-settings"\n',
            },
            ("com.example", "from-settings", "1.0.0"),
            id="settings_root_project_name",
        ),
        pytest.param(
            {
                "build.gradle": 'group = "com.example"\nname = "from-build"\nversion = "1.0.0"\n',
                "settings.gradle": 'rootProject.name = "from-settings"\n',
            },
            ("com.example", "from-build", "1.0.0"),
            id="build_name_before_settings",
        ),
        pytest.param(
            {
                "build.gradle": 'group = "com.example"\nversion = "1.0.0"\napply from: "gradle/coordinates.gradle"\n',
                "gradle/coordinates.gradle": 'version = "9.0.0"\nname = "from-applied"\n',
            },
            ("com.example", "from-applied", "1.0.0"),
            id="applied_script_fills_missing_values",
        ),
        pytest.param(
            {
                "build.gradle": 'group = "com.example"\nversion = "1.0.0"\n'
                'publishing {\n    publications {\n        maven {\n            version = "9.0.0"\n'
                "        }\n    }\n}\n",
            },
            ("com.example", None, "1.0.0"),
            id="publication_version_is_ignored",
        ),
    ],
)
def test_get_gradle_artifact_coordinates(
    files: dict[str, str],
    expected: tuple[str, str | None, str],
    tmp_path: Path,
    write_file: Callable[[str, str], str],
) -> None:
    """Test extracting the coordinates of a project.

    A None artifact id in ``expected`` stands for the name of the project directory.
    """
    for name, content in files.items():
        write_file(name, content)

    group, artifact, version = expected
    assert get_gradle_artifact_coordinates(str(tmp_path)) == GradleCoordinates(
        group=group,
        artifact=artifact or tmp_path.name,
        version=version,
    )


def test_get_gradle_artifact_coordinates_with_properties(
    tmp_path: Path, write_file: Callable[[str, str], str]
) -> None:
    """Test that the given properties override the gradle.properties file."""
    write_file("build.gradle", 'group = "com.example"\nversion = "${projectVersion}"\n')
    write_file("gradle.properties", "projectVersion=1.0.0\n")

    coordinates = get_gradle_artifact_coordinates(str(tmp_path), {"projectVersion": "2.0.0"})
    assert coordinates.version == "2.0.0"


@pytest.mark.parametrize(
    ("content", "error"),
    [
        pytest.param('version = "1.0.0"\nname = "app"\n', MissingCoordinateError, id="missing_group"),
        pytest.param('group = "com.example"\nname = "app"\n', MissingCoordinateError, id="missing_version"),
    ],
)
def test_get_gradle_artifact_coordinates_missing_values(
    content: str,
    error: type[Exception],
    tmp_path: Path,
    write_file: Callable[[str, str], str],
) -> None:
    """Test projects without group or version."""
    write_file("build.gradle", content)
    with pytest.raises(error):
        get_gradle_artifact_coordinates(str(tmp_path))


def test_get_gradle_artifact_coordinates_without_build_script(tmp_path: Path) -> None:
    """Test a directory without build script."""
    with pytest.raises(BuildScriptNotFoundError):
        get_gradle_artifact_coordinates(str(tmp_path))

    with pytest.raises(InvalidWorkingDirectoryError):
        get_gradle_artifact_coordinates(os.path.join(tmp_path, "nonexistent"))
