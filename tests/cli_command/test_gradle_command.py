# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module tests the inspection of Gradle command lines."""

import os

import pytest
from hypothesis import given
from hypothesis import strategies as st

from gradle_resolver.cli_command.gradle_command import (
    BUILD_FILE_OPTION,
    PROJECT_PROPERTY_OPTION,
    GradleInvocation,
    extract_build_file_path,
    split_gradle_command,
    was_publish_command,
)
from tests.st import NON_PUBLISH_TASK_ST


@pytest.mark.parametrize(
    "tasks",
    [
        pytest.param(["publish"], id="publish"),
        pytest.param(["clean", "publish"], id="clean_publish"),
        pytest.param(["publishToSomethingElse"], id="publish_to_repository"),
        pytest.param(["publishToSonatype"], id="publish_to_sonatype"),
        pytest.param(["publishToArtifactory"], id="publish_to_artifactory"),
        pytest.param([":project:publish"], id="project_path"),
        pytest.param([":sub:project:publish"], id="subproject_path"),
        pytest.param([":a:b:c:d:publish"], id="deeply_nested_project_path"),
        pytest.param([":publish"], id="root_project_path"),
        pytest.param(["::publish"], id="double_colon"),
        pytest.param(["assemble", "check", "publish"], id="publish_after_other_tasks"),
        pytest.param(["clean", "build", "publish", "check"], id="publish_in_the_middle"),
        pytest.param(["publishToMavenLocal", "publish"], id="local_and_remote"),
        pytest.param(["publishToMavenLocal", "publishToRemote"], id="local_and_remote_repository"),
    ],
)
def test_publish_command(tasks: list[str]) -> None:
    """Test the tasks that publish artifacts."""
    assert was_publish_command(tasks) is True


@pytest.mark.parametrize(
    "tasks",
    [
        pytest.param([], id="no_task"),
        pytest.param(["clean"], id="clean"),
        pytest.param(["build"], id="build"),
        pytest.param(["clean", "build", "test", "check", "assemble", "jar"], id="many_tasks"),
        pytest.param(["publishToMavenLocal"], id="maven_local"),
        pytest.param([":publishToMavenLocal"], id="maven_local_root_project"),
        pytest.param([":app:publishToMavenLocal"], id="maven_local_subproject"),
        pytest.param(["publishToLocal"], id="local"),
        pytest.param(["clean", "build", "publishToMavenLocal"], id="only_local_publishing"),
        pytest.param(["publishMavenPublicationToMavenLocal"], id="publication_to_maven_local"),
        pytest.param(["publishAllPublicationsToLocal"], id="all_publications_to_local"),
        pytest.param(["publishAllPublicationsToMavenRepository"], id="long_form_publication_task"),
        pytest.param(["Publish"], id="case_sensitive"),
        pytest.param(["publisher"], id="prefix_of_a_longer_word"),
        pytest.param(["doNotPublish"], id="suffix"),
        pytest.param(["publishTo"], id="prefix_without_destination"),
        pytest.param([""], id="empty_task"),
        pytest.param([":"], id="only_colon"),
        pytest.param(["   "], id="whitespaces"),
        pytest.param(["\tpublish"], id="leading_tab"),
    ],
)
def test_non_publish_command(tasks: list[str]) -> None:
    """Test the tasks that do not publish artifacts."""
    assert was_publish_command(tasks) is False


@given(st.lists(NON_PUBLISH_TASK_ST, max_size=5))
def test_publish_task_among_any_tasks(tasks: list[str]) -> None:
    """Test that only the publish task decides."""
    assert was_publish_command(tasks) is False
    assert was_publish_command([*tasks, "publish"]) is True


@pytest.mark.parametrize(
    ("args", "expected"),
    [
        pytest.param(["-b", "custom.gradle"], ("custom.gradle", 2), id="short_separate"),
        pytest.param(["--build-file", "custom.gradle"], ("custom.gradle", 2), id="long_separate"),
        pytest.param(["--build-file=custom.gradle"], ("custom.gradle", 1), id="long_equals"),
        pytest.param(["-bcustom.gradle"], ("custom.gradle", 1), id="short_attached"),
        pytest.param(["-b"], ("", 1), id="missing_value"),
        pytest.param(["--build-cache"], None, id="other_long_option"),
        pytest.param(["clean"], None, id="task"),
    ],
)
def test_match_value_option(args: list[str], expected: tuple[str, int] | None) -> None:
    """Test matching an option that takes a value."""
    assert BUILD_FILE_OPTION.match(args, 0) == expected


def test_match_value_option_at_index() -> None:
    """Test matching an option in the middle of the arguments."""
    args = ["clean", "-P", "repo=libs", "publish"]
    assert PROJECT_PROPERTY_OPTION.match(args, 0) is None
    assert PROJECT_PROPERTY_OPTION.match(args, 1) == ("repo=libs", 2)


@pytest.mark.parametrize(
    ("args", "expected"),
    [
        pytest.param(["-b", "custom.gradle"], "custom.gradle", id="build_file"),
        pytest.param(["--build-file=custom.gradle", "publish"], "custom.gradle", id="build_file_equals"),
        pytest.param(["-p", "sub"], os.path.join("sub", "build.gradle"), id="project_dir"),
        pytest.param(["--project-dir", "sub"], os.path.join("sub", "build.gradle"), id="long_project_dir"),
        pytest.param(["-p"], "", id="project_dir_without_value"),
        pytest.param(["-b"], "", id="build_file_without_value"),
        pytest.param(["clean", "publish"], "", id="no_build_file"),
        pytest.param([], "", id="no_argument"),
        pytest.param(["clean", "-b", "first.gradle", "-b", "second.gradle"], "first.gradle", id="first_option_wins"),
    ],
)
def test_extract_build_file_path(args: list[str], expected: str) -> None:
    """Test extracting the build file of a command line."""
    assert extract_build_file_path(args) == expected


@pytest.mark.parametrize(
    ("args", "expected"),
    [
        pytest.param(
            ["clean", "publish", "-Prepo=libs", "-P", "other=x", "--info", "-b", "custom.gradle", "-x", "test"],
            GradleInvocation(tasks=["clean", "publish"], build_file="custom.gradle", properties={"repo": "libs", "other": "x"}),
            id="tasks_options_and_properties",
        ),
        pytest.param(
            ["-Dorg.gradle.jvmargs=-Xmx1g", ":app:publishToMavenLocal", "--console", "plain"],
            GradleInvocation(tasks=[":app:publishToMavenLocal"], properties={"org.gradle.jvmargs": "-Xmx1g"}),
            id="system_property",
        ),
        pytest.param(
            ["--project-prop", "repo=x", "--system-prop=other=y", "publish"],
            GradleInvocation(tasks=["publish"], properties={"repo": "x", "other": "y"}),
            id="long_property_options",
        ),
        pytest.param(
            ["-p", "sub", "publish", "-P"],
            GradleInvocation(tasks=["publish"], build_file=os.path.join("sub", "build.gradle")),
            id="project_dir_and_trailing_flag",
        ),
        pytest.param([], GradleInvocation(), id="no_argument"),
    ],
)
def test_split_gradle_command(args: list[str], expected: GradleInvocation) -> None:
    """Test splitting a command line into tasks, build file and properties."""
    assert split_gradle_command(args) == expected
