# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module tests the defaults module."""

import os
from pathlib import Path

import pytest

from gradle_resolver.config.defaults import create_defaults, defaults, load_defaults


def test_load_defaults(tmp_path: Path) -> None:
    """Test loading defaults."""
    user_config_path = os.path.join(tmp_path, "config.ini")
    with open(user_config_path, "w", encoding="utf-8") as user_config_file:
        user_config_file.write("[gradle.repository]\nurl_marker = nexus\n")

    # Test that the user configuration is loaded.
    assert load_defaults(user_config_path) is True

    # Test that the values in user configuration is prioritized.
    assert defaults.get("gradle.repository", "url_marker") == "nexus"
    assert defaults.get("gradle", "build_script") == "build"

    # Test loading an invalid configuration path.
    assert load_defaults("invalid") is False


def test_load_malformed_defaults(tmp_path: Path) -> None:
    """Test loading a user configuration that is not an .ini file."""
    user_config_path = os.path.join(tmp_path, "config.ini")
    with open(user_config_path, "w", encoding="utf-8") as user_config_file:
        user_config_file.write("no section header\n")

    assert load_defaults(user_config_path) is False


def test_create_defaults(tmp_path: Path) -> None:
    """Test dumping the default values."""
    assert create_defaults(str(tmp_path), str(tmp_path)) is True
    assert os.path.isfile(os.path.join(tmp_path, "defaults.ini"))


@pytest.mark.xfail(
    os.geteuid() == 0,
    reason="Only effective for non-root users",
)
def test_create_defaults_without_permission() -> None:
    """Test dumping default config in cases where the user does not have write permission to the output location."""
    assert create_defaults(output_path="/", cwd_path="/") is False


def test_create_defaults_in_missing_directory(tmp_path: Path) -> None:
    """Test dumping the default values in a directory that does not exist."""
    assert create_defaults(os.path.join(tmp_path, "missing"), str(tmp_path)) is False


@pytest.mark.parametrize(
    ("user_config_input", "delimiter", "strip", "expect"),
    [
        (
            """
            [test.list]
            list = ,github.com, gitlab.com, space string, space string
            """,
            ",",
            False,
            ["github.com", " gitlab.com", " space string"],
        ),
        (
            """
            [test.list]
            list = ,github.com, gitlab.com, space string, space string
            """,
            ",",
            True,
            ["github.com", "gitlab.com", "space string"],
        ),
        # Using None as the `delimiter` also splits on spaces inside the lines.
        (
            """
            [test.list]
            list =
                github.com
                comma_ended,
                space string
                space string
            """,
            None,
            True,
            ["github.com", "comma_ended,", "space", "string"],
        ),
    ],
)
def test_get_str_list_with_custom_delimiter(
    user_config_input: str,
    delimiter: str,
    strip: bool,
    expect: list[str],
    tmp_path: Path,
) -> None:
    """Test getting a list of strings from defaults.ini using a custom delimiter."""
    user_config_path = os.path.join(tmp_path, "config.ini")
    with open(user_config_path, "w", encoding="utf-8") as user_config_file:
        user_config_file.write(user_config_input)
    load_defaults(user_config_path)

    results = defaults.get_list(section="test.list", option="list", delimiter=delimiter, strip=strip)
    assert results == expect


@pytest.mark.parametrize(
    ("user_config_input", "expect"),
    [
        (
            """
            [test.list]
            list = ,github.com, gitlab.com, space string, space string
            """,
            [",github.com, gitlab.com, space string, space string"],
        ),
        (
            """
            [test.list]
            list =
                github.com
                comma_ended,
                space string
                foo bar
                foo bar
                space string
            """,
            ["github.com", "comma_ended,", "space string", "foo bar"],
        ),
        (
            """
            [test.list]
            list =
            """,
            [],
        ),
    ],
)
def test_get_str_list_default(
    user_config_input: str,
    expect: list[str],
    tmp_path: Path,
) -> None:
    """Test default behavior of getting a list of strings from an option in defaults.ini.

    The default behavior includes striping leading/trailing whitespaces from elements, removing empty elements and
    removing duplicated elements from the return list.
    """
    user_config_path = os.path.join(tmp_path, "config.ini")
    with open(user_config_path, "w", encoding="utf-8") as user_config_file:
        user_config_file.write(user_config_input)
    load_defaults(user_config_path)

    results = defaults.get_list(section="test.list", option="list")
    assert results == expect


def test_get_str_list_with_duplicates(tmp_path: Path) -> None:
    """Test keeping the duplicated elements of a list."""
    user_config_path = os.path.join(tmp_path, "config.ini")
    with open(user_config_path, "w", encoding="utf-8") as user_config_file:
        user_config_file.write("[test.list]\nlist =\n    a\n    b\n    a\n")
    load_defaults(user_config_path)

    assert defaults.get_list(section="test.list", option="list", remove_duplicates=False) == ["a", "b", "a"]


@pytest.mark.parametrize(
    ("section", "option", "fallback", "expect"),
    [
        ("gradle", "non-existing", None, []),
        ("non-existing", "option", None, []),
        ("gradle", "non-existing", ["some", "fallback", "value"], ["some", "fallback", "value"]),
        ("non-existing", "option", ["some", "fallback", "value"], ["some", "fallback", "value"]),
    ],
)
def test_get_str_list_fallback(section: str, option: str, fallback: list[str] | None, expect: list[str]) -> None:
    """Test getting the fallback value of a missing option."""
    assert defaults.get_list(section=section, option=option, fallback=fallback) == expect


def test_packaged_lists() -> None:
    """Test the lists of the packaged defaults.ini."""
    assert defaults.get_list("gradle", "init_scripts") == ["init.gradle.kts", "init.gradle"]
    assert defaults.get_list("gradle.environment", "jvm_options_variables") == ["GRADLE_OPTS", "JAVA_OPTS"]
    assert defaults.get_list("gradle.repository", "property_name_keywords") == ["repo", "artifactory", "url", "deploy"]
