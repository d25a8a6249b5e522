# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module builds Gradle property tables and resolves property references.

A property table maps property names, which may contain dots, to string values. Gradle reads properties
from several sources. In increasing order of precedence they are:

* ``gradle.properties`` in the Gradle user home,
* ``gradle.properties`` in the project directory,
* ``ext`` properties declared in the build scripts,
* ``ORG_GRADLE_PROJECT_<name>`` environment variables,
* ``-P``/``-D`` command-line arguments, then the ``-P``/``-D`` options in ``GRADLE_OPTS`` and ``JAVA_OPTS``.
"""

import logging
import os
import re
import shlex
from collections.abc import Iterable, Mapping

from gradle_resolver.config.defaults import defaults
from gradle_resolver.errors import ConfigurationError
from gradle_resolver.parsers.gradle_scanner import CharacterKind, classify_characters, iter_blocks

logger: logging.Logger = logging.getLogger(__name__)

_QUOTED_VALUE = r"(?P<quote>[\"'])(?P<value>(?:(?!(?P=quote)).)+)(?P=quote)"

EXT_BLOCK_ASSIGNMENT = re.compile(r"(?m)^[ \t]*(?P<key>[A-Za-z_][A-Za-z0-9_.]*)[ \t]*=[ \t]*" + _QUOTED_VALUE)
EXT_FLAT_ASSIGNMENT = re.compile(
    r"(?m)^[ \t]*(?:project\.)?ext\.(?P<key>[A-Za-z_][A-Za-z0-9_.]*)[ \t]*=[ \t]*" + _QUOTED_VALUE
)
KOTLIN_EXTRA_ASSIGNMENT = re.compile(
    r"(?m)^[ \t]*(?:project\.)?extra\[[ \t]*(?P<kquote>[\"'])(?P<key>[^\"'\n]+)(?P=kquote)[ \t]*\][ \t]*=[ \t]*"
    + _QUOTED_VALUE
)
KOTLIN_EXTRA_SET = re.compile(
    r"(?m)^[ \t]*(?:project\.)?extra\.set\([ \t]*(?P<kquote>[\"'])(?P<key>[^\"'\n]+)(?P=kquote)[ \t]*,[ \t]*"
    + _QUOTED_VALUE
)

PROPERTIES_FILE_ENTRY = re.compile(r"(?m)^[ \t]*([^#!=\s:]+)[ \t]*[:=][ \t]*(.*)$")

PROPERTY_ARGUMENT_PREFIXES = ("--project-prop=", "--system-prop=", "-P", "-D")

BRACED_REFERENCE = re.compile(r"\$\{([^}]+)\}")
SIMPLE_REFERENCE = re.compile(r"\$([A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)*)")
UNRESOLVED_REFERENCE = re.compile(r"\$\{[^}]*\}|\$[A-Za-z_]")
FIND_PROPERTY_CALL = re.compile(r"^findProperty\((?P<quote>[\"'])(?P<name>.+)(?P=quote)\)$")
PROJECT_PREFIXES = ("project.", "rootProject.")


def unquote(value: str) -> str:
    """Remove one pair of matching single or double quotes around a value."""
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def _statement_start(match: re.Match) -> int:
    """Return the offset of the first character of a matched statement, after its indentation."""
    statement = match.group(0)
    return match.start() + len(statement) - len(statement.lstrip())


def extract_properties_from_script(content: str) -> dict[str, str]:
    """Extract the extra properties declared in a Gradle script.

    The supported declarations are ``ext { key = "value" }``, ``ext.key = "value"`` and
    ``project.ext.key = "value"`` in the Groovy DSL and ``extra["key"] = "value"`` and
    ``extra.set("key", "value")`` in the Kotlin DSL. Only quoted values are extracted. Declarations in
    comments or string literals are ignored. When a key is declared more than once, the last declaration
    in the script wins.

    Parameters
    ----------
    content : str
        The content of the Gradle script.

    Returns
    -------
    dict[str, str]
        The extra properties.
    """
    if not content:
        return {}

    kinds = classify_characters(content)
    declarations: list[tuple[int, str, str]] = []

    for block in iter_blocks(content, "ext"):
        for match in EXT_BLOCK_ASSIGNMENT.finditer(block.body):
            position = block.body_start + _statement_start(match)
            declarations.append((position, match.group("key"), match.group("value")))

    for pattern in (EXT_FLAT_ASSIGNMENT, KOTLIN_EXTRA_ASSIGNMENT, KOTLIN_EXTRA_SET):
        for match in pattern.finditer(content):
            declarations.append((_statement_start(match), match.group("key"), match.group("value")))

    properties: dict[str, str] = {}
    for position, key, value in sorted(declarations):
        if kinds[position] != CharacterKind.CODE:
            continue
        properties[key.strip()] = value
    return properties


def read_properties_file(path: str) -> dict[str, str]:
    """Read a Java ``.properties`` file such as ``gradle.properties``.

    Both ``key=value`` and ``key:value`` entries are accepted. Comment lines starting with ``#`` or ``!``
    are skipped, and entries with an empty value are dropped.

    Parameters
    ----------
    path : str
        The path to the file.

    Returns
    -------
    dict[str, str]
        The properties, or an empty dictionary if the file cannot be read.
    """
    try:
        with open(path, encoding="utf-8") as properties_file:
            content = properties_file.read()
    except (OSError, UnicodeDecodeError) as error:
        logger.debug("Unable to read the properties file %s: %s", path, error)
        return {}

    properties: dict[str, str] = {}
    for match in PROPERTIES_FILE_ENTRY.finditer(content):
        key = match.group(1).strip()
        value = unquote(match.group(2).strip())
        if key and value:
            properties[key] = value
    return properties


def parse_properties_from_args(args: Iterable[str]) -> dict[str, str]:
    """Parse the project and system properties passed to Gradle on the command line.

    Only ``-Pkey=value``, ``-Dkey=value``, ``--project-prop=key=value`` and ``--system-prop=key=value``
    tokens are considered. The pair is split on the first ``=``.

    >>> parse_properties_from_args(["clean", "-Prepo=libs-release", "-P", "-Dempty="])
    {'repo': 'libs-release'}
    """
    properties: dict[str, str] = {}
    for arg in args:
        arg = arg.strip()
        for prefix in PROPERTY_ARGUMENT_PREFIXES:
            if arg.startswith(prefix) and len(arg) > len(prefix):
                pair = arg[len(prefix) :]
                break
        else:
            continue

        key, separator, value = pair.partition("=")
        key = key.strip()
        value = unquote(value.strip())
        if separator and key and value:
            properties[key] = value
    return properties


def parse_properties_from_opts(opts: str) -> dict[str, str]:
    """Parse the properties defined in a JVM options string such as ``GRADLE_OPTS``."""
    try:
        args = shlex.split(opts)
    except ValueError as error:
        logger.debug("Unable to split the options %s: %s", opts, error)
        args = opts.split()
    return parse_properties_from_args(args)


def parse_properties_from_environment(environ: Mapping[str, str]) -> dict[str, str]:
    """Return the project properties set through ``ORG_GRADLE_PROJECT_<name>`` environment variables."""
    prefix = defaults.get("gradle.environment", "project_property_prefix", fallback="ORG_GRADLE_PROJECT_")
    properties: dict[str, str] = {}
    for name, value in environ.items():
        if not name.startswith(prefix):
            continue
        key = name[len(prefix) :].strip()
        value = value.strip()
        if key and value:
            properties[key] = value
    return properties


def merge_property_tables(*tables: Mapping[str, str]) -> dict[str, str]:
    """Merge property tables, later tables taking precedence.

    Empty values never override an existing value.
    """
    merged: dict[str, str] = {}
    for table in tables:
        for key, value in table.items():
            if value:
                merged[key] = value
    return merged


def get_gradle_user_home(environ: Mapping[str, str]) -> str:
    """Return the Gradle user home directory.

    Parameters
    ----------
    environ : Mapping[str, str]
        The environment variables, usually ``os.environ``.

    Returns
    -------
    str
        The value of ``GRADLE_USER_HOME`` if it is set, otherwise ``~/.gradle``.
    """
    variable = defaults.get("gradle.environment", "user_home_variable", fallback="GRADLE_USER_HOME")
    if gradle_user_home := environ.get(variable):
        return gradle_user_home
    return os.path.join(os.path.expanduser("~"), defaults.get("gradle", "user_home_dir", fallback=".gradle"))


def collect_gradle_properties(working_dir: str, gradle_user_home: str | None = None) -> dict[str, str]:
    """Build the part of the property table that comes from ``gradle.properties`` files.

    Parameters
    ----------
    working_dir : str
        The project directory.
    gradle_user_home : str | None
        The Gradle user home directory. Its ``gradle.properties`` file is read only if it is given.

    Returns
    -------
    dict[str, str]
        The properties. ``rootDir`` and ``projectDir`` default to ``working_dir``.
    """
    file_name = defaults.get("gradle", "properties_file", fallback="gradle.properties")
    tables = []
    if gradle_user_home:
        tables.append(read_properties_file(os.path.join(gradle_user_home, file_name)))
    tables.append(read_properties_file(os.path.join(working_dir, file_name)))

    properties = merge_property_tables(*tables)
    properties.setdefault("rootDir", working_dir)
    properties.setdefault("projectDir", working_dir)
    return properties


def collect_override_properties(args: Iterable[str] = (), environ: Mapping[str, str] | None = None) -> dict[str, str]:
    """Build the part of the property table that overrides the properties declared in build scripts.

    Parameters
    ----------
    args : Iterable[str]
        The Gradle command-line arguments.
    environ : Mapping[str, str] | None
        The environment variables. No environment variable is read if it is None.

    Returns
    -------
    dict[str, str]
        The properties from ``ORG_GRADLE_PROJECT_`` variables, then from ``args``, then from the JVM
        options variables, later sources taking precedence.
    """
    environ = environ or {}
    tables = [parse_properties_from_environment(environ), parse_properties_from_args(args)]
    for variable in defaults.get_list(
        "gradle.environment", "jvm_options_variables", fallback=["GRADLE_OPTS", "JAVA_OPTS"]
    ):
        if opts := environ.get(variable):
            tables.append(parse_properties_from_opts(opts))
    return merge_property_tables(*tables)


def _resolve(value: str, properties: Mapping[str, str], depth: int, max_depth: int) -> str:
    if depth > max_depth:
        logger.debug("Reached the maximum depth while resolving %s.", value)
        return value

    def replace_braced(match: re.Match) -> str:
        reference = match.group(0)
        key = match.group(1).strip()
        for prefix in PROJECT_PREFIXES:
            if key.startswith(prefix):
                key = key[len(prefix) :]
                break
        if find_property := FIND_PROPERTY_CALL.match(key):
            key = find_property.group("name")

        if not key or key.startswith("$"):
            return reference

        replacement = properties.get(key)
        if not replacement:
            return reference
        if replacement == reference:
            logger.debug("Circular reference to the property %s.", key)
            return reference
        return _resolve(replacement, properties, depth + 1, max_depth)

    def replace_simple(match: re.Match) -> str:
        reference = match.group(0)
        full_key = match.group(1)

        candidates = [full_key]
        for prefix in PROJECT_PREFIXES:
            if full_key.startswith(prefix):
                candidates.append(full_key[len(prefix) :])
        for key in candidates:
            replacement = properties.get(key)
            if replacement:
                if replacement == reference:
                    return reference
                return _resolve(replacement, properties, depth + 1, max_depth)

        # $host.example.com resolves the longest known prefix and keeps the rest.
        parts = full_key.split(".")
        for index in range(len(parts) - 1, 0, -1):
            prefix_key = ".".join(parts[:index])
            replacement = properties.get(prefix_key)
            if replacement and replacement != "$" + prefix_key:
                suffix = "." + ".".join(parts[index:])
                return _resolve(replacement, properties, depth + 1, max_depth) + suffix
        return reference

    result = BRACED_REFERENCE.sub(replace_braced, value)
    return SIMPLE_REFERENCE.sub(replace_simple, result)


def resolve_gradle_property(value: str, properties: Mapping[str, str], max_depth: int | None = None) -> str:
    """Replace the ``${name}`` and ``$name`` references in a value with their property values.

    Inside ``${...}``, the ``project.`` and ``rootProject.`` prefixes are ignored and
    ``findProperty("name")`` is treated as a reference to ``name``. Dotted names are looked up literally.
    A ``$name`` reference whose full name is unknown resolves its longest known dotted prefix and keeps
    the remaining suffix. Substituted values are resolved again, up to ``max_depth`` levels. References
    that cannot be resolved are left untouched.

    Parameters
    ----------
    value : str
        The value to resolve.
    properties : Mapping[str, str]
        The property table.
    max_depth : int | None
        The maximum nesting of references. The ``max_property_depth`` default is used if it is None.

    Returns
    -------
    str
        The resolved value.

    Examples
    --------
    >>> resolve_gradle_property("${artifactoryUrl}/$repo", {"artifactoryUrl": "http://host/artifactory", "repo": "libs"})
    'http://host/artifactory/libs'
    >>> resolve_gradle_property("$host.example.com", {"host": "localhost"})
    'localhost.example.com'
    """
    if "$" not in value:
        return value
    if max_depth is None:
        try:
            max_depth = defaults.getint("gradle", "max_property_depth", fallback=10)
        except ValueError as error:
            raise ConfigurationError(
                "The max_property_depth in section [gradle] of the .ini configuration file must be an integer."
            ) from error
    return _resolve(value, properties, 0, max_depth)


def has_unresolved_reference(value: str) -> bool:
    """Return True if the value still contains a ``${...}`` or ``$name`` reference."""
    return UNRESOLVED_REFERENCE.search(value) is not None
