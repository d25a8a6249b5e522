# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module finds the repository that receives the artifacts published by a Gradle project."""

import logging
import os
from collections.abc import Iterable, Mapping

from gradle_resolver.config.defaults import defaults
from gradle_resolver.errors import (
    InvalidWorkingDirectoryError,
    NoRepositoryFoundError,
    NoValidURLError,
    UnresolvedPropertyError,
)
from gradle_resolver.parsers.gradle_properties import (
    collect_gradle_properties,
    collect_override_properties,
    extract_properties_from_script,
    has_unresolved_reference,
    merge_property_tables,
    resolve_gradle_property,
)
from gradle_resolver.parsers.gradle_script import GradleScript, find_gradle_script, load_gradle_script
from gradle_resolver.parsers.repository_urls import find_urls_in_gradle_script
from gradle_resolver.parsers.script_inclusion import collect_applied_scripts
from gradle_resolver.repository.repo_key import find_repo_in_properties, find_repository_key_from_matches

logger: logging.Logger = logging.getLogger(__name__)


def validate_working_dir(working_dir: str) -> None:
    """Raise an ``InvalidWorkingDirectoryError`` if ``working_dir`` is empty or is not a directory."""
    if not working_dir:
        raise InvalidWorkingDirectoryError("The working directory cannot be empty.")
    if not os.path.isdir(working_dir):
        raise InvalidWorkingDirectoryError(f"The working directory {working_dir} does not exist or is not a directory.")


def is_snapshot_version(version: str) -> bool:
    """Return True if the version is a snapshot version, e.g. ``1.0.0-SNAPSHOT``."""
    suffix = defaults.get("gradle", "snapshot_suffix", fallback="SNAPSHOT")
    return version.strip().upper().endswith(suffix.upper())


def find_repo_in_gradle_script(
    script: GradleScript,
    base_properties: Mapping[str, str],
    override_properties: Mapping[str, str],
    is_snapshot: bool,
    inherited_properties: Mapping[str, str] | None = None,
    visited: set[str] | None = None,
) -> str:
    """Find the deploy repository declared in a Gradle script or in the scripts it applies.

    The repository URLs of the script are resolved against the property table made of
    ``base_properties``, the ``ext`` properties of the script and of the scripts applying it, and
    ``override_properties``, in increasing order of precedence. URLs with unresolved references and
    relative paths are ignored. The applied scripts are only scanned when the script itself declares no
    usable repository.

    Parameters
    ----------
    script : GradleScript
        The script to scan.
    base_properties : Mapping[str, str]
        The properties from ``gradle.properties`` files.
    override_properties : Mapping[str, str]
        The properties from the command line and the environment.
    is_snapshot : bool
        True if a snapshot version is deployed.
    inherited_properties : Mapping[str, str] | None
        The ``ext`` properties of the scripts applying this script.
    visited : set[str] | None
        The absolute paths of the scripts already scanned.

    Returns
    -------
    str
        The repository key.

    Raises
    ------
    NoRepositoryFoundError
        If no repository is declared.
    NoValidURLError
        If the declared repository URLs contain no repository key.
    UnresolvedPropertyError
        If the only repository URL of a script references an unknown property.
    """
    if visited is None:
        visited = set()
    visited.add(os.path.abspath(script.path))

    script_properties = merge_property_tables(inherited_properties or {}, extract_properties_from_script(script.content))
    properties = merge_property_tables(base_properties, script_properties, override_properties)

    raw_urls = find_urls_in_gradle_script(script.content, script.is_kotlin)
    resolved_urls = []
    unresolved_urls = []
    for raw_url in raw_urls:
        url = resolve_gradle_property(raw_url, properties)
        if has_unresolved_reference(url):
            logger.debug("Skipping the repository URL %s with an unresolved property in %s.", url, script.path)
            unresolved_urls.append(url)
            continue
        if url.startswith(("./", "../")):
            logger.debug("Skipping the relative repository path %s in %s.", url, script.path)
            continue
        resolved_urls.append(url)

    if resolved_urls:
        return find_repository_key_from_matches(resolved_urls, script.path, is_snapshot)

    if len(set(raw_urls)) == 1 and unresolved_urls:
        raise UnresolvedPropertyError(
            f"The repository URL {unresolved_urls[0]} in {script.path} references a property that cannot be resolved."
        )

    for applied_path in collect_applied_scripts(script.content, script.is_kotlin, properties, script.path):
        absolute_path = os.path.abspath(applied_path)
        if absolute_path in visited:
            logger.debug("Skipping the already scanned script %s.", applied_path)
            continue
        visited.add(absolute_path)

        applied_script = load_gradle_script(applied_path)
        if applied_script is None:
            continue

        try:
            repository_key = find_repo_in_gradle_script(
                applied_script,
                base_properties,
                override_properties,
                is_snapshot,
                inherited_properties=script_properties,
                visited=visited,
            )
        except (NoRepositoryFoundError, NoValidURLError) as error:
            logger.debug(error)
            continue

        logger.debug("Found the repository %s in the applied script %s.", repository_key, applied_path)
        return repository_key

    raise NoRepositoryFoundError(f"No repository found in {script.path}.")


def get_init_script_paths(gradle_user_home: str) -> list[str]:
    """Return the init scripts of the Gradle user home, from the highest to the lowest precedence.

    Parameters
    ----------
    gradle_user_home : str
        The Gradle user home directory.

    Returns
    -------
    list[str]
        The existing ``init.gradle.kts`` and ``init.gradle`` scripts, followed by the scripts of the
        ``init.d`` directory in reverse alphabetical order.
    """
    paths = [
        os.path.join(gradle_user_home, name)
        for name in defaults.get_list("gradle", "init_scripts", fallback=["init.gradle.kts", "init.gradle"])
    ]

    init_dir = os.path.join(gradle_user_home, defaults.get("gradle", "init_dir", fallback="init.d"))
    try:
        entries = sorted(os.listdir(init_dir), reverse=True)
    except OSError as error:
        logger.debug("Unable to list the init scripts in %s: %s", init_dir, error)
        entries = []

    extensions = (
        defaults.get("gradle", "groovy_extension", fallback=".gradle"),
        defaults.get("gradle", "kotlin_extension", fallback=".gradle.kts"),
    )
    paths.extend(os.path.join(init_dir, entry) for entry in entries if entry.endswith(extensions))
    return [path for path in paths if os.path.isfile(path)]


def find_repo_in_init_scripts(
    gradle_user_home: str,
    base_properties: Mapping[str, str],
    override_properties: Mapping[str, str],
    is_snapshot: bool,
) -> str:
    """Find the deploy repository declared in the init scripts of the Gradle user home.

    Raises
    ------
    NoRepositoryFoundError
        If none of the init scripts declares a usable repository.
    """
    for path in get_init_script_paths(gradle_user_home):
        script = load_gradle_script(path)
        if script is None:
            continue
        try:
            return find_repo_in_gradle_script(script, base_properties, override_properties, is_snapshot)
        except (NoRepositoryFoundError, NoValidURLError) as error:
            logger.debug(error)

    raise NoRepositoryFoundError(f"No repository found in the init scripts of {gradle_user_home}.")


def get_gradle_deploy_repository(
    working_dir: str,
    version: str,
    args: Iterable[str] = (),
    environ: Mapping[str, str] | None = None,
    gradle_user_home: str | None = None,
    build_file: str | None = None,
) -> str:
    """Find the key of the repository that receives the artifacts published by a Gradle project.

    The configuration is searched in the following order, and the first repository found is returned:

    1. the build script and the scripts it applies,
    2. the settings script and the scripts it applies,
    3. the ``gradle.properties`` files, the command-line and the environment properties,
    4. the init scripts of the Gradle user home.

    Parameters
    ----------
    working_dir : str
        The project directory.
    version : str
        The version being published. Snapshot versions prefer snapshot repositories and other versions
        prefer release repositories.
    args : Iterable[str]
        The Gradle command-line arguments, used for ``-P`` and ``-D`` properties.
    environ : Mapping[str, str] | None
        The environment variables. No environment variable is read if it is None.
    gradle_user_home : str | None
        The Gradle user home directory. Its ``gradle.properties`` and init scripts are only read if it is
        given.
    build_file : str | None
        The build script passed explicitly to Gradle, relative to ``working_dir`` or absolute. The default
        build script of its directory is used if it does not exist, and the default build script of
        ``working_dir`` if there is none.

    Returns
    -------
    str
        The repository key.

    Raises
    ------
    InvalidWorkingDirectoryError
        If ``working_dir`` is empty or is not a directory.
    UnresolvedPropertyError
        If the only repository URL of a scanned script references an unknown property.
    NoRepositoryFoundError
        If no repository can be found.
    """
    validate_working_dir(working_dir)

    is_snapshot = is_snapshot_version(version)
    base_properties = collect_gradle_properties(working_dir, gradle_user_home)
    override_properties = collect_override_properties(args, environ)

    build_script = defaults.get("gradle", "build_script", fallback="build")
    script_paths: list[str | None] = []
    if build_file:
        build_file = os.path.join(working_dir, build_file)
        if os.path.isfile(build_file):
            script_paths.append(build_file)
        else:
            # A project directory given with -p may hold a Kotlin DSL build script.
            logger.debug("The build file %s does not exist.", build_file)
            script_paths.append(find_gradle_script(os.path.dirname(build_file), build_script))
    if not any(script_paths):
        script_paths = [find_gradle_script(working_dir, build_script)]
    script_paths.append(find_gradle_script(working_dir, defaults.get("gradle", "settings_script", fallback="settings")))

    for path in script_paths:
        if path is None:
            continue
        script = load_gradle_script(path)
        if script is None:
            continue
        try:
            repository_key = find_repo_in_gradle_script(script, base_properties, override_properties, is_snapshot)
        except (NoRepositoryFoundError, NoValidURLError) as error:
            logger.debug(error)
            continue
        logger.info("Found the deploy repository %s in %s.", repository_key, os.path.basename(path))
        return repository_key

    try:
        repository_key = find_repo_in_properties(
            merge_property_tables(base_properties, override_properties), is_snapshot
        )
        logger.info("Found the deploy repository %s in the Gradle properties.", repository_key)
        return repository_key
    except NoRepositoryFoundError as error:
        logger.debug(error)

    if gradle_user_home:
        try:
            repository_key = find_repo_in_init_scripts(
                gradle_user_home, base_properties, override_properties, is_snapshot
            )
            logger.info("Found the deploy repository %s in the Gradle init scripts.", repository_key)
            return repository_key
        except NoRepositoryFoundError as error:
            logger.debug(error)

    raise NoRepositoryFoundError(f"No deploy repository found in the Gradle configuration of {working_dir}.")
