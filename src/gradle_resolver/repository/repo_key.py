# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module extracts repository keys from repository URLs and selects the deploy repository.

The selection between several candidate repositories follows a fixed order of preference:

1. ``PREFERRED``: a candidate whose key (or property name) refers to the kind of the version being
   deployed, i.e. ``snapshot`` for snapshot versions and ``release`` otherwise.
2. ``DEPLOY``: a candidate found in a property whose name refers to deployment.
3. ``FALLBACK``: the first candidate.
"""

import logging
import urllib.parse
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum

from gradle_resolver.config.defaults import defaults
from gradle_resolver.errors import InvalidURLError, NoRepositoryFoundError, NoValidURLError

logger: logging.Logger = logging.getLogger(__name__)


class RepositorySelection(str, Enum):
    """The reason a repository candidate is selected, from the strongest to the weakest."""

    PREFERRED = "preferred"
    DEPLOY = "deploy"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class RepositoryCandidate:
    """A repository key found in the Gradle configuration.

    ``name`` is the name of the property holding the repository, or empty for repositories declared in
    Gradle scripts.
    """

    key: str
    name: str = ""


def extract_repo_key_from_artifactory_url(url: str) -> str:
    """Extract the repository key from a repository URL.

    The key is the last path segment after the ``artifactory`` segment, so that both
    ``https://host/artifactory/libs-release`` and ``https://host/artifactory/api/maven/libs-release``
    yield ``libs-release``. The query string, the fragment and trailing slashes are ignored.

    Parameters
    ----------
    url : str
        The repository URL. It may be an absolute path such as ``/artifactory/libs-release``.

    Returns
    -------
    str
        The repository key.

    Raises
    ------
    InvalidURLError
        If the URL is empty or does not contain a repository key after the ``artifactory`` segment.
    """
    value = url.strip()
    if not value:
        raise InvalidURLError("The repository URL is empty.")

    try:
        path = urllib.parse.urlsplit(value).path
    except ValueError as error:
        raise InvalidURLError(f"The repository URL {value} cannot be parsed: {error}") from error

    marker = defaults.get("gradle.repository", "url_marker", fallback="artifactory")
    segments = [segment for segment in path.split("/") if segment]
    if marker not in segments:
        raise InvalidURLError(f"The repository URL {value} does not contain an /{marker}/ path segment.")

    remainder = segments[segments.index(marker) + 1 :]
    if not remainder:
        raise InvalidURLError(f"Unable to extract the repository key from {value} (check the repository URL).")

    return remainder[-1]


def classify_candidate(candidate: RepositoryCandidate, is_snapshot: bool) -> RepositorySelection:
    """Return how strongly a candidate matches the kind of version being deployed."""
    preferred = (
        defaults.get("gradle.repository", "snapshot_keyword", fallback="snapshot")
        if is_snapshot
        else defaults.get("gradle.repository", "release_keyword", fallback="release")
    ).lower()
    deploy = defaults.get("gradle.repository", "deploy_keyword", fallback="deploy").lower()

    if preferred in candidate.key.lower() or preferred in candidate.name.lower():
        return RepositorySelection.PREFERRED
    if deploy in candidate.name.lower():
        return RepositorySelection.DEPLOY
    return RepositorySelection.FALLBACK


def select_repository_key(candidates: list[RepositoryCandidate], is_snapshot: bool, source_name: str) -> str:
    """Select the deploy repository among candidates.

    Parameters
    ----------
    candidates : list[RepositoryCandidate]
        The candidates, in order of appearance.
    is_snapshot : bool
        True if a snapshot version is deployed.
    source_name : str
        The place the candidates come from, used in messages.

    Returns
    -------
    str
        The key of the first candidate with the strongest ``RepositorySelection``.

    Raises
    ------
    NoRepositoryFoundError
        If there is no candidate.
    """
    if not candidates:
        raise NoRepositoryFoundError(f"No repository found in {source_name}.")

    ranking = list(RepositorySelection)
    classified = [(ranking.index(classify_candidate(candidate, is_snapshot)), candidate) for candidate in candidates]
    rank, selected = min(classified, key=lambda item: item[0])
    logger.debug(
        "Selected the repository %s from %s (%s, snapshot: %s).",
        selected.key,
        source_name,
        ranking[rank].value,
        is_snapshot,
    )
    return selected.key


def find_repository_key_from_matches(urls: Iterable[str], source_name: str, is_snapshot: bool) -> str:
    """Select the deploy repository among the repository URLs found in a Gradle script.

    Parameters
    ----------
    urls : Iterable[str]
        The resolved repository URLs, in document order.
    source_name : str
        The script the URLs come from, used in messages.
    is_snapshot : bool
        True if a snapshot version is deployed.

    Returns
    -------
    str
        The repository key.

    Raises
    ------
    NoRepositoryFoundError
        If there is no URL.
    NoValidURLError
        If no repository key can be extracted from any of the URLs.
    """
    distinct_urls = list(dict.fromkeys(url.strip() for url in urls))
    if not distinct_urls:
        raise NoRepositoryFoundError(f"No repository URL found in {source_name}.")

    candidates = []
    for url in distinct_urls:
        try:
            candidates.append(RepositoryCandidate(key=extract_repo_key_from_artifactory_url(url)))
        except InvalidURLError as error:
            logger.debug("Ignoring the repository URL %s from %s: %s", url, source_name, error)

    if not candidates:
        raise NoValidURLError(
            f"None of the repository URLs found in {source_name} contains a repository key: {', '.join(distinct_urls)}."
        )

    return select_repository_key(candidates, is_snapshot, source_name)


def find_repo_in_properties(properties: Mapping[str, str], is_snapshot: bool) -> str:
    """Select the deploy repository among Gradle properties.

    A property is a candidate only if its name contains one of the ``property_name_keywords`` of
    ``defaults.ini`` (``repo``, ``artifactory``, ``url`` or ``deploy``). Its value is either a URL or
    absolute path containing a repository key, or a bare repository key. Boolean values, relative paths,
    values that contain ``:`` or ``/`` without a repository key (e.g. Maven coordinates) and properties
    that only refer to the other kind of version (e.g. ``releaseRepo`` for a snapshot) are ignored.

    Properties are considered in alphabetical order of their names, so the first name wins when no
    candidate is preferred over the others.

    Parameters
    ----------
    properties : Mapping[str, str]
        The property table.
    is_snapshot : bool
        True if a snapshot version is deployed.

    Returns
    -------
    str
        The repository key.

    Raises
    ------
    NoRepositoryFoundError
        If no property holds a repository.
    """
    keywords = [
        keyword.lower()
        for keyword in defaults.get_list(
            "gradle.repository", "property_name_keywords", fallback=["repo", "artifactory", "url", "deploy"]
        )
    ]
    snapshot_keyword = defaults.get("gradle.repository", "snapshot_keyword", fallback="snapshot").lower()
    release_keyword = defaults.get("gradle.repository", "release_keyword", fallback="release").lower()
    preferred, opposite = (
        (snapshot_keyword, release_keyword) if is_snapshot else (release_keyword, snapshot_keyword)
    )

    candidates: list[RepositoryCandidate] = []
    seen_keys: set[str] = set()
    for name in sorted(properties):
        value = properties[name].strip()
        lowered_name = name.strip().lower()
        if not lowered_name or not value:
            continue
        if not any(keyword in lowered_name for keyword in keywords):
            continue
        if value.lower() in ("true", "false"):
            continue
        if opposite in lowered_name and preferred not in lowered_name:
            continue
        if value.startswith(("./", "../")):
            continue

        if "/" in value or ":" in value:
            try:
                key = extract_repo_key_from_artifactory_url(value)
            except InvalidURLError as error:
                logger.debug("Ignoring the property %s: %s", name, error)
                continue
        else:
            key = value

        if key in seen_keys:
            continue
        seen_keys.add(key)
        candidates.append(RepositoryCandidate(key=key, name=name))

    return select_repository_key(candidates, is_snapshot, "the Gradle properties")
