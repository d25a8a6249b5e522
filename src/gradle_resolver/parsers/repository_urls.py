# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module extracts the URLs of the Maven repositories declared in a Gradle script."""

import logging
import re

from gradle_resolver.config.defaults import defaults
from gradle_resolver.errors import ConfigurationError
from gradle_resolver.parsers.gradle_scanner import CharacterKind, classify_characters, iter_blocks

logger: logging.Logger = logging.getLogger(__name__)

_QUOTED_URL = r"(?P<quote>[\"'])(?P<url>(?:(?!(?P=quote)).)+)(?P=quote)"

# url "...", url = "...", url: "...", url = uri("..."), url uri("...")
GROOVY_URL = re.compile(r"\burl[ \t]*(?:[:=][ \t]*)?(?:uri[ \t]*\([ \t]*)?" + _QUOTED_URL)
# url = uri("..."), url.set(uri("...")), url = "...", url("...")
KOTLIN_URL = re.compile(r"\burl(?:\.set)?[ \t]*(?:\([ \t]*|=[ \t]*)(?:uri[ \t]*\([ \t]*)?" + _QUOTED_URL)

DEFAULT_REPOSITORY_BLOCKS = [
    "publishing:maven",
    "uploadArchives:mavenDeployer",
    "dependencyResolutionManagement:maven",
]


def get_repository_block_families() -> list[tuple[str, str]]:
    """Return the ``(parent block, repository block)`` pairs that declare repositories.

    Returns
    -------
    list[tuple[str, str]]
        The pairs, in search order.

    Raises
    ------
    ConfigurationError
        If an entry of ``repository_blocks`` in ``defaults.ini`` is not of the form ``<parent>:<block>``.
    """
    families = []
    for entry in defaults.get_list(
        "gradle.repository", "repository_blocks", fallback=DEFAULT_REPOSITORY_BLOCKS, remove_duplicates=False
    ):
        parent, separator, repository = entry.partition(":")
        if not separator or not parent.strip() or not repository.strip():
            raise ConfigurationError(
                f'The repository block family "{entry}" in section [gradle.repository] of the .ini configuration '
                "file must be of the form <parent block>:<repository block>."
            )
        families.append((parent.strip(), repository.strip()))
    return families


def find_urls_in_block(body: str, is_kotlin: bool) -> list[str]:
    """Return the repository URLs assigned in the body of a ``maven { ... }`` block.

    Assignments in comments are ignored.
    """
    pattern = KOTLIN_URL if is_kotlin else GROOVY_URL
    kinds = classify_characters(body)
    return [
        match.group("url").strip()
        for match in pattern.finditer(body)
        if kinds[match.start()] == CharacterKind.CODE and match.group("url").strip()
    ]


def find_urls_in_gradle_script(content: str, is_kotlin: bool) -> list[str]:
    """Return the URLs of the repositories declared in a Gradle script.

    Repositories are looked up in ``publishing { repositories { maven { ... } } }``,
    ``uploadArchives { repositories { mavenDeployer { ... } } }`` and
    ``dependencyResolutionManagement { repositories { maven { ... } } }``.

    Parameters
    ----------
    content : str
        The content of the Gradle script.
    is_kotlin : bool
        True if the script uses the Kotlin DSL.

    Returns
    -------
    list[str]
        The raw URLs, with property references left unresolved. The URLs are ordered by block family,
        then in document order.
    """
    urls: list[str] = []
    if not content:
        return urls

    for parent_keyword, repository_keyword in get_repository_block_families():
        for parent in iter_blocks(content, parent_keyword):
            for repositories in iter_blocks(parent.body, "repositories"):
                for repository in iter_blocks(repositories.body, repository_keyword):
                    urls.extend(find_urls_in_block(repository.body, is_kotlin))
    return urls
