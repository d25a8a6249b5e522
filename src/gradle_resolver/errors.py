# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains error classes for the Gradle resolver."""


class GradleResolverError(Exception):
    """The base class for Gradle resolver errors."""


class ConfigurationError(GradleResolverError):
    """Happens when there is an error in the configuration (.ini) file."""


class InvalidWorkingDirectoryError(GradleResolverError):
    """Happens when the working directory is empty, does not exist or is not a directory."""


class BuildScriptNotFoundError(GradleResolverError):
    """Happens when a directory does not contain a Gradle build script."""


class MissingCoordinateError(GradleResolverError):
    """Happens when the group or the version of a Gradle project cannot be found."""


class RepositoryResolutionError(GradleResolverError):
    """The base class for errors raised while resolving the deploy repository of a Gradle project."""


class NoRepositoryFoundError(RepositoryResolutionError):
    """Happens when no repository candidate can be found in the Gradle configuration."""


class NoValidURLError(RepositoryResolutionError):
    """Happens when repository URLs are found but none of them contains a repository key."""


class InvalidURLError(RepositoryResolutionError):
    """Happens when the repository key cannot be extracted from a single repository URL."""


class UnresolvedPropertyError(RepositoryResolutionError):
    """Happens when the only repository URL candidate references a property that cannot be resolved."""
