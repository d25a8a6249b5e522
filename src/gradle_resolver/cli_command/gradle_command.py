# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module inspects the arguments of a Gradle command."""

import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass, field

from gradle_resolver.config.defaults import defaults
from gradle_resolver.parsers.gradle_properties import parse_properties_from_args

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GradleValueOption:
    """An option of the Gradle command line that takes a value.

    The value can be passed as the next argument (``-b build.gradle``, ``--build-file build.gradle``),
    attached to the short name (``-bbuild.gradle``) or after ``=`` with the long name
    (``--build-file=build.gradle``).
    """

    short_name: str | None
    long_name: str

    def match(self, args: Sequence[str], index: int) -> tuple[str, int] | None:
        """Return the value of the option at ``args[index]`` and the number of arguments it spans.

        Parameters
        ----------
        args : Sequence[str]
            The arguments of the Gradle command.
        index : int
            The index of the argument to match.

        Returns
        -------
        tuple[str, int] | None
            The value and the number of arguments used, or None if ``args[index]`` is not this option.
            The value is empty if the option is the last argument.
        """
        arg = args[index]
        if arg in (self.short_name, self.long_name):
            if index + 1 < len(args):
                return args[index + 1], 2
            return "", 1
        if arg.startswith(self.long_name + "="):
            return arg[len(self.long_name) + 1 :], 1
        if self.short_name and arg.startswith(self.short_name) and not arg.startswith("--"):
            return arg[len(self.short_name) :], 1
        return None


BUILD_FILE_OPTION = GradleValueOption(short_name="-b", long_name="--build-file")
PROJECT_DIR_OPTION = GradleValueOption(short_name="-p", long_name="--project-dir")
SYSTEM_PROPERTY_OPTION = GradleValueOption(short_name="-D", long_name="--system-prop")
PROJECT_PROPERTY_OPTION = GradleValueOption(short_name="-P", long_name="--project-prop")

GRADLE_VALUE_OPTIONS: list[GradleValueOption] = [
    BUILD_FILE_OPTION,
    GradleValueOption(short_name="-c", long_name="--settings-file"),
    GradleValueOption(short_name=None, long_name="--configuration-cache-problems"),
    GradleValueOption(short_name=None, long_name="--console"),
    GradleValueOption(short_name="-F", long_name="--dependency-verification"),
    GradleValueOption(short_name="-g", long_name="--gradle-user-home"),
    GradleValueOption(short_name="-I", long_name="--init-script"),
    GradleValueOption(short_name=None, long_name="--include-build"),
    GradleValueOption(short_name="-M", long_name="--write-verification-metadata"),
    GradleValueOption(short_name=None, long_name="--max-workers"),
    PROJECT_DIR_OPTION,
    GradleValueOption(short_name=None, long_name="--priority"),
    GradleValueOption(short_name=None, long_name="--project-cache-dir"),
    GradleValueOption(short_name=None, long_name="--update-locks"),
    GradleValueOption(short_name=None, long_name="--warning-mode"),
    GradleValueOption(short_name="-x", long_name="--exclude-task"),
]


@dataclass
class GradleInvocation:
    """The parts of a Gradle command that matter for publishing."""

    #: The tasks to run, in order.
    tasks: list[str] = field(default_factory=list)

    #: The build script passed with -b/--build-file or derived from -p/--project-dir, or empty.
    build_file: str = ""

    #: The project and system properties passed with -P/-D.
    properties: dict[str, str] = field(default_factory=dict)


def was_publish_command(tasks: Sequence[str]) -> bool:
    """Return True if running the tasks publishes artifacts to a remote repository.

    A task publishes if its name, without the project path (``:sub:project:``), is ``publish`` or
    starts with ``publishTo``. Tasks publishing to the local Maven repository (``publishToMavenLocal``)
    are not counted. Task names are case-sensitive.

    >>> was_publish_command(["clean", ":app:publish"])
    True
    >>> was_publish_command(["publishToMavenLocal"])
    False
    """
    publish_task = defaults.get("gradle.publish", "publish_task", fallback="publish")
    prefix = defaults.get("gradle.publish", "publish_task_prefix", fallback="publishTo")
    local_suffix = defaults.get("gradle.publish", "local_task_suffix", fallback="Local")

    for task in tasks:
        name = task.rpartition(":")[2]
        if name == publish_task:
            return True
        if name.startswith(prefix) and len(name) > len(prefix) and not name.endswith(local_suffix):
            return True
    return False


def extract_build_file_path(tasks: Sequence[str]) -> str:
    """Return the build script passed explicitly in the arguments of a Gradle command.

    The build script is given with ``-b``/``--build-file``, or derived from the project directory given
    with ``-p``/``--project-dir``.

    Parameters
    ----------
    tasks : Sequence[str]
        The arguments of the Gradle command.

    Returns
    -------
    str
        The path of the build script, or an empty string if none is given or the option has no value.
    """
    for index in range(len(tasks)):
        if (build_file := BUILD_FILE_OPTION.match(tasks, index)) is not None:
            return build_file[0]
        if (project_dir := PROJECT_DIR_OPTION.match(tasks, index)) is not None:
            if not project_dir[0]:
                return ""
            build_script = defaults.get("gradle", "build_script", fallback="build")
            extension = defaults.get("gradle", "groovy_extension", fallback=".gradle")
            return os.path.join(project_dir[0], build_script + extension)
    return ""


def split_gradle_command(args: Sequence[str]) -> GradleInvocation:
    """Split the arguments of a Gradle command into tasks, build script and properties.

    Parameters
    ----------
    args : Sequence[str]
        The arguments of the Gradle command, without the ``gradle`` executable.

    Returns
    -------
    GradleInvocation
        The tasks, the explicit build script and the properties of the command.
    """
    tasks: list[str] = []
    property_args: list[str] = []
    index = 0
    while index < len(args):
        arg = args[index]

        matched = None
        for option in (PROJECT_PROPERTY_OPTION, SYSTEM_PROPERTY_OPTION):
            if (matched := option.match(args, index)) is not None:
                property_args.append(f"{option.short_name}{matched[0]}")
                break
        if matched is None:
            for value_option in GRADLE_VALUE_OPTIONS:
                if (matched := value_option.match(args, index)) is not None:
                    break

        if matched is not None:
            index += matched[1]
            continue

        if not arg.startswith("-"):
            tasks.append(arg)
        else:
            logger.debug("Ignoring the Gradle option %s.", arg)
        index += 1

    return GradleInvocation(
        tasks=tasks,
        build_file=extract_build_file_path(args),
        properties=parse_properties_from_args(property_args),
    )
