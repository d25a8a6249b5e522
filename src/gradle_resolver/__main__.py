# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This is the main entrypoint to run the Gradle resolver."""

import argparse
import logging
import os
import sys
from importlib import metadata as importlib_metadata

from gradle_resolver.artifact.coordinates import get_gradle_artifact_coordinates
from gradle_resolver.cli_command.gradle_command import split_gradle_command, was_publish_command
from gradle_resolver.config.defaults import create_defaults, load_defaults
from gradle_resolver.console import RichConsoleHandler, access_handler
from gradle_resolver.errors import (
    BuildScriptNotFoundError,
    ConfigurationError,
    InvalidWorkingDirectoryError,
    MissingCoordinateError,
    RepositoryResolutionError,
)
from gradle_resolver.parsers.gradle_properties import get_gradle_user_home
from gradle_resolver.repository.deploy_repository import get_gradle_deploy_repository, is_snapshot_version

logger: logging.Logger = logging.getLogger(__name__)

# The exit code of ``is-publish`` when the tasks do not publish artifacts.
NOT_PUBLISHING = 1


def deploy_repo(deploy_repo_args: argparse.Namespace) -> int:
    """Find the deploy repository of a Gradle project.

    Returns
    -------
    int
        Returns os.EX_OK if successful or the corresponding error code on failure.
    """
    rich_handler = access_handler.get_handler()
    working_dir = os.path.abspath(deploy_repo_args.working_dir)
    rich_handler.update_deploy_repo_table("Working Directory:", os.path.relpath(working_dir, os.getcwd()))
    rich_handler.update_deploy_repo_table("Project Version:", deploy_repo_args.project_version)
    rich_handler.update_deploy_repo_table("Snapshot:", str(is_snapshot_version(deploy_repo_args.project_version)))

    invocation = split_gradle_command(deploy_repo_args.gradle_args)
    if invocation.tasks and not was_publish_command(invocation.tasks):
        logger.info("The Gradle tasks %s do not publish artifacts.", " ".join(invocation.tasks))
        rich_handler.update_deploy_repo_table("Repository Key:", "Not Required")
        return os.EX_OK

    try:
        repository_key = get_gradle_deploy_repository(
            working_dir,
            deploy_repo_args.project_version,
            args=[f"-P{key}={value}" for key, value in invocation.properties.items()],
            environ=os.environ,
            gradle_user_home=get_gradle_user_home(os.environ),
            build_file=invocation.build_file or None,
        )
    except InvalidWorkingDirectoryError as error:
        logger.error(error)
        return os.EX_NOINPUT
    except ConfigurationError as error:
        logger.error(error)
        return os.EX_CONFIG
    except RepositoryResolutionError as error:
        logger.error(error)
        return os.EX_DATAERR

    rich_handler.update_deploy_repo_table("Repository Key:", f"[bold green]{repository_key}[/]")
    return os.EX_OK


def coordinates(coordinates_args: argparse.Namespace) -> int:
    """Extract the Maven coordinates of a Gradle project.

    Returns
    -------
    int
        Returns os.EX_OK if successful or the corresponding error code on failure.
    """
    rich_handler = access_handler.get_handler()
    try:
        gradle_coordinates = get_gradle_artifact_coordinates(os.path.abspath(coordinates_args.working_dir))
    except (InvalidWorkingDirectoryError, BuildScriptNotFoundError) as error:
        logger.error(error)
        return os.EX_NOINPUT
    except ConfigurationError as error:
        logger.error(error)
        return os.EX_CONFIG
    except MissingCoordinateError as error:
        logger.error(error)
        return os.EX_DATAERR

    logger.info("Found the coordinates %s.", gradle_coordinates.to_purl())
    rich_handler.update_coordinates_table("Group:", gradle_coordinates.group)
    rich_handler.update_coordinates_table("Artifact:", gradle_coordinates.artifact)
    rich_handler.update_coordinates_table("Version:", gradle_coordinates.version)
    rich_handler.update_coordinates_table("Package URL:", gradle_coordinates.to_purl().to_string())
    return os.EX_OK


def is_publish(is_publish_args: argparse.Namespace) -> int:
    """Check whether a Gradle command publishes artifacts.

    Returns
    -------
    int
        Returns os.EX_OK if the command publishes artifacts, or ``NOT_PUBLISHING`` otherwise.
    """
    rich_handler = access_handler.get_handler()
    invocation = split_gradle_command(is_publish_args.gradle_args)
    if invocation.build_file:
        rich_handler.update_publish_table("Build File:", invocation.build_file)

    if was_publish_command(invocation.tasks):
        rich_handler.update_publish_table("Publish Command:", "[bold green]Yes[/]")
        return os.EX_OK

    rich_handler.update_publish_table("Publish Command:", "No")
    return NOT_PUBLISHING


def dump_defaults(dump_defaults_args: argparse.Namespace) -> int:
    """Dump the defaults.ini file to the output directory.

    Returns
    -------
    int
        Returns os.EX_OK if successful or the corresponding error code on failure.
    """
    rich_handler = access_handler.get_handler()
    output_dir = dump_defaults_args.output_dir
    if not os.path.isdir(output_dir):
        logger.error("The output directory %s does not exist.", output_dir)
        return os.EX_USAGE

    if not create_defaults(output_dir, os.getcwd()):
        return os.EX_CANTCREAT

    rich_handler.update_dump_defaults(os.path.relpath(os.path.join(output_dir, "defaults.ini"), os.getcwd()))
    return os.EX_OK


def perform_action(action_args: argparse.Namespace) -> int:
    """Perform the indicated action of the Gradle resolver."""
    match action_args.action:
        case "deploy-repo":
            return deploy_repo(action_args)

        case "coordinates":
            return coordinates(action_args)

        case "is-publish":
            return is_publish(action_args)

        case "dump-defaults":
            return dump_defaults(action_args)

        case _:
            logger.error("The Gradle resolver does not support command option %s.", action_args.action)
            return os.EX_USAGE


def main(argv: list[str] | None = None) -> None:
    """Execute the Gradle resolver as a standalone command-line tool.

    Parameters
    ----------
    argv: list[str] | None
        Command-line arguments.
        If ``argv`` is ``None``, argparse automatically looks at ``sys.argv``.
        Hence, we set ``argv = None`` by default.
    """
    main_parser = argparse.ArgumentParser(prog="gradle-resolver")

    main_parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {importlib_metadata.version('gradle-resolver')}",
        help="Show the version number and exit",
    )

    main_parser.add_argument(
        "-v",
        "--verbose",
        help="Run with more debug logs",
        action="store_true",
    )

    main_parser.add_argument(
        "-dp",
        "--defaults-path",
        default="",
        help="The path to the defaults configuration file.",
    )

    # Add sub parsers for each action.
    sub_parser = main_parser.add_subparsers(dest="action", help="Run gradle-resolver <action> --help for help")

    # Find the deploy repository of a project.
    deploy_repo_parser = sub_parser.add_parser(
        name="deploy-repo",
        description="Find the repository that receives the artifacts published by a Gradle project.",
    )

    deploy_repo_parser.add_argument(
        "-wd",
        "--working-dir",
        default=os.getcwd(),
        type=str,
        help="The directory of the Gradle project.",
    )

    deploy_repo_parser.add_argument(
        "--project-version",
        required=True,
        type=str,
        help="The version being published. Snapshot versions prefer snapshot repositories.",
    )

    deploy_repo_parser.add_argument(
        "gradle_args",
        nargs=argparse.REMAINDER,
        help="The arguments of the Gradle command, e.g. clean publish -Prepo=libs-release.",
    )

    # Extract the coordinates of a project.
    coordinates_parser = sub_parser.add_parser(
        name="coordinates",
        description="Extract the group, artifact id and version of a Gradle project.",
    )

    coordinates_parser.add_argument(
        "-wd",
        "--working-dir",
        default=os.getcwd(),
        type=str,
        help="The directory of the Gradle project.",
    )

    # Check whether a Gradle command publishes artifacts.
    is_publish_parser = sub_parser.add_parser(
        name="is-publish",
        description="Exit with status 0 if the Gradle command publishes artifacts and 1 otherwise.",
    )

    is_publish_parser.add_argument(
        "gradle_args",
        nargs=argparse.REMAINDER,
        help="The arguments of the Gradle command.",
    )

    # Dump the default values.
    dump_defaults_parser = sub_parser.add_parser(
        name="dump-defaults",
        description="Dumps the defaults.ini file to the output directory.",
    )

    dump_defaults_parser.add_argument(
        "-o",
        "--output-dir",
        default=os.getcwd(),
        type=str,
        help="The directory where defaults.ini is created.",
    )

    args = main_parser.parse_args(argv)

    if not args.action:
        main_parser.print_help()
        sys.exit(os.EX_USAGE)

    if args.verbose:
        log_level = logging.DEBUG
        log_format = "%(asctime)s [%(name)s:%(funcName)s:%(lineno)d] [%(levelname)s] %(message)s"
    else:
        log_level = logging.INFO
        log_format = "%(asctime)s [%(levelname)s] %(message)s"

    # Set global logging config. The rich handler renders the logs together with the result tables.
    rich_handler: RichConsoleHandler = access_handler.set_handler(args.verbose)
    rich_handler.setFormatter(logging.Formatter("%(message)s"))
    logging.basicConfig(format=log_format, handlers=[rich_handler], force=True, level=log_level)

    rich_handler.start(args.action)
    try:
        # Load the default values from defaults.ini files.
        if not load_defaults(args.defaults_path):
            rich_handler.error("Exiting because the defaults configuration could not be loaded.")
            status_code = os.EX_NOINPUT
        else:
            status_code = perform_action(args)
        if status_code not in (os.EX_OK, NOT_PUBLISHING):
            rich_handler.mark_failed()
    finally:
        rich_handler.close()

    sys.exit(status_code)


if __name__ == "__main__":
    main()
