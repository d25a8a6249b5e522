# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module provides functions to manage default values."""

import configparser
import logging
import os
import pathlib
import shutil

logger: logging.Logger = logging.getLogger(__name__)


class ConfigParser(configparser.ConfigParser):
    """This class extends ConfigParser with useful methods."""

    def get_list(
        self,
        section: str,
        option: str,
        delimiter: str | None = "\n",
        fallback: list[str] | None = None,
        strip: bool = True,
        remove_duplicates: bool = True,
    ) -> list[str]:
        """Parse and return a list of strings from an ``option`` for ``section`` in ``defaults.ini``.

        This method uses str.split() to split the value into list of strings.
        References: https://docs.python.org/3/library/stdtypes.html#str.split.

        The ``delimiter`` parameter is used as the ``sep`` argument of str.split(). By default, the value
        is split on newlines, so that each line of a multi-line option is one element.

        If ``strip`` is True (default: True), leading and trailing whitespaces are removed from each element.
        Empty elements are always removed from the result.

        If ``remove_duplicates`` is True (default: True), duplicated elements are removed while the order of
        their first occurrence is kept.

        Parameters
        ----------
        section : str
            The section in ``defaults.ini``.
        option : str
            The option whose values will be split into a list of strings.
        delimiter : str | None
            The delimiter used to split the strings.
        fallback : list[str] | None
            The fallback value in case of errors.
        strip : bool
            If True, strip whitespaces from each element.
        remove_duplicates : bool
            If True, remove duplicated elements from the final list.

        Returns
        -------
        list[str]
            The result list of strings or the fallback value (an empty list by default) if errors.

        Examples
        --------
        Given the following ``defaults.ini``

        .. code-block::

            [gradle.repository]
            property_name_keywords =
                repo
                artifactory

        >>> config_parser.get_list("gradle.repository", "property_name_keywords")
        ['repo', 'artifactory']
        """
        try:
            value = self.get(section, option)
        except (configparser.NoOptionError, configparser.NoSectionError) as error:
            logger.debug(error)
            return fallback or []

        content = value.split(sep=delimiter)
        if strip:
            content = [element.strip() for element in content]
        content = [element for element in content if element]

        if remove_duplicates:
            return list(dict.fromkeys(content))

        return content


defaults = ConfigParser()


def load_defaults(user_config_path: str) -> bool:
    """Read the default values from ``defaults.ini`` file and store them in the defaults global object.

    Parameters
    ----------
    user_config_path : str
        The path to the user's defaults configuration file. Only the packaged ``defaults.ini`` is read
        if it is empty.

    Returns
    -------
    bool
        Return True if succeeded or False if failed.
    """
    curr_dir = pathlib.Path(__file__).parent.absolute()
    config_files = [os.path.join(curr_dir, "defaults.ini")]
    if user_config_path:
        if not os.path.isfile(user_config_path):
            logger.error("The defaults configuration file %s does not exist.", user_config_path)
            return False
        config_files.append(user_config_path)

    try:
        defaults.read(config_files, encoding="utf8")
        return True
    except (configparser.Error, ValueError) as error:
        logger.error("Failed to read the defaults.ini files.")
        logger.error(error)
        return False


def create_defaults(output_path: str, cwd_path: str) -> bool:
    """Create the ``defaults.ini`` file at the given location for end users.

    Parameters
    ----------
    output_path : str
        The path where the ``defaults.ini`` will be created.
    cwd_path : str
        The path to the current working directory.

    Returns
    -------
    bool
        Return True if succeeded or False if failed.
    """
    src_path = os.path.join(pathlib.Path(__file__).parent.absolute(), "defaults.ini")
    try:
        user_defaults = ConfigParser()
        user_defaults.read(src_path, encoding="utf8")
    except (configparser.Error, ValueError) as error:
        logger.error(error)
        return False

    # Since we have only one defaults.ini file and ConfigParser.write does not
    # preserve the comments, copy the file directly.
    dest_path = os.path.join(output_path, "defaults.ini")
    try:
        shutil.copy2(src_path, dest_path)
        logger.info(
            "Dumped the default values in %s.",
            os.path.relpath(dest_path, cwd_path),
        )
        return True
    except shutil.Error as error:
        logger.error("Failed to create %s: %s.", os.path.relpath(dest_path, cwd_path), error)
        return False
    except OSError as error:
        logger.error(error)
        return False
