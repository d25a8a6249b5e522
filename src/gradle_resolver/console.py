# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module implements a rich console handler for logging."""

import logging
import time
from typing import Any

from rich.console import Group, RenderableType
from rich.live import Live
from rich.logging import RichHandler
from rich.panel import Panel
from rich.rule import Rule
from rich.status import Status
from rich.table import Table


class TableBuilder:
    """Builder to provide common table-building utilities for console classes."""

    @staticmethod
    def _make_table(content: dict, columns: list[str]) -> Table:
        table = Table(show_header=False, box=None)
        for col in columns:
            table.add_column(col, justify="left")
        for field, value in content.items():
            table.add_row(field, value)
        return table


class RichConsoleHandler(RichHandler, TableBuilder):
    """A rich console handler for logging with rich formatting and live updates."""

    def __init__(self, *args: Any, verbose: bool = False, **kwargs: Any) -> None:
        """
        Initialize the RichConsoleHandler.

        Parameters
        ----------
        verbose : bool, optional
            if True, enables verbose logging, by default False
        args
            Variable length argument list.
        kwargs
            Arbitrary keyword arguments.
        """
        super().__init__(*args, **kwargs)
        self.setLevel(logging.DEBUG)
        self.command = ""
        self.logs: list[str] = []
        self.error_logs: list[str] = []
        self.deploy_repo_content: dict[str, str | Status] = {
            "Working Directory:": Status("[green]Processing[/]"),
            "Project Version:": Status("[green]Processing[/]"),
            "Snapshot:": Status("[green]Processing[/]"),
            "Repository Key:": Status("[green]Processing[/]"),
        }
        self.deploy_repo_table = self._make_table(self.deploy_repo_content, ["Details", "Value"])
        self.coordinates_content: dict[str, str | Status] = {
            "Group:": Status("[green]Processing[/]"),
            "Artifact:": Status("[green]Processing[/]"),
            "Version:": Status("[green]Processing[/]"),
            "Package URL:": Status("[green]Processing[/]"),
        }
        self.coordinates_table = self._make_table(self.coordinates_content, ["Details", "Value"])
        self.publish_content: dict[str, str | Status] = {
            "Publish Command:": Status("[green]Processing[/]"),
            "Build File:": "Not Specified",
        }
        self.publish_table = self._make_table(self.publish_content, ["Details", "Value"])
        self.dump_defaults: str | Status = Status("[green]Generating[/]")
        self.verbose = verbose
        self.verbose_panel = Panel(
            "\n".join(self.logs),
            title="Verbose Mode",
            title_align="left",
            border_style="blue",
        )
        self.error_message: str = ""
        self.live = Live(get_renderable=self.make_layout, refresh_per_second=10)

    def emit(self, record: logging.LogRecord) -> None:
        """
        Emit a log record with rich formatting.

        Parameters
        ----------
        record : logging.LogRecord
            The log record to be emitted.
        """
        log_time = time.strftime("%H:%M:%S")
        msg = self.format(record)

        if record.levelno >= logging.ERROR:
            self.logs.append(f"[red][ERROR][/red] {log_time} {msg}")
            self.error_logs.append(f"[red][ERROR][/red] {log_time} {msg}")
        elif record.levelno >= logging.WARNING:
            self.logs.append(f"[yellow][WARNING][/yellow] {log_time} {msg}")
        elif record.levelno >= logging.INFO:
            self.logs.append(f"[blue][INFO][/blue] {log_time} {msg}")
        else:
            self.logs.append(f"[dim][DEBUG][/dim] {log_time} {msg}")

        self.verbose_panel.renderable = "\n".join(self.logs)

    def update_deploy_repo_table(self, key: str, value: str | Status) -> None:
        """
        Add or update a key-value pair in the deploy repository table.

        Parameters
        ----------
        key : str
            The key to be added or updated.
        value : str or Status
            The value associated with the key.
        """
        self.deploy_repo_content[key] = value
        self.deploy_repo_table = self._make_table(self.deploy_repo_content, ["Details", "Value"])

    def update_coordinates_table(self, key: str, value: str | Status) -> None:
        """
        Add or update a key-value pair in the coordinates table.

        Parameters
        ----------
        key : str
            The key to be added or updated.
        value : str or Status
            The value associated with the key.
        """
        self.coordinates_content[key] = value
        self.coordinates_table = self._make_table(self.coordinates_content, ["Details", "Value"])

    def update_publish_table(self, key: str, value: str | Status) -> None:
        """
        Add or update a key-value pair in the publish command table.

        Parameters
        ----------
        key : str
            The key to be added or updated.
        value : str or Status
            The value associated with the key.
        """
        self.publish_content[key] = value
        self.publish_table = self._make_table(self.publish_content, ["Details", "Value"])

    def update_dump_defaults(self, value: str | Status) -> None:
        """
        Update the dump defaults value.

        Parameters
        ----------
        value : str or Status
            The value to be set for dump defaults.
        """
        self.dump_defaults = value

    def mark_failed(self) -> None:
        """Convert any Processing Status entries to Failed."""
        for content in (self.deploy_repo_content, self.coordinates_content, self.publish_content):
            for key, value in content.items():
                if isinstance(value, Status):
                    content[key] = "[red]Failed[/red]"

        self.deploy_repo_table = self._make_table(self.deploy_repo_content, ["Details", "Value"])
        self.coordinates_table = self._make_table(self.coordinates_content, ["Details", "Value"])
        self.publish_table = self._make_table(self.publish_content, ["Details", "Value"])
        if isinstance(self.dump_defaults, Status):
            self.dump_defaults = "[red]Failed[/red]"

    def make_layout(self) -> Group:
        """
        Create the layout for the live console display.

        Returns
        -------
        Group
            A rich Group object containing the layout for the live console display.
        """
        layout: list[RenderableType] = []
        if self.error_logs:
            error_log_panel = Panel(
                "\n".join(self.error_logs),
                title="Error Logs",
                title_align="left",
                border_style="red",
            )
            layout = layout + [error_log_panel]
        match self.command:
            case "deploy-repo":
                layout = layout + [Rule(" DEPLOY REPOSITORY", align="left"), "", self.deploy_repo_table]
            case "coordinates":
                layout = layout + [Rule(" COORDINATES", align="left"), "", self.coordinates_table]
            case "is-publish":
                layout = layout + [self.publish_table]
            case "dump-defaults":
                dump_defaults_table = Table(show_header=False, box=None)
                dump_defaults_table.add_column("Detail", justify="left")
                dump_defaults_table.add_column("Value", justify="left")
                dump_defaults_table.add_row("Dump Defaults", self.dump_defaults)
                layout = layout + [dump_defaults_table]
        if self.verbose:
            layout = layout + ["", self.verbose_panel]
        if self.error_message:
            error_panel = Panel(
                self.error_message,
                title="Error",
                title_align="left",
                border_style="red",
            )
            layout = layout + ["", error_panel]
        return Group(*layout)

    def error(self, message: str) -> None:
        """
        Handle error logging.

        Parameters
        ----------
        message : str
            The error message to be logged.
        """
        self.error_message = message

    def start(self, command: str) -> None:
        """
        Start the live console display.

        Parameters
        ----------
        command : str
            The command being executed (e.g., "deploy-repo", "coordinates").
        """
        self.command = command
        if not self.live.is_started:
            self.live.start()

    def close(self) -> None:
        """Stop the live console display."""
        self.live.stop()


class AccessHandler:
    """A class to manage access to the RichConsoleHandler instance."""

    def __init__(self) -> None:
        """Initialize the AccessHandler with a default RichConsoleHandler instance."""
        self.rich_handler = RichConsoleHandler()

    def set_handler(self, verbose: bool) -> RichConsoleHandler:
        """
        Set a new RichConsoleHandler instance with the specified verbosity.

        Parameters
        ----------
        verbose : bool
            if True, enables verbose logging

        Returns
        -------
        RichConsoleHandler
            The new RichConsoleHandler instance.
        """
        self.rich_handler = RichConsoleHandler(verbose=verbose)
        return self.rich_handler

    def get_handler(self) -> RichConsoleHandler:
        """
        Get the current RichConsoleHandler instance.

        Returns
        -------
        RichConsoleHandler
            The current RichConsoleHandler instance.
        """
        return self.rich_handler


access_handler = AccessHandler()
