"""Command wiring between the host, the coverage service and the status bar."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

import structlog

from gutterwatch.config.models import GutterWatchConfig
from gutterwatch.core.errors import InternalError
from gutterwatch.editor.window import EditorWindow
from gutterwatch.service.coverage_service import CoverageService
from gutterwatch.status.toggler import (
    REMOVE_WATCH_COMMAND,
    WATCH_COMMAND,
    StatusBarItem,
    StatusBarToggler,
)

logger = structlog.get_logger()

DISPLAY_COMMAND = "gutterwatch.displayCoverage"
REMOVE_COMMAND = "gutterwatch.removeCoverage"
TOGGLE_COMMAND = "gutterwatch.toggleCoverage"

CommandHandler = Callable[[], Awaitable[None]]


class Extension:
    """Owns one status bar toggler and one coverage service for a window.

    Usage::

        ext = Extension(config, window)
        await ext.execute_command(WATCH_COMMAND)
        ...
        ext.dispose()
    """

    def __init__(
        self,
        config: GutterWatchConfig,
        window: EditorWindow,
        *,
        item: StatusBarItem | None = None,
        service: CoverageService | None = None,
    ) -> None:
        self.status_bar = StatusBarToggler(config.status_bar, item)
        self.service = service or CoverageService(config, window, self.status_bar)
        self._commands: dict[str, CommandHandler] = {
            DISPLAY_COMMAND: self.display_coverage,
            WATCH_COMMAND: self.watch_coverage_and_visible_editors,
            REMOVE_WATCH_COMMAND: self.remove_watch,
            REMOVE_COMMAND: self.remove_coverage,
            TOGGLE_COMMAND: self.toggle_coverage,
        }

    @property
    def commands(self) -> list[str]:
        return list(self._commands)

    async def execute_command(self, command: str) -> None:
        """Run a registered command by id.

        Raises:
            InternalError: If ``command`` is not registered.
        """
        handler = self._commands.get(command)
        if handler is None:
            raise InternalError.unexpected(f"Unknown command: {command}")
        logger.debug("command_executed", command=command)
        await handler()

    async def click_status_bar(self) -> None:
        await self.execute_command(self.status_bar.item.command)

    async def display_coverage(self) -> None:
        await self.service.display_for_file()

    async def watch_coverage_and_visible_editors(self) -> None:
        if self.status_bar.is_active:
            return
        self.status_bar.toggle(True)
        await self.service.watch_workspace()

    async def remove_watch(self) -> None:
        self.service.dispose()
        self.status_bar.toggle(False)

    async def remove_coverage(self) -> None:
        await self.service.remove_coverage_for_current_editor()

    async def toggle_coverage(self) -> None:
        await self.service.toggle_coverage()

    def dispose(self) -> None:
        self.service.dispose()
        self.status_bar.dispose()
