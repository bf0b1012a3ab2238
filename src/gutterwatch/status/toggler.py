"""Status indicator for coverage.

``StatusBarToggler`` knows nothing about how coverage is computed. It holds
four inputs (active, loading, coverage text, warn) and recomputes the text,
tooltip, click command and background of a ``StatusBarItem`` from scratch on
every mutation.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import Any

from gutterwatch.config.models import StatusBarConfig

COVERAGE_TEXT = "Cov"
LOADING_TEXT = " ".join(["$(loading~spin)", COVERAGE_TEXT])
IDLE_ICON = "$(circle-large-outline)"

WATCH_COMMAND = "gutterwatch.watchCoverageAndVisibleEditors"
WATCH_TEXT = " ".join([IDLE_ICON, "Watch"])
WATCH_TOOLTIP = "gutterwatch: Click to watch workspace."

REMOVE_WATCH_COMMAND = "gutterwatch.removeWatch"
REMOVE_WATCH_TOOLTIP = "gutterwatch: Click to remove watch from workspace."

WARNING_BACKGROUND = "statusBarItem.errorBackground"


@dataclass(frozen=True, slots=True)
class DisplayState:
    """Inputs the indicator is derived from."""

    is_active: bool = False
    is_loading: bool = False
    coverage_text: str | None = None
    is_warn: bool = False


@dataclass
class StatusBarItem:
    """A status bar entry as the host draws it."""

    text: str = ""
    tooltip: str = ""
    command: str = ""
    background_color: str | None = None
    visible: bool = False
    disposed: bool = False
    on_render: Callable[[StatusBarItem], None] | None = field(default=None, repr=False)

    def show(self) -> None:
        self.visible = True
        self._render()

    def hide(self) -> None:
        self.visible = False

    def update(
        self, *, text: str, tooltip: str, command: str, background_color: str | None
    ) -> None:
        changed = (text, tooltip, command, background_color) != (
            self.text,
            self.tooltip,
            self.command,
            self.background_color,
        )
        self.text = text
        self.tooltip = tooltip
        self.command = command
        self.background_color = background_color
        if changed:
            self._render()

    def dispose(self) -> None:
        self.visible = False
        self.disposed = True

    def _render(self) -> None:
        if self.visible and not self.disposed and self.on_render is not None:
            self.on_render(self)


def _is_number(value: float | None) -> bool:
    return value is not None and math.isfinite(value)


def _fmt(value: float | None) -> str:
    assert value is not None
    return str(int(value)) if float(value).is_integer() else str(value)


class StatusBarToggler:
    """Derives the coverage status bar entry from activity and percentages."""

    def __init__(self, config: StatusBarConfig, item: StatusBarItem | None = None) -> None:
        self._config = config
        self._item = item or StatusBarItem()
        self._state = DisplayState()
        self._item.update(
            text=WATCH_TEXT, tooltip=WATCH_TOOLTIP, command=WATCH_COMMAND, background_color=None
        )
        if config.show_status_bar_toggler:
            self._item.show()

    @property
    def item(self) -> StatusBarItem:
        return self._item

    @property
    def state(self) -> DisplayState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state.is_active

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def status_text(self) -> str:
        return self._item.text

    def toggle(self, active: bool) -> None:
        """Switch between watch and remove-watch."""
        self._set(is_active=active)

    def set_loading(self, loading: bool | None = None) -> None:
        """Set the loading flag; flips it when called without an argument."""
        self._set(is_loading=not self._state.is_loading if loading is None else loading)

    def set_coverage(
        self,
        line: float | None = None,
        total_line: float | None = None,
        branch: float | None = None,
        total_branch: float | None = None,
    ) -> None:
        """Show percentages. Absent values narrow the text; no line value clears it."""
        is_warn = False
        text: str | None = None
        if _is_number(line):
            if _is_number(total_line):
                if _is_number(branch) and _is_number(total_branch):
                    assert total_line is not None and total_branch is not None
                    is_warn = (
                        total_line < self._config.warn_line_threshold
                        or total_branch < self._config.warn_branch_threshold
                    )
                    text = (
                        f"{_fmt(line)},{_fmt(branch)}%/{_fmt(total_line)},{_fmt(total_branch)}%"
                    )
                else:
                    text = f"{_fmt(line)}%/{_fmt(total_line)}%"
            else:
                text = f"{_fmt(line)}%"
        self._set(coverage_text=text, is_warn=is_warn)

    def dispose(self) -> None:
        self._item.dispose()

    def _status_text(self) -> str:
        if self._state.is_loading:
            return LOADING_TEXT
        if self._state.is_active:
            return " ".join([IDLE_ICON, self._state.coverage_text or "No", COVERAGE_TEXT])
        return WATCH_TEXT

    def _set(self, **changes: Any) -> None:
        self._state = replace(self._state, **changes)
        self._update()

    def _update(self) -> None:
        state = self._state
        if state.is_active:
            command, tooltip = REMOVE_WATCH_COMMAND, REMOVE_WATCH_TOOLTIP
        else:
            command, tooltip = WATCH_COMMAND, WATCH_TOOLTIP
        background = WARNING_BACKGROUND if (state.is_warn and state.is_active) else None
        self._item.update(
            text=self._status_text(),
            tooltip=tooltip,
            command=command,
            background_color=background,
        )
