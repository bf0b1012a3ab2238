"""Report file watcher using watchfiles for async filesystem monitoring.

Design:
- One recursive awatch over the workspace folders (or the parent
  directories of manual report paths)
- Events are filtered against the coverage brace glob before they are
  batched, so source edits never trigger a refresh
- watchfiles' own debounce groups the chunks of a report being written
- The callback receives one batch per debounce window
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import structlog
from watchfiles import Change, awatch

from gutterwatch.config.models import CoverageConfig, WatcherConfig
from gutterwatch.core.disposable import Subscription
from gutterwatch.files.globs import GlobMatcher, build_watch_glob

logger = structlog.get_logger()


class ChangeKind(Enum):
    """Kind of report file change."""

    CREATED = "created"
    MODIFIED = "modified"
    DELETED = "deleted"


_CHANGE_KINDS: dict[Change, ChangeKind] = {
    Change.added: ChangeKind.CREATED,
    Change.modified: ChangeKind.MODIFIED,
    Change.deleted: ChangeKind.DELETED,
}


@dataclass(frozen=True, slots=True)
class ReportChange:
    """A change to one coverage report file."""

    path: Path
    kind: ChangeKind


ChangeCallback = Callable[[list[ReportChange]], None]


def watch_roots(config: CoverageConfig, workspace_folders: Sequence[Path]) -> list[Path]:
    """Existing directories that must be watched to see every report change."""
    if config.manual_coverage_file_paths:
        candidates: list[Path] = []
        for raw in config.manual_coverage_file_paths:
            path = Path(raw).expanduser()
            if not path.is_absolute() and workspace_folders:
                path = Path(workspace_folders[0]) / path
            candidates.append(path.parent)
    else:
        candidates = [Path(f) for f in workspace_folders]

    roots: list[Path] = []
    for candidate in candidates:
        if candidate.is_dir() and candidate not in roots:
            roots.append(candidate)
    return roots


@dataclass
class CoverageFileWatcher:
    """Async watcher delivering batches of report file changes.

    Usage::

        watcher = CoverageFileWatcher(roots, pattern, on_change)
        await watcher.start()
        ...
        watcher.stop()
    """

    roots: list[Path]
    pattern: str
    on_change: ChangeCallback
    debounce_ms: int = 300
    step_ms: int = 50

    _matcher: GlobMatcher = field(init=False)
    _watch_task: asyncio.Task[None] | None = field(default=None, init=False)
    _stop_event: asyncio.Event = field(default_factory=asyncio.Event, init=False)

    def __post_init__(self) -> None:
        self._matcher = GlobMatcher(self.pattern)

    @property
    def is_running(self) -> bool:
        return self._watch_task is not None and not self._watch_task.done()

    def accepts(self, change: Change, path: str) -> bool:  # noqa: ARG002
        """watchfiles filter: only report files matching the glob."""
        return self._matcher.matches(path)

    async def start(self) -> None:
        """Start watching. No-op when already running or nothing is watchable."""
        if self._watch_task is not None:
            return
        if not self.roots:
            logger.warning("no_watchable_dirs", pattern=self.pattern)
            return

        self._stop_event.clear()
        self._watch_task = asyncio.create_task(self._watch_loop())
        logger.info(
            "report_watcher_started",
            roots=[str(r) for r in self.roots],
            pattern=self.pattern,
            debounce_ms=self.debounce_ms,
        )

    def stop(self) -> None:
        """Stop watching. Safe to call more than once and from sync code."""
        self._stop_event.set()
        if self._watch_task is not None:
            if not self._watch_task.done():
                self._watch_task.cancel()
            self._watch_task = None
            logger.info("report_watcher_stopped")

    def to_changes(self, raw: set[tuple[Change, str]]) -> list[ReportChange]:
        """Convert and de-duplicate a watchfiles batch, sorted by path."""
        latest: dict[Path, ChangeKind] = {}
        for change_type, path_str in raw:
            if not self._matcher.matches(path_str):
                continue
            latest[Path(path_str)] = _CHANGE_KINDS[change_type]
        return [ReportChange(path=p, kind=k) for p, k in sorted(latest.items())]

    async def _watch_loop(self) -> None:
        try:
            async for raw in awatch(
                *self.roots,
                watch_filter=self.accepts,
                debounce=self.debounce_ms,
                step=self.step_ms,
                stop_event=self._stop_event,
                ignore_permission_denied=True,
            ):
                changes = self.to_changes(raw)
                if not changes:
                    continue
                logger.info(
                    "report_changes_detected",
                    count=len(changes),
                    kinds=sorted({c.kind.value for c in changes}),
                )
                try:
                    self.on_change(changes)
                except Exception as e:
                    # A failing callback must not end the watch
                    logger.error("report_change_callback_failed", error=str(e), exc_info=True)
        except asyncio.CancelledError:
            pass
        except Exception as e:
            if not self._stop_event.is_set():
                logger.error("report_watcher_error", error=str(e))


async def watch_coverage_files(
    coverage: CoverageConfig,
    watcher_config: WatcherConfig,
    workspace_folders: Sequence[Path],
    on_change: ChangeCallback,
) -> Subscription:
    """Start a watcher for the configured reports and return its handle."""
    pattern = build_watch_glob(coverage, workspace_folders)
    logger.info("listening_to_file_system", pattern=pattern)
    watcher = CoverageFileWatcher(
        roots=watch_roots(coverage, workspace_folders),
        pattern=pattern,
        on_change=on_change,
        debounce_ms=watcher_config.debounce_ms,
        step_ms=watcher_config.step_ms,
    )
    await watcher.start()
    return Subscription(watcher.stop)

