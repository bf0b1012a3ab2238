"""Coverage cache orchestration.

``CoverageService`` owns the coverage cache and drives the refresh cycle:

    discover → read → parse/merge → replace cache → render → status bar

Cycles are started by explicit commands, by report file changes and (in a
lightweight render-only form) by editor focus changes. Several cycles can be
in flight at once; a monotonic generation counter decides which one may
commit. A cycle that finishes after a newer one has started drops its result,
so the cache always holds one complete snapshot from a single cycle.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Coroutine, Iterator
from contextlib import contextmanager
from typing import Any

import structlog

from gutterwatch.config.models import GutterWatchConfig
from gutterwatch.core.disposable import CompositeSubscription, Subscription
from gutterwatch.core.logging import clear_cycle_id, set_cycle_id
from gutterwatch.coverage.finder import SectionFinder
from gutterwatch.coverage.models import EMPTY_CACHE, Cache, freeze
from gutterwatch.coverage.parser import CoverageParser
from gutterwatch.coverage.stats import NO_COVERAGE, CoverageFigures, compute_figures
from gutterwatch.editor.window import EditorWindow, TextEditor
from gutterwatch.files.loader import FilesLoader
from gutterwatch.render.renderer import Renderer
from gutterwatch.service.state import ServiceState
from gutterwatch.status.toggler import StatusBarToggler
from gutterwatch.watcher.coverage_watcher import (
    ChangeCallback,
    ReportChange,
    watch_coverage_files,
)

logger = structlog.get_logger()

WatchFiles = Callable[[ChangeCallback], Awaitable[Subscription]]
"""Starts a report file subscription that calls back with change batches."""


class CoverageService:
    """Owns the coverage cache, the refresh cycle and the change subscriptions.

    Collaborators default to the real implementations built from ``config``;
    pass them explicitly to substitute them.
    """

    def __init__(
        self,
        config: GutterWatchConfig,
        window: EditorWindow,
        status_bar: StatusBarToggler,
        *,
        files_loader: FilesLoader | None = None,
        coverage_parser: CoverageParser | None = None,
        section_finder: SectionFinder | None = None,
        renderer: Renderer | None = None,
        watch_files: WatchFiles | None = None,
    ) -> None:
        self._config = config
        self._window = window
        self._status_bar = status_bar
        self._state = ServiceState.INITIALIZING
        logger.info("service_state", state=self._state.value)

        folders = window.workspace_folders
        self._files_loader = files_loader or FilesLoader(config.coverage, folders)
        self._coverage_parser = coverage_parser or CoverageParser(
            config.coverage.remote_path_resolve
        )
        self._section_finder = section_finder or SectionFinder(folders)
        self._renderer = renderer or Renderer(config.render, self._section_finder)
        self._watch_files = watch_files or self._watch_configured_files

        self._cache: Cache = EMPTY_CACHE
        self._generation = 0
        self._disposed_generation = 0
        self._is_coverage_displayed = False
        self._loading_depth = 0
        self._subscriptions = CompositeSubscription()
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def state(self) -> ServiceState:
        return self._state

    @property
    def cache(self) -> Cache:
        return self._cache

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_coverage_displayed(self) -> bool:
        return self._is_coverage_displayed

    @property
    def is_watching(self) -> bool:
        return len(self._subscriptions) > 0

    # -- commands ------------------------------------------------------------

    async def display_for_file(self) -> None:
        """Run one full refresh cycle and mark coverage as displayed."""
        if await self._load_cache_and_process():
            self._is_coverage_displayed = True

    async def toggle_coverage(self) -> None:
        if self._is_coverage_displayed:
            await self.remove_coverage_for_current_editor()
        else:
            await self.display_for_file()

    async def watch_workspace(self) -> None:
        """Display once, then follow report file changes and editor focus."""
        await self.display_for_file()
        if self.is_watching:
            logger.info("watch_restarted")
            self._release_subscriptions()
        await self._listen_to_file_system()
        self._listen_to_editor_events()

    async def remove_coverage_for_current_editor(self) -> None:
        """Clear decorations without discarding the cache."""
        try:
            with self._loading():
                self._renderer.render_coverage(EMPTY_CACHE, self._window.visible_editors)
        except Exception as e:
            logger.error("remove_coverage_failed", error=str(e), exc_info=True)
        finally:
            self._is_coverage_displayed = False

    async def refresh(self) -> bool:
        """Run a full refresh cycle without changing the displayed flag."""
        return await self._load_cache_and_process()

    async def wait_idle(self) -> None:
        """Wait for every refresh started by a file change to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def current_figures(self) -> CoverageFigures:
        """Figures for the active editor from the current cache. Never raises."""
        return self._safe_figures(self._cache, self._window.active_editor)

    def dispose(self) -> None:
        """Release subscriptions, empty the cache and clear all decorations.

        Cycles still in flight are superseded and will not repopulate the cache.
        """
        self._release_subscriptions()
        self._generation += 1
        self._disposed_generation = self._generation
        self._cache = EMPTY_CACHE
        self._is_coverage_displayed = False
        try:
            self._renderer.render_coverage(self._cache, self._window.visible_editors)
        except Exception as e:
            logger.error("dispose_render_failed", error=str(e), exc_info=True)
        logger.info("service_disposed")

    # -- refresh cycle -------------------------------------------------------

    async def _load_cache_and_process(self) -> bool:
        """Full cycle. Returns False when it failed or dispose() tore it down."""
        self._generation += 1
        generation = self._generation
        set_cycle_id(generation)
        try:
            with self._loading():
                if await self._load_cache(generation):
                    self._render_and_summarize()
            return generation > self._disposed_generation
        except Exception as e:
            if generation == self._generation:
                self._transition(ServiceState.ERROR)
                logger.error("refresh_failed", error=str(e), exc_info=True)
            else:
                logger.warning("superseded_refresh_failed", error=str(e))
            return False
        finally:
            clear_cycle_id()

    async def _load_cache(self, generation: int) -> bool:
        """Load and commit a new cache. Returns False if a newer cycle started."""
        self._transition(ServiceState.LOADING)
        files = await self._files_loader.find_coverage_files()
        logger.info("loading_coverage_files", count=len(files))
        logger.debug("coverage_files", files=sorted(str(f) for f in files))

        data_files = await self._files_loader.load_data_files(files)
        logger.info("loaded_data_files", count=len(data_files))

        sections = await self._coverage_parser.files_to_sections(data_files)
        if generation != self._generation:
            logger.info(
                "refresh_discarded",
                newer_generation=self._generation,
                sections=len(sections),
            )
            return False

        logger.info("caching_coverage", sections=len(sections))
        self._cache = freeze(sections)
        return True

    def _render_and_summarize(self) -> None:
        self._transition(ServiceState.RENDERING)
        self._render()
        self._transition(ServiceState.READY)

    def _render(self) -> None:
        self._renderer.render_coverage(self._cache, self._window.visible_editors)
        self._set_status_bar_coverage(self._cache, self._window.active_editor)

    def _handle_editor_events(self, _editor: TextEditor | None) -> None:
        """Focus changed: re-render from the existing cache, no reloading.

        While a full cycle is in flight the state is left to it; only the
        decorations and the status bar are redrawn.
        """
        cycle_running = self._loading_depth > 0
        try:
            with self._loading():
                if cycle_running:
                    self._render()
                else:
                    self._render_and_summarize()
        except Exception as e:
            if not cycle_running:
                self._transition(ServiceState.ERROR)
            logger.error("editor_refresh_failed", error=str(e), exc_info=True)

    def _on_coverage_files_changed(self, changes: list[ReportChange]) -> None:
        logger.info(
            "coverage_files_changed",
            count=len(changes),
            files=[c.path.name for c in changes[:5]],
        )
        self._spawn(self._load_cache_and_process())

    # -- status bar ----------------------------------------------------------

    def _set_status_bar_coverage(self, cache: Cache, editor: TextEditor | None) -> None:
        figures = self._safe_figures(cache, editor)
        self._status_bar.set_coverage(
            figures.line, figures.total_line, figures.branch, figures.total_branch
        )

    def _safe_figures(self, cache: Cache, editor: TextEditor | None) -> CoverageFigures:
        if editor is None:
            return NO_COVERAGE
        try:
            matches = self._section_finder.find_sections_for_editor(editor, cache)
            return compute_figures(matches, cache.values())
        except Exception as e:
            logger.debug("coverage_figures_unavailable", error=str(e))
            return NO_COVERAGE

    # -- subscriptions -------------------------------------------------------

    async def _listen_to_file_system(self) -> None:
        subscription = await self._watch_files(self._on_coverage_files_changed)
        self._subscriptions.add(subscription)

    def _listen_to_editor_events(self) -> None:
        self._subscriptions.add(self._window.on_did_change_active_editor(self._handle_editor_events))

    async def _watch_configured_files(self, on_change: ChangeCallback) -> Subscription:
        return await watch_coverage_files(
            self._config.coverage,
            self._config.watcher,
            self._window.workspace_folders,
            on_change,
        )

    def _release_subscriptions(self) -> None:
        self._subscriptions.dispose()
        self._subscriptions = CompositeSubscription()

    # -- helpers -------------------------------------------------------------

    def _transition(self, state: ServiceState) -> None:
        self._state = state
        logger.info("service_state", state=state.value)

    @contextmanager
    def _loading(self) -> Iterator[None]:
        """Hold the loading indicator; overlapping holders share it."""
        self._loading_depth += 1
        if self._loading_depth == 1:
            self._status_bar.set_loading(True)
        try:
            yield
        finally:
            self._loading_depth -= 1
            if self._loading_depth == 0:
                self._status_bar.set_loading(False)

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
