"""Coverage report discovery and reading."""

from __future__ import annotations

import asyncio
import os
from collections.abc import Iterable, Sequence
from pathlib import Path

import structlog

from gutterwatch.config.models import CoverageConfig
from gutterwatch.core.errors import DiscoveryError, ReadError
from gutterwatch.files.globs import GlobMatcher

logger = structlog.get_logger()


class FilesLoader:
    """Finds report files in the workspace folders and reads them.

    Manual report paths, when configured, replace the search.
    """

    def __init__(self, config: CoverageConfig, workspace_folders: Sequence[Path]) -> None:
        self._config = config
        self._workspace_folders = [Path(f) for f in workspace_folders]
        names = ",".join(config.coverage_file_names)
        base_dir = config.coverage_base_dir.strip("/") or "**"
        self._matcher = GlobMatcher(f"{base_dir}/{{{names}}}")
        self._ignored_dirs = frozenset(config.ignored_dirs)

    async def find_coverage_files(self) -> set[Path]:
        """Discover report files. May be empty.

        Raises:
            DiscoveryError: If a workspace folder cannot be searched.
        """
        if self._config.manual_coverage_file_paths:
            return set(self._manual_paths())
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._search)

    def _manual_paths(self) -> Iterable[Path]:
        for raw in self._config.manual_coverage_file_paths:
            path = Path(raw).expanduser()
            if not path.is_absolute() and self._workspace_folders:
                path = self._workspace_folders[0] / path
            yield path

    def _search(self) -> set[Path]:
        found: set[Path] = set()
        for folder in self._workspace_folders:
            found.update(self._search_folder(folder))
        return found

    def _search_folder(self, folder: Path) -> set[Path]:
        if not folder.is_dir():
            raise DiscoveryError.walk_failed(str(folder), "not a directory")

        def _raise(err: OSError) -> None:
            # The folder itself must be readable; unreadable subdirs are skipped
            if Path(err.filename or "") == folder:
                raise DiscoveryError.walk_failed(str(folder), err.strerror or str(err)) from err
            logger.debug("discovery_dir_skipped", path=err.filename, reason=err.strerror)

        found: set[Path] = set()
        for dirpath, dirnames, filenames in os.walk(folder, onerror=_raise):
            # Prune in-place to avoid descending into dependency trees
            dirnames[:] = [d for d in dirnames if d not in self._ignored_dirs]
            for filename in filenames:
                path = Path(dirpath) / filename
                if self._matcher.matches(path.relative_to(folder)):
                    found.add(path)
        return found

    async def load_data_files(self, paths: Iterable[Path]) -> dict[Path, str]:
        """Read every report. Files deleted since discovery are skipped.

        Raises:
            ReadError: If an existing file cannot be read or decoded.
        """
        loop = asyncio.get_running_loop()
        results = await asyncio.gather(
            *(loop.run_in_executor(None, _read, p) for p in sorted(paths))
        )
        data: dict[Path, str] = {}
        for path, content in results:
            if content is None:
                logger.warning("coverage_file_missing", file=str(path))
                continue
            data[path] = content
        return data


def _read(path: Path) -> tuple[Path, str | None]:
    try:
        return path, path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return path, None
    except (OSError, UnicodeDecodeError) as e:
        raise ReadError.unreadable(str(path), str(e)) from e
