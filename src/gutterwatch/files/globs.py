"""Brace globs for coverage report files.

The watch pattern has the shape ``{/ws1,/ws2}/**/{lcov.info,cov.xml}``: one
glob naming every workspace folder and every report name. Manual report paths
replace the search entirely: ``{/abs/lcov.info,/abs/other.xml}``.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from pathlib import Path, PurePath

from gutterwatch.config.models import CoverageConfig


def build_watch_glob(config: CoverageConfig, workspace_folders: Sequence[Path]) -> str:
    """Compose the glob the filesystem watcher filters on."""
    if config.manual_coverage_file_paths:
        # Manual paths outside the workspace folders are not watchable,
        # but listing them keeps those inside working
        paths = [
            _resolve(p, workspace_folders).as_posix() for p in config.manual_coverage_file_paths
        ]
        return "{" + ",".join(paths) + "}"

    names = ",".join(config.coverage_file_names)
    base_dir = config.coverage_base_dir.strip("/") or "**"
    if workspace_folders:
        folders = ",".join(Path(f).as_posix() for f in workspace_folders)
        base_dir = "{" + folders + "}/" + base_dir
    return f"{base_dir}/{{{names}}}"


def _resolve(path: str, workspace_folders: Sequence[Path]) -> Path:
    candidate = Path(path).expanduser()
    if not candidate.is_absolute() and workspace_folders:
        candidate = Path(workspace_folders[0]) / candidate
    return candidate


def expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` alternatives, nested groups included.

    An unmatched ``{`` is kept literally.
    """
    start = pattern.find("{")
    if start == -1:
        return [pattern]

    depth = 0
    options: list[str] = []
    last = start + 1
    for i in range(start, len(pattern)):
        ch = pattern[i]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                options.append(pattern[last:i])
                prefix, suffix = pattern[:start], pattern[i + 1 :]
                expanded: list[str] = []
                for option in options:
                    expanded.extend(expand_braces(prefix + option + suffix))
                return expanded
        elif ch == "," and depth == 1:
            options.append(pattern[last:i])
            last = i + 1

    # Unbalanced: treat the brace as a literal
    return [pattern[: start + 1] + p for p in expand_braces(pattern[start + 1 :])]


def _translate(pattern: str) -> str:
    """Translate one brace-free glob into a regex body.

    ``**/`` matches zero or more directories, ``*`` and ``?`` never cross "/".
    """
    out: list[str] = []
    i = 0
    while i < len(pattern):
        if pattern.startswith("**/", i):
            out.append("(?:.*/)?")
            i += 3
        elif pattern.startswith("**", i):
            out.append(".*")
            i += 2
        elif pattern[i] == "*":
            out.append("[^/]*")
            i += 1
        elif pattern[i] == "?":
            out.append("[^/]")
            i += 1
        else:
            out.append(re.escape(pattern[i]))
            i += 1
    return "".join(out)


class GlobMatcher:
    """Matches posix path strings against a brace glob."""

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        alternatives = [_translate(p) for p in expand_braces(pattern)]
        self._regex = re.compile("^(?:" + "|".join(alternatives) + ")$")

    def matches(self, path: str | PurePath) -> bool:
        text = path.as_posix() if isinstance(path, PurePath) else path.replace("\\", "/")
        return self._regex.match(text) is not None

    def __repr__(self) -> str:
        return f"GlobMatcher({self.pattern!r})"
