"""Path normalization shared by cache keys and editor lookup."""

from collections.abc import Sequence
from pathlib import Path, PurePath


def normalize_path(path: str | PurePath, remote_path_resolve: Sequence[str] = ()) -> str:
    """Normalize a report or editor path into a cache key.

    - backslashes become forward slashes
    - a leading "./" is dropped
    - a ``[remote, local]`` prefix pair rewrites report paths produced on
      another machine
    """
    text = str(path).replace("\\", "/")
    if len(remote_path_resolve) == 2:
        remote, local = (p.replace("\\", "/") for p in remote_path_resolve)
        if remote and text.startswith(remote):
            text = local + text[len(remote) :]
    while text.startswith("./"):
        text = text[2:]
    return text


def relative_to_any(path: Path, roots: Sequence[Path]) -> str | None:
    """Posix path of ``path`` relative to the first root containing it."""
    for root in roots:
        try:
            return path.relative_to(root).as_posix()
        except ValueError:
            continue
    return None
