"""Report file discovery, reading and glob matching."""

from gutterwatch.files.globs import GlobMatcher, build_watch_glob, expand_braces
from gutterwatch.files.loader import FilesLoader

__all__ = ["FilesLoader", "GlobMatcher", "build_watch_glob", "expand_braces"]
