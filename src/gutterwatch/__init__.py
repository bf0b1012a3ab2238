"""gutterwatch - live code coverage for open editors."""

__version__ = "0.1.0"
