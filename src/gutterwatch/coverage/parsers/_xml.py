"""Shared XML helpers for the XML-based report formats."""

import xml.etree.ElementTree as ET

from gutterwatch.core.errors import CoverageParseError


def parse_root(content: str, *, source: str, format_name: str) -> ET.Element:
    """Parse XML text and strip namespaces from every tag."""
    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise CoverageParseError.invalid(source, f"invalid {format_name} XML: {e}") from e

    for elem in root.iter():
        if "}" in elem.tag:
            elem.tag = elem.tag.split("}", 1)[1]
    return root


def int_attr(elem: ET.Element, name: str, *, source: str, default: int = 0) -> int:
    raw = elem.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise CoverageParseError.invalid(
            source, f"<{elem.tag}> attribute {name}={raw!r} is not an integer"
        ) from e


def header(content: str) -> str:
    """First 2KB, enough to sniff the root element."""
    return content[:2048]
