"""Cobertura XML format parser.

Structure:
<coverage line-rate="0.85" branch-rate="0.50" ...>
  <sources><source>/abs/project/root</source></sources>
  <packages>
    <package name="...">
      <classes>
        <class name="..." filename="..." line-rate="...">
          <lines>
            <line number="1" hits="1" branch="false"/>
            <line number="2" hits="0" branch="true" condition-coverage="50% (1/2)"/>
          </lines>
        </class>
      </classes>
    </package>
  </packages>
</coverage>

Used by: coverage.py (coverage xml), coverlet, gocover-cobertura
"""

import posixpath
import re

from gutterwatch.coverage.models import BranchCoverage, Section
from gutterwatch.coverage.parsers._xml import header, int_attr, parse_root

_CONDITION_RE = re.compile(r"\((\d+)/(\d+)\)")


class CoberturaParser:
    """Parser for Cobertura XML."""

    @property
    def format_id(self) -> str:
        return "cobertura"

    def can_parse(self, content: str) -> bool:
        """<coverage> root with line-rate distinguishes it from Clover."""
        head = header(content)
        return "<coverage" in head and "line-rate=" in head

    def parse(self, content: str, *, source: str = "<memory>") -> dict[str, Section]:
        root = parse_root(content, source=source, format_name="Cobertura")

        # Relative filenames are relative to the first <source>
        source_dirs = [s.text.strip() for s in root.findall("./sources/source") if s.text]
        base_dir = source_dirs[0] if source_dirs else ""

        sections: dict[str, Section] = {}

        for cls in root.findall(".//class"):
            filename = cls.get("filename", "")
            if not filename:
                continue
            filename = filename.replace("\\", "/")
            if base_dir and not posixpath.isabs(filename):
                filename = posixpath.join(base_dir.replace("\\", "/"), filename)

            section = sections.get(filename)
            if section is None:
                section = sections[filename] = Section(path=filename)

            # Class-level lines only; method-level lines duplicate them
            for line in cls.findall("./lines/line"):
                line_num = int_attr(line, "number", source=source)
                hits = int_attr(line, "hits", source=source)
                section.details[line_num] = max(section.details.get(line_num, 0), hits)

                if line.get("branch") == "true":
                    match = _CONDITION_RE.search(line.get("condition-coverage", ""))
                    if match:
                        taken = int(match.group(1))
                        total = int(match.group(2))
                        for branch_id in range(total):
                            section.add_branch(
                                BranchCoverage(
                                    line=line_num,
                                    block_id=0,
                                    branch_id=branch_id,
                                    hits=1 if branch_id < taken else 0,
                                )
                            )

        return sections
