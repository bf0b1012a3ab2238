"""Clover XML format parser.

Structure:
<coverage generated="..." clover="...">
  <project timestamp="...">
    <package name="com.example">
      <file name="Foo.php" path="/path/to/Foo.php">
        <line num="1" type="stmt" count="1"/>
        <line num="5" type="cond" count="0" truecount="1" falsecount="0"/>
        <line num="10" type="method" name="bar" count="3"/>
      </file>
    </package>
  </project>
</coverage>

Used by: phpunit --coverage-clover, kover, OpenClover
"""

from gutterwatch.coverage.models import BranchCoverage, Section
from gutterwatch.coverage.parsers._xml import header, int_attr, parse_root


class CloverParser:
    """Parser for Clover XML."""

    @property
    def format_id(self) -> str:
        return "clover"

    def can_parse(self, content: str) -> bool:
        head = header(content)
        if "<coverage" not in head:
            return False
        return 'clover="' in head or "<project" in head

    def parse(self, content: str, *, source: str = "<memory>") -> dict[str, Section]:
        root = parse_root(content, source=source, format_name="Clover")
        sections: dict[str, Section] = {}

        for file_elem in root.iter("file"):
            file_path = file_elem.get("path") or file_elem.get("name", "")
            if not file_path:
                continue
            file_path = file_path.replace("\\", "/")
            section = Section(path=file_path)

            for line in file_elem.findall("line"):
                num = int_attr(line, "num", source=source)
                if num <= 0:
                    continue
                count = int_attr(line, "count", source=source)
                section.details[num] = count

                if line.get("type") == "cond":
                    true_count = int_attr(line, "truecount", source=source)
                    false_count = int_attr(line, "falsecount", source=source)
                    section.add_branch(
                        BranchCoverage(line=num, block_id=0, branch_id=0, hits=true_count)
                    )
                    section.add_branch(
                        BranchCoverage(line=num, block_id=0, branch_id=1, hits=false_count)
                    )

            sections[file_path] = section

        return sections
