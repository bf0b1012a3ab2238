"""JaCoCo XML format parser.

Only the per-line <sourcefile> data is used; class and method counters carry
no line numbers to decorate.

Structure:
<report name="...">
  <package name="com/example">
    <sourcefile name="Foo.java">
      <line nr="1" mi="0" ci="1" mb="0" cb="0"/>
      <line nr="2" mi="1" ci="0" mb="1" cb="1"/>
    </sourcefile>
  </package>
</report>
"""

from gutterwatch.core.errors import CoverageParseError
from gutterwatch.coverage.models import BranchCoverage, Section
from gutterwatch.coverage.parsers._xml import header, int_attr, parse_root


class JacocoParser:
    """Parser for JaCoCo XML reports (Maven/Gradle)."""

    @property
    def format_id(self) -> str:
        return "jacoco"

    def can_parse(self, content: str) -> bool:
        head = header(content)
        if "<report" not in head:
            return False
        return any(marker in head for marker in ("JACOCO", "<sessioninfo", "<package"))

    def parse(self, content: str, *, source: str = "<memory>") -> dict[str, Section]:
        root = parse_root(content, source=source, format_name="JaCoCo")
        if root.tag != "report":
            raise CoverageParseError.invalid(source, f"unexpected root <{root.tag}>")

        sections: dict[str, Section] = {}

        for package in root.iter("package"):
            package_path = package.get("name", "")
            for sourcefile in package.findall("sourcefile"):
                filename = sourcefile.get("name", "")
                if not filename:
                    continue
                file_path = f"{package_path}/{filename}" if package_path else filename
                section = Section(path=file_path)

                for line in sourcefile.findall("line"):
                    nr = int_attr(line, "nr", source=source)
                    ci = int_attr(line, "ci", source=source)  # covered instructions
                    mb = int_attr(line, "mb", source=source)  # missed branches
                    cb = int_attr(line, "cb", source=source)  # covered branches

                    section.details[nr] = ci
                    for branch_id in range(mb + cb):
                        section.add_branch(
                            BranchCoverage(
                                line=nr,
                                block_id=0,
                                branch_id=branch_id,
                                hits=1 if branch_id < cb else 0,
                            )
                        )

                sections[file_path] = section

        return sections
