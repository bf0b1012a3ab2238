"""Section merging with max-hit semantics.

The same source file can show up in several reports (parallel shards,
separate unit/integration runs, one LCOV and one Cobertura export). They are
combined as "covered in any run":

- line[i] = max(line[i] across all sections)
- branch[j] = max(branch[j].hits across all sections)

Branch data stays absent only when every input lacks it.
"""

from collections.abc import Iterable, Mapping

from gutterwatch.coverage.models import BranchCoverage, Section


def merge_sections(sections: Iterable[Section]) -> Section:
    """Merge several Sections for the same file.

    Args:
        sections: Sections to merge. The first one's path is kept.

    Returns:
        New Section with max hits across all inputs.
    """
    sections_list = list(sections)
    if not sections_list:
        raise ValueError("Cannot merge empty section list")

    if len(sections_list) == 1:
        return sections_list[0]

    merged_lines: dict[int, int] = {}
    for section in sections_list:
        for line_num, hits in section.details.items():
            merged_lines[line_num] = max(merged_lines.get(line_num, 0), hits)

    # Branches keyed by (line, block_id, branch_id)
    has_branches = False
    branch_key_to_hits: dict[tuple[int, int, int], int] = {}
    for section in sections_list:
        if section.branch_details is None:
            continue
        has_branches = True
        for branch in section.branch_details:
            key = (branch.line, branch.block_id, branch.branch_id)
            branch_key_to_hits[key] = max(branch_key_to_hits.get(key, 0), branch.hits)

    merged_branches = [
        BranchCoverage(line=line, block_id=block_id, branch_id=branch_id, hits=hits)
        for (line, block_id, branch_id), hits in sorted(branch_key_to_hits.items())
    ]

    return Section(
        path=sections_list[0].path,
        details=dict(sorted(merged_lines.items())),
        branch_details=merged_branches if has_branches else None,
    )


def merge_section_maps(maps: Iterable[Mapping[str, Section]]) -> dict[str, Section]:
    """Merge per-report mappings into one mapping keyed by path.

    Paths present in only one report are taken as-is.
    """
    by_path: dict[str, list[Section]] = {}
    for mapping in maps:
        for path, section in mapping.items():
            by_path.setdefault(path, []).append(section)

    return {path: merge_sections(group) for path, group in by_path.items()}
