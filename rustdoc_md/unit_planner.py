"""Assign sections to output files for multi-file rendering."""

from rustdoc_md.file_safe import file_safe
from rustdoc_md.item_kinds import PAGE_KINDS
from rustdoc_md.render_config import UNIT_ITEM
from rustdoc_md.section import ITEM, Section

INDEX_FILE = "index.md"


def plan_units(root: Section, unit: str = UNIT_ITEM) -> dict[Section, str]:
    """Map every unit-root section to its relative, forward-slash file path.

    The crate root is `index.md`; each module is `<dir>/index.md` mirroring its
    path; in `item` mode each page-worthy module item is `<dir>/<name>.md`.
    Names that collide within one directory get the item id appended.
    """
    files = {root: INDEX_FILE}
    _plan_module(root, "", files, unit)
    return files


def _plan_module(module: Section, directory: str, files: dict[Section, str], unit: str) -> None:
    file_names = {"index"}
    dir_names: set[str] = set()
    for child in module.children():
        if child.role != ITEM:
            continue
        if child.kind == "module":
            token = _unique(file_safe(child.name), child, dir_names)
            sub = f"{directory}{token}/"
            files[child] = f"{sub}{INDEX_FILE}"
            _plan_module(child, sub, files, unit)
        elif unit == UNIT_ITEM and child.kind in PAGE_KINDS:
            token = _unique(file_safe(child.name), child, file_names)
            files[child] = f"{directory}{token}.md"


def _unique(token: str, section: Section, taken: set[str]) -> str:
    if token in taken:
        token = f"{token}-{file_safe(section.item_id or '')}"
    base, n = token, 2
    while token in taken:
        token = f"{base}-{n}"
        n += 1
    taken.add(token)
    return token
