"""Render a SectionTree to Markdown, as one document or as cross-linked files."""

import logging
import posixpath
from collections.abc import Callable

from rustdoc_md.field_layout import field_layout
from rustdoc_md.header_slug import AnchorRegistry
from rustdoc_md.item import Item
from rustdoc_md.item_kinds import is_blanket_impl, kind_label
from rustdoc_md.item_signature import ASSOC_BODY, format_impl_header, format_item_signature, format_use
from rustdoc_md.md_codeblock import md_codeblock
from rustdoc_md.md_heading import md_heading
from rustdoc_md.md_table import md_cell, md_table
from rustdoc_md.render_config import MULTI, SINGLE, RenderConfig
from rustdoc_md.rendered_output import RenderedOutput
from rustdoc_md.resolved_ref import DanglingRef, ExternalRef, LocalRef, ResolvedRef
from rustdoc_md.rewrite_doc_links import rewrite_doc_links
from rustdoc_md.section import EXTERNAL, ITEM, LINK, PLACEHOLDER, UNSUPPORTED, Section, SectionTree
from rustdoc_md.shift_doc_headings import shift_doc_headings
from rustdoc_md.type_formatting import (
    format_generics,
    format_path,
    format_type,
    format_where_clause,
    principal_path_id,
)
from rustdoc_md.unit_planner import INDEX_FILE, plan_units

logger = logging.getLogger(__name__)

UNRESOLVED = "*(unresolved reference)*"


def render(tree: SectionTree, config: RenderConfig | None = None) -> RenderedOutput:
    """Render a section tree in the mode selected by `config`."""
    return MarkdownRenderer(tree, config or RenderConfig()).render()


class MarkdownRenderer:
    """Turns one SectionTree into Markdown text.

    Output order is exactly the tree's traversal order. Anchors are assigned
    once, up front, so every link resolves to the same slug in both modes.
    """

    def __init__(self, tree: SectionTree, config: RenderConfig) -> None:
        """Assign anchors for every section of the tree."""
        self.tree = tree
        self.config = config
        self.document = tree.document
        self.resolver = tree.resolver
        self.max_level = config.max_heading_depth
        self._unit_files: dict[Section, str] = {}
        self._unit_of: dict[Section, str] = {}
        self._current_file = ""

        registry = AnchorRegistry()
        self._anchors: dict[Section, str] = {
            section: registry.claim(section.qualified_name, section.item_id)
            for section in tree.walk()
            if section.role != LINK
        }

    def render(self) -> RenderedOutput:
        """Render the whole tree."""
        warnings = tuple(self.tree.warnings)
        if self.config.mode == MULTI:
            files = self._render_multi()
            logger.info("Rendered %s into %d files", self.tree.crate_name, len(files))
            return RenderedOutput(mode=MULTI, files=files, warnings=warnings)
        text = self._render_single()
        logger.info("Rendered %s into one document (%d bytes)", self.tree.crate_name, len(text))
        return RenderedOutput(mode=SINGLE, text=text, warnings=warnings)

    # -----------------------------
    # Modes
    # -----------------------------

    def _render_single(self) -> str:
        root = self.tree.root
        parts = self._crate_header()
        toc = self._toc(root, 0, lambda s: s.role == ITEM)
        if toc:
            parts += [md_heading(2, "Table of Contents", self.max_level), "", *toc, ""]
        parts += self._render_body(root, 1)
        return _finish(parts)

    def _render_multi(self) -> dict[str, str]:
        self._unit_files = plan_units(self.tree.root, self.config.multi_file_unit)
        self._assign_units(self.tree.root, INDEX_FILE)
        files = {}
        for section, path in self._unit_files.items():
            self._current_file = path
            files[path] = self._render_unit(section)
        self._current_file = ""
        return files

    def _assign_units(self, section: Section, unit: str) -> None:
        unit = self._unit_files.get(section, unit)
        self._unit_of[section] = unit
        for child in section.children():
            self._assign_units(child, unit)

    def _render_unit(self, section: Section) -> str:
        if section is self.tree.root:
            parts = self._crate_header()
            toc = self._toc(section, 0, lambda s: s in self._unit_files)
            if toc:
                parts += [md_heading(2, "Table of Contents", self.max_level), "", *toc, ""]
        else:
            parts = self._heading(section, 1, self._title(section))
        parts += self._render_body(section, 1)
        return _finish(parts)

    def _crate_header(self) -> list[str]:
        root = self.tree.root
        parts = [f'<a id="{self._anchors[root]}"></a>', ""]
        parts += [md_heading(1, f"Crate `{self.tree.crate_name}`", self.max_level), ""]
        if self.document.crate_version:
            parts += [f"**Version:** {self.document.crate_version}", ""]
        parts += [f"**Format Version:** {self.document.format_version}", ""]
        return parts

    def _toc(
        self,
        module: Section,
        depth: int,
        include: Callable[[Section], bool],
    ) -> list[str]:
        """List module-level sections (nested by module) that `include` accepts."""
        lines = []
        for child in module.children():
            if not include(child):
                continue
            lines.append(f"{'  ' * depth}- [{self._title(child)}]({self._href(child)})")
            if child.is_module:
                lines.extend(self._toc(child, depth + 1, include))
        return lines

    # -----------------------------
    # Sections
    # -----------------------------

    def _render_section(self, section: Section, level: int) -> list[str]:
        if section.role == ITEM:
            return self._heading(section, level, self._title(section)) + self._render_body(
                section,
                level,
            )
        if section.role == PLACEHOLDER:
            return self._render_placeholder(section, level)
        if section.role == UNSUPPORTED:
            return self._render_unsupported(section, level)
        return self._render_reexport(section, level)

    def _heading(self, section: Section, level: int, text: str) -> list[str]:
        parts = []
        anchor = self._anchors.get(section)
        if anchor:
            parts += [f'<a id="{anchor}"></a>', ""]
        return parts + [md_heading(level, text, self.max_level), ""]

    def _title(self, section: Section) -> str:
        if section.role == ITEM and section.kind == "impl" and section.item is not None:
            return _impl_title(section.item)
        if section.role == PLACEHOLDER:
            return f"Unresolved `{section.name}`"
        if section.role in {LINK, EXTERNAL} and section.use_item is not None:
            return f"Re-export `{_reexport_label(section)}`"
        return f"{kind_label(section.kind)} `{section.name}`"

    def _render_body(self, section: Section, level: int) -> list[str]:
        item = section.item
        parts: list[str] = []
        if item is None:
            return parts
        if section.reexported_from:
            parts += [f"*Re-exported from `{section.reexported_from}`*", ""]
        parts += self._render_attributes(item)
        parts += self._render_deprecation(item)
        docs = self._render_docs(item, level)
        if docs:
            parts += [docs, ""]
        if section is not self.tree.root:
            parts += [md_codeblock("rust", self._signature(section)), ""]

        kind = section.kind
        if kind in {"struct", "union", "variant"}:
            parts += self._render_fields(item, level)
        elif kind == "trait":
            parts += _trait_notes(item)
        elif kind == "impl":
            parts += self._render_impl_notes(section)

        parts += self._render_groups(section, level)

        if kind == "trait":
            parts += self._render_implementors(section, level)
        elif kind == "impl":
            parts += self._render_provided_methods(section, level)
        if section.blanket_impls:
            parts += self._render_blanket_list(section)
        return parts

    def _render_groups(self, section: Section, level: int) -> list[str]:
        parts = []
        for group in section.groups:
            parts += [md_heading(level + 1, group.title, self.max_level), ""]
            for child in group.sections:
                if child in self._unit_files and self._unit_files[child] != self._current_file:
                    parts += self._render_summary(child, level + 2)
                else:
                    parts += self._render_section(child, level + 2)
        return parts

    def _render_summary(self, section: Section, level: int) -> list[str]:
        """Render a child that lives in its own file as a linked summary entry."""
        parts = [md_heading(level, f"[{self._title(section)}]({self._href(section)})", self.max_level)]
        summary = self._summary_text(section.item)
        if summary:
            parts.append(summary)
        parts.append("")
        return parts

    def _render_reexport(self, section: Section, level: int) -> list[str]:
        parts = self._heading(section, level, self._title(section))
        use = section.use_item
        if use is not None:
            docs = self._render_docs(use, level)
            if docs:
                parts += [docs, ""]
            parts += [md_codeblock("rust", format_use(use)), ""]
        parts += [f"**Target:** {self._target_text(section)}", ""]
        return parts

    def _render_placeholder(self, section: Section, level: int) -> list[str]:
        parts = self._heading(section, level, self._title(section))
        if section.use_item is not None:
            parts += [md_codeblock("rust", format_use(section.use_item)), ""]
        parts += [
            f"> Reference could not be resolved (id `{section.item_id}`: {section.note}).",
            "",
        ]
        return parts

    def _render_unsupported(self, section: Section, level: int) -> list[str]:
        parts = self._heading(section, level, f"Unsupported Item `{section.name}`")
        parts += [
            f"> Item kind `{section.kind}` is not supported by this renderer "
            f"(id `{section.item_id}`).",
            "",
        ]
        if section.item is not None:
            docs = self._render_docs(section.item, level)
            if docs:
                parts += [docs, ""]
        return parts

    # -----------------------------
    # Item details
    # -----------------------------

    def _signature(self, section: Section) -> str:
        item = section.item
        if item.kind == "impl" and is_blanket_impl(item.kind, item.inner):
            blanket = {**item.inner, "for": item.inner.get("blanket_impl") or item.inner.get("for")}
            where = format_where_clause(item.inner.get("generics"))
            return format_impl_header(blanket) + (f"{where}\n" if where else " ") + ASSOC_BODY
        name = None if item.kind == "impl" else section.name
        return format_item_signature(item, self.document, name=name)

    def _render_attributes(self, item: Item) -> list[str]:
        hidden = set(self.config.hidden_attributes)
        attrs = [a for a in item.attrs if a.strip() not in hidden]
        if not attrs:
            return []
        return ["**Attributes:**", "", *[f"- `{a}`" for a in attrs], ""]

    def _render_deprecation(self, item: Item) -> list[str]:
        deprecation = item.deprecation
        if not deprecation:
            return []
        text = "**Deprecated"
        if deprecation.get("since"):
            text += f" since {deprecation['since']}"
        text += "**"
        if deprecation.get("note"):
            text += f": {deprecation['note']}"
        return [f"> {text}", ""]

    def _render_docs(self, item: Item, level: int) -> str:
        text = rewrite_doc_links(item.docs, item.links, self._doc_link)
        return shift_doc_headings(text, level, self.max_level).strip()

    def _summary_text(self, item: Item | None) -> str:
        """Return the first prose paragraph of an item's docs, on one line."""
        if item is None or not item.docs:
            return ""
        docs = rewrite_doc_links(item.docs, item.links, self._doc_link)
        for para in docs.split("\n\n"):
            para = para.strip()
            if para and not para.startswith(("#", "```", "~~~")):
                return " ".join(para.split())
        return ""

    def _render_fields(self, item: Item, level: int) -> list[str]:
        field_ids, stripped, tuple_like = field_layout(item)
        rows = []
        for field_id in field_ids:
            if field_id is None:
                continue
            field = self.document.get(field_id)
            if field is None:
                rows.append([f"`{field_id}`", UNRESOLVED, ""])
                continue
            rows.append(
                [
                    f"`{field.name or field_id}`",
                    self._type_cell(field.inner.get("type")),
                    md_cell(self._summary_text(field)),
                ],
            )
        parts = []
        if rows:
            headers = ["Index" if tuple_like else "Name", "Type", "Documentation"]
            parts += [md_heading(level + 1, "Fields", self.max_level), "", md_table(headers, rows), ""]
        if stripped:
            parts += ["*Some fields are private and not shown.*", ""]
        return parts

    def _type_cell(self, ty: object) -> str:
        text = md_cell(format_type(ty))
        type_id = principal_path_id(ty)
        if type_id is None:
            return f"`{text}`"
        return self._ref_link(text, self.resolver.resolve(type_id))

    def _render_implementors(self, section: Section, level: int) -> list[str]:
        if not section.implementors:
            return []
        lines: list[str] = []
        for impl_id in section.implementors:
            impl = self.document.get(impl_id)
            if impl is None:
                line = f"- `{impl_id}` {UNRESOLVED}"
            else:
                target = impl.inner.get("blanket_impl") or impl.inner.get("for")
                text = f"`{format_type(target)}`"
                impl_section = self.tree.section_for(impl_id)
                if impl_section is not None:
                    text = f"[{text}]({self._href(impl_section)})"
                generics = format_generics(impl.inner.get("generics"))
                line = f"- {text}" + (f" with `{generics}`" if generics else "")
            if line not in lines:
                lines.append(line)
        return [
            md_heading(level + 1, "Implementors", self.max_level),
            "",
            "This trait is implemented for the following types:",
            "",
            *lines,
            "",
        ]

    def _render_impl_notes(self, section: Section) -> list[str]:
        inner = section.item.inner
        parts = []
        trait = inner.get("trait")
        if trait:
            ref = self.resolver.resolve(trait.get("id"))
            parts += [f"**Trait:** {self._ref_link(format_path(trait), ref)}", ""]
        if inner.get("is_synthetic"):
            parts += ["> This implementation is synthesized by the compiler.", ""]
        if section.note:
            parts += [f"> {section.note}", ""]
        if is_blanket_impl(section.kind, inner) and section.applies_to:
            links = []
            for type_id in section.applies_to:
                links.append(self._ref_link(self._label_for(type_id), self.resolver.resolve(type_id)))
            parts += ["**Implemented for:**", "", *[f"- {link}" for link in links], ""]
        return parts

    def _render_provided_methods(self, section: Section, level: int) -> list[str]:
        inner = section.item.inner
        trait = inner.get("trait")
        names = sorted(set(inner.get("provided_trait_methods") or []))
        if not trait or not names or is_blanket_impl(section.kind, inner):
            return []
        trait_section = self.tree.section_for(trait.get("id"))
        lines = []
        for name in names:
            member = _child_named(trait_section, name)
            lines.append(f"- [`{name}`]({self._href(member)})" if member else f"- `{name}`")
        return [
            md_heading(level + 1, "Provided Trait Methods (Not Overridden)", self.max_level),
            "",
            *lines,
            "",
        ]

    def _render_blanket_list(self, section: Section) -> list[str]:
        blankets = sorted(section.blanket_impls, key=lambda s: (s.name, s.path[-1]))
        return [
            "<details><summary>Blanket Implementations</summary>",
            "",
            "This type is implemented for the following traits through blanket implementations:",
            "",
            *[f"- [`{b.name}`]({self._href(b)})" for b in blankets],
            "",
            "</details>",
            "",
        ]

    # -----------------------------
    # References
    # -----------------------------

    def _href(self, section: Section) -> str:
        anchor = self._anchors.get(section, "")
        unit = self._unit_of.get(section)
        if self.config.mode != MULTI or unit is None or unit == self._current_file:
            return f"#{anchor}"
        rel = posixpath.relpath(unit, posixpath.dirname(self._current_file) or ".")
        if section in self._unit_files:
            return rel
        return f"{rel}#{anchor}"

    def _ref_link(self, label: str, ref: ResolvedRef) -> str:
        """Render a reference as a link, or as annotated plain text when it has no local anchor."""
        text = f"`{label}`"
        if isinstance(ref, LocalRef):
            section = self.tree.section_for(ref.item.id)
            return f"[{text}]({self._href(section)})" if section else text
        if isinstance(ref, ExternalRef):
            url = self.resolver.external_url(ref) if self.config.link_external else None
            if url:
                return f"[{text}]({url})"
            return f"{text} (crate `{ref.crate_name}`)"
        return f"{text} {UNRESOLVED}"

    def _doc_link(self, target_id: str) -> tuple[str | None, str]:
        ref = self.resolver.resolve(target_id)
        if isinstance(ref, LocalRef):
            section = self.tree.section_for(ref.item.id)
            return (self._href(section) if section else None), ""
        if isinstance(ref, ExternalRef):
            url = self.resolver.external_url(ref) if self.config.link_external else None
            return url, "" if url else f" (crate `{ref.crate_name}`)"
        return None, ""

    def _target_text(self, section: Section) -> str:
        target = section.target
        if isinstance(target, LocalRef):
            dest = self.tree.section_for(target.item.id)
            label = dest.qualified_name if dest else self._label_for(target.item.id)
            return self._ref_link(label, target)
        if isinstance(target, ExternalRef):
            return self._ref_link(target.qualified_name, target)
        reason = target.reason if isinstance(target, DanglingRef) else "no target"
        return f"`{section.name}` {UNRESOLVED} ({reason})"

    def _label_for(self, item_id: str) -> str:
        section = self.tree.section_for(item_id)
        if section is not None:
            return section.name
        path = self.resolver.canonical_path(item_id)
        if path:
            return path.rsplit("::", 1)[-1]
        item = self.document.get(item_id)
        return (item.name if item else None) or item_id


def _finish(parts: list[str]) -> str:
    return "\n".join(parts).rstrip() + "\n"


def _impl_title(item: Item) -> str:
    inner = item.inner
    target = format_type(inner.get("blanket_impl") or inner.get("for"))
    trait = inner.get("trait")
    if not trait:
        return f"Implementation for `{target}`"
    negative = "!" if inner.get("is_negative") else ""
    prefix = "Blanket Implementation" if is_blanket_impl(item.kind, inner) else "Implementation"
    return f"{prefix} of `{negative}{format_path(trait)}` for `{target}`"


def _reexport_label(section: Section) -> str:
    if section.use_item is not None and section.use_item.inner.get("is_glob"):
        return f"{section.name}::*"
    return section.name


def _trait_notes(item: Item) -> list[str]:
    inner = item.inner
    notes = []
    if inner.get("is_auto"):
        notes += ["> This is an auto trait.", ""]
    if inner.get("is_unsafe"):
        notes += ["> This trait is unsafe to implement.", ""]
    if not inner.get("is_dyn_compatible", inner.get("is_object_safe", True)):
        notes += ["> This trait is not dyn-compatible and cannot be used as `dyn Trait`.", ""]
    return notes


def _child_named(section: Section | None, name: str) -> Section | None:
    if section is None:
        return None
    for child in section.children():
        if child.name == name and child.role == ITEM:
            return child
    return None
