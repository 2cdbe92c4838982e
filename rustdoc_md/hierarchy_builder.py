"""Build the ordered section tree from a Document.

The item graph is not a tree: re-exports and globs make one item reachable from
several modules. A planning pass walks the modules in the same deterministic
order as the build and lets the first public path claim each item. The build
pass then emits a full section only at the claimed path; every other occurrence
becomes a link entry in the module's Re-exports group.
"""

import logging
from dataclasses import dataclass

from rustdoc_md.document import Document
from rustdoc_md.errors import DanglingReference, RenderWarning, UnsupportedItemKind
from rustdoc_md.field_layout import field_layout
from rustdoc_md.item import Item
from rustdoc_md.item_kinds import (
    MODULE_CATEGORIES,
    category_of,
    is_blanket_impl,
    is_known_kind,
    is_type_kind,
)
from rustdoc_md.reference_resolver import ReferenceResolver, use_source
from rustdoc_md.resolved_ref import DanglingRef, ExternalRef, LocalRef, ResolvedRef
from rustdoc_md.section import (
    EXTERNAL,
    ITEM,
    LINK,
    PLACEHOLDER,
    UNSUPPORTED,
    Section,
    SectionTree,
)
from rustdoc_md.type_formatting import format_path, format_type, principal_path_id

logger = logging.getLogger(__name__)

_CATEGORY_RANK = {key: rank for rank, (key, _) in enumerate(MODULE_CATEGORIES)}

# Items that only ever render inside their parent; module entries naming them are links.
_MEMBER_KINDS = frozenset({"variant", "struct_field", "assoc_const", "assoc_type", "impl"})


def id_sort_key(item_id: str) -> tuple[int, int, str]:
    """Order numeric ids numerically, ahead of non-numeric ids."""
    if item_id.isdigit():
        return (0, int(item_id), "")
    return (1, 0, item_id)


@dataclass(frozen=True)
class _Entry:
    """One name visible in a module: a direct child, or an item brought in by `use`."""

    name: str
    child_id: str
    target: ResolvedRef
    use_item: Item | None = None
    public: bool = True
    glob: bool = False

    @property
    def target_id(self) -> str:
        if isinstance(self.target, LocalRef):
            return self.target.item.id
        return self.target.item_id

    @property
    def link_only(self) -> bool:
        if self.glob:
            return True
        return isinstance(self.target, LocalRef) and self.target.item.kind in _MEMBER_KINDS

    @property
    def category(self) -> str:
        if self.link_only or isinstance(self.target, ExternalRef):
            return "reexports"
        if isinstance(self.target, DanglingRef):
            return "reexports" if self.use_item is not None else "other"
        kind = self.target.item.kind
        return category_of(kind) if is_known_kind(kind) else "other"

    def sort_key(self) -> tuple[int, str, tuple[int, int, str]]:
        return (_CATEGORY_RANK[self.category], self.name, id_sort_key(self.target_id))


class HierarchyBuilder:
    """Walks the module graph from the crate root and produces a SectionTree."""

    def __init__(
        self,
        document: Document,
        resolver: ReferenceResolver | None = None,
        *,
        include_private: bool = False,
    ) -> None:
        """Prepare a builder; each call to build() starts from a clean state."""
        self.document = document
        self.resolver = resolver or ReferenceResolver(document)
        self.include_private = include_private
        self._canonical: dict[str, tuple[str, ...]] = {}
        self._by_id: dict[str, Section] = {}
        self._warnings: list[RenderWarning] = []
        self._blankets: dict[str, Section] = {}
        self._blanket_sinks: list[tuple[tuple[str, ...], list[Section]]] = []

    def build(self) -> SectionTree:
        """Plan canonical paths, then build the section tree in traversal order."""
        self._canonical = {}
        self._by_id = {}
        self._warnings = []
        self._blankets = {}
        self._blanket_sinks = []

        if self.include_private and not self.document.includes_private:
            logger.warning(
                "Private items were requested but the export only contains the public API",
            )

        root = self.document.root_item
        root_path = (self.document.crate_name,)
        self._plan(root, root_path)
        root_section = self._item_section(root, self.document.crate_name, root_path)

        tree = SectionTree(
            document=self.document,
            resolver=self.resolver,
            root=root_section,
            by_id=self._by_id,
            warnings=self._warnings,
        )
        logger.info(
            "Built section tree for %s: %d rendered items, %d warnings",
            self.document.crate_name,
            len(self._by_id),
            len(self._warnings),
        )
        return tree

    # -----------------------------
    # Planning
    # -----------------------------

    def _plan(self, root: Item, root_path: tuple[str, ...]) -> None:
        self._canonical[root.id] = root_path
        self._plan_module(root, root_path, public_only=True)
        if self.include_private:
            self._plan_module(root, root_path, public_only=False)
        logger.debug("Planned %d canonical paths", len(self._canonical))

    def _plan_module(
        self,
        module: Item,
        path: tuple[str, ...],
        *,
        public_only: bool,
    ) -> None:
        for entry in self._module_entries(module):
            if public_only and not entry.public:
                continue
            if entry.link_only or not isinstance(entry.target, LocalRef):
                continue
            item = entry.target.item
            child_path = (*path, entry.name)
            self._canonical.setdefault(item.id, child_path)
            if item.kind == "module" and self._canonical[item.id] == child_path:
                self._plan_module(item, child_path, public_only=public_only)

    # -----------------------------
    # Module entries
    # -----------------------------

    def _module_entries(self, module: Item) -> list[_Entry]:
        """Return the names a module exposes, sorted in traversal order."""
        explicit: list[_Entry] = []
        globbed: list[_Entry] = []
        for raw_id in module.inner.get("items") or []:
            child_id = str(raw_id)
            child = self.document.get(child_id)
            if child is None:
                summary = self.document.summary(child_id)
                name = summary.name if summary else child_id
                explicit.append(_Entry(name, child_id, self.resolver.resolve(child_id)))
            elif child.kind == "impl":
                continue
            elif child.kind == "use" and child.inner.get("is_glob"):
                globbed.extend(self._glob_entries(child, child.is_public, set()))
            elif child.kind == "use":
                explicit.append(self._use_entry(child, public=child.is_public))
            else:
                explicit.append(
                    _Entry(child.name or child_id, child_id, LocalRef(child), public=child.is_public),
                )

        # Explicit names shadow glob imports.
        taken = {e.name for e in explicit}
        entries: list[_Entry] = []
        seen: set[tuple[str, str]] = set()
        for entry in explicit + [g for g in globbed if g.name not in taken]:
            key = (entry.name, entry.target_id)
            if key in seen:
                continue
            seen.add(key)
            entries.append(entry)
        entries.sort(key=_Entry.sort_key)
        return entries

    def _use_entry(self, use_item: Item, *, public: bool) -> _Entry:
        source = use_source(use_item)
        name = use_item.inner.get("name") or use_item.name or source.rsplit("::", 1)[-1]
        return _Entry(
            str(name),
            use_item.id,
            self.resolver.resolve(use_item.id),
            use_item=use_item,
            public=public,
        )

    def _glob_entries(self, use_item: Item, public: bool, seen: set[str]) -> list[_Entry]:
        """Expand `use path::*` into one entry per public item of the target module."""
        target = self.resolver.resolve(use_item.id)
        if not (isinstance(target, LocalRef) and target.item.kind == "module"):
            # Enum variant globs and external globs stay a single listing entry.
            return [
                _Entry(
                    use_source(use_item),
                    use_item.id,
                    target,
                    use_item=use_item,
                    public=public,
                    glob=True,
                ),
            ]
        module = target.item
        if module.id in seen:
            return []
        seen.add(module.id)

        entries = []
        for raw_id in module.inner.get("items") or []:
            child = self.document.get(str(raw_id))
            if child is None or child.kind == "impl" or not child.is_public:
                continue
            if child.kind == "use" and child.inner.get("is_glob"):
                entries.extend(self._glob_entries(child, public, seen))
            elif child.kind == "use":
                entries.append(self._use_entry(child, public=public))
            else:
                entries.append(
                    _Entry(
                        child.name or child.id,
                        child.id,
                        LocalRef(child),
                        use_item=use_item,
                        public=public,
                    ),
                )
        return entries

    # -----------------------------
    # Building
    # -----------------------------

    def _warn(self, warning: RenderWarning) -> None:
        logger.warning("%s", warning.describe())
        self._warnings.append(warning)

    def _placeholder(
        self,
        item_id: str,
        name: str,
        path: tuple[str, ...],
        context: str,
        *,
        target: DanglingRef | None = None,
        use_item: Item | None = None,
    ) -> Section:
        target = target or DanglingRef(item_id, "id not found in index or paths")
        self._warn(DanglingReference(item_id, context=context))
        return Section(
            PLACEHOLDER,
            "placeholder",
            name,
            path,
            item_id=item_id,
            use_item=use_item,
            target=target,
            note=target.reason,
        )

    def _item_section(
        self,
        item: Item,
        name: str,
        path: tuple[str, ...],
        use_item: Item | None = None,
    ) -> Section:
        if not is_known_kind(item.kind):
            self._warn(UnsupportedItemKind(item.id, kind=item.kind, name=item.name))
            section = Section(UNSUPPORTED, item.kind, name, path, item=item, item_id=item.id)
            self._by_id[item.id] = section
            return section

        section = Section(
            ITEM,
            item.kind,
            name,
            path,
            item=item,
            item_id=item.id,
            use_item=use_item,
            reexported_from=self._reexported_from(item, use_item, path),
        )
        self._by_id[item.id] = section

        kind = item.kind
        if kind == "module":
            self._build_module(section, item)
        elif kind in {"struct", "union"}:
            self._check_fields(section, item)
            self._attach_impls(section, item)
        elif kind == "enum":
            self._build_variants(section, item)
            self._attach_impls(section, item)
        elif kind == "variant":
            self._check_fields(section, item)
        elif kind == "trait":
            self._build_trait(section, item)
        elif kind == "impl":
            self._build_impl_members(section, item)
        return section

    def _reexported_from(
        self,
        item: Item,
        use_item: Item | None,
        path: tuple[str, ...],
    ) -> str | None:
        if use_item is None:
            return None
        original = self.resolver.canonical_path(item.id)
        if original is None:
            return use_source(use_item)
        return original if original != "::".join(path) else None

    def _build_module(self, section: Section, module: Item) -> None:
        buckets: dict[str, list[Section]] = {key: [] for key, _ in MODULE_CATEGORIES}
        self._blanket_sinks.append((section.path, []))

        for entry in self._module_entries(module):
            if not (entry.public or self.include_private):
                continue
            placed = self._entry_section(entry, section.path)
            if placed is not None:
                category, child = placed
                buckets[category].append(child)

        buckets["impls"].extend(self._module_impls(module, section.path))
        _, owned = self._blanket_sinks.pop()
        buckets["impls"].extend(sorted(owned, key=lambda s: s.path[-1]))

        for key, title in MODULE_CATEGORIES:
            section.add(title, buckets[key])

    def _entry_section(
        self,
        entry: _Entry,
        module_path: tuple[str, ...],
    ) -> tuple[str, Section] | None:
        path = (*module_path, entry.name)
        target = entry.target

        if isinstance(target, DanglingRef):
            context = f"module {'::'.join(module_path)}"
            placeholder = self._placeholder(
                entry.child_id,
                entry.name,
                path,
                context,
                target=target,
                use_item=entry.use_item,
            )
            return entry.category, placeholder

        if isinstance(target, ExternalRef):
            external = Section(
                EXTERNAL,
                target.summary.kind,
                entry.name,
                path,
                item_id=target.item_id,
                use_item=entry.use_item,
                target=target,
            )
            return entry.category, external

        item = target.item
        canonical = self._canonical.get(item.id)
        if canonical is None and not entry.link_only:
            # Not reachable in the requested scope.
            return None
        if not entry.link_only and canonical == path and item.id not in self._by_id:
            return entry.category, self._item_section(item, entry.name, path, entry.use_item)

        link = Section(
            LINK,
            item.kind,
            entry.name,
            path,
            item=item,
            item_id=item.id,
            use_item=entry.use_item,
            target=target,
        )
        return "reexports", link

    # -----------------------------
    # Types
    # -----------------------------

    def _check_fields(self, section: Section, item: Item) -> None:
        field_ids, _, _ = field_layout(item)
        for field_id in filter(None, field_ids):
            field = self.document.get(field_id)
            if field is None:
                self._warn(
                    DanglingReference(field_id, context=f"fields of {section.qualified_name}"),
                )
                continue
            type_id = principal_path_id(field.inner.get("type"))
            if type_id is not None and isinstance(self.resolver.resolve(type_id), DanglingRef):
                context = f"type of field {field.name} of {section.qualified_name}"
                self._warn(DanglingReference(type_id, context=context))

    def _build_variants(self, section: Section, enum: Item) -> None:
        variants = []
        for raw_id in enum.inner.get("variants") or []:
            variant = self.document.get(str(raw_id))
            if variant is None:
                context = f"variants of {section.qualified_name}"
                variants.append(
                    self._placeholder(str(raw_id), str(raw_id), (*section.path, str(raw_id)), context),
                )
                continue
            name = variant.name or variant.id
            variants.append(self._item_section(variant, name, (*section.path, name)))
        section.add("Variants", variants)

    def _attach_impls(self, section: Section, type_item: Item) -> None:
        inherent: list[Section] = []
        trait_impls: list[Section] = []
        auto_impls: list[Section] = []
        for raw_id in type_item.inner.get("impls") or []:
            impl_id = str(raw_id)
            if impl_id in self._by_id:
                continue
            impl = self.document.get(impl_id)
            if impl is None or impl.kind != "impl":
                context = f"implementations of {section.qualified_name}"
                path = (*section.path, f"impl {impl_id}")
                inherent.append(self._placeholder(impl_id, impl_id, path, context))
                continue
            if is_blanket_impl(impl.kind, impl.inner):
                blanket = self._blanket_section(impl, applies_to=type_item.id)
                if blanket not in section.blanket_impls:
                    section.blanket_impls.append(blanket)
                continue
            impl_section = self._impl_section(impl, section.path)
            if impl.inner.get("trait") is None:
                inherent.append(impl_section)
            elif impl.inner.get("is_synthetic"):
                auto_impls.append(impl_section)
            else:
                trait_impls.append(impl_section)

        trait_impls.sort(key=lambda s: (s.name, id_sort_key(s.item_id or "")))
        auto_impls.sort(key=lambda s: (s.name, id_sort_key(s.item_id or "")))
        section.add("Implementations", inherent)
        section.add("Trait Implementations", trait_impls)
        section.add("Auto Trait Implementations", auto_impls)

    def _impl_section(self, impl: Item, parent_path: tuple[str, ...]) -> Section:
        trait = impl.inner.get("trait")
        target = format_type(impl.inner.get("for"))
        if trait:
            name = ("!" if impl.inner.get("is_negative") else "") + format_path(trait)
            segment = f"impl {name} for {target}"
        else:
            name = target
            segment = f"impl {target}"
        section = self._item_section(impl, name, (*parent_path, segment))

        for_id = principal_path_id(impl.inner.get("for"))
        if for_id is not None and isinstance(self.resolver.resolve(for_id), DanglingRef):
            self._warn(
                DanglingReference(for_id, context=f"target of {section.qualified_name}"),
            )
            section.note = "The implementing type could not be resolved."
        return section

    def _build_impl_members(self, section: Section, impl: Item) -> None:
        types: list[Section] = []
        consts: list[Section] = []
        methods: list[Section] = []
        for raw_id in impl.inner.get("items") or []:
            member = self.document.get(str(raw_id))
            if member is None:
                context = f"members of {section.qualified_name}"
                path = (*section.path, str(raw_id))
                methods.append(self._placeholder(str(raw_id), str(raw_id), path, context))
                continue
            name = member.name or member.id
            member_section = self._item_section(member, name, (*section.path, name))
            if member.kind == "assoc_type":
                types.append(member_section)
            elif member.kind == "assoc_const":
                consts.append(member_section)
            else:
                methods.append(member_section)
        section.add("Associated Types", types)
        section.add("Associated Constants", consts)
        section.add("Methods", methods)

    def _blanket_section(self, impl: Item, applies_to: str | None) -> Section:
        """Return the shared section of a blanket impl, creating it in the current module."""
        blanket_type = impl.inner.get("blanket_impl") or impl.inner.get("for")
        trait = impl.inner.get("trait")
        trait_name = format_path(trait) if trait else "impl"
        key = f"{trait_name} for {format_type(blanket_type)}"

        section = self._blankets.get(key)
        if section is None:
            owner_path, sink = self._blanket_sinks[-1]
            section = Section(
                ITEM,
                "impl",
                trait_name,
                (*owner_path, f"blanket impl {key}"),
                item=impl,
                item_id=impl.id,
            )
            self._blankets[key] = section
            sink.append(section)
        self._by_id.setdefault(impl.id, section)
        if applies_to is not None and applies_to not in section.applies_to:
            section.applies_to.append(applies_to)
        return section

    # -----------------------------
    # Traits
    # -----------------------------

    def _build_trait(self, section: Section, trait: Item) -> None:
        required: list[Section] = []
        provided: list[Section] = []
        for raw_id in trait.inner.get("items") or []:
            member = self.document.get(str(raw_id))
            if member is None:
                context = f"items of {section.qualified_name}"
                path = (*section.path, str(raw_id))
                required.append(self._placeholder(str(raw_id), str(raw_id), path, context))
                continue
            name = member.name or member.id
            member_section = self._item_section(member, name, (*section.path, name))
            (provided if _is_provided(member) else required).append(member_section)
        section.add("Required Items", required)
        section.add("Provided Items", provided)

        foreign: list[Section] = []
        for raw_id in trait.inner.get("implementations") or []:
            impl_id = str(raw_id)
            section.implementors.append(impl_id)
            impl = self.document.get(impl_id)
            if impl is None:
                self._warn(
                    DanglingReference(impl_id, context=f"implementors of {section.qualified_name}"),
                )
                continue
            if impl.kind != "impl" or impl_id in self._by_id:
                continue
            if is_blanket_impl(impl.kind, impl.inner):
                self._blanket_section(impl, applies_to=None)
            elif self._impl_home(impl) == "trait":
                foreign.append(self._impl_section(impl, section.path))
        foreign.sort(key=lambda s: (s.path[-1], id_sort_key(s.item_id or "")))
        section.add("Implementations on Foreign Types", foreign)

    def _impl_home(self, impl: Item) -> str:
        """Decide where a non-blanket impl is rendered.

        Returns "type" when it is attached to a documented type, "trait" when it
        belongs under its documented local trait, "hidden" when its type is local
        but excluded from the output, and "module" otherwise.
        """
        for_id = principal_path_id(impl.inner.get("for"))
        if for_id is not None:
            owner = self.document.get(for_id)
            if owner is not None and is_type_kind(owner.kind):
                if for_id in self._canonical and impl.id in _impl_ids(owner):
                    return "type"
                if for_id not in self._canonical:
                    return "hidden"
        trait_id = (impl.inner.get("trait") or {}).get("id")
        if trait_id is not None:
            trait = self.document.get(str(trait_id))
            if (
                trait is not None
                and str(trait_id) in self._canonical
                and impl.id in {str(i) for i in trait.inner.get("implementations") or []}
            ):
                return "trait"
        return "module"

    def _module_impls(self, module: Item, path: tuple[str, ...]) -> list[Section]:
        """Build impl blocks listed directly in a module that have no other home."""
        sections = []
        for raw_id in module.inner.get("items") or []:
            impl = self.document.get(str(raw_id))
            if impl is None or impl.kind != "impl" or impl.id in self._by_id:
                continue
            if is_blanket_impl(impl.kind, impl.inner):
                self._blanket_section(impl, applies_to=None)
            elif self._impl_home(impl) == "module":
                sections.append(self._impl_section(impl, path))
        return sections


def _is_provided(member: Item) -> bool:
    """Check if a trait item comes with a default."""
    if member.kind == "function":
        return bool(member.inner.get("has_body"))
    if member.kind == "assoc_const":
        return member.inner.get("value") is not None
    if member.kind == "assoc_type":
        return member.inner.get("type") is not None
    return False


def _impl_ids(type_item: Item) -> set[str]:
    return {str(i) for i in type_item.inner.get("impls") or []}
