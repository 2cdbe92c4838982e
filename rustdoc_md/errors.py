"""Error taxonomy for the rustdoc JSON to Markdown pipeline.

Fatal problems are exceptions and stop the run. Non-fatal problems are plain
records collected while building and reported once the document is complete.
"""

from dataclasses import dataclass


class RustdocMdError(Exception):
    """Base class for all fatal conversion errors."""


class SchemaVersionMismatch(RustdocMdError):
    """The export declares a format version this tool does not support."""

    def __init__(self, expected: int, found: object) -> None:
        """Record both versions so the message can name them."""
        self.expected = expected
        self.found = found
        super().__init__(
            f"Unsupported rustdoc JSON format version {found!r} "
            f"(this tool supports version {expected})",
        )


class MalformedInput(RustdocMdError):
    """The decoded export is missing required structure."""


class ConfigurationError(RustdocMdError):
    """A configuration value is out of range or of the wrong type."""


class OutputWriteFailure(RustdocMdError):
    """Writing a rendered artifact failed."""

    def __init__(self, path: str, reason: str) -> None:
        """Keep the failing path for the caller."""
        self.path = path
        super().__init__(f"Could not write {path}: {reason}")


@dataclass(frozen=True)
class RenderWarning:
    """A non-fatal problem found while building the section tree."""

    item_id: str

    def describe(self) -> str:
        """Return a one-line, human-readable description."""
        return f"item {self.item_id}"


@dataclass(frozen=True)
class DanglingReference(RenderWarning):
    """An identifier that resolves neither locally nor externally."""

    context: str = ""

    def describe(self) -> str:
        """Return a one-line, human-readable description."""
        where = f" (referenced from {self.context})" if self.context else ""
        return f"Dangling reference to id {self.item_id}{where}"


@dataclass(frozen=True)
class UnsupportedItemKind(RenderWarning):
    """An item whose kind this renderer does not know."""

    kind: str = ""
    name: str | None = None

    def describe(self) -> str:
        """Return a one-line, human-readable description."""
        label = self.name or "<anonymous>"
        return f"Unsupported item kind {self.kind!r} for {label} (id {self.item_id})"
