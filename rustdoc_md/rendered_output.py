"""The text artifacts produced by one render."""

from dataclasses import dataclass, field

from rustdoc_md.errors import RenderWarning
from rustdoc_md.unit_planner import INDEX_FILE


@dataclass(frozen=True)
class RenderedOutput:
    """Either one document (single mode) or relative path -> text (multi mode)."""

    mode: str
    text: str = ""
    files: dict[str, str] = field(default_factory=dict)
    warnings: tuple[RenderWarning, ...] = ()

    @property
    def index(self) -> str:
        """Return the index / table-of-contents file of a multi-file render."""
        return self.files.get(INDEX_FILE, "")
