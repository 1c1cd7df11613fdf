"""Finder declarations and the capability interface used to execute them.

A finder is a named query declared as a (predicate, emit) pair. Finders are
registered explicitly with an accessor as a ``{name: FinderSpec}`` mapping;
each one is backed by a server-side view of the same name.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")

MAP_FUNCTION_TEMPLATE = (
    "function (doc, meta) {{\n"
    "  if ({predicate}) {{\n"
    "    {emit};\n"
    "  }}\n"
    "}}"
)

DEFAULT_EMIT = "emit(meta.id, null)"


@dataclass(frozen=True)
class FinderSpec:
    """Declarative definition of a finder view.

    Attributes:
        predicate: Expression evaluated per document, e.g.
            ``doc.status == "ACTIVE"``.
        emit: Emission statement run when the predicate holds.
    """

    predicate: str
    emit: str = DEFAULT_EMIT

    def __post_init__(self):
        if not self.predicate or not self.predicate.strip():
            raise ValueError("Finder predicate must not be empty")
        if not self.emit or not self.emit.strip():
            raise ValueError("Finder emit expression must not be empty")

    def render_map_function(self) -> str:
        """Render the single-document map function for this finder."""
        return MAP_FUNCTION_TEMPLATE.format(predicate=self.predicate, emit=self.emit)


@runtime_checkable
class FinderExecutor(Protocol[T]):
    """Anything that can run a registered finder by name."""

    def invoke_finder(self, name: str, *args: Any) -> List[T]:
        """Execute a finder and return its rows as entities.

        Args:
            name: Registered finder name.
            *args: Optional view key; one argument is used as the key, several
                form a compound key.

        Returns:
            Entities in the order the store returned them.

        Raises:
            UnannotatedFinderError: If the finder has no cached view.
            DeserializationError: If any row fails to parse.
        """
        ...
