"""Data models exchanged with document store backends.

These mirror what the store persists: design documents holding named views,
and the rows a view query returns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


class _NoKey:
    """Marker for "no key filter"; None is a valid emitted key."""

    def __repr__(self) -> str:
        return "NO_KEY"


NO_KEY: Any = _NoKey()


@dataclass(frozen=True)
class ViewDefinition:
    """A named view: map function source plus optional reduce source."""

    name: str
    map: str
    reduce: Optional[str] = None


@dataclass
class DesignDocument:
    """Named container of views (one per entity type)."""

    name: str
    views: List[ViewDefinition] = field(default_factory=list)

    def find_view(self, name: str) -> Optional[ViewDefinition]:
        for view in self.views:
            if view.name == name:
                return view
        return None

    def add_view(self, view: ViewDefinition) -> None:
        """Append a view.

        Raises:
            ValueError: If a view with the same name already exists.
        """
        if self.find_view(view.name) is not None:
            raise ValueError(f"View '{view.name}' already exists in design document '{self.name}'")
        self.views.append(view)

    def copy(self) -> "DesignDocument":
        return DesignDocument(name=self.name, views=list(self.views))

    def to_dict(self) -> Dict[str, Any]:
        """Serialize in the store's ``{"views": {name: {"map": ...}}}`` layout."""
        views: Dict[str, Dict[str, str]] = {}
        for view in self.views:
            body = {"map": view.map}
            if view.reduce:
                body["reduce"] = view.reduce
            views[view.name] = body
        return {"name": self.name, "views": views}


@dataclass(frozen=True)
class ViewRow:
    """One row of a view query result.

    ``document`` holds the raw JSON content of the emitting document, or None
    if the document no longer exists.
    """

    id: str
    key: Any = None
    value: Any = None
    document: Optional[str] = None
