"""Minimal tree format, slot entries, and the per-document metadata carrier"""

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from mdslots.core.nodes import Properties


# (tag_name, props, *children); serializes to the minimark array [tag, {props}, ...children]
MinimalNode = tuple
MinimalChild = Union[str, MinimalNode]
MinimalTree = list[MinimalChild]


def minimal_to_json(child: MinimalChild) -> Any:
    """Return a JSON-ready copy of a minimal child (tuples become lists)."""
    if isinstance(child, str):
        return child
    tag, props, *children = child
    return [tag, dict(props), *(minimal_to_json(c) for c in children)]


@dataclass
class SlotEntry:
    """A named region lifted out of the document body."""
    name: str
    tree: MinimalTree = field(default_factory=list)
    props: Properties = field(default_factory=dict)   # the slot element's own attributes

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "props": dict(self.props),
            "type": "minimark",
            "value": [minimal_to_json(c) for c in self.tree],
        }


SlotMap = dict[str, SlotEntry]


@dataclass
class DocumentData:
    """Side-channel output of one transformation run; never part of the tree."""
    slots: Optional[SlotMap] = None
    frontmatter: dict[str, Any] = field(default_factory=dict)
