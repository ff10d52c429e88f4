"""Lift top-level meta-* elements out of a hast tree into named minimal-tree slots"""

import logging
from typing import Optional

from mdslots.core.minimal import DocumentData, MinimalChild, MinimalTree, SlotEntry, SlotMap
from mdslots.core.nodes import Comment, Doctype, Element, Node, Parent, Text


_log = logging.getLogger(__name__)

SLOT_PREFIX = "meta-"


def hast_to_minimal(node: Node) -> Optional[MinimalChild]:
    """Convert one hast node to a minimal child; comments, doctypes and unknown kinds give None.

    The input is only read. Properties are copied, and on `code` elements an
    empty className list is dropped from the copy.
    """
    if isinstance(node, (Comment, Doctype)):
        return None
    if isinstance(node, Text):
        return node.value
    if not isinstance(node, Element):
        return None

    props = dict(node.properties)
    if node.tag_name == "code" and props.get("className") == []:
        del props["className"]

    return (node.tag_name, props, *convert_children(node))


def convert_children(node: Parent) -> MinimalTree:
    """Convert a parent's children in order, omitting dropped nodes."""
    converted = (hast_to_minimal(child) for child in node.children)
    return [c for c in converted if c is not None]


def from_hast(element: Element, name: str) -> SlotEntry:
    """Build the slot entry for a slot element; the wrapper itself is not encoded."""
    return SlotEntry(name=name, tree=convert_children(element), props=dict(element.properties))


def extract_slots(
    tree: Parent,
    file: Optional[DocumentData] = None,
    prefix: str = SLOT_PREFIX,
    ) -> SlotMap:
    """Move top-level `<prefix>*` elements of tree into file.slots and return the slot map.

    Only the root's immediate children are scanned. A later element with the
    same derived name overwrites the earlier entry.
    """
    if file is None:
        file = DocumentData()
    if file.slots is None:
        file.slots = {}

    i = 0
    while i < len(tree.children):
        node = tree.children[i]
        if isinstance(node, Element) and node.tag_name.startswith(prefix):
            name = node.tag_name[len(prefix):]
            if name in file.slots:
                _log.debug("Slot %r redefined; keeping the later element", name)
            file.slots[name] = from_hast(node, name)
            del tree.children[i]
            continue
        i += 1

    _log.debug("Extracted %d slot(s)", len(file.slots))
    return file.slots
