"""Unist-style node tree: typed node classes, JSON conversion, and traversal"""

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union


PropertyValue = Union[str, int, float, bool, None, list[Union[str, int, float]]]
Properties = dict[str, PropertyValue]


@dataclass(kw_only=True)
class Node:
    """Base node. JSON keys with no field of their own ride along in `extra`."""
    type: str
    data: dict[str, Any] = field(default_factory=dict)
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(kw_only=True)
class Literal(Node):
    value: str = ""


@dataclass(kw_only=True)
class Parent(Node):
    children: list[Node] = field(default_factory=list)


@dataclass(kw_only=True)
class Root(Parent):
    type: str = "root"


@dataclass(kw_only=True)
class Element(Parent):
    """An HTML element; the class list lives under properties['className']."""
    type: str = "element"
    tag_name: str
    properties: Properties = field(default_factory=dict)


@dataclass(kw_only=True)
class Text(Literal):
    type: str = "text"


@dataclass(kw_only=True)
class Comment(Literal):
    type: str = "comment"


@dataclass(kw_only=True)
class Doctype(Node):
    type: str = "doctype"


@dataclass(kw_only=True)
class Code(Literal):
    """A fenced or indented code block (mdast)."""
    type: str = "code"
    lang: Optional[str] = None
    meta: Optional[str] = None


@dataclass(kw_only=True)
class Html(Literal):
    """Raw markup not yet parsed into elements (mdast)."""
    type: str = "html"


Visitor = Callable[[Node, Optional[int], Optional[Parent]], None]


def _extra(data: dict[str, Any], *consumed: str) -> dict[str, Any]:
    skip = {"type", "data", *consumed}
    return {k: v for k, v in data.items() if k not in skip}


def _copy_properties(props: Properties) -> Properties:
    return {k: list(v) if isinstance(v, list) else v for k, v in props.items()}


def node_from_dict(data: dict[str, Any]) -> Node:
    """Build a typed node tree from unist JSON (hast or mdast)."""
    if not isinstance(data, dict) or not isinstance(data.get("type"), str):
        raise ValueError(f"Invalid node: expected a mapping with a string 'type', got {data!r:.80}")

    kind = data["type"]
    meta = dict(data.get("data") or {})
    children = [node_from_dict(c) for c in data.get("children") or []]

    if kind == "root":
        return Root(children=children, data=meta, extra=_extra(data, "children"))
    if kind == "element":
        tag_name = data.get("tagName")
        if not isinstance(tag_name, str):
            raise ValueError(f"Invalid element: missing 'tagName' in {data!r:.80}")
        return Element(
            tag_name=tag_name,
            properties=_copy_properties(data.get("properties") or {}),
            children=children,
            data=meta,
            extra=_extra(data, "tagName", "properties", "children"),
        )
    if kind == "text":
        return Text(value=data.get("value", ""), data=meta, extra=_extra(data, "value"))
    if kind == "comment":
        return Comment(value=data.get("value", ""), data=meta, extra=_extra(data, "value"))
    if kind == "doctype":
        return Doctype(data=meta, extra=_extra(data))
    if kind == "code":
        return Code(
            value=data.get("value", ""),
            lang=data.get("lang"),
            meta=data.get("meta"),
            data=meta,
            extra=_extra(data, "value", "lang", "meta"),
        )
    if kind == "html":
        return Html(value=data.get("value", ""), data=meta, extra=_extra(data, "value"))

    if isinstance(data.get("children"), list):
        return Parent(type=kind, children=children, data=meta, extra=_extra(data, "children"))
    if isinstance(data.get("value"), str):
        return Literal(type=kind, value=data["value"], data=meta, extra=_extra(data, "value"))
    return Node(type=kind, data=meta, extra=_extra(data))


def node_to_dict(node: Node) -> dict[str, Any]:
    """Serialize a node tree back to unist JSON."""
    out: dict[str, Any] = {"type": node.type}
    if isinstance(node, Element):
        out["tagName"] = node.tag_name
        out["properties"] = _copy_properties(node.properties)
    if isinstance(node, Code):
        out["lang"] = node.lang
        out["meta"] = node.meta
    if isinstance(node, Literal):
        out["value"] = node.value
    if isinstance(node, Parent):
        out["children"] = [node_to_dict(c) for c in node.children]
    if node.data:
        out["data"] = node.data
    out.update(node.extra)
    return out


def visit(tree: Node, test: str, visitor: Visitor) -> None:
    """Depth-first pre-order walk calling visitor(node, index, parent) for nodes of type `test`.

    Children are read by live index, so the visitor may replace the node at
    `index` one-for-one. The replaced node's own children are still walked.
    """
    def _walk(node: Node, index: Optional[int], parent: Optional[Parent]) -> None:
        if node.type == test:
            visitor(node, index, parent)
        if isinstance(node, Parent):
            i = 0
            while i < len(node.children):
                _walk(node.children[i], i, node)
                i += 1

    _walk(tree, None, None)
