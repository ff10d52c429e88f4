"""Bridge an mdast tree to hast, parsing raw HTML fragments with lxml"""

import copy
import logging
import re
from typing import Optional

from lxml import etree
from lxml import html as lxml_html

from mdslots.core.nodes import Comment, Doctype, Element, Literal, Node, Parent, Properties, Root, Text


_log = logging.getLogger(__name__)

# mdast parents that become a single element with converted children
_ELEMENT_MAP: dict[str, str] = {
    'paragraph':  'p',
    'blockquote': 'blockquote',
    'listItem':   'li',
    'emphasis':   'em',
    'strong':     'strong',
    'delete':     'del',
    'table':      'table',
    'tableRow':   'tr',
}

VOID_ELEMENTS = {
    'area', 'base', 'br', 'col', 'embed', 'hr', 'img', 'input',
    'link', 'meta', 'param', 'source', 'track', 'wbr',
}

_DOCTYPE_RE = re.compile(r'^\s*<!doctype[^>]*>', re.IGNORECASE)
_OPEN_TAG_RE = re.compile(r'^\s*<([A-Za-z][A-Za-z0-9-]*)(?=[\s/>])[^>]*>')
_CLOSE_ONLY_RE = re.compile(r'^\s*</([A-Za-z][A-Za-z0-9-]*)\s*>\s*$')


def _attrs_to_properties(attrib) -> Properties:
    """Map HTML attributes onto hast properties; `class` becomes a className list."""
    props: Properties = {}
    for name, value in attrib.items():
        if name == 'class':
            props['className'] = value.split()
        else:
            props[name] = value
    return props


def _from_lxml(el) -> Node | None:
    if el.tag is etree.Comment:
        return Comment(value=el.text or '')
    if not isinstance(el.tag, str):
        return None      # processing instructions, entities
    children: list[Node] = []
    if el.text:
        children.append(Text(value=el.text))
    for child in el:
        converted = _from_lxml(child)
        if converted is not None:
            children.append(converted)
        if child.tail:
            children.append(Text(value=child.tail))
    return Element(tag_name=el.tag, properties=_attrs_to_properties(el.attrib), children=children)


def parse_raw(markup: str) -> list[Node]:
    """Parse a raw HTML fragment into hast nodes; unparseable markup stays as text."""
    m = _DOCTYPE_RE.match(markup)
    if m:
        return [Doctype(), *parse_raw(markup[m.end():])]
    if not markup.strip():
        return [Text(value=markup)] if markup else []
    try:
        fragments = lxml_html.fragments_fromstring(markup)
    except (etree.ParserError, ValueError) as e:
        _log.debug("Keeping raw fragment as text (%s): %.40r", e, markup)
        return [Text(value=markup)]

    out: list[Node] = []
    for frag in fragments:
        if isinstance(frag, str):
            out.append(Text(value=frag))
            continue
        converted = _from_lxml(frag)
        if converted is not None:
            out.append(converted)
        if frag.tail:
            out.append(Text(value=frag.tail))
    return out


def _raw_value(node: Node) -> Optional[str]:
    if node.type in ('html', 'raw') and isinstance(node, Literal):
        return node.value
    return None


def _tag_balance(markup: str, tag: str) -> int:
    """Number of `tag` elements the markup opens minus the number it closes."""
    name = re.escape(tag)
    opens = len(re.findall(rf'<{name}(?=[\s/>])', markup, re.IGNORECASE))
    closes = len(re.findall(rf'</{name}\s*>', markup, re.IGNORECASE))
    return opens - closes


def _unclosed_tag(markup: str) -> Optional[str]:
    """Return the tag name when markup opens an element it does not close."""
    m = _OPEN_TAG_RE.match(markup)
    if not m or m.group(0).endswith('/>'):
        return None
    tag = m.group(1).lower()
    if tag in VOID_ELEMENTS:
        return None
    return tag if _tag_balance(markup, tag) > 0 else None


def _find_closer(siblings: list[Node], start: int, tag: str) -> Optional[int]:
    """Index of the raw sibling that closes `tag`, counting nested opens."""
    depth = 1
    for j in range(start, len(siblings)):
        value = _raw_value(siblings[j])
        if value is None:
            continue
        depth += _tag_balance(value, tag)
        if depth <= 0:
            return j
    return None


def _join_raw(opener: str, inner: list[Node], closer: str, tag: str) -> Optional[list[Node]]:
    """Rebuild an element whose open and close tags landed in separate raw nodes.

    The nodes between them become the element's children. Returns None when
    the opener does not parse into the expected element.
    """
    nodes = parse_raw(opener)
    target = next((n for n in nodes if isinstance(n, Element) and n.tag_name == tag), None)
    if target is None:
        return None

    last_close = list(re.finditer(rf'</{re.escape(tag)}\s*>', closer, re.IGNORECASE))[-1]
    target.children.extend(_convert_list(inner))
    target.children.extend(parse_raw(closer[:last_close.start()]))
    return nodes + parse_raw(closer[last_close.end():])


def _convert_list(siblings: list[Node]) -> list[Node]:
    """Convert siblings in order, re-joining raw open/close tags split across nodes."""
    out: list[Node] = []
    i = 0
    while i < len(siblings):
        child = siblings[i]
        value = _raw_value(child)
        if value is not None:
            tag = _unclosed_tag(value)
            if tag:
                end = _find_closer(siblings, i + 1, tag)
                if end is not None:
                    joined = _join_raw(value, siblings[i + 1:end], _raw_value(siblings[end]), tag)
                    if joined is not None:
                        out.extend(joined)
                        i = end + 1
                        continue
                _log.warning("Unclosed <%s> in raw HTML; the content after it stays outside", tag)
            elif m := _CLOSE_ONLY_RE.match(value):
                _log.warning("Dropping orphan closing tag </%s>", m.group(1))
                i += 1
                continue
        out.extend(_convert(child))
        i += 1
    return out


def _convert_all(node: Node) -> list[Node]:
    return _convert_list(getattr(node, 'children', []))


def _convert(node: Node) -> list[Node]:
    """Map one mdast node to zero or more hast nodes."""
    if isinstance(node, (Element, Comment, Doctype)):
        return [copy.deepcopy(node)]

    h_name = node.data.get('hName')
    if h_name:
        props = dict(node.data.get('hProperties') or {})
        return [Element(tag_name=h_name, properties=props, children=_convert_all(node))]

    t = node.type
    extra = node.extra

    if t in _ELEMENT_MAP:
        return [Element(tag_name=_ELEMENT_MAP[t], children=_convert_all(node))]
    if t == 'text':
        return [Text(value=node.value)]
    if t == 'heading':
        return [Element(tag_name=f"h{extra.get('depth', 1)}", children=_convert_all(node))]
    if t == 'list':
        props: Properties = {}
        if extra.get('ordered') and extra.get('start') not in (None, 1):
            props['start'] = extra['start']
        tag = 'ol' if extra.get('ordered') else 'ul'
        return [Element(tag_name=tag, properties=props, children=_convert_all(node))]
    if t == 'tableCell':
        return [Element(tag_name='th' if extra.get('header') else 'td', children=_convert_all(node))]
    if t == 'code':
        lang = getattr(node, 'lang', None)
        class_name = [f'language-{lang}'] if lang else []
        code = Element(tag_name='code', properties={'className': class_name}, children=[Text(value=node.value + '\n')])
        return [Element(tag_name='pre', children=[code])]
    if t == 'inlineCode':
        return [Element(tag_name='code', children=[Text(value=node.value)])]
    if t == 'thematicBreak':
        return [Element(tag_name='hr')]
    if t == 'break':
        return [Element(tag_name='br'), Text(value='\n')]
    if t == 'link':
        props = {'href': extra.get('url', '')}
        if extra.get('title'):
            props['title'] = extra['title']
        return [Element(tag_name='a', properties=props, children=_convert_all(node))]
    if t == 'image':
        props = {'src': extra.get('url', ''), 'alt': extra.get('alt', '')}
        if extra.get('title'):
            props['title'] = extra['title']
        return [Element(tag_name='img', properties=props)]
    if t in ('html', 'raw'):
        return parse_raw(node.value)

    if isinstance(node, Parent):
        return _convert_all(node)
    return []


def to_hast(tree: Root) -> Root:
    """Return a new hast Root for an mdast Root; the input is not modified."""
    return Root(children=_convert_all(tree), data=dict(tree.data))
