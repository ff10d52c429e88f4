"""File discovery, frontmatter extraction, and markdown-it parsing into an mdast tree"""

import re
from pathlib import Path
from typing import Any, Optional

import yaml
from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode

from mdslots.core.models import ParsedDoc
from mdslots.core.nodes import Code, Html, Literal, Node, Parent, Root, Text
from mdslots.core.utils.slug import slugify


FRONTMATTER_RE = re.compile(r'^---\s*\n(.*?)\n---\s*(?:\n|$)', re.DOTALL)
MD_EXTENSIONS = {'.md', '.mdx'}

# markdown-it container types that map one-to-one onto an mdast parent
_PARENT_TYPES = {
    'paragraph':  'paragraph',
    'blockquote': 'blockquote',
    'list_item':  'listItem',
    'em':         'emphasis',
    'strong':     'strong',
    's':          'delete',
    'table':      'table',
    'tr':         'tableRow',
}


def _make_parser(preset: str) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    return MarkdownIt(preset, options_update={"linkify": False})


def strip_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Return (frontmatter_dict, body) with YAML header removed."""
    m = FRONTMATTER_RE.match(text)
    if m:
        try:
            fm = yaml.safe_load(m.group(1)) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML frontmatter: {e}") from e
        if not isinstance(fm, dict):
            raise ValueError(f"Invalid YAML frontmatter: expected a mapping, got {type(fm).__name__}")
        return fm, text[m.end():]
    return {}, text


def discover_files(path: Path) -> list[Path]:
    """Return sorted .md/.mdx files under path, or [path] if a single file."""
    if path.is_file():
        return [path] if path.suffix in MD_EXTENSIONS else []
    return sorted(p for p in path.rglob('*') if p.suffix in MD_EXTENSIONS)


def _split_info(info: str) -> tuple[Optional[str], Optional[str]]:
    """Split a fence info string into (lang, meta)."""
    parts = info.strip().split(None, 1)
    if not parts:
        return None, None
    return parts[0], parts[1] if len(parts) > 1 else None


def _convert_children(node: SyntaxTreeNode) -> list[Node]:
    out: list[Node] = []
    for child in node.children:
        out.extend(_convert(child))
    return out


def _convert(node: SyntaxTreeNode) -> list[Node]:
    """Map one markdown-it syntax node to zero or more mdast nodes."""
    t = node.type

    if t in _PARENT_TYPES:
        return [Parent(type=_PARENT_TYPES[t], children=_convert_children(node))]
    if t == 'heading':
        return [Parent(type='heading', children=_convert_children(node), extra={'depth': int(node.tag[1:])})]
    if t in ('bullet_list', 'ordered_list'):
        ordered = t == 'ordered_list'
        start = int(node.attrs.get('start', 1)) if ordered else None
        return [Parent(type='list', children=_convert_children(node), extra={'ordered': ordered, 'start': start})]
    if t in ('th', 'td'):
        return [Parent(type='tableCell', children=_convert_children(node), extra={'header': t == 'th'})]
    if t == 'fence':
        lang, meta = _split_info(node.info)
        return [Code(value=node.content.removesuffix('\n'), lang=lang, meta=meta)]
    if t == 'code_block':
        return [Code(value=node.content.removesuffix('\n'))]
    if t in ('html_block', 'html_inline'):
        return [Html(value=node.content.removesuffix('\n'))]
    if t == 'hr':
        return [Node(type='thematicBreak')]
    if t == 'text':
        return [Text(value=node.content)]
    if t == 'softbreak':
        return [Text(value='\n')]
    if t == 'hardbreak':
        return [Node(type='break')]
    if t == 'code_inline':
        return [Literal(type='inlineCode', value=node.content)]
    if t == 'link':
        extra = {'url': node.attrs.get('href', ''), 'title': node.attrs.get('title')}
        return [Parent(type='link', children=_convert_children(node), extra=extra)]
    if t == 'image':
        extra = {'url': node.attrs.get('src', ''), 'alt': node.content, 'title': node.attrs.get('title')}
        return [Node(type='image', extra=extra)]

    # inline, thead, tbody and anything unrecognized: splice children into the parent
    return _convert_children(node)


def parse_markdown(text: str, parser_config: str = 'gfm-like') -> Root:
    """Parse a markdown body into an mdast Root."""
    tokens = _make_parser(parser_config).parse(text)
    return Root(children=_convert_children(SyntaxTreeNode(tokens)))


def parse_text(
    raw: str,
    path: Optional[Path] = None,
    parser_config: str = 'gfm-like',
    ) -> ParsedDoc:
    """Parse raw markdown (frontmatter included) into a ParsedDoc."""
    frontmatter, body = strip_frontmatter(raw)
    fallback = path.stem if path else 'untitled'
    return ParsedDoc(
        path=path,
        slug=str(frontmatter.get('slug') or slugify(fallback)),
        markdown=body,
        frontmatter=frontmatter,
        tree=parse_markdown(body, parser_config),
    )


def parse_file(path: Path, parser_config: str = 'gfm-like') -> ParsedDoc:
    """Parse a single markdown file into a ParsedDoc with an mdast tree."""
    return parse_text(path.read_text(encoding='utf-8'), path, parser_config)
