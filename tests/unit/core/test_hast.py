"""Unit tests for core/hast.py"""

from mdslots.core.hast import parse_raw, to_hast
from mdslots.core.music import make_score_node
from mdslots.core.nodes import Code, Comment, Doctype, Element, Html, Literal, Node, Parent, Root, Text


def test_paragraph_and_inline_marks():
    tree = Root(children=[Parent(type="paragraph", children=[
        Text(value="a "),
        Parent(type="strong", children=[Text(value="b")]),
        Literal(type="inlineCode", value="c"),
    ])])
    (p,) = to_hast(tree).children
    assert p == Element(tag_name="p", children=[
        Text(value="a "),
        Element(tag_name="strong", children=[Text(value="b")]),
        Element(tag_name="code", children=[Text(value="c")]),
    ])


def test_fenced_code_class_list():
    """Fences become pre > code with a language class, or an empty class list."""
    tree = Root(children=[Code(value="x = 1", lang="python"), Code(value="plain")])
    with_lang, without = to_hast(tree).children
    assert with_lang.tag_name == "pre"
    assert with_lang.children[0].properties == {"className": ["language-python"]}
    assert with_lang.children[0].children == [Text(value="x = 1\n")]
    assert without.children[0].properties == {"className": []}


def test_score_node_becomes_music_score_element():
    """Nodes with an hName hint become that element with hProperties."""
    tree = Root(children=[make_score_node("X:1")])
    assert to_hast(tree).children == [Element(tag_name="music-score", properties={"abc": "X:1"})]


def test_heading_list_and_break():
    tree = Root(children=[
        Parent(type="heading", extra={"depth": 3}, children=[Text(value="H")]),
        Parent(type="list", extra={"ordered": True, "start": 2}, children=[Parent(type="listItem")]),
        Node(type="thematicBreak"),
    ])
    h, ol, hr = to_hast(tree).children
    assert h.tag_name == "h3"
    assert (ol.tag_name, ol.properties) == ("ol", {"start": 2})
    assert ol.children == [Element(tag_name="li")]
    assert hr == Element(tag_name="hr")


def test_to_hast_leaves_input_untouched():
    code = Code(value="plain")
    tree = Root(children=[code])
    to_hast(tree)
    assert tree.children == [code]


def test_parse_raw_custom_element():
    """Raw markup parses into elements; class becomes a className list."""
    (el,) = parse_raw('<meta-box class="x y" id="b">A<em>b</em>c</meta-box>')
    assert el.tag_name == "meta-box"
    assert el.properties == {"className": ["x", "y"], "id": "b"}
    assert el.children == [Text(value="A"), Element(tag_name="em", children=[Text(value="b")]), Text(value="c")]


def test_parse_raw_comment_and_doctype():
    (el,) = parse_raw("<div>a<!-- note --></div>")
    assert el.children == [Text(value="a"), Comment(value=" note ")]
    assert parse_raw("<!DOCTYPE html>") == [Doctype()]


def test_html_nodes_bridge_through_parse_raw():
    tree = Root(children=[Html(value='<meta-side>\nhi\n</meta-side>')])
    (el,) = to_hast(tree).children
    assert el.tag_name == "meta-side"
    assert [c.value.strip() for c in el.children] == ["hi"]


def test_parse_raw_blank_markup():
    assert parse_raw("") == []
    assert parse_raw("  ") == [Text(value="  ")]


def test_parse_raw_doctype_keeps_following_markup():
    """Markup after a doctype is parsed rather than discarded."""
    nodes = parse_raw("<!DOCTYPE html>\n<p>after</p>")
    assert nodes == [Doctype(), Element(tag_name="p", children=[Text(value="after")])]


def _para(text: str) -> Parent:
    return Parent(type="paragraph", children=[Text(value=text)])


def test_split_open_and_close_tags_are_joined():
    """Markdown between a raw opener and its closer becomes the element's children."""
    tree = Root(children=[
        Html(value='<meta-box class="x">'),
        _para("Hello"),
        Html(value="</meta-box>"),
        _para("Out"),
    ])
    box, out = to_hast(tree).children
    assert box == Element(tag_name="meta-box", properties={"className": ["x"]}, children=[
        Element(tag_name="p", children=[Text(value="Hello")]),
    ])
    assert out == Element(tag_name="p", children=[Text(value="Out")])


def test_split_tags_nest_by_depth():
    tree = Root(children=[
        Html(value="<div>"), Html(value='<div class="in">'), _para("x"), Html(value="</div>"), Html(value="</div>"),
    ])
    (outer,) = to_hast(tree).children
    (inner,) = outer.children
    assert inner.properties == {"className": ["in"]}
    assert inner.children == [Element(tag_name="p", children=[Text(value="x")])]


def test_closer_with_leading_content():
    """Content before the closing tag in the same raw node stays inside the element."""
    tree = Root(children=[Html(value="<aside>"), _para("a"), Html(value="<b>b</b></aside>")])
    (aside,) = to_hast(tree).children
    assert [c.tag_name for c in aside.children] == ["p", "b"]


def test_unclosed_opener_warns_and_leaves_siblings(caplog):
    tree = Root(children=[Html(value="<meta-box>"), _para("loose")])
    with caplog.at_level("WARNING", logger="mdslots.core.hast"):
        box, para = to_hast(tree).children
    assert box == Element(tag_name="meta-box")
    assert para.tag_name == "p"
    assert "Unclosed <meta-box>" in caplog.text


def test_orphan_closer_warns_and_is_dropped(caplog):
    tree = Root(children=[_para("a"), Html(value="</meta-box>")])
    with caplog.at_level("WARNING", logger="mdslots.core.hast"):
        children = to_hast(tree).children
    assert [c.tag_name for c in children] == ["p"]
    assert "orphan closing tag </meta-box>" in caplog.text


def test_void_opener_not_treated_as_unclosed(caplog):
    tree = Root(children=[Html(value='<img src="a.png">'), _para("after")])
    with caplog.at_level("WARNING", logger="mdslots.core.hast"):
        img, para = to_hast(tree).children
    assert img.tag_name == "img"
    assert para.tag_name == "p"
    assert caplog.text == ""
