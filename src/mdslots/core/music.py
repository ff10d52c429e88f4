"""Rewrite music-abc fenced code blocks into music score nodes"""

import logging
from typing import Optional

from mdslots.core.nodes import Code, Node, Parent, visit


_log = logging.getLogger(__name__)

MUSIC_LANG = "music-abc"
SCORE_TYPE = "musicScoreCodeBlock"
SCORE_TAG = "music-score"
SCORE_ATTR = "abc"


def make_score_node(value: str, tag: str = SCORE_TAG) -> Parent:
    """Build a score node carrying the raw, unparsed notation under the `abc` key."""
    return Parent(
        type=SCORE_TYPE,
        children=[],
        data={"hName": tag, "hProperties": {SCORE_ATTR: value}},
    )


def rewrite_music_blocks(tree: Node, lang: str = MUSIC_LANG, tag: str = SCORE_TAG) -> Node:
    """Replace every `code` node tagged `lang` with a score node, in place.

    Returns the same tree. Matches without a parent or index are skipped.
    """
    def _replace(node: Node, index: Optional[int], parent: Optional[Parent]) -> None:
        if not isinstance(node, Code) or node.lang != lang:
            return
        if parent is None or index is None:
            return
        parent.children[index] = make_score_node(node.value, tag)
        _log.debug("Rewrote %s block at index %d of %s", lang, index, parent.type)

    visit(tree, "code", _replace)
    return tree
