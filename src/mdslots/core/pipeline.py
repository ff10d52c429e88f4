"""Pipeline step functions: music rewrite, hast bridge, slot extraction, and file orchestration"""

import json
import logging
from pathlib import Path
from typing import Optional

from mdslots.config import Settings
from mdslots.core.hast import to_hast
from mdslots.core.minimal import DocumentData
from mdslots.core.models import TransformResult
from mdslots.core.music import rewrite_music_blocks
from mdslots.core.nodes import Root, node_from_dict, node_to_dict
from mdslots.core.parse import discover_files, parse_file, parse_text
from mdslots.core.slots import SLOT_PREFIX, extract_slots


_log = logging.getLogger(__name__)


def transform_hast(
    tree: Root,
    file: Optional[DocumentData] = None,
    prefix: str = SLOT_PREFIX,
    ) -> tuple[Root, DocumentData]:
    """Stage two only: extract slots from an existing hast tree (mutated in place)."""
    file = file if file is not None else DocumentData()
    extract_slots(tree, file, prefix)
    return tree, file


def transform_tree(
    tree: Root,
    file: Optional[DocumentData] = None,
    settings: Optional[Settings] = None,
    ) -> tuple[Root, DocumentData]:
    """Run both stages over an mdast tree. Returns (pruned hast tree, document data)."""
    settings = settings or Settings()
    rewrite_music_blocks(tree, settings.music_lang, settings.score_tag)
    return transform_hast(to_hast(tree), file, settings.slot_prefix)


def _result(slug: str, path: Optional[Path], tree: Root, data: DocumentData) -> TransformResult:
    return TransformResult(
        slug=slug,
        path=str(path) if path else None,
        frontmatter=data.frontmatter,
        tree=node_to_dict(tree),
        slots={name: entry.to_dict() for name, entry in (data.slots or {}).items()},
    )


def transform_markdown(
    text: str,
    settings: Optional[Settings] = None,
    path: Optional[Path] = None,
    ) -> TransformResult:
    """Parse markdown (frontmatter included) and run the full pipeline."""
    settings = settings or Settings()
    parsed = parse_text(text, path, settings.parser_config)
    tree, data = transform_tree(parsed.tree, DocumentData(frontmatter=parsed.frontmatter), settings)
    return _result(parsed.slug, parsed.path, tree, data)


def run_build(
    path: str,
    settings: Settings,
    output_dir: Path,
    ) -> list[tuple[Path, Path]]:
    """Transform markdown under path and write one JSON result per document.

    Returns (source_path, output_file) pairs.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    results = []
    for p in discover_files(Path(path)):
        try:
            parsed = parse_file(p, settings.parser_config)
            tree, data = transform_tree(parsed.tree, DocumentData(frontmatter=parsed.frontmatter), settings)
            result = _result(parsed.slug, p, tree, data)
            out_file = output_dir / f"{result.slug}.json"
            out_file.write_text(result.model_dump_json(indent=settings.indent or None), encoding='utf-8')
            _log.debug("Wrote %s (%d slot(s))", out_file, len(result.slots))
            results.append((p, out_file))
        except Exception as e:
            raise RuntimeError(f"Failed to transform {p}: {e}") from e
    return results


def run_extract(tree_path: Path, prefix: str = SLOT_PREFIX) -> TransformResult:
    """Load a hast JSON tree from disk and run slot extraction on it."""
    try:
        raw = json.loads(tree_path.read_text(encoding='utf-8'))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {tree_path}: {e}") from e

    tree = node_from_dict(raw)
    if not isinstance(tree, Root):
        raise ValueError(f"Expected a 'root' node in {tree_path}, got '{tree.type}'")
    tree, data = transform_hast(tree, prefix=prefix)
    return _result(tree_path.stem, tree_path, tree, data)
