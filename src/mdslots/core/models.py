"""Intermediate and output data models for the transform pipeline"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel

from mdslots.core.nodes import Root


class TransformResult(BaseModel):
    """Public output contract: the pruned hast tree plus its side-channel slots."""
    slug: str
    path: Optional[str] = None
    frontmatter: dict[str, Any] = {}
    tree: dict[str, Any]                 # hast JSON, slot elements removed
    slots: dict[str, dict[str, Any]] = {}


@dataclass
class ParsedDoc:
    """Internal parse result carrying the mdast tree; not persisted."""
    path:        Optional[Path]
    slug:        str
    markdown:    str               # body only (frontmatter stripped)
    frontmatter: dict[str, Any]
    tree:        Root              # mdast
