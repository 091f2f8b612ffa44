"""Markdown-with-frontmatter document store.

Documents live under the data root and are addressed by relative POSIX paths
such as ``goals/2025/q1/january/week-03.md``. Reads report absence as ``None``;
writes serialize the full document in memory and hand it to an atomic write.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any

import frontmatter
import yaml

from northstar.fileio import read_text, write_text_atomic
from northstar.workspace import data_root

logger = logging.getLogger(__name__)


@dataclass
class Document:
    path: str
    metadata: dict[str, Any] = field(default_factory=dict)
    body: str = ""


def parse_document(text: str, path: str = "") -> Document | None:
    """Split a document into metadata and body. Returns None on malformed YAML."""
    try:
        post = frontmatter.loads(text)
    except yaml.YAMLError as e:
        logger.warning("Malformed frontmatter in %s: %s", path or "<text>", e)
        return None
    metadata = post.metadata if isinstance(post.metadata, dict) else {}
    return Document(path=path, metadata=dict(metadata), body=post.content.strip())


def render_document(metadata: dict[str, Any], body: str) -> str:
    """Serialize metadata + body. Keys with a None value are left out."""
    clean = {k: v for k, v in metadata.items() if v is not None}
    post = frontmatter.Post(body, **clean)
    return frontmatter.dumps(post, sort_keys=False) + "\n"


# ── Paths ─────────────────────────────────────────────────────

def resolve_document_path(path: str, root: Path | None = None) -> Path:
    """Map a relative document path to an absolute path below the root."""
    if root is None:
        root = data_root()
    rel = PurePosixPath(path.replace("\\", "/"))
    if not path or rel.is_absolute():
        raise ValueError(f"Document path must be relative: {path!r}")
    if ".." in rel.parts:
        raise ValueError(f"Path traversal not allowed: {path!r}")
    return root.joinpath(*rel.parts)


# ── Store ─────────────────────────────────────────────────────

def read_document(path: str, root: Path | None = None) -> Document | None:
    full = resolve_document_path(path, root)
    if not full.is_file():
        return None
    return parse_document(read_text(full), path)


def write_document(
    path: str,
    metadata: dict[str, Any],
    body: str,
    root: Path | None = None,
) -> bool:
    """Write a document atomically. Returns False (and logs) on I/O failure."""
    full = resolve_document_path(path, root)
    text = render_document(metadata, body)
    try:
        write_text_atomic(full, text)
    except OSError:
        logger.exception("Error writing document %s", path)
        return False
    return True


def list_documents(prefix: str, root: Path | None = None) -> list[str]:
    """All ``*.md`` documents below ``prefix``, as sorted relative paths."""
    if root is None:
        root = data_root()
    base = resolve_document_path(prefix, root)
    if not base.is_dir():
        return []
    return sorted(
        p.relative_to(root).as_posix()
        for p in base.rglob("*.md")
        if p.is_file() and not p.name.startswith(".tmp_")
    )


def document_exists(path: str, root: Path | None = None) -> bool:
    return resolve_document_path(path, root).is_file()


def delete_document(path: str, root: Path | None = None) -> bool:
    full = resolve_document_path(path, root)
    try:
        full.unlink()
    except FileNotFoundError:
        return False
    except OSError:
        logger.exception("Error deleting document %s", path)
        return False
    return True
