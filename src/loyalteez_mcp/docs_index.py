# docs_index.py
"""
Markdown documentation index with a time-boxed cache.

Files under the docs root become resources addressed as
loyalteez://docs/<relative path without .md>. The index is built lazily on
first access and rebuilt once it is older than the TTL.
"""

import logging
import re
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import yaml

logger = logging.getLogger(__name__)

DOCS_URI_PREFIX = "loyalteez://docs/"
CACHE_TTL_SECONDS = 5 * 60

_FRONTMATTER_RE = re.compile(r"^---\s*\n(.*?)\n---\s*\n(.*)$", re.DOTALL)
_SKIPPED_DIRS = {"node_modules"}


@dataclass
class DocFile:
    path: Path
    uri: str
    title: str
    content: str
    frontmatter: Dict[str, Any] = field(default_factory=dict)
    category: Optional[str] = None

    def render(self) -> str:
        """Title heading, the remaining frontmatter, then the body."""
        text = f"# {self.title}\n\n"
        extra = {k: v for k, v in self.frontmatter.items() if k not in ("title", "label")}
        if extra:
            text += "---\n"
            for key, value in extra.items():
                text += f"{key}: {value}\n"
            text += "---\n\n"
        return text + self.content


def parse_frontmatter(text: str):
    """Split a markdown file into (frontmatter dict, body). Raises yaml.YAMLError on bad YAML."""
    match = _FRONTMATTER_RE.match(text)
    if not match:
        return {}, text
    data = yaml.safe_load(match.group(1)) or {}
    if not isinstance(data, dict):
        raise yaml.YAMLError("frontmatter must be a mapping")
    return data, match.group(2)


def _markdown_files(root: Path) -> List[Path]:
    found = []
    for entry in sorted(root.iterdir()):
        if entry.is_dir():
            if entry.name.startswith(".") or entry.name in _SKIPPED_DIRS:
                continue
            found.extend(_markdown_files(entry))
        elif entry.is_file() and entry.suffix == ".md":
            found.append(entry)
    return found


def load_documentation(docs_root: Path) -> Dict[str, DocFile]:
    index: Dict[str, DocFile] = {}
    if not docs_root.is_dir():
        logger.warning(f"Documentation directory not found: {docs_root}")
        return index

    for path in _markdown_files(docs_root):
        try:
            frontmatter, body = parse_frontmatter(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
            logger.warning(f"Skipping doc file {path}: {e}")
            continue

        relative = path.relative_to(docs_root)
        uri = DOCS_URI_PREFIX + relative.with_suffix("").as_posix()
        title = frontmatter.get("title") or frontmatter.get("label") or path.stem
        index[uri] = DocFile(
            path=path,
            uri=uri,
            title=str(title),
            content=body,
            frontmatter=frontmatter,
            category=relative.parts[0] if len(relative.parts) > 1 else None,
        )

    logger.info(f"Loaded {len(index)} documentation files from {docs_root}")
    return index


class DocsCache:
    """Lazily loaded documentation index that expires after `ttl` seconds."""

    def __init__(
        self,
        docs_root: Path,
        ttl: float = CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.docs_root = Path(docs_root)
        self.ttl = ttl
        self._clock = clock
        self._index: Optional[Dict[str, DocFile]] = None
        self._loaded_at: Optional[float] = None

    def index(self) -> Dict[str, DocFile]:
        now = self._clock()
        if self._index is None or self._loaded_at is None or now - self._loaded_at >= self.ttl:
            self._index = load_documentation(self.docs_root)
            self._loaded_at = now
        return self._index

    def get(self, uri: str) -> Optional[DocFile]:
        return self.index().get(uri)

    def search(self, query: str) -> List[DocFile]:
        needle = query.lower()
        return [
            doc for doc in self.index().values()
            if needle in doc.title.lower() or needle in doc.content.lower() or needle in doc.uri.lower()
        ]

    def clear(self) -> None:
        self._index = None
        self._loaded_at = None

    def stats(self) -> Dict[str, Any]:
        return {
            "cached": self._index is not None,
            "age": self._clock() - self._loaded_at if self._loaded_at is not None else None,
            "docCount": len(self._index) if self._index is not None else 0,
        }
