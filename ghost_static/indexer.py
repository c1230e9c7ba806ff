"""Build search.json from the HTML pages of a normalized tree.

One SearchDocument per page, in depth-first walk order. That order is the only
ranking the client applies, so it is kept stable by sorting names in each
directory.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator

from . import htmldoc

logger = logging.getLogger(__name__)

SKIP_DIRS = {"public", "assets"}
SKIP_FILES = {"404.html"}
CONTENT_SELECTORS = ["main", "article", ".post-content", ".gh-content", ".content"]
NOISE_SELECTORS = ["script", "style"]
CHROME_SELECTORS = ["script", "style", "nav", "footer"]
HEAD_SELECTORS = ["head", "title"]
EXCERPT_CHARS = 200
UNTITLED = "Untitled"


@dataclass(slots=True)
class SearchDocument:
    title: str
    url: str
    excerpt: str
    content: str
    tags: list[str] = field(default_factory=list)
    date: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def iter_html_files(root: Path) -> Iterator[Path]:
    """Yield indexable HTML files under root, depth first."""
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if not d.startswith(".") and d not in SKIP_DIRS)
        for name in sorted(filenames):
            if name.endswith(".html") and name not in SKIP_FILES:
                yield Path(dirpath) / name


def page_url(rel_path: str) -> str:
    """Map a tree-relative file path to the URL a static host serves it at."""
    rel = rel_path.replace("\\", "/").lstrip("/")
    if rel == "index.html":
        return "/"
    if rel.endswith("/index.html"):
        return "/" + rel[: -len("index.html")]
    return "/" + rel


def parse_tags(raw: str) -> list[str]:
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


def make_excerpt(text: str, limit: int = EXCERPT_CHARS) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def extract_body_text(doc: htmldoc.Document) -> str:
    """Plain text of the main content container, or of the page body without chrome."""
    for selector in CONTENT_SELECTORS:
        container = htmldoc.query_one(doc, selector)
        if container is not None:
            htmldoc.remove(container, NOISE_SELECTORS)
            return htmldoc.text_of(container)

    body = htmldoc.query_one(doc, "body")
    if body is None:
        # <body> is optional in HTML5; keep head text out of the page text
        body = doc
        htmldoc.remove(body, HEAD_SELECTORS)
    htmldoc.remove(body, CHROME_SELECTORS)
    return htmldoc.text_of(body)


def extract_document(data: bytes | str, rel_path: str, now: datetime | None = None) -> SearchDocument | None:
    """Extract a SearchDocument from one page, or None if it has no title and no text."""
    doc = htmldoc.parse(data)

    title = htmldoc.text_of(htmldoc.query_one(doc, "title"))
    description = htmldoc.meta_content(doc, name="description") or htmldoc.meta_content(
        doc, prop="og:description"
    )
    tags = parse_tags(htmldoc.meta_content(doc, name="keywords"))
    date = htmldoc.attr(htmldoc.query_one(doc, "time[datetime]"), "datetime")
    content = extract_body_text(doc)

    if not title and not content:
        return None
    if not date:
        date = (now or datetime.now(timezone.utc)).isoformat()

    return SearchDocument(
        title=title or UNTITLED,
        url=page_url(rel_path),
        excerpt=description or make_excerpt(content),
        content=content,
        tags=tags,
        date=date,
    )


def build_index(root: Path) -> list[SearchDocument]:
    """Extract documents for every indexable page; unreadable pages are skipped."""
    now = datetime.now(timezone.utc)
    documents: list[SearchDocument] = []
    skipped = 0
    for path in iter_html_files(root):
        rel = path.relative_to(root).as_posix()
        try:
            document = extract_document(path.read_bytes(), rel, now=now)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Skipping %s: %s", path, exc)
            skipped += 1
            continue
        if document is None:
            logger.debug("No title or text in %s, not indexed", path)
            continue
        documents.append(document)
    logger.info("Indexed %s page(s), skipped %s", len(documents), skipped)
    return documents


def write_index(documents: list[SearchDocument], path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = [doc.to_dict() for doc in documents]
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    logger.info("Wrote %s with %s entries", path, len(payload))
    return path
