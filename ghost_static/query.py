"""Substring search over a loaded corpus, plus result rendering.

Mirrors what static/search.js does in the browser: presence match only, and
results keep corpus order.
"""

from __future__ import annotations

import html
import json
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping, Sequence

logger = logging.getLogger(__name__)

NO_RESULTS_HTML = '<div class="search-no-results">No results found</div>'

Entry = Mapping[str, Any]


def load_corpus(path: Path) -> list[dict[str, Any]]:
    """Load search.json. Any failure is logged and yields an empty corpus."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.error("Failed to load search index %s: %s", path, exc)
        return []
    if not isinstance(data, list):
        logger.error("Search index %s is not a JSON array", path)
        return []
    entries = [item for item in data if isinstance(item, dict)]
    logger.debug("Search index loaded: %s entries", len(entries))
    return entries


def haystack(entry: Entry) -> str:
    tags = entry.get("tags") or []
    parts = [
        entry.get("title") or "",
        entry.get("content") or "",
        entry.get("excerpt") or "",
        " ".join(str(t) for t in tags),
    ]
    return " ".join(str(p) for p in parts).lower()


def matches(entry: Entry, query: str) -> bool:
    return query.lower() in haystack(entry)


def search(corpus: Sequence[Entry], query: str) -> list[Entry]:
    if not query.strip():
        return []
    return [entry for entry in corpus if matches(entry, query)]


def highlight(text: str, query: str) -> str:
    """HTML-escape text and wrap every case-insensitive occurrence of query in <mark>."""
    if not query.strip():
        return html.escape(text)
    pieces = re.split(f"({re.escape(query)})", text, flags=re.IGNORECASE)
    out = []
    for i, piece in enumerate(pieces):
        if i % 2:
            out.append(f"<mark>{html.escape(piece)}</mark>")
        else:
            out.append(html.escape(piece))
    return "".join(out)


def format_date(value: str) -> str:
    if not value:
        return ""
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return ""
    return parsed.strftime("%x")


def render_result(entry: Entry, query: str) -> str:
    title = highlight(str(entry.get("title") or ""), query)
    excerpt = highlight(str(entry.get("excerpt") or ""), query)
    url = html.escape(str(entry.get("url") or ""), quote=True)
    parts = [
        '<div class="search-result">',
        f'<h3><a href="{url}">{title}</a></h3>',
        f"<p>{excerpt}</p>",
    ]
    tags = entry.get("tags") or []
    if tags:
        spans = "".join(f'<span class="tag">{html.escape(str(tag))}</span>' for tag in tags)
        parts.append(f'<div class="search-tags">{spans}</div>')
    date = format_date(str(entry.get("date") or ""))
    if date:
        parts.append(f'<time class="search-date">{date}</time>')
    parts.append("</div>")
    return "".join(parts)


def render_results(results: Sequence[Entry], query: str) -> str:
    if not results:
        return NO_RESULTS_HTML
    return "".join(render_result(entry, query) for entry in results)
