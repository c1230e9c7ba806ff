"""Thin query layer over BeautifulSoup.

Extraction code only talks to parse/query/text_of, so the parser behind it can
be swapped without touching the index builder.
"""

from __future__ import annotations

import re
from typing import Iterable

from bs4 import BeautifulSoup
from bs4.element import Tag

Document = BeautifulSoup
Node = Tag

WS_RE = re.compile(r"\s+")


def parse(data: bytes | str) -> Document:
    return BeautifulSoup(data, "html.parser")


def query(node: Node, selector: str) -> list[Node]:
    return list(node.select(selector))


def query_one(node: Node, selector: str) -> Node | None:
    return node.select_one(selector)


def remove(node: Node, selectors: Iterable[str]) -> None:
    """Detach every descendant of node matching any selector."""
    for selector in selectors:
        for child in node.select(selector):
            child.decompose()


def collapse_ws(text: str) -> str:
    return WS_RE.sub(" ", text).strip()


def text_of(node: Node | None) -> str:
    if node is None:
        return ""
    return collapse_ws(node.get_text(" "))


def attr(node: Node | None, name: str) -> str:
    if node is None:
        return ""
    value = node.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    return (value or "").strip()


def meta_content(doc: Document, *, name: str | None = None, prop: str | None = None) -> str:
    """Return the content of <meta name=...> or <meta property=...>, or ""."""
    if name is not None:
        selector = f'meta[name="{name}"]'
    elif prop is not None:
        selector = f'meta[property="{prop}"]'
    else:
        raise ValueError("meta_content needs name or prop")
    return attr(query_one(doc, selector), "content")
