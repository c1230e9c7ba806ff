"""Search overlay state machine driven against a parsed page.

Same contract as the browser script: initialize() injects the overlay markup
once per document and returns a handle; events are fed in through
handle_key/click/input.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence

from bs4 import BeautifulSoup

from . import htmldoc
from .query import load_corpus, render_results, search

logger = logging.getLogger(__name__)

CONTAINER_CLASS = "search-container"

OVERLAY_MARKUP = """<div class="search-container">
<div class="search-overlay" style="display: none">
<div class="search-modal">
<div class="search-header">
<input type="text" class="search-input" placeholder="{placeholder}" autocomplete="off">
<button class="search-close" aria-label="Close search">&times;</button>
</div>
<div class="search-results"></div>
</div>
</div>
</div>"""


def _style_decls(node: Any) -> list[tuple[str, str]]:
    decls = []
    for part in (node.get("style") or "").split(";"):
        name, sep, value = part.partition(":")
        if sep and name.strip():
            decls.append((name.strip().lower(), value.strip()))
    return decls


def get_style(node: Any, name: str) -> str | None:
    return dict(_style_decls(node)).get(name)


def set_style(node: Any, name: str, value: str | None) -> None:
    """Set or drop one inline declaration, leaving the others alone."""
    decls = [(n, v) for n, v in _style_decls(node) if n != name]
    if value is not None:
        decls.append((name, value))
    if decls:
        node["style"] = "; ".join(f"{n}: {v}" for n, v in decls)
    elif "style" in node.attrs:
        del node["style"]


class State(enum.Enum):
    CLOSED = "closed"
    OPEN = "open"


@dataclass(slots=True)
class EngineConfig:
    index_path: Path | None = None
    trigger_selectors: tuple[str, ...] = (".gh-head-menu", "nav", "header")
    placeholder: str = "Search articles..."
    trigger_label: str = "Search"


class SearchEngine:
    """Handle returned by initialize(). Owns the injected overlay."""

    def __init__(self, document: BeautifulSoup, config: EngineConfig, corpus: Sequence[dict[str, Any]]) -> None:
        self.document = document
        self.config = config
        self.corpus = list(corpus)
        self.state = State.CLOSED
        self.focused: Any = None
        self.saved_overflow: str | None = None
        self.destroyed = False

        body = htmldoc.query_one(document, "body") or document
        markup = OVERLAY_MARKUP.format(placeholder=config.placeholder)
        self.container = htmldoc.parse(markup).find("div")
        body.append(self.container)

        self.overlay = htmldoc.query_one(self.container, ".search-overlay")
        self.input_el = htmldoc.query_one(self.container, ".search-input")
        self.results_el = htmldoc.query_one(self.container, ".search-results")
        self.close_el = htmldoc.query_one(self.container, ".search-close")
        self.trigger = self._attach_trigger()

    def _attach_trigger(self) -> Any:
        for selector in self.config.trigger_selectors:
            host = htmldoc.query_one(self.document, selector)
            if host is None:
                continue
            trigger = self.document.new_tag(
                "button", attrs={"class": "search-trigger", "aria-label": "Open search"}
            )
            trigger.string = self.config.trigger_label
            host.append(trigger)
            return trigger
        logger.debug("No navigation element found; search trigger not rendered")
        return None

    @property
    def is_open(self) -> bool:
        return self.state is State.OPEN

    @property
    def query(self) -> str:
        return self.input_el.get("value", "")

    def _body(self) -> Any:
        return htmldoc.query_one(self.document, "body")

    def open(self) -> None:
        body = self._body()
        if body is not None and not self.is_open:
            self.saved_overflow = get_style(body, "overflow")
            set_style(body, "overflow", "hidden")
        self.overlay["style"] = "display: flex"
        self.state = State.OPEN
        self.focused = self.input_el

    def close(self) -> None:
        body = self._body()
        if body is not None and self.is_open:
            set_style(body, "overflow", self.saved_overflow)
            self.saved_overflow = None
        self.overlay["style"] = "display: none"
        self.state = State.CLOSED
        self.focused = None
        self.input_el["value"] = ""
        self.results_el.clear()

    def destroy(self) -> None:
        """Remove injected markup; the handle is inert afterwards."""
        if self.destroyed:
            return
        self.close()
        self.container.decompose()
        if self.trigger is not None:
            self.trigger.decompose()
        self.destroyed = True

    def input(self, value: str) -> list[dict[str, Any]]:
        """Set the query text and re-render results synchronously."""
        self.input_el["value"] = value
        self.results_el.clear()
        results = search(self.corpus, value)
        if value.strip():
            fragment = htmldoc.parse(render_results(results, value))
            for node in list(fragment.contents):
                self.results_el.append(node.extract())
        return results

    def handle_key(self, key: str, ctrl: bool = False, meta: bool = False) -> bool:
        """Feed a keydown event. Return True when default handling is prevented."""
        if self.destroyed:
            return False
        if (ctrl or meta) and key.lower() == "k":
            self.open()
            return True
        if key == "Escape" and self.is_open:
            self.close()
        return False

    def click(self, target: str) -> None:
        """Feed a click on 'trigger', 'close', 'backdrop' or 'modal'."""
        if self.destroyed:
            return
        if target == "trigger":
            if self.trigger is not None:
                self.open()
        elif target in ("close", "backdrop"):
            self.close()
        elif target != "modal":
            raise ValueError(f"unknown click target: {target}")


def initialize(
    document: BeautifulSoup,
    config: EngineConfig | None = None,
    corpus: Sequence[dict[str, Any]] | None = None,
) -> SearchEngine:
    """Attach a search engine to document. May be called once per document."""
    config = config or EngineConfig()
    if htmldoc.query_one(document, f".{CONTAINER_CLASS}") is not None:
        raise RuntimeError("search engine already initialized for this document")
    if corpus is None:
        corpus = load_corpus(config.index_path) if config.index_path is not None else []
    return SearchEngine(document, config, corpus)
