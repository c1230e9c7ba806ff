from __future__ import annotations

import json
import random
from pathlib import Path

import pytest

from ghost_static import htmldoc
from ghost_static.engine import EngineConfig, State, initialize

PAGE = """<!DOCTYPE html><html><head><title>Blog</title></head>
<body><header><nav class="gh-head-menu"><a href="/">Home</a></nav></header><main>Hi</main></body></html>"""


@pytest.fixture
def engine(corpus: list[dict]):
    return initialize(htmldoc.parse(PAGE), corpus=corpus)


def overlay_display(engine) -> str:
    return engine.overlay["style"]


def test_initial_state_is_closed(engine) -> None:
    assert engine.state is State.CLOSED
    assert overlay_display(engine) == "display: none"
    assert htmldoc.query_one(engine.document, "body > .search-container") is not None


def test_trigger_attached_to_cms_menu(engine) -> None:
    menu = htmldoc.query_one(engine.document, ".gh-head-menu")
    assert engine.trigger.parent is menu


def test_trigger_falls_back_to_header() -> None:
    doc = htmldoc.parse("<html><body><header>Top</header></body></html>")
    eng = initialize(doc, corpus=[])
    assert eng.trigger.parent.name == "header"


def test_no_nav_means_no_trigger_but_shortcut_works() -> None:
    doc = htmldoc.parse("<html><body><p>plain</p></body></html>")
    eng = initialize(doc, corpus=[])
    assert eng.trigger is None
    assert htmldoc.query(doc, ".search-trigger") == []
    assert eng.handle_key("k", ctrl=True) is True
    assert eng.is_open


def test_open_locks_scroll_and_focuses(engine) -> None:
    engine.click("trigger")
    assert engine.is_open
    assert overlay_display(engine) == "display: flex"
    assert engine.focused is engine.input_el
    assert engine.document.body["style"] == "overflow: hidden"


def test_cmd_k_prevents_default(engine) -> None:
    assert engine.handle_key("k", meta=True) is True
    assert engine.is_open
    assert engine.handle_key("k") is False


def test_escape_closes_and_clears(engine) -> None:
    engine.open()
    engine.input("widget")
    engine.handle_key("Escape")
    assert engine.state is State.CLOSED
    assert engine.query == ""
    assert engine.results_el.contents == []
    assert "style" not in engine.document.body.attrs


def test_existing_body_style_is_preserved(corpus: list[dict]) -> None:
    doc = htmldoc.parse('<html><body style="background: red; overflow: auto"><nav></nav></body></html>')
    eng = initialize(doc, corpus=corpus)

    eng.open()
    assert doc.body["style"] == "background: red; overflow: hidden"
    eng.open()
    eng.close()
    assert doc.body["style"] == "background: red; overflow: auto"


def test_close_keeps_unrelated_body_style(corpus: list[dict]) -> None:
    doc = htmldoc.parse('<html><body style="background: red"><nav></nav></body></html>')
    eng = initialize(doc, corpus=corpus)

    eng.open()
    eng.close()
    assert doc.body.get("style") == "background: red"


def test_modal_click_keeps_open(engine) -> None:
    engine.open()
    engine.click("modal")
    assert engine.is_open
    engine.click("backdrop")
    assert not engine.is_open


def test_input_renders_matches(engine) -> None:
    engine.open()
    results = engine.input("Widget")
    assert [r["url"] for r in results] == ["/tools/"]
    links = htmldoc.query(engine.results_el, ".search-result a")
    assert [a["href"] for a in links] == ["/tools/"]


def test_input_no_results_state(engine) -> None:
    engine.open()
    engine.input("nothing-like-this")
    assert htmldoc.query_one(engine.results_el, ".search-no-results") is not None


def test_blank_input_renders_nothing(engine) -> None:
    engine.open()
    engine.input("   ")
    assert engine.results_el.contents == []


def test_regex_characters_highlighted(engine) -> None:
    engine.open()
    engine.input("c++")
    marks = [m.get_text() for m in htmldoc.query(engine.results_el, "mark")]
    assert marks == ["C++", "c++"]


def test_initialize_twice_raises(engine) -> None:
    with pytest.raises(RuntimeError):
        initialize(engine.document, corpus=[])


def test_destroy_removes_markup(engine) -> None:
    engine.open()
    engine.destroy()
    assert htmldoc.query(engine.document, ".search-container") == []
    assert htmldoc.query(engine.document, ".search-trigger") == []
    assert engine.handle_key("k", ctrl=True) is False


def test_corpus_loaded_from_index(tmp_path: Path, corpus: list[dict]) -> None:
    path = tmp_path / "search.json"
    path.write_text(json.dumps(corpus), encoding="utf-8")
    eng = initialize(htmldoc.parse(PAGE), EngineConfig(index_path=path))
    assert len(eng.corpus) == 3


def test_missing_index_degrades_to_no_results(tmp_path: Path) -> None:
    eng = initialize(htmldoc.parse(PAGE), EngineConfig(index_path=tmp_path / "missing.json"))
    eng.open()
    assert eng.input("anything") == []
    assert htmldoc.query_one(eng.results_el, ".search-no-results") is not None


def test_state_follows_last_transition(corpus: list[dict]) -> None:
    rng = random.Random(1234)
    actions = {
        "trigger": (lambda e: e.click("trigger"), State.OPEN),
        "shortcut": (lambda e: e.handle_key("k", ctrl=True), State.OPEN),
        "escape": (lambda e: e.handle_key("Escape"), State.CLOSED),
        "backdrop": (lambda e: e.click("backdrop"), State.CLOSED),
        "close": (lambda e: e.click("close"), State.CLOSED),
    }
    eng = initialize(htmldoc.parse(PAGE), corpus=corpus)
    for _ in range(200):
        name = rng.choice(sorted(actions))
        apply, expected = actions[name]
        if eng.is_open:
            eng.input("post")
        apply(eng)
        assert eng.state is expected
        if expected is State.CLOSED:
            assert eng.query == ""
            assert eng.results_el.contents == []
