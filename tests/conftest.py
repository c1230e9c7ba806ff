from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture
def site(tmp_path: Path) -> Path:
    root = tmp_path / "static-site"
    root.mkdir()
    return root


@pytest.fixture
def corpus() -> list[dict]:
    return [
        {
            "title": "First post",
            "url": "/first/",
            "excerpt": "An opening note",
            "content": "Welcome to the blog.",
            "tags": ["intro"],
            "date": "2024-01-02T10:00:00+00:00",
        },
        {
            "title": "Tools",
            "url": "/tools/",
            "excerpt": "What I use",
            "content": "A review of every widget on my desk.",
            "tags": [],
            "date": "2024-02-03T10:00:00+00:00",
        },
        {
            "title": "Languages",
            "url": "/languages/",
            "excerpt": "Notes on C++ and c++ templates",
            "content": "Why I keep coming back to C++.",
            "tags": ["c++", "programming"],
            "date": "",
        },
    ]
