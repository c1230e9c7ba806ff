"""Ship the browser search script into an exported tree."""

from __future__ import annotations

import logging
import re
from importlib import resources
from pathlib import Path

from .indexer import iter_html_files

logger = logging.getLogger(__name__)

SCRIPT_NAME = "search.js"
BODY_CLOSE_RE = re.compile(r"</body\s*>", re.IGNORECASE)


def script_source() -> str:
    return resources.files("ghost_static").joinpath("static").joinpath(SCRIPT_NAME).read_text(encoding="utf-8")


def script_tag(rel_path: str) -> str:
    """Return the <script> tag for a page, with a src relative to its depth."""
    depth = rel_path.replace("\\", "/").count("/")
    return f'<script src="{"../" * depth}{SCRIPT_NAME}" defer></script>'


def inject_script(text: str, tag: str) -> str | None:
    """Insert tag before the last </body>. None when already present or no body."""
    if f"{SCRIPT_NAME}\" defer></script>" in text:
        return None
    matches = list(BODY_CLOSE_RE.finditer(text))
    if not matches:
        return None
    pos = matches[-1].start()
    return text[:pos] + tag + "\n" + text[pos:]


def install_client(root: Path, inject: bool = True) -> int:
    """Copy search.js to root and reference it from every indexable page.

    Return the number of pages rewritten.
    """
    (root / SCRIPT_NAME).write_text(script_source(), encoding="utf-8")
    if not inject:
        return 0

    touched = 0
    for path in iter_html_files(root):
        rel = path.relative_to(root).as_posix()
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Cannot add search script to %s: %s", path, exc)
            continue
        updated = inject_script(text, script_tag(rel))
        if updated is None:
            continue
        path.write_text(updated, encoding="utf-8")
        touched += 1
    logger.info("Search script referenced from %s page(s)", touched)
    return touched
