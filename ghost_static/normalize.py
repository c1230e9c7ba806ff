"""Repair a raw mirror into a tree that static hosts can serve as-is.

Every stage is idempotent and skips itself when its precondition is absent, so
running normalize_tree twice leaves the same tree.
"""

from __future__ import annotations

import html
import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)

PLACEHOLDER_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
  <title>{title}</title>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
</head>
<body>
  <h1>{title}</h1>
  <p>This site is being set up. Please check back soon!</p>
</body>
</html>
"""


@dataclass(slots=True)
class NormalizeReport:
    merged_dir: str | None = None
    cname_written: bool = False
    placeholder_created: bool = False


def _remove(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


def denest_host_dir(root: Path, host_names: Iterable[str]) -> Path | None:
    """Move the contents of a host-named subdirectory into root.

    Colliding destinations are replaced wholesale. Returns the merged directory,
    or None when no candidate exists.
    """
    for name in host_names:
        source = root / name
        if not source.is_dir():
            continue
        moved = 0
        for entry in sorted(source.iterdir()):
            dest = root / entry.name
            if dest.exists() or dest.is_symlink():
                _remove(dest)
            shutil.move(str(entry), str(dest))
            moved += 1
        shutil.rmtree(source)
        logger.info("Merged %s entries from %s into %s", moved, source, root)
        return source
    logger.debug("No host directory (%s) under %s", ", ".join(host_names), root)
    return None


def write_nojekyll(root: Path) -> Path:
    path = root / ".nojekyll"
    path.write_text("", encoding="utf-8")
    return path


def write_cname(root: Path, domain: str) -> Path | None:
    if not domain:
        return None
    path = root / "CNAME"
    path.write_text(domain, encoding="utf-8")
    logger.info("Created CNAME file for domain: %s", domain)
    return path


def ensure_entry_point(root: Path, site_title: str = "Ghost Blog") -> bool:
    """Write a placeholder index.html if the tree has none. Return True if created."""
    path = root / "index.html"
    if path.exists():
        return False
    logger.warning("No index.html found in %s, creating a placeholder", root)
    path.write_text(PLACEHOLDER_TEMPLATE.format(title=html.escape(site_title)), encoding="utf-8")
    return True


def normalize_tree(
    root: Path,
    host_names: Iterable[str],
    domain: str = "",
    site_title: str = "Ghost Blog",
) -> NormalizeReport:
    """Run all normalization stages on root."""
    root.mkdir(parents=True, exist_ok=True)
    report = NormalizeReport()
    merged = denest_host_dir(root, list(host_names))
    if merged is not None:
        report.merged_dir = merged.name
    write_nojekyll(root)
    report.cname_written = write_cname(root, domain) is not None
    report.placeholder_created = ensure_entry_point(root, site_title)
    return report
