"""Check that an exported tree is ready to deploy."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from .config import ExportConfig

REQUIRED_FIELDS = {"title": str, "url": str, "excerpt": str, "content": str, "date": str, "tags": list}


@dataclass(slots=True)
class VerifyReport:
    ok: list[str] = field(default_factory=list)
    ng: list[str] = field(default_factory=list)
    residual_url_files: list[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.ng


def iter_html(root: Path) -> Iterable[Path]:
    for path in root.rglob("*.html"):
        if path.is_file():
            yield path


def detect_url(path: Path, targets: list[str]) -> bool:
    try:
        with path.open("r", encoding="utf-8", errors="ignore") as f:
            text = f.read()
    except OSError:
        return False
    return any(t in text for t in targets)


def check_index(path: Path, report: VerifyReport) -> None:
    if not path.exists():
        report.ng.append(f"search index not found: {path.name}")
        return
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        report.ng.append(f"failed to load search index: {e}")
        return
    if not isinstance(data, list):
        report.ng.append("search index is not a JSON array")
        return

    urls: set[str] = set()
    for i, item in enumerate(data):
        if not isinstance(item, dict):
            report.ng.append(f"search index entry {i} is not an object")
            continue
        for name, kind in REQUIRED_FIELDS.items():
            if not isinstance(item.get(name), kind):
                report.ng.append(f"search index entry {i} has bad field: {name}")
        url = item.get("url")
        if isinstance(url, str):
            if url in urls:
                report.ng.append(f"duplicate url in search index: {url}")
            urls.add(url)
    report.ok.append(f"search index entries: {len(data)}")


def verify_tree(root: Path, config: ExportConfig) -> VerifyReport:
    report = VerifyReport()
    if not root.is_dir():
        report.ng.append(f"output directory not found: {root}")
        return report

    for name in ("index.html", ".nojekyll"):
        if (root / name).is_file():
            report.ok.append(f"found {name}")
        else:
            report.ng.append(f"missing file: {name}")

    cname = root / "CNAME"
    if config.domain:
        if not cname.is_file():
            report.ng.append("missing file: CNAME")
        elif cname.read_text(encoding="utf-8").strip() != config.domain:
            report.ng.append(f"CNAME does not match domain {config.domain}")
        else:
            report.ok.append(f"CNAME: {config.domain}")

    for name in config.host_names:
        if (root / name).exists():
            report.ng.append(f"host directory still present: {name}")

    check_index(root / config.index_name, report)

    targets = [name for name in config.host_names if ":" in name] or config.host_names
    for path in iter_html(root):
        if detect_url(path, targets):
            report.residual_url_files.append(path.relative_to(root).as_posix())
    if report.residual_url_files:
        report.ng.append(f"residual URL {targets[0]!r} found in {len(report.residual_url_files)} file(s)")
    elif targets:
        report.ok.append(f"no residual URL {targets[0]!r}")

    return report
