from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from ghost_static import mirror
from ghost_static.config import ExportConfig
from ghost_static.errors import MirrorError
from ghost_static.mirror import build_wget_command, run_mirror

from .helpers import write


def fake_run(returncode: int, files: dict[str, str] | None = None, root: Path | None = None):
    def runner(cmd, check=False):
        if files and root is not None:
            for rel, text in files.items():
                write(root, rel, text)
        return subprocess.CompletedProcess(cmd, returncode)

    return runner


def test_command_restricts_to_origin() -> None:
    cmd = build_wget_command(ExportConfig(output_dir="out"))
    assert cmd[0] == "wget"
    assert "--recursive" in cmd
    assert "--convert-links" in cmd
    assert "--restrict-file-names=windows" in cmd
    assert "--domains=localhost" in cmd
    assert "--directory-prefix=out" in cmd
    assert cmd[-1] == "http://localhost:2368"


def test_success(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(mirror.subprocess, "run", fake_run(0))
    assert run_mirror(ExportConfig(output_dir=str(tmp_path))) == 0


def test_server_errors_are_tolerated(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(
        mirror.subprocess, "run", fake_run(8, {"localhost+2368/index.html": "x"}, tmp_path)
    )
    assert run_mirror(ExportConfig(output_dir=str(tmp_path))) == 8


def test_server_errors_with_empty_output_are_fatal(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(mirror.subprocess, "run", fake_run(8))
    with pytest.raises(MirrorError):
        run_mirror(ExportConfig(output_dir=str(tmp_path)))


@pytest.mark.parametrize("status", [1, 3, 4, 5])
def test_other_failures_are_fatal(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, status: int) -> None:
    monkeypatch.setattr(mirror.subprocess, "run", fake_run(status))
    with pytest.raises(MirrorError, match=str(status)):
        run_mirror(ExportConfig(output_dir=str(tmp_path)))


def test_missing_tool_is_fatal(tmp_path: Path) -> None:
    config = ExportConfig(output_dir=str(tmp_path), wget_bin=str(tmp_path / "no-such-wget"))
    with pytest.raises(MirrorError, match="not found"):
        run_mirror(config)
