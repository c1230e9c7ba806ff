"""Run the external recursive mirror tool (wget) against the source site."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from urllib.parse import urlparse

from .config import ExportConfig
from .errors import MirrorError

logger = logging.getLogger(__name__)

# wget: "Server issued an error response", e.g. a 404 on a favicon.
WGET_SERVER_ERROR = 8


def build_wget_command(config: ExportConfig) -> list[str]:
    host = urlparse(config.source_url).hostname or "localhost"
    return [
        config.wget_bin,
        "--recursive",
        "--no-clobber",
        "--page-requisites",
        "--adjust-extension",
        "--convert-links",
        "--restrict-file-names=windows",
        f"--domains={host}",
        "--no-parent",
        f"--wait={config.wget_wait_sec}",
        "--random-wait",
        f"--timeout={config.wget_timeout_sec}",
        f"--tries={config.wget_tries}",
        f"--directory-prefix={config.output_dir}",
        config.source_url,
    ]


def _has_files(root: Path) -> bool:
    return root.is_dir() and any(p.is_file() for p in root.rglob("*"))


def run_mirror(config: ExportConfig) -> int:
    """Mirror source_url into output_dir. Return the tool's exit status.

    Status 8 only means some requests got an HTTP error (missing assets), so the
    run continues with a warning. Any other failure raises MirrorError.
    """
    cmd = build_wget_command(config)
    logger.info("Mirroring %s into %s", config.source_url, config.output_dir)
    logger.debug("Command: %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, check=False)
    except FileNotFoundError as exc:
        raise MirrorError(f"mirror tool not found: {config.wget_bin}") from exc

    status = result.returncode
    if status == 0:
        return status
    if status != WGET_SERVER_ERROR:
        raise MirrorError(f"{config.wget_bin} exited with status {status}")

    logger.warning("%s exited with status %s (some resources returned HTTP errors); continuing", config.wget_bin, status)
    if not _has_files(config.output_path):
        raise MirrorError(f"{config.wget_bin} exited with status {status} and produced no files")
    return status
