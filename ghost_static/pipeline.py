"""Export pipeline: wait, mirror, normalize, install client, index.

Stages run strictly in sequence; indexing reads the normalized tree.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

import aiohttp

from .client import install_client
from .config import ExportConfig
from .indexer import build_index, write_index
from .mirror import run_mirror
from .normalize import normalize_tree
from .readiness import wait_for_ready

logger = logging.getLogger(__name__)


def clean_output(output_dir: Path) -> None:
    if output_dir.exists():
        shutil.rmtree(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)


def finalize(config: ExportConfig) -> int:
    """Normalize the mirrored tree and write its search index. Return documents indexed."""
    root = config.output_path
    report = normalize_tree(root, config.host_names, config.domain, config.site_title)
    logger.info(
        "Normalized %s: merged=%s cname=%s placeholder=%s",
        root,
        report.merged_dir,
        report.cname_written,
        report.placeholder_created,
    )
    if config.install_client:
        install_client(root)
    documents = build_index(root)
    write_index(documents, config.index_path)
    return len(documents)


async def run(config: ExportConfig) -> int:
    """Execute all stages. Return process exit code; fatal errors propagate."""
    logger.info("Starting static export with config: %s", config)
    async with aiohttp.ClientSession() as session:
        await wait_for_ready(config, session)

    clean_output(config.output_path)
    status = run_mirror(config)
    documents = finalize(config)

    logger.info(
        "Summary: source=%s output=%s mirror_status=%s documents=%s index=%s",
        config.source_url,
        config.output_dir,
        status,
        documents,
        config.index_path,
    )
    return 0
