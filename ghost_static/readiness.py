"""Wait for the source CMS to answer before mirroring it."""

from __future__ import annotations

import asyncio
import logging

import aiohttp

from .config import ExportConfig
from .errors import SourceNotReadyError

logger = logging.getLogger(__name__)


async def check_ready(session: aiohttp.ClientSession, url: str, timeout_sec: float) -> bool:
    """Return True when a single GET on url answers HTTP 200."""
    try:
        async with session.get(url, timeout=aiohttp.ClientTimeout(total=timeout_sec)) as resp:
            return resp.status == 200
    except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
        logger.debug("Probe of %s failed: %s", url, exc)
        return False


async def wait_for_ready(config: ExportConfig, session: aiohttp.ClientSession) -> None:
    """Poll source_url until it responds; raise SourceNotReadyError when the budget runs out."""
    logger.info("Waiting for %s to be ready...", config.source_url)
    attempts = max(1, config.max_retries)
    for attempt in range(1, attempts + 1):
        if await check_ready(session, config.source_url, config.probe_timeout_sec):
            logger.info("Source is ready after %s attempt(s)", attempt)
            return
        logger.info("Attempt %s/%s: source not ready, waiting %.1fs", attempt, attempts, config.retry_delay_sec)
        if attempt < attempts:
            await asyncio.sleep(config.retry_delay_sec)
    raise SourceNotReadyError(f"{config.source_url} did not become ready after {attempts} attempts")
