from __future__ import annotations

import asyncio
from typing import Dict, Optional, Tuple
from aiohttp import ClientSession, ClientTimeout
import aiohttp
import logging
from yarl import URL

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """The HTTP exchange did not complete."""


def strip_query(url: str) -> str:
    """Drop the query string (it carries the signature) before logging a URL."""
    return url.split("?", 1)[0]


async def fetch_body(
    session: ClientSession,
    url: str,
    *,
    timeout: float = 30.0,
    user_agent: Optional[str] = None,
    verify_ssl: bool = True,
) -> Tuple[int, bytes]:
    """
    GET a URL once and return ``(status, body)``.

    Any status with a body counts as a completed exchange; the service answers
    errors with XML documents. Connection problems and timeouts raise
    TransportError.
    """
    headers: Dict[str, str] = {}
    if user_agent:
        headers["User-Agent"] = user_agent

    kwargs = {}
    if not verify_ssl:
        kwargs["ssl"] = False

    try:
        # The query is already canonical; stop yarl from re-quoting it.
        async with session.get(URL(url, encoded=True), headers=headers, timeout=ClientTimeout(total=timeout), **kwargs) as resp:
            return resp.status, await resp.read()
    except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
        logger.debug("fetch_body failed for %s: %r", strip_query(url), exc)
        raise TransportError(f"{type(exc).__name__}: {exc}" if str(exc) else type(exc).__name__) from exc


def create_session() -> ClientSession:
    """
    Create an aiohttp ClientSession.
    """
    # Note: caller is responsible for closing the session (use ``async with``).
    connector = aiohttp.TCPConnector(limit=0)
    return aiohttp.ClientSession(connector=connector)
