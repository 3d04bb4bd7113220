from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Mapping, Optional, Tuple

from aiohttp import ClientSession

from .categories import SEARCH_INDICES
from .config import ClientConfig
from .responses import ApiResult, TransportFailure, parse_xml
from .signing import Credentials, QueryParams, request_url, signed_query
from .utils.http import TransportError, create_session, fetch_body, strip_query

logger = logging.getLogger(__name__)


# ---- Operation parameters ----------------------------------------------------

def item_search_query(keywords: str, search_index: str, page: int = 1) -> QueryParams:
    return {
        "ResponseGroup": "Medium",
        "Operation": "ItemSearch",
        "Keywords": keywords,
        "SearchIndex": search_index,
        "ItemPage": str(page),
    }


def item_lookup_query(item_id: str, id_type: str) -> QueryParams:
    return {
        "ResponseGroup": "Large,Reviews,EditorialReview",
        "Operation": "ItemLookup",
        "ItemId": item_id,
        "IdType": id_type,
    }


def similarity_lookup_query(item_id: str) -> QueryParams:
    return {
        "ResponseGroup": "Medium",
        "Operation": "SimilarityLookup",
        "ItemId": item_id,
        "MerchantId": "Amazon",
    }


class SignedRequestClient:
    """
    Signs, sends and parses Product Advertising API requests.

    - Credentials are immutable; every call signs its own parameters, so one
      instance may serve concurrent requests.
    - Send methods never raise for transport or XML errors; they return
      TransportFailure / ParseFailure values instead.
    - The ``*_async`` methods are the core; the plain methods run them on a
      fresh event loop and must not be called from inside a running loop.
    """

    def __init__(
        self,
        access_key: str,
        secret_key: str,
        associate_tag: str,
        config: ClientConfig | None = None,
        session: ClientSession | None = None,
    ) -> None:
        self.credentials = Credentials(access_key, secret_key, associate_tag)
        self.config = config or ClientConfig()
        # An injected session belongs to the caller and is never closed here.
        self._session = session

    @classmethod
    def from_config(cls, config: ClientConfig, session: ClientSession | None = None) -> "SignedRequestClient":
        return cls(config.access_key, config.secret_key, config.associate_tag, config=config, session=session)

    @staticmethod
    def list_search_categories() -> Tuple[str, ...]:
        return SEARCH_INDICES

    def signed_url(self, query: Mapping[str, object], *, now: Optional[datetime] = None) -> str:
        cfg = self.config
        canonical = signed_query(self.credentials, query, host=cfg.host, endpoint=cfg.endpoint, now=now)
        return request_url(canonical, scheme=cfg.scheme, host=cfg.host, endpoint=cfg.endpoint)

    # ---- Send routine ----

    async def _send(
        self,
        query: Mapping[str, object],
        timeout: Optional[float],
        session: ClientSession | None,
    ) -> ApiResult:
        cfg = self.config
        url = self.signed_url(query)
        operation = query.get("Operation", "?")
        fetch_kwargs = dict(
            timeout=cfg.request_timeout if timeout is None else timeout,
            user_agent=cfg.user_agent,
            verify_ssl=cfg.verify_ssl,
        )
        logger.debug("%s -> %s", operation, strip_query(url))

        try:
            if session is not None:
                status, body = await fetch_body(session, url, **fetch_kwargs)
            else:
                async with create_session() as own:
                    status, body = await fetch_body(own, url, **fetch_kwargs)
        except TransportError as exc:
            logger.warning("%s request to %s failed: %s", operation, strip_query(url), exc)
            return TransportFailure(reason=str(exc), url=url)

        result = parse_xml(body, status=status, url=url)
        if not result:
            logger.warning("%s response (HTTP %s) could not be parsed: %s", operation, status, result.reason)
        return result

    async def send_async(self, query: Mapping[str, object], timeout: Optional[float] = None) -> ApiResult:
        return await self._send(query, timeout, self._session)

    def send(self, query: Mapping[str, object], timeout: Optional[float] = None) -> ApiResult:
        # A fresh loop cannot reuse a session bound to another loop.
        return asyncio.run(self._send(query, timeout, None))

    # ---- Operations ----

    async def search_items_async(
        self, keywords: str, category_name: str, page: int = 1, timeout: Optional[float] = None
    ) -> ApiResult:
        return await self.send_async(item_search_query(keywords, category_name, page), timeout)

    async def lookup_item_async(self, item_id: str, id_type: str, timeout: Optional[float] = None) -> ApiResult:
        return await self.send_async(item_lookup_query(item_id, id_type), timeout)

    async def find_similar_items_async(self, item_id: str, timeout: Optional[float] = None) -> ApiResult:
        return await self.send_async(similarity_lookup_query(item_id), timeout)

    def search_items(
        self, keywords: str, category_name: str, page: int = 1, timeout: Optional[float] = None
    ) -> ApiResult:
        return self.send(item_search_query(keywords, category_name, page), timeout)

    def lookup_item(self, item_id: str, id_type: str, timeout: Optional[float] = None) -> ApiResult:
        return self.send(item_lookup_query(item_id, id_type), timeout)

    def find_similar_items(self, item_id: str, timeout: Optional[float] = None) -> ApiResult:
        return self.send(similarity_lookup_query(item_id), timeout)
