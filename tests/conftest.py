"""Pytest fixtures for the product API client tests."""

import asyncio
import socket
from datetime import datetime, timezone

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from ecom_product_api.client import SignedRequestClient
from ecom_product_api.config import ClientConfig
from ecom_product_api.signing import Credentials

ITEM_SEARCH_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<ItemSearchResponse xmlns="http://webservices.amazon.com/AWSECommerceService/2011-08-01">
  <Items>
    <TotalResults>2</TotalResults>
    <Item><ASIN>B000000001</ASIN><ItemAttributes><Title>Trail Shoes</Title></ItemAttributes></Item>
    <Item><ASIN>B000000002</ASIN><ItemAttributes><Title>Road Shoes</Title></ItemAttributes></Item>
  </Items>
</ItemSearchResponse>
"""

ERROR_XML = b"""<?xml version="1.0"?>
<ItemLookupErrorResponse xmlns="http://ecs.amazonaws.com/doc/2011-08-01/">
  <Error><Code>InvalidClientTokenId</Code><Message>The AWS Access Key Id you provided does not exist.</Message></Error>
</ItemLookupErrorResponse>
"""

PAAPI_ENV = (
    "PAAPI_ACCESS_KEY",
    "PAAPI_SECRET_KEY",
    "PAAPI_ASSOCIATE_TAG",
    "PAAPI_HOST",
    "PAAPI_LOCALE",
    "PAAPI_ENDPOINT",
    "PAAPI_SCHEME",
    "PAAPI_REQUEST_TIMEOUT",
    "PAAPI_VERIFY_SSL",
    "PAAPI_USER_AGENT",
    "PAAPI_EXPORTER",
    "PAAPI_OUTPUT_PATH",
    "PAAPI_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in PAAPI_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def credentials():
    return Credentials("AKIDEXAMPLE", "secret/key+example", "mytag-21")


@pytest.fixture
def fixed_now():
    return datetime(2024, 5, 1, 10, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def client(credentials):
    return SignedRequestClient(credentials.access_key, credentials.secret_key, credentials.associate_tag)


@pytest.fixture
def closed_port_host():
    """host:port where nothing is listening."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        port = s.getsockname()[1]
    return f"127.0.0.1:{port}"


class FakeService:
    """Scriptable stand-in for the remote endpoint; records every request."""

    def __init__(self) -> None:
        self.body: bytes = ITEM_SEARCH_XML
        self.status: int = 200
        self.delay: float = 0.0
        self.queries = []
        self.raw_queries = []
        self.user_agents = []

    async def handle(self, request: web.Request) -> web.Response:
        self.queries.append(dict(request.query))
        self.raw_queries.append(request.rel_url.raw_query_string)
        self.user_agents.append(request.headers.get("User-Agent"))
        if self.delay:
            await asyncio.sleep(self.delay)
        return web.Response(body=self.body, status=self.status, content_type="text/xml")


@pytest_asyncio.fixture
async def service():
    fake = FakeService()
    app = web.Application()
    app.router.add_get("/onca/xml", fake.handle)
    server = TestServer(app)
    await server.start_server()
    fake.host = f"{server.host}:{server.port}"
    try:
        yield fake
    finally:
        await server.close()


@pytest.fixture
def service_client(credentials):
    """Factory for a client pointed at a FakeService."""

    def _make(service, **overrides):
        cfg = ClientConfig(host=service.host, **overrides)
        return SignedRequestClient(
            credentials.access_key, credentials.secret_key, credentials.associate_tag, config=cfg
        )

    return _make


@pytest.fixture
def item_search_xml():
    return ITEM_SEARCH_XML


@pytest.fixture
def error_xml():
    return ERROR_XML
