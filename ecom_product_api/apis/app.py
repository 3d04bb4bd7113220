from __future__ import annotations

from typing import Any, Dict, List
import logging

try:
    from fastapi import Depends, FastAPI, HTTPException
    from pydantic import BaseModel
except Exception as exc:  # pragma: no cover - optional dependency
    raise RuntimeError(
        "FastAPI not installed. Install with `pip install fastapi pydantic uvicorn` "
        "or avoid using the API server."
    ) from exc

from ..client import SignedRequestClient
from ..config import ClientConfig
from ..responses import ApiResult, TransportFailure
from ..version import __version__

logger = logging.getLogger(__name__)

app = FastAPI(title="ecom_product_api", version=__version__)


class CategoriesResponse(BaseModel):
    categories: List[str]


class DocumentResponse(BaseModel):
    status: int
    document: Dict[str, Any]


def get_client() -> SignedRequestClient:
    try:
        cfg = ClientConfig.from_env()
        cfg.validate()
    except ValueError as exc:
        logger.error("Invalid client configuration: %s", exc)
        raise HTTPException(status_code=503, detail={"error": "config", "reason": str(exc)}) from exc
    return SignedRequestClient.from_config(cfg)


def _document_or_502(result: ApiResult) -> DocumentResponse:
    if not result:
        kind = "transport" if isinstance(result, TransportFailure) else "parse"
        raise HTTPException(status_code=502, detail={"error": kind, "reason": result.reason})
    return DocumentResponse(status=result.status, document=result.to_dict())


@app.get("/health")
async def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/categories", response_model=CategoriesResponse)
async def categories() -> CategoriesResponse:
    return CategoriesResponse(categories=list(SignedRequestClient.list_search_categories()))


@app.get("/search", response_model=DocumentResponse)
async def search(
    keywords: str,
    category: str = "All",
    page: int = 1,
    client: SignedRequestClient = Depends(get_client),
) -> DocumentResponse:
    return _document_or_502(await client.search_items_async(keywords, category, page))


@app.get("/items/{item_id}", response_model=DocumentResponse)
async def lookup(
    item_id: str,
    id_type: str = "ASIN",
    client: SignedRequestClient = Depends(get_client),
) -> DocumentResponse:
    return _document_or_502(await client.lookup_item_async(item_id, id_type))


@app.get("/items/{item_id}/similar", response_model=DocumentResponse)
async def similar(
    item_id: str,
    client: SignedRequestClient = Depends(get_client),
) -> DocumentResponse:
    return _document_or_502(await client.find_similar_items_async(item_id))
