from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List

from ..client import (
    SignedRequestClient,
    item_lookup_query,
    item_search_query,
    similarity_lookup_query,
)
from ..config import ClientConfig, host_for_locale
from ..responses import ApiResponse
from ..signing import QueryParams
from ..utils.logging import setup_logging
from ..utils.loader import load_symbol

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ecom-product-api", description="Product Advertising API client")
    p.add_argument("--config", type=str, help="Path to config JSON", default=None)
    p.add_argument("--locale", type=str, default=None, help="Marketplace locale (us, uk, in, ...)")
    p.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds (default from config)")
    p.add_argument("--insecure", action="store_true",
                   help="Disable TLS certificate verification (only relevant with https)")
    p.add_argument("--exporter", type=str, default=None, help="Exporter dotted path (module:ClassName)")
    p.add_argument("--output", type=str, default=None, help="Output file path (default: print to stdout)")
    p.add_argument("--dry-run", action="store_true", help="Print the signed request URL instead of sending it")
    p.add_argument("--log-level", type=str, default=None, help="Log level (DEBUG, INFO, WARNING, ERROR)")
    p.add_argument("--serve", action="store_true", help="Run REST API server instead of a single request")
    p.add_argument("--host", type=str, default="127.0.0.1", help="API host (when --serve)")
    p.add_argument("--port", type=int, default=8000, help="API port (when --serve)")

    sub = p.add_subparsers(dest="command")
    sub.add_parser("categories", help="List search categories")

    search = sub.add_parser("search", help="ItemSearch by keywords")
    search.add_argument("keywords")
    search.add_argument("--category", default="All", help="Search index (see `categories`)")
    search.add_argument("--page", type=int, default=1)

    lookup = sub.add_parser("lookup", help="ItemLookup with the large response group")
    lookup.add_argument("item_id")
    lookup.add_argument("--id-type", default="ASIN", help="ASIN, SKU, UPC, EAN or ISBN")

    similar = sub.add_parser("similar", help="SimilarityLookup for an item")
    similar.add_argument("item_id")
    return p


def _load_config(args: argparse.Namespace) -> ClientConfig:
    if args.config:
        cfg = ClientConfig.from_file(args.config)
    else:
        cfg = ClientConfig.from_env()

    if args.locale:
        cfg.host = host_for_locale(args.locale)
    if args.timeout is not None:
        cfg.request_timeout = args.timeout
    if args.insecure:
        cfg.verify_ssl = False
    if args.exporter:
        cfg.exporter = args.exporter
    if args.output:
        cfg.output_path = args.output

    cfg.validate()
    return cfg


def _build_query(args: argparse.Namespace) -> QueryParams:
    if args.command == "search":
        return item_search_query(args.keywords, args.category, args.page)
    if args.command == "lookup":
        return item_lookup_query(args.item_id, args.id_type)
    return similarity_lookup_query(args.item_id)


def _emit(response: ApiResponse, cfg: ClientConfig) -> None:
    data = response.to_dict()
    if not cfg.output_path:
        print(json.dumps(data, indent=2, ensure_ascii=False))
        return
    exporter = load_symbol(cfg.exporter)()
    exporter.export(data, cfg.output_path)
    logger.info("HTTP %s | Output: %s", response.status, cfg.output_path)


def run_server(host: str, port: int) -> None:
    try:
        import uvicorn  # type: ignore
    except Exception as exc:  # pragma: no cover - optional dep
        raise SystemExit("To run the API, install dependencies: pip install fastapi uvicorn pydantic") from exc
    uvicorn.run("ecom_product_api.apis.app:app", host=host, port=port)


def run_cli(argv: List[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    if args.serve:
        run_server(args.host, args.port)
        return 0

    if args.command is None:
        parser.print_help(sys.stderr)
        return 2

    if args.command == "categories":
        for name in SignedRequestClient.list_search_categories():
            print(name)
        return 0

    try:
        cfg = _load_config(args)
    except (ValueError, OSError, TypeError) as exc:
        # bad values, unreadable --config, unknown keys in the JSON
        parser.error(str(exc))

    client = SignedRequestClient.from_config(cfg)
    query = _build_query(args)

    if args.dry_run:
        print(client.signed_url(query))
        return 0

    result = client.send(query)
    if not result:
        print(f"error: {type(result).__name__}: {result.reason}", file=sys.stderr)
        return 1

    _emit(result, cfg)
    return 0
