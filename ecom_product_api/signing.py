"""
Request signing for the Product Advertising "onca/xml" REST interface.

Every request carries its whole payload in the query string. The query is
canonicalized (keys sorted by byte order, keys and values percent-encoded),
prefixed with the method, host and endpoint, and signed with HMAC-SHA256
keyed by the secret key. The base64 digest travels as the ``Signature``
parameter.

All functions here are pure: they take an immutable ``Credentials`` value and
return new mappings or strings, so one client can sign concurrent requests.
"""
from __future__ import annotations

import base64
import hashlib
import hmac
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Mapping, Optional
from urllib.parse import quote

SERVICE = "AWSECommerceService"
REQUEST_METHOD = "GET"
SIGNATURE_PARAM = "Signature"

DEFAULT_HOST = "webservices.amazon.in"
DEFAULT_ENDPOINT = "/onca/xml"

QueryParams = Dict[str, str]


@dataclass(frozen=True)
class Credentials:
    """Account credentials. The secret key is kept out of ``repr``."""

    access_key: str
    secret_key: str = field(repr=False)
    associate_tag: str

    def common_params(self) -> QueryParams:
        return {
            "Service": SERVICE,
            "AssociateTag": self.associate_tag,
            "AWSAccessKeyId": self.access_key,
        }


def timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 date-time with UTC offset, e.g. ``2024-05-01T10:00:00+00:00``."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.isoformat(timespec="seconds")


def encode(value: object) -> str:
    # Full percent-encoding, then the service's tilde quirk: "~" stays literal.
    return quote(str(value), safe="").replace("%7E", "~")


def canonical_query(params: Mapping[str, object]) -> str:
    """Serialize ``params`` as ``key=value&...`` sorted by the UTF-8 bytes of each key."""
    pairs = sorted(params.items(), key=lambda kv: kv[0].encode("utf-8"))
    return "&".join(f"{encode(k)}={encode(v)}" for k, v in pairs)


def string_to_sign(
    params: Mapping[str, object],
    host: str = DEFAULT_HOST,
    endpoint: str = DEFAULT_ENDPOINT,
) -> str:
    unsigned = {k: v for k, v in params.items() if k != SIGNATURE_PARAM}
    return f"{REQUEST_METHOD}\n{host}\n{endpoint}\n{canonical_query(unsigned)}"


def sign(
    params: Mapping[str, object],
    secret_key: str,
    host: str = DEFAULT_HOST,
    endpoint: str = DEFAULT_ENDPOINT,
) -> str:
    """Return the base64-encoded HMAC-SHA256 signature for ``params``."""
    digest = hmac.new(
        secret_key.encode("utf-8"),
        string_to_sign(params, host, endpoint).encode("utf-8"),
        hashlib.sha256,
    ).digest()
    return base64.b64encode(digest).decode("ascii")


def build_params(
    credentials: Credentials,
    operation_params: Mapping[str, object],
    *,
    now: Optional[datetime] = None,
) -> QueryParams:
    """Merge common parameters, a fresh Timestamp and the operation parameters.

    Operation parameters win on key collision. Values are stringified.
    """
    params = credentials.common_params()
    params["Timestamp"] = timestamp(now)
    params.update({k: str(v) for k, v in operation_params.items()})
    return params


def signed_query(
    credentials: Credentials,
    operation_params: Mapping[str, object],
    *,
    host: str = DEFAULT_HOST,
    endpoint: str = DEFAULT_ENDPOINT,
    now: Optional[datetime] = None,
) -> str:
    """Canonical query string for the request, ``Signature`` included."""
    params = build_params(credentials, operation_params, now=now)
    params[SIGNATURE_PARAM] = sign(params, credentials.secret_key, host, endpoint)
    return canonical_query(params)


def request_url(query: str, *, scheme: str = "http", host: str = DEFAULT_HOST, endpoint: str = DEFAULT_ENDPOINT) -> str:
    return f"{scheme}://{host}{endpoint}?{query}"
