from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Optional, Dict, Any
import os
import json

from .signing import DEFAULT_ENDPOINT, DEFAULT_HOST
from .version import __version__, CONFIG_SCHEMA_VERSION

#: Marketplace locale -> API host.
MARKETPLACE_HOSTS: Dict[str, str] = {
    "br": "webservices.amazon.com.br",
    "ca": "webservices.amazon.ca",
    "cn": "webservices.amazon.cn",
    "de": "webservices.amazon.de",
    "es": "webservices.amazon.es",
    "fr": "webservices.amazon.fr",
    "in": "webservices.amazon.in",
    "it": "webservices.amazon.it",
    "jp": "webservices.amazon.co.jp",
    "mx": "webservices.amazon.com.mx",
    "uk": "webservices.amazon.co.uk",
    "us": "webservices.amazon.com",
}

DEFAULT_EXPORTER = "ecom_product_api.export.json_exporter:JSONExporter"

_TRUTHY = {"1", "true", "yes", "on"}


def host_for_locale(locale: str) -> str:
    try:
        return MARKETPLACE_HOSTS[locale.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown marketplace locale {locale!r}; expected one of {', '.join(sorted(MARKETPLACE_HOSTS))}"
        ) from None


@dataclass
class ClientConfig:
    """
    Canonical configuration object for the client, CLI and API facade.
    Keep it dataclass-only (no heavy deps) to stay upgrade-friendly.
    """
    schema_version: int = CONFIG_SCHEMA_VERSION
    access_key: str = ""
    secret_key: str = field(default="", repr=False)
    associate_tag: str = ""
    host: str = DEFAULT_HOST
    endpoint: str = DEFAULT_ENDPOINT
    # The service is reached over plain http unless told otherwise.
    scheme: str = "http"
    request_timeout: float = 30.0
    # Certificate verification only matters for scheme="https". Turning it off is insecure.
    verify_ssl: bool = True
    user_agent: str = f"ecom_product_api/{__version__}"
    # Dotted path for the exporter to allow runtime swapping without code changes.
    exporter: str = DEFAULT_EXPORTER
    # Where to write results; None prints to stdout.
    output_path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    # ---------- Loaders ----------

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """
        Build config from environment variables (all optional).
        """
        def _get(name: str, default: str) -> str:
            return os.getenv(name, default)

        host = _get("PAAPI_HOST", "")
        if not host:
            locale = _get("PAAPI_LOCALE", "")
            host = host_for_locale(locale) if locale else DEFAULT_HOST

        return cls(
            access_key=_get("PAAPI_ACCESS_KEY", ""),
            secret_key=_get("PAAPI_SECRET_KEY", ""),
            associate_tag=_get("PAAPI_ASSOCIATE_TAG", ""),
            host=host,
            endpoint=_get("PAAPI_ENDPOINT", DEFAULT_ENDPOINT),
            scheme=_get("PAAPI_SCHEME", "http"),
            request_timeout=float(_get("PAAPI_REQUEST_TIMEOUT", "30.0")),
            verify_ssl=_get("PAAPI_VERIFY_SSL", "true").strip().lower() in _TRUTHY,
            user_agent=_get("PAAPI_USER_AGENT", f"ecom_product_api/{__version__}"),
            exporter=_get("PAAPI_EXPORTER", DEFAULT_EXPORTER),
            output_path=_get("PAAPI_OUTPUT_PATH", "") or None,
        )

    @classmethod
    def from_file(cls, path: str | os.PathLike[str]) -> "ClientConfig":
        """
        Load configuration from a JSON file. Supports schema migration for future versions.
        """
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        data = migrate_config(data)
        return cls(**data)

    # ---------- Validation ----------

    def validate(self) -> None:
        # Credentials are deliberately not checked; the service reports bad ones.
        if not self.host:
            raise ValueError("host cannot be empty")
        if not self.endpoint.startswith("/"):
            raise ValueError("endpoint must start with '/'")
        if self.scheme not in ("http", "https"):
            raise ValueError("scheme must be 'http' or 'https'")
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be > 0")


def migrate_config(raw: Dict[str, Any]) -> Dict[str, Any]:
    """
    Migrate config dict to the latest schema version.
    Keep this pure and additive. Add migrations here as you bump schema.
    """
    raw = dict(raw)
    # A marketplace locale is accepted in place of an explicit host.
    locale = raw.pop("locale", None)
    if locale and "host" not in raw:
        raw["host"] = host_for_locale(locale)

    raw.setdefault("schema_version", CONFIG_SCHEMA_VERSION)
    return raw
