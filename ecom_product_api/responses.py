from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional, Set, Tuple, Union
from xml.etree import ElementTree

import xmltodict


@dataclass(frozen=True)
class Failure:
    """
    A request that produced no usable document.
    Falsy, so callers can write ``if not result: ...``.
    """
    reason: str
    ok: ClassVar[bool] = False

    def __bool__(self) -> bool:
        return False


@dataclass(frozen=True)
class TransportFailure(Failure):
    """The HTTP exchange did not complete (connection error, timeout, ...)."""
    url: str = field(default="", repr=False)


@dataclass(frozen=True)
class ParseFailure(Failure):
    """The exchange completed but the body is not well-formed XML."""
    body: str = field(default="", repr=False)
    status: Optional[int] = None


@dataclass(frozen=True)
class ApiResponse:
    """A parsed XML document returned by the service."""

    root: ElementTree.Element
    status: int = 200
    url: str = field(default="", repr=False)
    body: Union[bytes, str] = field(default=b"", repr=False)
    ok: ClassVar[bool] = True

    @property
    def namespace(self) -> Optional[str]:
        return _split_tag(self.root.tag)[0]

    # Paths are matched in any namespace: "Items/Item" finds "{ns}Items/{ns}Item".

    def find(self, path: str) -> Optional[ElementTree.Element]:
        return self.root.find(_any_namespace(path))

    def findall(self, path: str) -> List[ElementTree.Element]:
        return self.root.findall(_any_namespace(path))

    def findtext(self, path: str, default: Optional[str] = None) -> Optional[str]:
        return self.root.findtext(_any_namespace(path), default)

    def to_dict(self) -> Dict[str, Any]:
        """
        The document as plain dicts and lists, namespaces stripped.
        Attributes become ``@name`` keys and element text ``#text``.
        """
        collapse = {ns: None for ns in _namespaces(self.root)}
        return xmltodict.parse(self.body, process_namespaces=True, namespaces=collapse)


ApiResult = Union[ApiResponse, TransportFailure, ParseFailure]


def parse_xml(body: Union[bytes, str], *, status: int = 200, url: str = "") -> Union[ApiResponse, ParseFailure]:
    """
    Parse a response body. Never raises for malformed input; returns ParseFailure instead.
    """
    try:
        root = ElementTree.fromstring(body)
    except (ElementTree.ParseError, LookupError, ValueError) as exc:
        # LookupError: unknown encoding named in the XML declaration
        text = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else body
        return ParseFailure(reason=f"malformed XML: {exc}", body=text, status=status)
    return ApiResponse(root=root, status=status, url=url, body=body)


def _split_tag(tag: str) -> Tuple[Optional[str], str]:
    if tag.startswith("{"):
        ns, _, local = tag[1:].partition("}")
        return ns, local
    return None, tag


def _any_namespace(path: str) -> str:
    segments = []
    for seg in path.split("/"):
        if seg in ("", ".", "..", "*") or seg.startswith("{"):
            segments.append(seg)
        else:
            segments.append("{*}" + seg)
    return "/".join(segments)


def _namespaces(root: ElementTree.Element) -> Set[str]:
    found = set()
    for element in root.iter():
        ns = _split_tag(element.tag)[0]
        if ns:
            found.add(ns)
        found.update(filter(None, (_split_tag(k)[0] for k in element.attrib)))
    return found
