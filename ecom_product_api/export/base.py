from __future__ import annotations

from typing import Any, Dict, Protocol


class Exporter(Protocol):
    def export(self, data: Dict[str, Any], path: str) -> None:
        ...
