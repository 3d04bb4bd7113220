from __future__ import annotations

import json
from typing import Any, Dict
from pathlib import Path

from .base import Exporter


class JSONExporter:
    """Writes a converted response document as pretty-printed JSON."""

    def export(self, data: Dict[str, Any], path: str) -> None:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
