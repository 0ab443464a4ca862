"""Persist and load draftable field-mapping profiles."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from dfsproj.config import normalize_service
from dfsproj.ingest import DEFAULT_DRAFTABLE_MAPPINGS


@dataclass
class FeedProfile:
    draftable_mappings: Dict[str, Dict[str, str]] = field(default_factory=dict)

    @classmethod
    def load(cls, path: Path) -> "FeedProfile":
        data = json.loads(path.read_text(encoding="utf-8"))
        mappings = data.get("draftable_mappings", {})
        return cls(
            draftable_mappings={normalize_service(service): dict(mapping) for service, mapping in mappings.items()},
        )

    def save(self, path: Path) -> None:
        payload = {"draftable_mappings": self.draftable_mappings}
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    def mapping_for(self, service: str) -> Optional[Dict[str, str]]:
        """Return the profile mapping layered over the service default, if any."""

        key = normalize_service(service)
        override = self.draftable_mappings.get(key)
        if override is None:
            return None
        merged = dict(DEFAULT_DRAFTABLE_MAPPINGS.get(key, {}))
        merged.update(override)
        return merged
