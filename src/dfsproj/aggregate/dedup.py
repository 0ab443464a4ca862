"""Per-pass gate that keeps the first eligible record for each draftable UID."""

from __future__ import annotations

from typing import Set

from dfsproj.models import ProjectionRecord


class DedupGate:
    def __init__(self) -> None:
        self._seen: Set[str] = set()
        self.duplicates = 0
        self.ineligible = 0

    def admit(self, record: ProjectionRecord) -> bool:
        if not record.eligible:
            self.ineligible += 1
            return False
        if record.draftable_uid in self._seen:
            self.duplicates += 1
            return False
        self._seen.add(record.draftable_uid)
        return True
