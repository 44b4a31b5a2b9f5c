from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

CREATED = "created"
UPDATED = "updated"
SKIPPED = "skipped"
FAILED = "failed"

STATUSES = (CREATED, UPDATED, SKIPPED, FAILED)


@dataclass(frozen=True)
class RemoteMatch:
    remote_id: Optional[int] = None

    @property
    def found(self) -> bool:
        return self.remote_id is not None


NOT_FOUND = RemoteMatch()


@dataclass(frozen=True)
class SyncOutcome:
    entity_id: Any
    name: Any
    status: str
    remote_id: Optional[int] = None
    error: Optional[str] = None

    def __post_init__(self) -> None:
        if self.status not in STATUSES:
            raise ValueError(f"unknown sync status {self.status!r}")
        if self.status == FAILED and self.remote_id is not None:
            raise ValueError("a failed outcome cannot carry a remote id")
        if self.status in (CREATED, UPDATED) and self.remote_id is None:
            raise ValueError(f"a {self.status} outcome needs a remote id")

    @property
    def succeeded(self) -> bool:
        return self.status in (CREATED, UPDATED)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"id": self.entity_id, "name": self.name, "status": self.status}
        if self.remote_id is not None:
            out["odoo_id"] = self.remote_id
        if self.error is not None:
            out["error"] = self.error
        return out


@dataclass
class SyncSummary:
    entity_type: str
    outcomes: List[SyncOutcome] = field(default_factory=list)
    orphans: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def total_count(self) -> int:
        return len(self.outcomes)

    @property
    def synced_count(self) -> int:
        return sum(1 for o in self.outcomes if o.succeeded)

    @property
    def failed_count(self) -> int:
        return sum(1 for o in self.outcomes if o.status == FAILED)

    @property
    def skipped_count(self) -> int:
        return sum(1 for o in self.outcomes if o.status == SKIPPED)

    @property
    def ok(self) -> bool:
        return self.failed_count == 0

    def failed(self) -> List[SyncOutcome]:
        return [o for o in self.outcomes if o.status == FAILED]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entity_type": self.entity_type,
            "success": True,
            "synced_count": self.synced_count,
            "total_count": self.total_count,
            "failed_count": self.failed_count,
            "skipped_count": self.skipped_count,
            "results": [o.to_dict() for o in self.outcomes],
            "orphans": list(self.orphans),
        }
