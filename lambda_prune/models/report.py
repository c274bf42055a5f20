# lambda_prune/models/report.py
from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional


# Result of one resource's list -> select -> delete pipeline
@dataclass
class ResourceOutcome:
    name: str
    kind: str
    deployed: bool = True
    published: int = 0               # versions excluding $LATEST
    aliases: int = 0
    selected: List[str] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)  # replicated edge versions
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


# Aggregate of one sweep (all functions, or all layers)
@dataclass
class SweepReport:
    kind: str
    dry_run: bool = False
    outcomes: List[ResourceOutcome] = field(default_factory=list)

    @property
    def failed(self) -> List[ResourceOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def deleted_count(self) -> int:
        return sum(len(o.deleted) for o in self.outcomes)

    @property
    def selected_count(self) -> int:
        return sum(len(o.selected) for o in self.outcomes)


# ---- Helpers ----
def to_dict(obj: Any) -> Dict[str, Any]:
    return asdict(obj)


__all__ = ["ResourceOutcome", "SweepReport", "to_dict"]
