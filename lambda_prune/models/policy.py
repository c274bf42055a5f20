# lambda_prune/models/policy.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from lambda_prune.errors import ConfigurationError


def _parse_number(value: Any) -> Optional[int]:
    """Accept ints and integer-like strings, ignore anything else."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return None


# The `custom.prune` block of the project file
@dataclass(frozen=True)
class PruneSettings:
    number: Optional[int] = None
    automatic: Optional[bool] = None
    include_layers: Optional[bool] = None

    @classmethod
    def from_custom(cls, custom: Optional[Dict[str, Any]]) -> "PruneSettings":
        prune = (custom or {}).get("prune") or {}
        if not isinstance(prune, dict):
            return cls()

        automatic = prune.get("automatic")
        include_layers = prune.get("includeLayers")
        return cls(
            number=_parse_number(prune.get("number")),
            automatic=automatic if isinstance(automatic, bool) else None,
            include_layers=include_layers if isinstance(include_layers, bool) else None,
        )


# Effective retention policy for one invocation
@dataclass(frozen=True)
class PrunePolicy:
    keep: int
    include_layers: bool = False
    dry_run: bool = False

    @classmethod
    def resolve(cls, options: Dict[str, Any], settings: PruneSettings) -> "PrunePolicy":
        """
        An explicit option always wins over the project setting. A missing or
        negative count is rejected here so the selector never sees one.
        """
        keep = _parse_number(options.get("number"))
        if keep is None:
            keep = settings.number
        if keep is None:
            raise ConfigurationError(
                "Number of versions to keep is required: pass --number "
                "or set custom.prune.number"
            )
        if keep < 0:
            raise ConfigurationError(f"Number of versions to keep must be >= 0, got {keep}")

        return cls(
            keep=keep,
            include_layers=bool(options.get("includeLayers") or settings.include_layers),
            dry_run=bool(options.get("dryRun")),
        )


def automatic_keep(options: Dict[str, Any], settings: PruneSettings) -> Optional[int]:
    """
    Count to use after a deployment, or None when automatic pruning is off or
    no count is configured. A negative count is rejected, not ignored.
    """
    if settings.automatic is not True:
        return None
    keep = _parse_number(options.get("number"))
    if keep is None:
        keep = settings.number
    if keep is None:
        return None
    if keep < 0:
        raise ConfigurationError(f"Number of versions to keep must be >= 0, got {keep}")
    return keep


__all__ = ["PruneSettings", "PrunePolicy", "automatic_keep"]
