# lambda_prune/models/versions.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


# One published version as reported by the Lambda API
@dataclass(frozen=True)
class VersionRecord:
    version: str                         # item["Version"], always a string
    arn: str = ''                        # FunctionArn / LayerVersionArn
    description: Optional[str] = None
    last_modified: Optional[str] = None  # LastModified / CreatedDate

    @classmethod
    def from_function_item(cls, item: Dict[str, Any]) -> "VersionRecord":
        """Map one ListVersionsByFunction item."""
        return cls(
            version=str(item["Version"]),
            arn=item.get("FunctionArn", ''),
            description=item.get("Description"),
            last_modified=item.get("LastModified"),
        )

    @classmethod
    def from_layer_item(cls, item: Dict[str, Any]) -> "VersionRecord":
        """Map one ListLayerVersions item. Layer versions come back as ints."""
        return cls(
            version=str(item["Version"]),
            arn=item.get("LayerVersionArn", ''),
            description=item.get("Description"),
            last_modified=item.get("CreatedDate"),
        )


# A named pointer bound to exactly one function version
@dataclass(frozen=True)
class AliasRecord:
    name: str
    function_version: str
    description: Optional[str] = None

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> "AliasRecord":
        return cls(
            name=item.get("Name", ''),
            function_version=str(item["FunctionVersion"]),
            description=item.get("Description"),
        )


# A configured resource: project key plus its deployed platform name
@dataclass(frozen=True)
class PruneTarget:
    key: str
    name: str
    kind: str  # Keywords.FUNCTION.value | Keywords.LAYER.value


__all__ = ["VersionRecord", "AliasRecord", "PruneTarget"]
