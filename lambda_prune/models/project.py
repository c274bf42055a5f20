# lambda_prune/models/project.py
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from lambda_prune.Keywords import Keywords
from lambda_prune.errors import ConfigurationError
from lambda_prune.models.policy import PruneSettings
from lambda_prune.models.versions import PruneTarget

DEFAULT_STAGE = "dev"
DEFAULT_REGION = "us-east-1"


@dataclass(frozen=True)
class ServiceProject:
    """
    The parts of a serverless.yml project the pruner needs: where it is
    deployed, which functions and layers it owns, and the custom.prune block.
    """
    service: str
    stage: str = DEFAULT_STAGE
    region: str = DEFAULT_REGION
    profile: Optional[str] = None
    functions: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    layers: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    custom: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(
        cls,
        doc: Dict[str, Any],
        *,
        stage: Optional[str] = None,
        region: Optional[str] = None,
    ) -> "ServiceProject":
        if not isinstance(doc, dict):
            raise ConfigurationError("Project configuration must be a mapping")

        service = doc.get("service")
        # service may be written as {name: ...}
        if isinstance(service, dict):
            service = service.get("name")
        if not service:
            raise ConfigurationError("Project configuration is missing 'service'")

        provider = doc.get("provider") or {}
        return cls(
            service=str(service),
            stage=stage or provider.get("stage") or DEFAULT_STAGE,
            region=region or provider.get("region") or DEFAULT_REGION,
            profile=provider.get("profile"),
            functions={k: (v or {}) for k, v in (doc.get("functions") or {}).items()},
            layers={k: (v or {}) for k, v in (doc.get("layers") or {}).items()},
            custom=doc.get("custom") or {},
        )

    @classmethod
    def load(
        cls,
        path: Path,
        *,
        stage: Optional[str] = None,
        region: Optional[str] = None,
    ) -> "ServiceProject":
        path = Path(path)
        if not path.exists():
            raise ConfigurationError(f"project file not found: {path}")
        try:
            with path.open("r", encoding="utf-8") as f:
                doc = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"could not parse {path}: {e}") from e
        return cls.from_dict(doc, stage=stage, region=region)

    @property
    def settings(self) -> PruneSettings:
        return PruneSettings.from_custom(self.custom)

    def function_name(self, key: str) -> str:
        if key not in self.functions:
            raise ConfigurationError(f"Function '{key}' is not defined in service {self.service}")
        return self.functions[key].get("name") or f"{self.service}-{self.stage}-{key}"

    def layer_name(self, key: str) -> str:
        if key not in self.layers:
            raise ConfigurationError(f"Layer '{key}' is not defined in service {self.service}")
        return self.layers[key].get("name") or key

    def function_targets(self, only: Optional[str] = None) -> List[PruneTarget]:
        keys = [only] if only else list(self.functions)
        return [PruneTarget(key=k, name=self.function_name(k), kind=Keywords.FUNCTION.value) for k in keys]

    def layer_targets(self, only: Optional[str] = None) -> List[PruneTarget]:
        keys = [only] if only else list(self.layers)
        return [PruneTarget(key=k, name=self.layer_name(k), kind=Keywords.LAYER.value) for k in keys]


__all__ = ["ServiceProject", "DEFAULT_STAGE", "DEFAULT_REGION"]
