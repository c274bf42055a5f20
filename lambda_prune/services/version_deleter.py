# lambda_prune/services/version_deleter.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from botocore.exceptions import ClientError

from lambda_prune.errors import REMOTE_ERRORS, RemoteFailure, error_message, status_code
from lambda_prune.utils.prune_logger import PruneLogger, make_logger

REPLICATED_PREFIX = "Lambda was unable to delete"
REPLICATED_SUFFIX = "because it is a replicated function."


def is_replicated_function_error(exc: Exception) -> bool:
    """Lambda@Edge replicas can't be deleted by region; they go away on their own."""
    if not isinstance(exc, ClientError):
        return False
    message = error_message(exc)
    return (
        status_code(exc) == 400
        and message.startswith(REPLICATED_PREFIX)
        and message.endswith(REPLICATED_SUFFIX)
    )


@dataclass
class DeletionResult:
    deleted: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)


class VersionDeleter:
    """
    Deletes versions one at a time, in the order given.

    Pass `result` to keep track of progress when a deletion fails part way.
    """

    def __init__(self, lambda_client, log: Optional[PruneLogger] = None):
        self._lambda = lambda_client
        self.log = log or make_logger()

    def delete_function_versions(
        self,
        function_name: str,
        versions: Iterable[str],
        result: Optional[DeletionResult] = None,
    ) -> DeletionResult:
        result = result if result is not None else DeletionResult()
        for version in versions:
            self.log.info(f"Deleting Function {function_name} v{version}...")
            try:
                self._lambda.delete_function(FunctionName=function_name, Qualifier=version)
            except REMOTE_ERRORS as e:
                if is_replicated_function_error(e):
                    self.log.warning(f"Unable to delete replicated Lambda@Edge function version {function_name} v{version}...")
                    result.skipped.append(version)
                    continue
                raise RemoteFailure.from_boto(function_name, "delete_function", e) from e
            result.deleted.append(version)
        return result

    def delete_layer_versions(
        self,
        layer_name: str,
        versions: Iterable[str],
        result: Optional[DeletionResult] = None,
    ) -> DeletionResult:
        result = result if result is not None else DeletionResult()
        for version in versions:
            self.log.info(f"Deleting Layer {layer_name} v{version}...")
            try:
                self._lambda.delete_layer_version(LayerName=layer_name, VersionNumber=int(version))
            except REMOTE_ERRORS as e:
                raise RemoteFailure.from_boto(layer_name, "delete_layer_version", e) from e
            result.deleted.append(version)
        return result
