# lambda_prune/services/version_lister.py
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, TypeVar

from lambda_prune.errors import REMOTE_ERRORS, RemoteFailure, is_not_found
from lambda_prune.models.versions import AliasRecord, VersionRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")


class VersionLister:
    """
    Reads the complete version and alias history of one function or layer.

    Every page is collected before returning. A resource the platform does not
    know about lists as empty.
    """

    def __init__(self, lambda_client):
        self._lambda = lambda_client

    def _collect(
        self,
        operation: str,
        resource: str,
        params: Dict[str, Any],
        result_key: str,
        build: Callable[[Dict[str, Any]], T],
    ) -> List[T]:
        try:
            paginator = self._lambda.get_paginator(operation)
            items: List[T] = []
            pages = 0
            for page in paginator.paginate(**params):
                pages += 1
                for item in page.get(result_key, []):
                    items.append(build(item))
            logger.debug("%s(%s): %d item(s) over %d page(s)", operation, resource, len(items), pages)
            return items
        except REMOTE_ERRORS as e:
            if is_not_found(e):
                logger.debug("%s(%s): not deployed", operation, resource)
                return []
            raise RemoteFailure.from_boto(resource, operation, e) from e

    def list_versions(self, function_name: str) -> List[VersionRecord]:
        return self._collect(
            "list_versions_by_function",
            function_name,
            {"FunctionName": function_name},
            "Versions",
            VersionRecord.from_function_item,
        )

    def list_aliases(self, function_name: str) -> List[AliasRecord]:
        return self._collect(
            "list_aliases",
            function_name,
            {"FunctionName": function_name},
            "Aliases",
            AliasRecord.from_item,
        )

    def list_layer_versions(self, layer_name: str) -> List[VersionRecord]:
        return self._collect(
            "list_layer_versions",
            layer_name,
            {"LayerName": layer_name},
            "LayerVersions",
            VersionRecord.from_layer_item,
        )
