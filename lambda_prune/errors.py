# lambda_prune/errors.py
from __future__ import annotations

from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError


class PruneError(RuntimeError):
    """Base class for every failure surfaced to the operator."""


class ConfigurationError(PruneError):
    """Raised before any remote call when the project or options are unusable."""


class RemoteFailure(PruneError):
    """A Lambda API call failed in a way the sweep does not tolerate."""

    def __init__(
        self,
        resource: str,
        operation: str,
        message: str,
        *,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
    ) -> None:
        super().__init__(f"{operation} failed for {resource}: {message}")
        self.resource = resource
        self.operation = operation
        self.message = message
        self.status_code = status_code
        self.code = code

    @classmethod
    def from_boto(cls, resource: str, operation: str, exc: Exception) -> "RemoteFailure":
        if isinstance(exc, ClientError):
            return cls(
                resource,
                operation,
                error_message(exc),
                status_code=status_code(exc),
                code=error_code(exc),
            )
        return cls(resource, operation, str(exc))


class SweepFailed(PruneError):
    """
    Raised once every requested sweep has finished and at least one resource
    failed. `reports` holds every sweep of the run, failed or not.
    """

    def __init__(self, reports) -> None:
        self.reports = list(reports)
        parts = []
        for report in self.reports:
            failed = [o.name for o in report.failed]
            if failed:
                parts.append(f"{report.kind} sweep failed for {len(failed)} resource(s): {', '.join(failed)}")
        super().__init__("; ".join(parts))


# ---- ClientError helpers ----
def status_code(exc: ClientError) -> Optional[int]:
    return exc.response.get("ResponseMetadata", {}).get("HTTPStatusCode")


def error_code(exc: ClientError) -> str:
    return exc.response.get("Error", {}).get("Code", "")


def error_message(exc: ClientError) -> str:
    return exc.response.get("Error", {}).get("Message", "")


def is_not_found(exc: Exception) -> bool:
    if not isinstance(exc, ClientError):
        return False
    return status_code(exc) == 404 or error_code(exc) == "ResourceNotFoundException"


REMOTE_ERRORS = (ClientError, BotoCoreError)

__all__ = [
    "PruneError",
    "ConfigurationError",
    "RemoteFailure",
    "SweepFailed",
    "REMOTE_ERRORS",
    "is_not_found",
]
