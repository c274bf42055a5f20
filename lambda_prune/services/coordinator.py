# lambda_prune/services/coordinator.py
from __future__ import annotations

import logging
from typing import Iterable, Optional

from lambda_prune.Keywords import Keywords
from lambda_prune.errors import PruneError, SweepFailed
from lambda_prune.models.report import ResourceOutcome, SweepReport
from lambda_prune.models.versions import PruneTarget
from lambda_prune.services.retention import select_function_versions, select_layer_versions
from lambda_prune.services.version_deleter import DeletionResult, VersionDeleter
from lambda_prune.services.version_lister import VersionLister
from lambda_prune.utils.prune_logger import PruneLogger, make_logger

logger = logging.getLogger(__name__)


def _plural(count: int, single: str, plural: str) -> str:
    return f"{count} {single if count == 1 else plural}"


class PruneCoordinator:
    """
    Drives list -> select -> delete for each target, one target at a time.

    A failing target is recorded and the sweep moves on; SweepFailed is raised
    once every target has been processed. With dry_run set the deleter is
    never touched.
    """

    def __init__(
        self,
        lister: VersionLister,
        deleter: VersionDeleter,
        *,
        keep: int,
        dry_run: bool = False,
        verbose: bool = False,
        log: Optional[PruneLogger] = None,
    ):
        if keep < 0:
            raise ValueError(f"keep must be >= 0, got {keep}")
        self.lister = lister
        self.deleter = deleter
        self.keep = keep
        self.dry_run = dry_run
        self.verbose = verbose
        self.log = log or make_logger(verbose=verbose)

    # ---- sweeps ----
    def prune_functions(self, targets: Iterable[PruneTarget]) -> SweepReport:
        return self._sweep(Keywords.FUNCTION.value, targets, self._prune_function)

    def prune_layers(self, targets: Iterable[PruneTarget]) -> SweepReport:
        return self._sweep(Keywords.LAYER.value, targets, self._prune_layer)

    def _sweep(self, kind, targets, prune_one) -> SweepReport:
        report = SweepReport(kind=kind, dry_run=self.dry_run)
        for target in targets:
            outcome = ResourceOutcome(name=target.name, kind=kind)
            report.outcomes.append(outcome)
            try:
                prune_one(target, outcome)
            except PruneError as e:
                outcome.error = str(e)
                logger.debug("%s %s failed", kind, target.name, exc_info=True)
                self.log.warning(f"Failed to prune {kind} {target.name}: {e}")

        if report.failed:
            raise SweepFailed([report])
        return report

    # ---- per resource ----
    def _prune_function(self, target: PruneTarget, outcome: ResourceOutcome) -> None:
        versions = self.lister.list_versions(target.name)
        if not versions:
            outcome.deployed = False
            self.log.debug(f"{target.name} is not deployed, nothing to do")
            return
        aliases = self.lister.list_aliases(target.name)

        candidates = select_function_versions(versions, aliases, self.keep)
        outcome.published = sum(1 for v in versions if v.version != Keywords.LATEST_VERSION.value)
        outcome.aliases = len(aliases)
        outcome.selected = list(candidates)

        self.log.info(
            f"{target.name} has {_plural(outcome.published, 'additional version', 'additional versions')} "
            f"published and {_plural(outcome.aliases, 'alias', 'aliases')}, "
            f"{_plural(len(candidates), 'version', 'versions')} selected for deletion"
        )
        self._delete(target, candidates, outcome, self.deleter.delete_function_versions)

    def _prune_layer(self, target: PruneTarget, outcome: ResourceOutcome) -> None:
        versions = self.lister.list_layer_versions(target.name)
        if not versions:
            outcome.deployed = False
            self.log.debug(f"{target.name} is not deployed, nothing to do")
            return

        candidates = select_layer_versions(versions, self.keep)
        outcome.published = len(versions)
        outcome.selected = list(candidates)

        self.log.info(
            f"{target.name} has {_plural(outcome.published, 'version', 'versions')} published, "
            f"{_plural(len(candidates), 'version', 'versions')} selected for deletion"
        )
        self._delete(target, candidates, outcome, self.deleter.delete_layer_versions)

    def _delete(self, target, candidates, outcome, delete) -> None:
        if self.verbose and candidates:
            self.log.debug(f"{target.name} deletion candidates: {', '.join(candidates)}")

        if self.dry_run:
            for version in candidates:
                self.log.info(f"Dry-run: would delete {target.kind} {target.name} v{version}")
            return

        progress = DeletionResult()
        try:
            delete(target.name, candidates, progress)
        finally:
            outcome.deleted = list(progress.deleted)
            outcome.skipped = list(progress.skipped)
