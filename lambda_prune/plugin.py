# lambda_prune/plugin.py
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional

import boto3

from lambda_prune.Keywords import Keywords
from lambda_prune.errors import ConfigurationError, SweepFailed
from lambda_prune.models.policy import PrunePolicy, automatic_keep
from lambda_prune.models.project import ServiceProject
from lambda_prune.models.report import SweepReport
from lambda_prune.services.coordinator import PruneCoordinator
from lambda_prune.services.version_deleter import VersionDeleter
from lambda_prune.services.version_lister import VersionLister
from lambda_prune.utils.aws_clients import lambda_client
from lambda_prune.utils.prune_logger import make_logger


COMMANDS = {
    "prune": {
        "usage": "Clean up deployed functions and/or layers by deleting older versions.",
        "lifecycleEvents": ["prune"],
        "options": {
            "number": {"usage": "Number of previous versions to keep", "shortcut": "n", "required": True},
            "stage": {"usage": "Stage of the service", "shortcut": "s"},
            "region": {"usage": "Region of the service", "shortcut": "r"},
            "function": {"usage": "Function name. Limits cleanup to the specified function", "shortcut": "f"},
            "layer": {"usage": "Layer name. Limits cleanup to the specified Lambda layer", "shortcut": "l"},
            "includeLayers": {"usage": "Boolean flag. Includes the pruning of Lambda layers.", "shortcut": "i"},
            "dryRun": {"usage": "Dry-run. Lists deletion candidates", "shortcut": "d"},
        },
    },
}


class PrunePlugin:
    """
    Entry points into a prune run: the interactive `prune` command and the
    automatic run after a deployment. Both resolve configuration up front and
    hand off to a PruneCoordinator.
    """

    def __init__(
        self,
        project: ServiceProject,
        options: Optional[Dict[str, Any]] = None,
        *,
        client=None,
        log_fn: Optional[Callable[[str], None]] = None,
        session_factory: Callable[..., boto3.Session] = boto3.Session,
    ):
        self.project = project
        self.options = options or {}
        self.verbose = bool(self.options.get("verbose"))
        self.log = make_logger(log_fn, verbose=self.verbose)
        self._client = client
        self._session_factory = session_factory

        self.commands = COMMANDS
        self.hooks = {
            Keywords.PRUNE_EVENT.value: self.prune,
            Keywords.POST_DEPLOY_EVENT.value: self.post_deploy,
        }

    def run_hook(self, event: str):
        handler = self.hooks.get(event)
        if handler is None:
            raise ConfigurationError(f"No handler registered for lifecycle event '{event}'")
        return handler()

    @property
    def client(self):
        if self._client is None:
            self._client = lambda_client(
                profile=self.options.get("profile") or self.project.profile,
                region=self.project.region,
                session_factory=self._session_factory,
            )
        return self._client

    def post_deploy(self) -> List[SweepReport]:
        if self.options.get("noDeploy") is True:
            return []

        keep = automatic_keep(self.options, self.project.settings)
        if keep is None:
            return []

        self.log.info("Running post-deployment pruning")
        return self._run(PrunePolicy.resolve(dict(self.options, number=keep), self.project.settings))

    def prune(self) -> List[SweepReport]:
        return self._run(PrunePolicy.resolve(self.options, self.project.settings))

    def _run(self, policy: PrunePolicy) -> List[SweepReport]:
        function_only = self.options.get("function")
        layer_only = self.options.get("layer")

        # resolve every target before touching the platform
        sweeps = []
        if layer_only and not function_only:
            sweeps.append(("layers", self.project.layer_targets(layer_only)))
        else:
            sweeps.append(("functions", self.project.function_targets(function_only)))
            if policy.include_layers:
                sweeps.append(("layers", self.project.layer_targets(layer_only)))

        coordinator = PruneCoordinator(
            VersionLister(self.client),
            VersionDeleter(self.client, log=self.log),
            keep=policy.keep,
            dry_run=policy.dry_run,
            verbose=self.verbose,
            log=self.log,
        )

        self.log.info("Querying for deployed versions")
        with ThreadPoolExecutor(max_workers=len(sweeps)) as pool:
            futures = [
                pool.submit(
                    coordinator.prune_layers if kind == "layers" else coordinator.prune_functions,
                    targets,
                )
                for kind, targets in sweeps
            ]
        # leaving the pool waits for both sweeps
        reports = []
        failed = False
        for future in futures:
            try:
                reports.append(future.result())
            except SweepFailed as e:
                reports.extend(e.reports)
                failed = True
        if failed:
            raise SweepFailed(reports)

        if policy.dry_run:
            self.log.success("Dry-run complete, no actions taken.")
        else:
            self.log.success("Pruning complete.")
        return reports
