# lambda_prune/services/retention.py
from __future__ import annotations

from typing import Iterable, List

from lambda_prune.Keywords import Keywords
from lambda_prune.models.versions import AliasRecord, VersionRecord


def _newest_first(version_ids: Iterable[str]) -> List[str]:
    # numeric, not lexicographic: "10" is newer than "9"
    return sorted(version_ids, key=int, reverse=True)


def select_function_versions(
    versions: Iterable[VersionRecord],
    aliases: Iterable[AliasRecord],
    keep: int,
) -> List[str]:
    """
    Versions of a function that are safe to delete, newest first.

    $LATEST and every alias target are never candidates; of what remains the
    `keep` most recent survive.
    """
    aliased = {a.function_version for a in aliases}
    eligible = [
        v.version
        for v in versions
        if v.version != Keywords.LATEST_VERSION.value and v.version not in aliased
    ]
    return _newest_first(eligible)[keep:]


def select_layer_versions(versions: Iterable[VersionRecord], keep: int) -> List[str]:
    """Layer versions to delete, newest first. Layers have no $LATEST or aliases."""
    return _newest_first(v.version for v in versions)[keep:]
