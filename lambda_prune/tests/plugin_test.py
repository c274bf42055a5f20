# tests/plugin_test.py
import pytest

from lambda_prune.errors import ConfigurationError, SweepFailed
from lambda_prune.models.project import ServiceProject
from lambda_prune.plugin import PrunePlugin
from lambda_prune.tests.fakes import FakeLambda, client_error


def _project(custom=None):
    return ServiceProject.from_dict({
        "service": "svc",
        "provider": {"stage": "dev"},
        "functions": {"A": {}, "B": {}, "C": {}},
        "layers": {"deps": {}, "extra": {"name": "svc-extra"}},
        "custom": custom or {},
    })


def _platform():
    fake = FakeLambda()
    for key in ("A", "B", "C"):
        fake.add_function(f"svc-dev-{key}", [1, 2, 3, 4, 5])
    fake.add_layer("deps", [1, 2, 3])
    fake.add_layer("svc-extra", [1, 2, 3])
    return fake


def _plugin(options, custom=None, fake=None):
    messages = []
    plugin = PrunePlugin(_project(custom), options, client=fake or _platform(), log_fn=messages.append)
    return plugin, messages


def test_hooks_table():
    plugin, _ = _plugin({})

    assert "prune" in plugin.commands
    assert "prune" in plugin.commands["prune"]["lifecycleEvents"]
    assert callable(plugin.hooks["prune:prune"])
    assert callable(plugin.hooks["after:deploy:deploy"])

    with pytest.raises(ConfigurationError):
        plugin.run_hook("before:package:cleanup")


def test_prune_functions_only_by_default():
    fake = _platform()
    plugin, messages = _plugin({"number": 2}, fake=fake)

    reports = plugin.run_hook("prune:prune")

    assert [r.kind for r in reports] == ["function"]
    for key in ("A", "B", "C"):
        assert fake.surviving(f"svc-dev-{key}") == ["$LATEST", "4", "5"]
    assert fake.surviving("deps") == ["1", "2", "3"]
    assert messages[-1] == "Prune: Pruning complete."


def test_single_function_filter():
    fake = _platform()
    plugin, _ = _plugin({"number": 1, "function": "A"}, fake=fake)

    plugin.prune()

    assert {c[1] for c in fake.deletes()} == {"svc-dev-A"}


def test_include_layers_runs_both_sweeps():
    fake = _platform()
    plugin, _ = _plugin({"number": 1, "includeLayers": True}, fake=fake)

    reports = plugin.prune()

    assert sorted(r.kind for r in reports) == ["function", "layer"]
    assert fake.surviving("deps") == ["3"]
    assert fake.surviving("svc-extra") == ["3"]


def test_include_layers_from_custom():
    fake = _platform()
    plugin, _ = _plugin({"number": 1}, custom={"prune": {"includeLayers": True}}, fake=fake)

    plugin.prune()

    assert fake.surviving("deps") == ["3"]


def test_layer_filter_skips_functions():
    fake = _platform()
    plugin, _ = _plugin({"number": 0, "layer": "extra"}, fake=fake)

    reports = plugin.prune()

    assert [r.kind for r in reports] == ["layer"]
    assert fake.surviving("svc-extra") == []
    assert fake.surviving("deps") == ["1", "2", "3"]
    assert not any(c[0] == "delete_function" for c in fake.deletes())


def test_dry_run():
    fake = _platform()
    plugin, messages = _plugin({"number": 0, "dryRun": True, "includeLayers": True}, fake=fake)

    plugin.prune()

    assert fake.deletes() == []
    assert messages[-1] == "Prune: Dry-run complete, no actions taken."


def test_configuration_errors_before_remote_calls():
    fake = _platform()

    plugin, _ = _plugin({}, fake=fake)
    with pytest.raises(ConfigurationError):
        plugin.prune()

    plugin, _ = _plugin({"number": 1, "function": "unknown"}, fake=fake)
    with pytest.raises(ConfigurationError):
        plugin.prune()

    assert fake.calls == []


def test_function_sweep_failure_does_not_stop_layer_sweep():
    fake = _platform()
    fake.delete_errors[("svc-dev-B", "1")] = client_error(500, "ServiceException", "boom")
    plugin, _ = _plugin({"number": 1, "includeLayers": True}, fake=fake)

    with pytest.raises(SweepFailed) as info:
        plugin.prune()

    functions, layers = info.value.reports
    assert functions.kind == "function" and [o.name for o in functions.failed] == ["svc-dev-B"]
    assert layers.kind == "layer" and layers.failed == [] and layers.deleted_count == 4
    assert fake.surviving("svc-dev-C") == ["$LATEST", "5"]
    assert fake.surviving("deps") == ["3"]


def test_both_sweeps_failing_are_both_reported():
    fake = _platform()
    fake.delete_errors[("svc-dev-A", "4")] = client_error(500, "ServiceException", "boom")
    fake.delete_errors[("deps", 2)] = client_error(500, "ServiceException", "boom")
    plugin, _ = _plugin({"number": 1, "includeLayers": True}, fake=fake)

    with pytest.raises(SweepFailed) as info:
        plugin.prune()

    assert [len(r.failed) for r in info.value.reports] == [1, 1]
    assert "function sweep failed" in str(info.value)
    assert "layer sweep failed" in str(info.value)
    # the other layer still got pruned
    assert fake.surviving("svc-extra") == ["3"]


def test_post_deploy_runs_when_enabled():
    fake = _platform()
    plugin, messages = _plugin({}, custom={"prune": {"automatic": True, "number": 3}}, fake=fake)

    plugin.run_hook("after:deploy:deploy")

    assert "Prune: Running post-deployment pruning" in messages
    assert fake.surviving("svc-dev-A") == ["$LATEST", "3", "4", "5"]


def test_post_deploy_option_overrides_number():
    fake = _platform()
    plugin, _ = _plugin({"number": 1}, custom={"prune": {"automatic": True, "number": 3}}, fake=fake)

    plugin.post_deploy()

    assert fake.surviving("svc-dev-A") == ["$LATEST", "5"]


@pytest.mark.parametrize("options,custom", [
    ({}, {"prune": {"automatic": True}}),
    ({}, {"prune": {"number": 2}}),
    ({}, {"prune": {"automatic": "true", "number": 2}}),
    ({"noDeploy": True}, {"prune": {"automatic": True, "number": 2}}),
    ({}, {}),
])
def test_post_deploy_noop(options, custom):
    fake = _platform()
    plugin, messages = _plugin(options, custom=custom, fake=fake)

    assert plugin.post_deploy() == []
    assert fake.calls == []
    assert messages == []


def test_post_deploy_rejects_negative_override():
    fake = _platform()
    plugin, messages = _plugin({"number": -1}, custom={"prune": {"automatic": True, "number": 1}}, fake=fake)

    with pytest.raises(ConfigurationError):
        plugin.post_deploy()

    assert fake.calls == []
    assert messages == []
