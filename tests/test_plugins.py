from types import SimpleNamespace

import pytest

from dataminer.models import PluginProcessor, ProcessorRegistry
from dataminer.plugins import PluginError, add_plugin, find_plugins, load_plugin


def _register_sample(registry):
    registry.register("sample", PluginProcessor("sample"))


def _register_other(registry):
    registry.register("other", PluginProcessor("other"))


def test_load_plugin_with_register_callable():
    registry = ProcessorRegistry()
    load_plugin(_register_sample, registry)
    assert registry.available() == ["sample"]
    assert registry.get("sample").name == "sample"


def test_load_plugin_with_object_exposing_register_plugin():
    registry = ProcessorRegistry()
    load_plugin(SimpleNamespace(register_plugin=_register_sample), registry)
    assert "sample" in registry


def test_plugin_without_register_function_raises():
    with pytest.raises(PluginError, match="register_plugin"):
        load_plugin(SimpleNamespace(register_plugin=42), ProcessorRegistry())


def test_non_callable_plugin_raises_and_registers_nothing():
    registry = ProcessorRegistry()
    with pytest.raises(PluginError):
        load_plugin(42, registry)
    assert len(registry) == 0


def test_failing_registration_raises_with_cause():
    def broken(registry):
        raise RuntimeError("boom")

    with pytest.raises(PluginError, match="boom") as info:
        load_plugin(broken, ProcessorRegistry())
    assert isinstance(info.value.__cause__, RuntimeError)


def test_find_plugins_returns_added_plugins_in_order():
    group = "dataminer.tests.ordered"
    add_plugin(_register_sample, group)
    add_plugin(_register_other, group)
    assert find_plugins(group) == [_register_sample, _register_other]


def test_add_plugin_works_as_decorator():
    group = "dataminer.tests.decorated"

    @add_plugin.__call__
    def _unused(registry):  # pragma: no cover - never loaded
        pass

    decorated = add_plugin(_register_sample, group)
    assert decorated is _register_sample
    assert find_plugins(group) == [_register_sample]


def test_found_plugins_load_into_registry():
    group = "dataminer.tests.loading"
    add_plugin(SimpleNamespace(register_plugin=_register_sample), group)
    add_plugin(_register_other, group)
    registry = ProcessorRegistry()
    for plugin in find_plugins(group):
        load_plugin(plugin, registry)
    assert sorted(registry.available()) == ["other", "sample"]


def test_find_plugins_in_unknown_group_is_empty(capsys):
    assert find_plugins("dataminer.tests.unused-group") == []
    assert "No plugins found" in capsys.readouterr().err