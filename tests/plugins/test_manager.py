"""Tests for PluginManager — registration, hook relay, field aliases."""

from __future__ import annotations

import pluggy
import pytest

from voiceform.plugins.manager import PluginManager

hookimpl = pluggy.HookimplMarker("voiceform")


class _DummyPlugin:
    @hookimpl
    def post_submit(self, values: dict[str, str], accepted: bool) -> None:
        pass


class _AliasPlugin:
    @hookimpl
    def register_field_aliases(self) -> dict[str, list[str]]:
        return {"annualIncome": ["wages"], "occupation": ["line of work"]}


class _MoreAliases:
    @hookimpl
    def register_field_aliases(self) -> dict[str, list[str]]:
        return {"annualIncome": ["earnings"]}


class _BrokenAliases:
    @hookimpl
    def register_field_aliases(self) -> dict[str, list[str]]:
        raise RuntimeError("bad plugin")


class _WrongShape:
    @hookimpl
    def register_field_aliases(self) -> list[str]:
        return ["wages"]


class TestPluginManager:
    def test_register_plugin(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_DummyPlugin(), name="dummy")
        assert "dummy" in pm.list_plugin_names()

    def test_register_plugin_default_name(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_DummyPlugin())
        assert "_DummyPlugin" in pm.list_plugin_names()

    def test_unregister(self) -> None:
        pm = PluginManager()
        plugin = _DummyPlugin()
        pm.register_plugin(plugin, name="dummy")
        pm.unregister(plugin)
        assert "dummy" not in pm.list_plugin_names()

    def test_is_loaded(self) -> None:
        pm = PluginManager()
        assert pm.is_loaded is False
        pm.discover_and_load()
        assert pm.is_loaded is True

    @pytest.mark.parametrize(
        "hook_name",
        [
            "post_field_set",
            "post_field_clear",
            "post_form_clear",
            "post_focus",
            "post_submit",
            "post_listening_change",
            "register_field_aliases",
        ],
    )
    def test_hookspecs_registered(self, hook_name: str) -> None:
        assert hasattr(PluginManager().hook, hook_name)

    def test_entry_point_classes_are_instantiated(self) -> None:
        pm = PluginManager()
        pm._pm.register(_AliasPlugin, name="alias-class")
        pm._normalize_plugin_instances()
        assert pm.collect_field_aliases()["occupation"] == ["line of work"]


class TestCollectFieldAliases:
    def test_merges_contributions(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_AliasPlugin())
        pm.register_plugin(_MoreAliases())
        merged = pm.collect_field_aliases()
        assert sorted(merged["annualIncome"]) == ["earnings", "wages"]
        assert merged["occupation"] == ["line of work"]

    def test_no_plugins(self) -> None:
        assert PluginManager().collect_field_aliases() == {}

    def test_broken_plugin_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        pm = PluginManager()
        pm.register_plugin(_BrokenAliases())
        pm.register_plugin(_AliasPlugin())
        with caplog.at_level("WARNING"):
            merged = pm.collect_field_aliases()
        assert merged["annualIncome"] == ["wages"]
        assert "Failed to collect field aliases" in caplog.text

    def test_wrong_shape_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        pm = PluginManager()
        pm.register_plugin(_WrongShape())
        with caplog.at_level("WARNING"):
            assert pm.collect_field_aliases() == {}
        assert "non-dict" in caplog.text
