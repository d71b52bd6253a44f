"""Tests for the process entry point, plugin and provider registries."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from playerhub import global_api, plugins, providers
from playerhub.api import Api
from playerhub.engine import BaseEngine
from playerhub.global_api import PlayerHub, get_hub, select_player, set_hub
from playerhub.observability import PlayerCreated
from playerhub.page import Element, PageContext
from playerhub.plugins import PluginRegistrar
from playerhub.providers import Provider


class TestSelectPlayer:
    def test_creates_then_finds(self):
        player = select_player("main")
        assert isinstance(player, Api)
        assert player.unique_id >= 1
        assert select_player("main") is player
        assert select_player() is player
        assert select_player(0) is player

    def test_element_query(self):
        element = Element("video", {"class": "hero"})
        player = select_player(element)
        assert select_player(Element("video")) is player

    def test_unresolvable_returns_registrar(self):
        result = select_player(1.5)
        assert isinstance(result, PluginRegistrar)
        assert not hasattr(result, "setup")
        assert result.query == 1.5

    def test_empty_registry(self):
        assert isinstance(select_player(), PluginRegistrar)

    def test_empty_string_selects_first(self):
        first = select_player("main")
        assert select_player("") is first
        assert len(get_hub().registry) == 1

    def test_index_out_of_range(self):
        select_player("a")
        assert isinstance(select_player(3), PluginRegistrar)

    def test_closed_page(self):
        hub = set_hub(PlayerHub(page=PageContext(elements={"known": Element("known")})))
        assert isinstance(hub("ghost"), PluginRegistrar)
        assert isinstance(hub("known"), Api)

    def test_created_event(self):
        with patch("playerhub.global_api.emit") as mock_emit:
            select_player("a")
            select_player("b")
            select_player("a")
        created = [c[0][0] for c in mock_emit.call_args_list]
        assert all(isinstance(e, PlayerCreated) for e in created)
        assert [(e.dom_id, e.live_instances) for e in created] == [("a", 1), ("b", 2)]

    def test_removed_player_is_recreated(self):
        first = select_player("main")
        first.remove()
        second = select_player("main")
        assert second is not first
        assert second.unique_id == first.unique_id + 1

    def test_replaced_hub_does_not_reuse_ids(self):
        first = select_player("a")
        set_hub(PlayerHub())
        second = select_player("b")
        assert second.unique_id != first.unique_id
        assert second.unique_id > first.unique_id


class TestHubConfiguration:
    def test_custom_engine_factory(self):
        class TinyEngine(BaseEngine):
            CAPABILITIES = frozenset({"setup"})

            def setup(self, config, api=None):
                self.config = config

        built = []

        def factory(element):
            built.append(TinyEngine(element))
            return built[-1]

        set_hub(PlayerHub(engine_factory=factory))
        select_player("a").setup({"file": "a.mp4"})
        assert built[0].config["id"] == "a"

    def test_defaults_from_settings_file(self, tmp_path):
        (tmp_path / "settings.yaml").write_text("defaults:\n  volume: 42\n  skin: bekle\n")
        player = select_player("a").setup()
        assert get_hub().defaults == {"volume": 42, "skin": "bekle"}
        assert player.get_volume() == 42
        assert player.get_config()["skin"] == "bekle"

    def test_injected_defaults_read_on_each_setup(self):
        hub = set_hub(PlayerHub(defaults={"volume": 10}))
        player = hub("a").setup()
        hub.defaults["volume"] = 70
        player.setup()
        assert player.get_volume() == 70

    def test_get_hub_is_singleton(self):
        assert get_hub() is get_hub()
        global_api.reset()
        assert get_hub() is not None


class TestPlugins:
    def test_first_registration_wins(self):
        first = global_api.register_plugin("related", "0.1", dict)
        second = global_api.register_plugin("related", "0.1", list)
        assert second is first
        assert plugins.registered_plugins() == ["related"]

    def test_registrar_registers(self):
        registrar = select_player(object())
        definition = registrar.register_plugin("share", "0.0.1", dict)
        assert plugins.get_plugin_definition("share") is definition

    def test_incompatible_plugin_warns(self, caplog):
        definition = global_api.register_plugin("future", "99.0", dict)
        assert definition.is_compatible() is False
        assert "requires player 99.0" in caplog.text

    @pytest.mark.parametrize(
        ("minimum", "running", "ok"),
        [("0.1", "0.1.0", True), ("7.10", "7.9.3", False), ("8.0.0-beta", "8.0.0", True), ("", "0.0.1", True)],
    )
    def test_version_compare(self, minimum, running, ok):
        definition = plugins.PluginDefinition("p", minimum, dict)
        assert definition.is_compatible(running) is ok


class TestProviders:
    def test_priority_order(self):
        global_api.register_provider("html5", priority=1)
        global_api.register_provider("hls", priority=5)
        global_api.register_provider("flash")
        assert global_api.available_providers() == ["hls", "html5", "flash"]

    def test_reregister_replaces(self):
        global_api.register_provider("html5", priority=1)
        replacement = Provider("html5", priority=9)
        assert get_hub().register_provider(replacement) is replacement
        assert providers.get_provider("html5").priority == 9

    def test_unknown_provider(self):
        with pytest.raises(KeyError, match="Unknown provider"):
            providers.get_provider("nope")

    def test_supporting(self):
        global_api.register_provider("hls", lambda src: str(src.get("file", "")).endswith(".m3u8"))
        global_api.register_provider("html5", lambda src: True, priority=-1)
        assert providers.providers_supporting({"file": "live.m3u8"}) == ["hls", "html5"]
        assert providers.providers_supporting({"file": "a.mp4"}) == ["html5"]

    def test_reset_clears(self):
        global_api.register_provider("html5")
        global_api.register_plugin("related", "0.1", dict)
        global_api.reset()
        assert global_api.available_providers() == []
        assert plugins.registered_plugins() == []
