# tests/unit/state/test_reducers.py
"""Tests for the application state reducers.

Test Coverage:
- Plugin registration and the plugin command queue
- Device registration and selection
- Client announcement, removal and selection
- Enabled plugin bookkeeping
"""

import pytest

from debugsim.clients.client import Client
from debugsim.clients.client_id import ClientQuery, client_id_for_query
from debugsim.devices.base_device import BaseDevice
from debugsim.logging_system import get_instance
from debugsim.plugins.definitions import client_plugin, device_plugin
from debugsim.state import actions
from debugsim.state.store import create_store


@pytest.fixture
def store():
    return create_store()


def make_device(serial="serial_1"):
    return BaseDevice(serial, "physical", "MockAndroidDevice", "Android")


def make_client(store, device, app="myApp"):
    query = ClientQuery(app, device.os, device.title, device.serial, 4)
    return Client(
        client_id_for_query(query), query, None, get_instance(), store, [], device
    )


# ================================================================
# PLUGIN TESTS
# ================================================================
class TestPluginsReducer:
    """Test plugin catalogs and commands."""

    def test_register_splits_by_kind(self, store):
        """Test that registered plugins land in the right catalog.

        WHY: Device and client plugins are started by different owners.
        """
        store.dispatch(
            actions.register_plugins([client_plugin("Network"), device_plugin("CPU")])
        )
        plugins = store.get_state().plugins

        assert list(plugins.client_plugins) == ["Network"]
        assert list(plugins.device_plugins) == ["CPU"]

    def test_register_replaces_catalogs(self, store):
        """Test that a second registration replaces the first.

        WHY: Harness init registers the complete catalog.
        """
        store.dispatch(actions.register_plugins([client_plugin("Network")]))
        store.dispatch(actions.register_plugins([client_plugin("Layout")]))

        assert list(store.get_state().plugins.client_plugins) == ["Layout"]

    def test_duplicate_id_keeps_last(self, store):
        """Test that a duplicate plugin id keeps the last definition.

        WHY: Ids are unique across both catalogs.
        """
        store.dispatch(
            actions.register_plugins([client_plugin("Logs"), device_plugin("Logs")])
        )
        plugins = store.get_state().plugins

        assert "Logs" not in plugins.client_plugins
        assert plugins.device_plugins["Logs"].is_device_plugin

    def test_commands_queue_and_drain(self, store):
        """Test that load/switch commands queue until processed.

        WHY: The plugin manager consumes the queue in order.
        """
        network = client_plugin("Network")
        store.dispatch(actions.load_plugin(network))
        store.dispatch(actions.switch_plugin(network, selected_app="myApp"))

        commands = store.get_state().plugins.plugin_commands
        assert [c.command for c in commands] == ["load", "switch"]
        assert commands[1].selected_app == "myApp"

        store.dispatch(actions.plugin_commands_processed(1))
        assert [c.command for c in store.get_state().plugins.plugin_commands] == ["switch"]

    def test_plugin_loaded_moves_between_catalogs(self, store):
        """Test that loading a definition replaces one of the same id.

        WHY: A reloaded plugin may change kind.
        """
        store.dispatch(actions.register_plugins([client_plugin("Logs")]))
        store.dispatch(actions.plugin_loaded(device_plugin("Logs", version="2.0.0")))
        plugins = store.get_state().plugins

        assert "Logs" not in plugins.client_plugins
        assert plugins.device_plugins["Logs"].version == "2.0.0"


# ================================================================
# DEVICE TESTS
# ================================================================
class TestDeviceRegistration:
    """Test device registration and selection."""

    def test_first_device_is_selected(self, store):
        """Test that the first registered device becomes selected.

        WHY: The UI always shows some device once one exists.
        """
        first = make_device("serial_1")
        second = make_device("serial_2")

        store.dispatch(actions.register_device(first))
        store.dispatch(actions.register_device(second))
        connections = store.get_state().connections

        assert connections.devices == (first, second)
        assert connections.selected_device is first

    def test_same_serial_replaces_device(self, store):
        """Test that a device with a known serial replaces the old entry.

        WHY: Serials are unique within the store.
        """
        old = make_device("abc")
        new = make_device("abc")

        store.dispatch(actions.register_device(old))
        store.dispatch(actions.register_device(new))
        connections = store.get_state().connections

        assert connections.devices == (new,)
        assert connections.selected_device is new
        assert connections.get_device("abc") is new

    def test_select_device_clears_foreign_app(self, store):
        """Test that selecting another device drops the selected app.

        WHY: The selected app must run on the selected device.
        """
        first = make_device("serial_1")
        second = make_device("serial_2")
        store.dispatch(actions.register_device(first))
        store.dispatch(actions.register_device(second))
        client = make_client(store, first)
        store.dispatch(actions.new_client(client))

        store.dispatch(actions.select_device(second))
        connections = store.get_state().connections

        assert connections.selected_device is second
        assert connections.selected_app is None


# ================================================================
# CLIENT TESTS
# ================================================================
class TestClientAnnouncement:
    """Test client announcement and removal."""

    def test_new_client_becomes_selected(self, store):
        """Test that an announced client is selected with its device.

        WHY: Newly connected apps are shown straight away.
        """
        first = make_device("serial_1")
        second = make_device("serial_2")
        store.dispatch(actions.register_device(first))
        store.dispatch(actions.register_device(second))
        client = make_client(store, second)

        store.dispatch(actions.new_client(client))
        connections = store.get_state().connections

        assert connections.clients == (client,)
        assert connections.selected_app == client.id
        assert connections.selected_device is second
        assert connections.get_client(client.id) is client

    def test_same_id_replaces_client(self, store):
        """Test that announcing the same id twice keeps one entry.

        WHY: A reconnecting app replaces its old client.
        """
        device = make_device()
        store.dispatch(actions.register_device(device))
        old = make_client(store, device)
        new = make_client(store, device)

        store.dispatch(actions.new_client(old))
        store.dispatch(actions.new_client(new))

        assert store.get_state().connections.clients == (new,)

    def test_client_removed_clears_selection(self, store):
        """Test that removing the selected client clears the selection.

        WHY: A stale selection would point at a gone client.
        """
        device = make_device()
        store.dispatch(actions.register_device(device))
        client = make_client(store, device)
        store.dispatch(actions.new_client(client))

        store.dispatch(actions.client_removed(client.id))
        connections = store.get_state().connections

        assert connections.clients == ()
        assert connections.selected_app is None

    def test_select_plugin_with_deep_link(self, store):
        """Test that selecting a plugin for an app records the deep link.

        WHY: Plugins read the deep link payload on activation.
        """
        device = make_device()
        store.dispatch(actions.register_device(device))
        client = make_client(store, device)

        store.dispatch(
            actions.select_plugin(
                "Network", selected_app=client.id, deep_link_payload={"url": "x"}
            )
        )
        connections = store.get_state().connections

        assert connections.selected_plugin == "Network"
        assert connections.selected_app == client.id
        assert connections.deep_link_payload == {"url": "x"}


# ================================================================
# ENABLED PLUGIN TESTS
# ================================================================
class TestEnabledPlugins:
    """Test enabled plugin bookkeeping."""

    def test_enable_and_disable_client_plugin(self, store):
        """Test enabling then disabling a client plugin for an app.

        WHY: Enabled plugins are tracked per app name.
        """
        store.dispatch(actions.set_plugin_enabled("myApp", "Network", True))
        store.dispatch(actions.set_plugin_enabled("myApp", "Layout", True))
        assert store.get_state().connections.enabled_plugins["myApp"] == (
            "Network",
            "Layout",
        )

        store.dispatch(actions.set_plugin_enabled("myApp", "Network", False))
        assert store.get_state().connections.enabled_plugins["myApp"] == ("Layout",)

    def test_redundant_enable_keeps_identity(self, store):
        """Test that enabling an enabled plugin returns the same state.

        WHY: No change must not wake up side effects.
        """
        store.dispatch(actions.set_plugin_enabled("myApp", "Network", True))
        before = store.get_state()

        store.dispatch(actions.set_plugin_enabled("myApp", "Network", True))

        assert store.get_state() is before

    def test_toggle_device_plugin(self, store):
        """Test enabling and disabling a device plugin.

        WHY: Device plugins are enabled globally, not per app.
        """
        store.dispatch(actions.set_device_plugin_enabled("CPU", True))
        assert "CPU" in store.get_state().connections.enabled_device_plugins

        store.dispatch(actions.set_device_plugin_enabled("CPU", False))
        assert "CPU" not in store.get_state().connections.enabled_device_plugins
