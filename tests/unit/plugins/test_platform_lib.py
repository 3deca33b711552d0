# tests/unit/plugins/test_platform_lib.py
"""Tests for the process-wide platform library binding."""

import pytest

from debugsim.plugins import platform_lib
from debugsim.plugins.platform_lib import get_platform_lib


class TestPlatformLibBinding:
    """Test binding the library to a store."""

    def test_unbound_library_raises(self, monkeypatch):
        """Test that using the library before initialisation fails.

        WHY: Plugins must not run against a missing store.
        """
        monkeypatch.setattr(platform_lib, "_platform_lib", None)

        with pytest.raises(RuntimeError, match="has not been initialised"):
            get_platform_lib()

    @pytest.mark.asyncio
    async def test_harness_init_binds_library(self, harness):
        """Test that harness init rebinds the library to its store.

        WHY: Every harness gets a fresh store.
        """
        lib = get_platform_lib()

        assert lib.store is harness.store
        assert lib.logger is harness.logger


class TestPlatformLibOperations:
    """Test the operations exposed to plugins."""

    @pytest.mark.asyncio
    async def test_select_plugin_on_client(self, harness_with_plugins):
        """Test selecting a plugin on a client with a deep link.

        WHY: Plugins open other plugins through the library.
        """
        harness = harness_with_plugins
        device = await harness.create_device()
        client = await harness.create_client(device, name="myApp")
        await harness.create_client(device, name="other")

        get_platform_lib().select_plugin(client, "Network", deep_link={"id": 7})
        connections = harness.get_state().connections

        assert connections.selected_plugin == "Network"
        assert connections.selected_app == client.id
        assert connections.selected_device is device
        assert connections.deep_link_payload == {"id": 7}

    @pytest.mark.asyncio
    async def test_select_plugin_on_device(self, harness_with_plugins):
        """Test selecting a device plugin on a device.

        WHY: Device plugins are selected without an app.
        """
        harness = harness_with_plugins
        await harness.create_device()
        second = await harness.create_device()

        get_platform_lib().select_plugin(second, "DeviceLogs")
        connections = harness.get_state().connections

        assert connections.selected_plugin == "DeviceLogs"
        assert connections.selected_device is second

    @pytest.mark.asyncio
    async def test_is_plugin_available(self, harness_with_plugins):
        """Test availability for device and client plugins.

        WHY: The UI greys out plugins the target cannot run.
        """
        harness = harness_with_plugins
        device = await harness.create_device(
            supports_plugin=lambda details: details.id != "CPU"
        )
        client = await harness.create_client(device, supported_plugins=["Network"])
        lib = get_platform_lib()

        assert lib.is_plugin_available(device, client, "DeviceLogs")
        assert not lib.is_plugin_available(device, client, "CPU")
        assert lib.is_plugin_available(device, client, "Network")
        assert not lib.is_plugin_available(device, client, "Layout")
        assert not lib.is_plugin_available(device, None, "Network")
        assert not lib.is_plugin_available(device, client, "Unknown")

    @pytest.mark.asyncio
    async def test_enable_client_plugin(self, harness_with_plugins):
        """Test enabling a client plugin for a client's app.

        WHY: Enabling goes through the plugin manager queue.
        """
        harness = harness_with_plugins
        device = await harness.create_device()
        client = await harness.create_client(device, name="myApp")
        lib = get_platform_lib()

        assert lib.enable_plugin(client, "Network") is True
        assert "Network" in client.plugin_instances
        assert lib.enable_plugin(client, "Network") is False

    @pytest.mark.asyncio
    async def test_enable_device_plugin(self, harness_with_plugins):
        """Test enabling device plugins.

        WHY: Enabled device plugins are not switched off again.
        """
        harness = harness_with_plugins
        device = await harness.create_device()
        lib = get_platform_lib()

        assert lib.enable_plugin(device, "DeviceLogs") is False
        assert lib.enable_plugin(device, "CPU") is True
        assert "CPU" in device.plugin_instances

    @pytest.mark.asyncio
    async def test_enable_unknown_plugin(self, harness_with_plugins):
        """Test that unknown plugins are not enabled.

        WHY: Only registered plugins can be switched.
        """
        device = await harness_with_plugins.create_device()

        assert get_platform_lib().enable_plugin(device, "Unknown") is False
