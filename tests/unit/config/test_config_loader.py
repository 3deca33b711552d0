# tests/unit/config/test_config_loader.py
import pytest

from debugsim.config import ConfigLoader, DeviceProfile, HarnessSettings
from debugsim.config.config_loader import DEFAULT_CONFIG_DIR, DEFAULT_ENABLED_DEVICE_PLUGINS
from debugsim.plugins.definitions import PluginKind


def test_defaults_without_files(tmp_path):
    loader = ConfigLoader(config_dir=tmp_path)
    settings = loader.load_settings()

    assert settings == HarnessSettings()
    assert settings.sdk_version == 4
    assert settings.run_side_effects_synchronously is True
    assert settings.live_device == DeviceProfile("physical", "MockAndroidDevice", "Android")
    assert settings.archived_device == DeviceProfile("emulator", "archived device", "Android")
    assert settings.enabled_device_plugins == frozenset(DEFAULT_ENABLED_DEVICE_PLUGINS)
    assert loader.load_plugin_definitions() == []


def test_shipped_harness_file_matches_defaults():
    settings = ConfigLoader(config_dir=DEFAULT_CONFIG_DIR).load_settings()

    assert settings == HarnessSettings()


def test_partial_override_keeps_defaults(write_config_file, temp_config_dir):
    write_config_file(
        "harness.yml",
        {"harness": {"sdk_version": 7, "live_device": {"title": "Pixel"}}},
    )

    settings = ConfigLoader(config_dir=temp_config_dir).load_settings()

    assert settings.sdk_version == 7
    assert settings.live_device == DeviceProfile("physical", "Pixel", "Android")
    assert settings.archived_device.title == "archived device"


def test_enabled_device_plugins_override(write_config_file, temp_config_dir):
    write_config_file("harness.yml", {"harness": {"enabled_device_plugins": ["CPU"]}})

    settings = ConfigLoader(config_dir=temp_config_dir).load_settings()

    assert settings.enabled_device_plugins == frozenset({"CPU"})


@pytest.mark.parametrize(
    "harness, message",
    [
        ({"sdk_version": "four"}, "sdk_version"),
        ({"sdk_version": True}, "sdk_version"),
        ({"enabled_device_plugins": "CPU"}, "enabled_device_plugins"),
        ({"archived_device": ["emulator"]}, "must be a mapping"),
    ],
)
def test_invalid_values_raise(write_config_file, temp_config_dir, harness, message):
    write_config_file("harness.yml", {"harness": harness})

    with pytest.raises(ValueError, match=message):
        ConfigLoader(config_dir=temp_config_dir).load_settings()


def test_harness_section_must_be_mapping(write_config_file, temp_config_dir):
    write_config_file("harness.yml", {"harness": ["sdk_version"]})

    with pytest.raises(ValueError, match="must be a mapping"):
        ConfigLoader(config_dir=temp_config_dir).load_all()


def test_load_plugin_definitions(write_config_file, temp_config_dir):
    write_config_file(
        "plugins.yml",
        {
            "plugins": [
                {"id": "Network", "title": "Network Inspector"},
                {"id": "CPU", "kind": "device", "supported_os": ["Android"], "version": 2},
            ]
        },
    )

    network, cpu = ConfigLoader(config_dir=temp_config_dir).load_plugin_definitions()

    assert network.kind == PluginKind.CLIENT
    assert network.title == "Network Inspector"
    assert cpu.is_device_plugin
    assert cpu.supported_os == ("Android",)
    assert cpu.version == "2"


def test_plugin_without_id_raises(write_config_file, temp_config_dir):
    write_config_file("plugins.yml", {"plugins": [{"title": "Nameless"}]})

    with pytest.raises(ValueError, match="without id"):
        ConfigLoader(config_dir=temp_config_dir).load_plugin_definitions()


def test_plugin_unknown_kind_raises(write_config_file, temp_config_dir):
    write_config_file("plugins.yml", {"plugins": [{"id": "X", "kind": "server"}]})

    with pytest.raises(ValueError, match="unknown kind"):
        ConfigLoader(config_dir=temp_config_dir).load_plugin_definitions()
