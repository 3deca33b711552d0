# debugsim/config/config_loader.py
"""
Config loader for YAML harness configuration.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from debugsim.plugins.definitions import PluginDefinition, PluginKind

DEFAULT_CONFIG_DIR = Path(__file__).resolve().parent

DEFAULT_ENABLED_DEVICE_PLUGINS = (
    "DeviceLogs",
    "CrashReporter",
    "MobileBuilds",
    "Hermesdebuggerrn",
    "React",
)


@dataclass(frozen=True)
class DeviceProfile:
    """Fixed metadata used when the harness manufactures a device."""

    device_type: str
    title: str
    os: str


@dataclass(frozen=True)
class HarnessSettings:
    """Resolved harness configuration.

    Attributes:
        sdk_version: Protocol/SDK version put into synthesized client queries
        run_side_effects_synchronously: Run store side effects inline with dispatch
        live_device: Metadata for live (physical) devices
        archived_device: Metadata for archived devices
        enabled_device_plugins: Device plugins enabled in a fresh store
    """

    sdk_version: int = 4
    run_side_effects_synchronously: bool = True
    live_device: DeviceProfile = DeviceProfile("physical", "MockAndroidDevice", "Android")
    archived_device: DeviceProfile = DeviceProfile("emulator", "archived device", "Android")
    enabled_device_plugins: frozenset[str] = field(
        default_factory=lambda: frozenset(DEFAULT_ENABLED_DEVICE_PLUGINS)
    )


class ConfigLoader:
    """Loads harness settings and plugin definitions from a config directory."""

    def __init__(self, config_dir=None):
        self.config_dir = Path(config_dir) if config_dir else DEFAULT_CONFIG_DIR
        self.config_dir.mkdir(parents=True, exist_ok=True)

    def load_all(self) -> dict[str, Any]:
        """Load all configuration files and merge them with defaults."""
        config = {}

        harness_path = self.config_dir / "harness.yml"
        defaults = self._default_harness()
        if harness_path.exists():
            with open(harness_path) as f:
                harness_data = yaml.safe_load(f) or {}
            overrides = harness_data.get("harness", {}) or {}
            if not isinstance(overrides, dict):
                raise ValueError(f"'harness' in {harness_path} must be a mapping")
            for key in ("live_device", "archived_device"):
                if key in overrides:
                    profile = overrides[key] or {}
                    if not isinstance(profile, dict):
                        raise ValueError(f"'{key}' in {harness_path} must be a mapping")
                    overrides[key] = {**defaults[key], **profile}
            config["harness"] = {**defaults, **overrides}
        else:
            config["harness"] = defaults

        plugins_path = self.config_dir / "plugins.yml"
        if plugins_path.exists():
            with open(plugins_path) as f:
                plugins_data = yaml.safe_load(f) or {}
            config["plugins"] = plugins_data.get("plugins", []) or []
        else:
            config["plugins"] = []

        return config

    def load_settings(self) -> HarnessSettings:
        """Load harness.yml into a HarnessSettings instance.

        Raises:
            ValueError: If a value has the wrong type
        """
        harness = self.load_all()["harness"]

        sdk_version = harness["sdk_version"]
        if not isinstance(sdk_version, int) or isinstance(sdk_version, bool):
            raise ValueError(f"sdk_version must be an integer, got {sdk_version!r}")

        enabled = harness["enabled_device_plugins"] or []
        if not isinstance(enabled, list):
            raise ValueError("enabled_device_plugins must be a list")

        return HarnessSettings(
            sdk_version=sdk_version,
            run_side_effects_synchronously=bool(
                harness["run_side_effects_synchronously"]
            ),
            live_device=self._device_profile(harness["live_device"]),
            archived_device=self._device_profile(harness["archived_device"]),
            enabled_device_plugins=frozenset(str(p) for p in enabled),
        )

    def load_plugin_definitions(self) -> list[PluginDefinition]:
        """Build PluginDefinitions from plugins.yml.

        Raises:
            ValueError: If an entry has no id or an unknown kind
        """
        definitions = []
        for entry in self.load_all()["plugins"]:
            if not entry.get("id"):
                raise ValueError(f"Plugin entry without id: {entry!r}")
            try:
                kind = PluginKind(entry.get("kind", "client"))
            except ValueError:
                raise ValueError(
                    f"Plugin '{entry['id']}' has unknown kind {entry.get('kind')!r}"
                ) from None
            definitions.append(
                PluginDefinition(
                    id=entry["id"],
                    title=entry.get("title", entry["id"]),
                    kind=kind,
                    supported_os=tuple(entry.get("supported_os", ()) or ()),
                    version=str(entry.get("version", "1.0.0")),
                )
            )
        return definitions

    def _device_profile(self, data: dict[str, Any]) -> DeviceProfile:
        if not isinstance(data, dict):
            raise ValueError(f"Device profile must be a mapping, got {data!r}")
        return DeviceProfile(
            device_type=str(data["device_type"]),
            title=str(data["title"]),
            os=str(data["os"]),
        )

    def _default_harness(self) -> dict[str, Any]:
        """Built-in defaults used when harness.yml is absent."""
        return {
            "sdk_version": 4,
            "run_side_effects_synchronously": True,
            "live_device": {
                "device_type": "physical",
                "title": "MockAndroidDevice",
                "os": "Android",
            },
            "archived_device": {
                "device_type": "emulator",
                "title": "archived device",
                "os": "Android",
            },
            "enabled_device_plugins": list(DEFAULT_ENABLED_DEVICE_PLUGINS),
        }
