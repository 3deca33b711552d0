"""Harness configuration loading."""

from debugsim.config.config_loader import (
    ConfigLoader,
    DeviceProfile,
    HarnessSettings,
)

__all__ = ["ConfigLoader", "DeviceProfile", "HarnessSettings"]
