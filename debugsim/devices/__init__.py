"""Simulated devices."""

from debugsim.devices.archived_device import ArchivedDevice
from debugsim.devices.base_device import BaseDevice

__all__ = ["ArchivedDevice", "BaseDevice"]
