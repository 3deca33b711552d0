"""
debugsim - in-memory simulation of the device debugging platform.

Packages:
- state: application store, state shape and reducers
- plugins: plugin definitions, plugin manager, platform library
- devices: live and archived devices
- clients: client processes and their identity
- network: stub connection and protocol emulator
- harness: test orchestrator
"""

__version__ = "0.1.0"
