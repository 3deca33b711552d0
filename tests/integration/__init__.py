# tests/integration/__init__.py
"""
Integration tests for the simulated debugging platform.

These tests drive the harness end to end: real store, reducers and plugin
manager, devices and clients created through the harness, and client
traffic answered by the protocol emulator.

Running Integration Tests:
    pytest tests/integration/                    # All integration tests
    pytest tests/integration/ -m integration     # Tagged as integration
"""
