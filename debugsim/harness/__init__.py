"""In-memory platform harness for tests."""

from debugsim.harness.platform_harness import HarnessContext, PlatformHarness

__all__ = ["HarnessContext", "PlatformHarness"]
