"""Mock implementations for testing."""

from tests.mocks.clock import FakeClock

__all__ = ["FakeClock"]
