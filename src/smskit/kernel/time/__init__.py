"""Kernel time – Clock port + implementations."""
from smskit.kernel.time.clock import Clock, FrozenClock, SystemClock

__all__ = ["Clock", "FrozenClock", "SystemClock"]
