"""Fake implementations of core ports for testing.

These in-memory implementations allow core domain logic to be tested
without touching the filesystem or producing output:

- FakeFingerprintPort: Scripted sequence of snapshots
- RecordingReporter: Captured protocol calls for assertion
"""

from .fingerprint import FakeFingerprintPort
from .reporter import RecordingReporter

__all__ = [
    "FakeFingerprintPort",
    "RecordingReporter",
]
