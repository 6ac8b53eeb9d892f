"""Test suite for the assay test engine.

Organized into three categories:

1. core/: Unit tests for core domain logic
   - Minimal dependencies, fast execution
   - Uses in-memory fakes for ports

2. adapters/: Tests for the reporter and scheduler adapters
   - Output captured in memory or written under tmp_path

3. fakes/: Port implementations for testing
   - In-memory implementations of ReporterPort and FingerprintPort
   - Used by core unit tests
"""
