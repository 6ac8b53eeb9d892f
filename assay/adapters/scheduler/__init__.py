"""Scheduler adapters for driving test runs over time.

- auto_test: Re-run the suite whenever code or tests change on disk
"""
