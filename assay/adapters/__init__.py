"""External adapters for the assay test engine.

This package contains the concrete implementations that sit on top of
the core ports and produce output or drive the engine over time.

Adapter Organization:

- reporter/: Reporters that turn results into output (terminal, markdown)
- scheduler/: Drivers that re-run the suite when files change
"""
