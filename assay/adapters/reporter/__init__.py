"""Reporter adapters for presenting test results.

Implementations support multiple output channels:
- Summary (terminal, one character per expectation)
- Markdown file (dated report written at the end of a run)
"""
