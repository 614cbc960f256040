"""Utility helpers for fogit core.

- io/: File I/O operations (atomic writes, YAML)
- paths: Metadata directory layout and project root resolution
- subprocess: Subprocess execution with configured timeouts
- text: Slugs and tokenization
- time: UTC timestamps
- merge: Deep dictionary merge
"""
