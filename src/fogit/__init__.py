"""
fogit - feature tracking metadata layered on git.

Feature records live next to the code in ``.fogit/features`` and follow the
repository's branch, commit and merge lifecycle.
"""

__version__ = "0.4.0"
