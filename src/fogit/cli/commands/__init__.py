"""Top-level fogit commands, one module per command."""
