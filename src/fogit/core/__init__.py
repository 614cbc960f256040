"""fogit core library (no CLI concerns)."""
