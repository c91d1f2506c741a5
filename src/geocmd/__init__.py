"""geocmd — undoable edit commands for in-memory geodata layers."""

__version__ = "0.1.0"
