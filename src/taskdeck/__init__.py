"""Terminal client for a kanban project/task REST backend."""

__version__ = "0.1.0"
