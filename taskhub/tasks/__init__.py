"""Per-user task management."""
