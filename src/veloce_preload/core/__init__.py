"""Ports shared by the cache and the task-card assembler."""
