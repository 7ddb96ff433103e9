"""
veloce_preload: preload cache for task detail view state.

Components:
- preload/: the capacity-bounded preload cache (status machine, dedup, timeouts, eviction)
- card/: task-card value and the assembler that builds it
- tasks/: task domain model and an in-memory task directory
- llm/: OpenAI-compatible client used by the AI strategy advisor
- bootstrap.py: composition root wiring settings into concrete objects
"""
