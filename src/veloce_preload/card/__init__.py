"""
Task card.

Components:
- card_models.py: TaskCardState (the cached value), CardStrategy, DurationEstimate
- fallbacks.py: offline subtask breakdowns and per-type strategies
- strategy.py: LLM-backed and offline strategy advisors
- assembler.py: TaskCardAssembler (builds a TaskCardState for a task id)
"""
