"""
Task subsystem.

Components:
- task_models.py: data structures (TaskItem, TaskType, SubTask)
- task_directory.py: in-memory TaskDirectory / SubtaskSource adapter
"""
