"""DailyVault client: end-to-end encryption for tasks, subtasks and diary entries."""

__version__ = "0.3.0"
