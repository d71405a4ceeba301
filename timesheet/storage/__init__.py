"""Persistence for projects and tasks."""

from timesheet.storage.json_store import JsonStore

__all__ = ["JsonStore"]
