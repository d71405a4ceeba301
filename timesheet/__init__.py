"""Personal task and timesheet tracker.

Keeps work and personal tasks grouped by project, and moves them in and
out of Excel workbooks with duration statistics.
"""

__version__ = "1.0.0"
