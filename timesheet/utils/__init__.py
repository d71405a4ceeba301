"""Date, time and duration helpers."""
