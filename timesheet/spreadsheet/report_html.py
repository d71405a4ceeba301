"""HTML timesheet report.

Renders a self-contained page listing tasks with their project, type,
duration and status, followed by duration and completion totals.
"""

from typing import Iterable, Optional

from jinja2 import Template

from timesheet.models.project import Project
from timesheet.models.task import Task, TaskType
from timesheet.spreadsheet.statistics import aggregate
from timesheet.utils.dates import format_date
from timesheet.utils.durations import minutes_to_clock

EMPTY_MESSAGE = "No tasks in this timesheet"

TYPE_COLORS = {
    TaskType.WORK.value: "#1a73e8",
    TaskType.PERSONAL.value: "#9c27b0",
}


HTML_TEMPLATE = Template(
    """\
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<title>{{ title }}</title>
<style>
  body { font-family: 'Segoe UI', -apple-system, sans-serif; background: #f8f9fa;
         color: #202124; padding: 20px; }
  h1 { font-size: 22px; color: #1a73e8; }
  table { border-collapse: collapse; width: 100%; background: #fff; }
  th { background: #1a73e8; color: #fff; text-align: left; padding: 8px 12px; }
  td { border-bottom: 1px solid #dadce0; padding: 8px 12px; vertical-align: top; }
  .description { color: #5f6368; font-size: 12px; }
  .chip { color: #fff; border-radius: 10px; padding: 2px 10px; font-size: 12px; }
  .completed { color: #34a853; font-weight: 600; }
  .pending { color: #fbbc04; font-weight: 600; }
  .totals { margin-top: 16px; display: flex; gap: 32px; }
  .empty { text-align: center; color: #5f6368; padding: 24px; background: #fff; }
</style>
</head>
<body>
<h1>{{ title }}</h1>
{% if rows %}
<table>
  <thead>
    <tr><th>Task</th><th>Date</th><th>Project</th><th>Type</th><th>Duration</th><th>Status</th></tr>
  </thead>
  <tbody>
  {% for row in rows %}
    <tr>
      <td><strong>{{ row.title }}</strong>
        {% if row.description %}<div class="description">{{ row.description }}</div>{% endif %}</td>
      <td>{{ row.date }}</td>
      <td>{{ row.project }}</td>
      <td><span class="chip" style="background: {{ row.color }}">{{ row.type }}</span></td>
      <td>{{ row.duration }}</td>
      <td class="{{ row.status }}">{{ row.status }}</td>
    </tr>
  {% endfor %}
  </tbody>
</table>
<div class="totals">
  <div>Total tasks: <strong>{{ stats.total_tasks }}</strong></div>
  <div>Completed: <strong>{{ stats.completed_tasks }}</strong></div>
  <div>Total duration: <strong>{{ total_duration }}</strong></div>
</div>
{% else %}
<div class="empty">{{ empty_message }}</div>
{% endif %}
</body>
</html>
""",
    autoescape=True,
)


class TimesheetReportGenerator:
    """Generates an HTML timesheet for a list of tasks."""

    def render(
        self,
        tasks: Iterable[Task],
        projects: Optional[dict[str, Project]] = None,
        title: Optional[str] = None,
    ) -> str:
        tasks = list(tasks)
        projects = projects or {}
        rows = []
        for task in tasks:
            project = projects.get(task.project_id) if task.project_id else None
            rows.append({
                "title": task.title,
                "description": task.description,
                "date": format_date(task.date),
                "project": project.name if project else "-",
                "type": task.type.label,
                "color": TYPE_COLORS[task.type.value],
                "duration": minutes_to_clock(task.duration) if task.duration is not None else "-",
                "status": task.status.value,
            })

        stats = aggregate(tasks)
        return HTML_TEMPLATE.render(
            title=title or "Timesheet",
            rows=rows,
            stats=stats,
            total_duration=minutes_to_clock(stats.total_duration),
            empty_message=EMPTY_MESSAGE,
        )

    def generate(
        self,
        tasks: Iterable[Task],
        projects: Optional[dict[str, Project]],
        output_path: str,
        title: Optional[str] = None,
    ) -> str:
        """Write the report to ``output_path`` and return the path."""
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(self.render(tasks, projects, title))
        return output_path
