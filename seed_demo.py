"""Seed demo data for the timesheet web UI."""

from datetime import date, time, timedelta

from timesheet.models.task import TaskDraft, TaskStatus, TaskType
from timesheet.services.project_service import ProjectService
from timesheet.services.task_service import TaskService
from timesheet.storage.json_store import JsonStore
from timesheet.utils.dates import get_start_of_week

store = JsonStore(data_dir="data")
ps = ProjectService(store)
ts = TaskService(store)

monday = get_start_of_week(date.today())

# Projects
api = ps.create_project("API v2", TaskType.WORK, "#45B7D1")
ops = ps.create_project("Operations", TaskType.WORK, "#FF6B6B")
home = ps.create_project("Home", TaskType.PERSONAL, "#52B788")
fitness = ps.create_project("Fitness", TaskType.PERSONAL, "#F7DC6F")

# Work tasks
ts.create_task(TaskDraft("Design endpoints", TaskType.WORK, monday, api.id,
                         "Draft the v2 resource layout", time(9, 0), time(11, 30), 150,
                         TaskStatus.COMPLETED))
ts.create_task(TaskDraft("Code review", TaskType.WORK, monday, api.id,
                         start_time=time(13, 0), end_time=time(14, 0), duration=60,
                         status=TaskStatus.COMPLETED))
ts.create_task(TaskDraft("Rotate TLS certificates", TaskType.WORK, monday + timedelta(days=1),
                         ops.id, "Staging and production", duration=45))
ts.create_task(TaskDraft("Write migration guide", TaskType.WORK, monday + timedelta(days=2),
                         api.id, duration=120))

# Personal tasks
ts.create_task(TaskDraft("Groceries", TaskType.PERSONAL, monday, home.id, duration=40,
                         status=TaskStatus.COMPLETED))
ts.create_task(TaskDraft("Evening run", TaskType.PERSONAL, monday + timedelta(days=1),
                         fitness.id, start_time=time(18, 30), end_time=time(19, 15), duration=45))

print("Demo data seeded successfully!")
print(f"  {len(ps.list_projects())} projects")
print(f"  {len(ts.list_tasks())} tasks")
