"""Flask web server providing the REST API and HTML timesheet."""

import io
import logging
from datetime import date
from typing import Any, Optional

from flask import Flask, Response, jsonify, request, send_file

from timesheet.config import (
    DEFAULT_DATA_DIR,
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_PROJECT_COLOR,
    configure_logging,
)
from timesheet.exceptions import ExportError, NotFoundError, ValidationError
from timesheet.models.task import TaskDraft, TaskStatus, TaskType
from timesheet.reminders import ReminderSettings, ReminderTimer
from timesheet.services.project_service import ProjectService
from timesheet.services.task_service import TaskService
from timesheet.spreadsheet.exporter import ExportConfig, TaskExporter
from timesheet.spreadsheet.importer import TaskImporter
from timesheet.spreadsheet.report_html import TimesheetReportGenerator
from timesheet.storage.json_store import JsonStore
from timesheet.utils.dates import (
    from_storage_date,
    get_end_of_week,
    get_start_of_week,
    get_today,
    parse_time_string,
)
from timesheet.utils.durations import calculate_duration

logger = logging.getLogger(__name__)

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _parse_date_arg(value: Optional[str], name: str) -> date:
    if not value:
        raise ValidationError(f"{name} is required")
    try:
        return from_storage_date(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{name} must be YYYY-MM-DD") from e


def _date_range_args() -> tuple[date, date]:
    """``start``/``end`` query args, defaulting to the current week."""
    today = get_today()
    start = request.args.get("start")
    end = request.args.get("end")
    start_date = _parse_date_arg(start, "start") if start else get_start_of_week(today)
    end_date = _parse_date_arg(end, "end") if end else get_end_of_week(today)
    if start_date > end_date:
        raise ValidationError("start must not be after end")
    return start_date, end_date


def _flag(name: str, default: bool = True) -> bool:
    value = request.args.get(name)
    if value is None:
        return default
    return value.lower() in ("1", "true", "yes")


def _task_type(value: Any) -> TaskType:
    try:
        return TaskType(value)
    except ValueError as e:
        raise ValidationError("type must be 'work' or 'personal'") from e


def _task_status(value: Any) -> TaskStatus:
    try:
        return TaskStatus(value or TaskStatus.PENDING.value)
    except ValueError as e:
        raise ValidationError("status must be 'pending' or 'completed'") from e


def _task_fields(data: dict, partial: bool = False) -> dict[str, Any]:
    """Convert a JSON body into task fields, deriving duration from start/end."""
    fields: dict[str, Any] = {}
    for key in ("title", "project_id"):
        if key in data:
            fields[key] = data[key]
    if "description" in data:
        fields["description"] = data["description"] or ""
    if "type" in data or not partial:
        fields["type"] = _task_type(data.get("type"))
    if "date" in data or not partial:
        fields["date"] = _parse_date_arg(data.get("date"), "date")
    for key in ("start_time", "end_time"):
        if data.get(key):
            parsed = parse_time_string(data[key])
            if parsed is None:
                raise ValidationError(f"{key} must be HH:MM")
            fields[key] = parsed
        elif key in data:
            fields[key] = None
    if "status" in data:
        fields["status"] = _task_status(data["status"])

    if data.get("duration") is not None:
        try:
            fields["duration"] = int(data["duration"])
        except (TypeError, ValueError) as e:
            raise ValidationError("duration must be a number of minutes") from e
    elif fields.get("start_time") and fields.get("end_time"):
        fields["duration"] = calculate_duration(fields["start_time"], fields["end_time"])
    return fields


def create_app(data_dir: str = DEFAULT_DATA_DIR) -> Flask:
    app = Flask(__name__)

    store = JsonStore(data_dir=data_dir)
    project_service = ProjectService(store)
    task_service = TaskService(store)
    importer = TaskImporter(project_service, task_service)
    exporter = TaskExporter(project_service, task_service)
    reminder = ReminderTimer()
    app.extensions["timesheet_reminder"] = reminder

    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(NotFoundError)
    def handle_not_found(e):
        return jsonify({"error": str(e)}), 404

    @app.errorhandler(ExportError)
    def handle_export_error(e):
        return jsonify({"error": str(e)}), 500

    # ── Project API ──────────────────────────────────────────────────────────

    @app.route("/api/projects", methods=["GET"])
    def list_projects():
        type_arg = request.args.get("type")
        projects = project_service.list_projects(type=_task_type(type_arg) if type_arg else None)
        return jsonify([p.to_dict() for p in projects])

    @app.route("/api/projects", methods=["POST"])
    def create_project():
        data = request.get_json() or {}
        project = project_service.create_project(
            name=data.get("name", ""),
            type=_task_type(data.get("type")),
            color=data.get("color") or DEFAULT_PROJECT_COLOR,
        )
        return jsonify(project.to_dict()), 201

    @app.route("/api/projects/<project_id>", methods=["PUT"])
    def update_project(project_id):
        data = request.get_json() or {}
        project = project_service.update_project(
            project_id,
            name=data.get("name"),
            type=_task_type(data["type"]) if data.get("type") else None,
            color=data.get("color"),
        )
        return jsonify(project.to_dict())

    @app.route("/api/projects/<project_id>", methods=["DELETE"])
    def delete_project(project_id):
        if project_service.delete_project(project_id):
            return jsonify({"deleted": True})
        return jsonify({"error": "Not found"}), 404

    # ── Task API ─────────────────────────────────────────────────────────────

    @app.route("/api/tasks", methods=["GET"])
    def list_tasks():
        type_arg = request.args.get("type")
        status_arg = request.args.get("status")
        tasks = task_service.list_tasks(
            type=_task_type(type_arg) if type_arg else None,
            project_id=request.args.get("project_id") or None,
            status=_task_status(status_arg) if status_arg else None,
        )
        return jsonify([t.to_dict() for t in tasks])

    @app.route("/api/tasks", methods=["POST"])
    def create_task():
        data = request.get_json() or {}
        fields = _task_fields(data)
        fields.setdefault("title", "")
        task = task_service.create_task(TaskDraft(**fields))
        return jsonify(task.to_dict()), 201

    @app.route("/api/tasks/<task_id>", methods=["GET"])
    def get_task(task_id):
        task = task_service.get_task(task_id)
        if not task:
            return jsonify({"error": "Not found"}), 404
        return jsonify(task.to_dict())

    @app.route("/api/tasks/<task_id>", methods=["PUT"])
    def update_task(task_id):
        data = request.get_json() or {}
        task = task_service.update_task(task_id, **_task_fields(data, partial=True))
        return jsonify(task.to_dict())

    @app.route("/api/tasks/<task_id>/complete", methods=["POST"])
    def complete_task(task_id):
        return jsonify(task_service.complete_task(task_id).to_dict())

    @app.route("/api/tasks/<task_id>", methods=["DELETE"])
    def delete_task(task_id):
        if task_service.delete_task(task_id):
            return jsonify({"deleted": True})
        return jsonify({"error": "Not found"}), 404

    # ── Statistics, import and export ────────────────────────────────────────

    @app.route("/api/statistics", methods=["GET"])
    def statistics():
        start_date, end_date = _date_range_args()
        return jsonify(task_service.get_statistics(start_date, end_date).to_dict())

    @app.route("/api/import", methods=["POST"])
    def import_tasks():
        upload = request.files.get("file")
        if upload is None:
            raise ValidationError("file is required")
        result = importer.import_bytes(upload.read())
        return jsonify(result.to_dict()), 200 if result.success else 400

    @app.route("/api/export", methods=["GET"])
    def export_tasks():
        start_date, end_date = _date_range_args()
        variant = request.args.get("variant", "tasks")
        buffer = io.BytesIO()

        if variant == "weekly":
            file_name = exporter.export_weekly_summary(start_date, end_date, buffer)
        elif variant == "project":
            project_id = request.args.get("project_id")
            if not project_id:
                raise ValidationError("project_id is required")
            if project_service.get_project(project_id) is None:
                raise NotFoundError(f"Project {project_id} not found")
            file_name = exporter.export_project_tasks(project_id, start_date, end_date, buffer)
        elif variant == "tasks":
            type_arg = request.args.get("type", "all")
            if type_arg != "all":
                _task_type(type_arg)
            config = ExportConfig(
                start_date,
                end_date,
                type=type_arg,
                include_projects=_flag("include_projects"),
                include_statistics=_flag("include_statistics"),
            )
            file_name = exporter.export_tasks(config, buffer)
        else:
            raise ValidationError(f"Unknown export variant {variant!r}")

        buffer.seek(0)
        return send_file(
            buffer,
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name=file_name,
        )

    @app.route("/timesheet", methods=["GET"])
    def timesheet():
        start_date, end_date = _date_range_args()
        tasks = task_service.get_tasks_by_date_range(start_date, end_date)
        type_arg = request.args.get("type")
        if type_arg and type_arg != "all":
            task_type = _task_type(type_arg)
            tasks = [t for t in tasks if t.type == task_type]
        projects = {p.id: p for p in project_service.list_projects()}
        title = f"Timesheet {start_date.isoformat()} to {end_date.isoformat()}"
        html = TimesheetReportGenerator().render(tasks, projects, title=title)
        return Response(html, mimetype="text/html")

    # ── Reminder settings ────────────────────────────────────────────────────

    @app.route("/api/settings/reminder", methods=["GET"])
    def get_reminder():
        settings = reminder.settings
        return jsonify({
            "settings": settings.to_dict() if settings else None,
            "active": reminder.active,
            "next_run": reminder.next_run.isoformat() if reminder.next_run else None,
        })

    @app.route("/api/settings/reminder", methods=["PUT"])
    def set_reminder():
        data = request.get_json() or {}
        settings = ReminderSettings(
            enabled=bool(data.get("enabled", True)),
            time=data.get("time", "17:00"),
            days_enabled=data.get("days_enabled"),
        )
        if settings.enabled:
            reminder.start(settings, lambda title, body: logger.info("%s: %s", title, body))
        else:
            reminder.stop()
            reminder.settings = settings
        return get_reminder()

    return app


def main() -> None:
    configure_logging()
    app = create_app()
    app.run(debug=True, host=DEFAULT_HOST, port=DEFAULT_PORT)


if __name__ == "__main__":
    main()
