"""Tests for the Excel import/export pipeline.

Tests cover:
  - Project resolution and creation
  - Row validation
  - Importing workbooks into the services
  - Exporting tasks, project and weekly workbooks
  - Export/import round trip
  - HTML timesheet report
"""

import io
import os
import random
from datetime import date, time

import pytest
from openpyxl import Workbook, load_workbook

from timesheet.config import PROJECT_COLORS, TASK_COLUMNS
from timesheet.exceptions import ExportError, RowValidationError, StorageError
from timesheet.models.project import Project
from timesheet.models.task import TaskDraft, TaskStatus, TaskType
from timesheet.services.project_service import ProjectService
from timesheet.services.task_service import TaskService
from timesheet.spreadsheet.exporter import ExportConfig, TaskExporter, safe_sheet_title
from timesheet.spreadsheet.importer import TaskImporter
from timesheet.spreadsheet.project_resolver import ProjectResolver
from timesheet.spreadsheet.report_html import TimesheetReportGenerator
from timesheet.spreadsheet.row_validator import RowValidator
from timesheet.storage.json_store import JsonStore


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _create_task_workbook(path: str, rows: list[list], headers=None) -> str:
    """Write a single-sheet task workbook and return its path."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Tasks"
    ws.append(headers or TASK_COLUMNS)
    for row in rows:
        ws.append(row)
    wb.save(path)
    wb.close()
    return path


def _row(title, type_, project, date_text, start="-", end="-", duration="-", status="pending",
         description=""):
    return [title, description, type_, project, date_text, start, end, duration, status]


def _sheet_rows(path: str, sheet: str) -> list[tuple]:
    wb = load_workbook(path, read_only=True)
    rows = list(wb[sheet].iter_rows(values_only=True))
    wb.close()
    return rows


class FakeProjectService:
    """In-memory stand-in for ProjectService."""

    def __init__(self, projects=None, fail=False):
        self.projects = list(projects or [])
        self.fail = fail
        self.created = []

    def list_projects(self):
        return list(self.projects)

    def create_project(self, name, type, color):
        if self.fail:
            raise StorageError("disk full")
        project = Project(id=f"p{len(self.projects) + 1}", name=name, type=type, color=color)
        self.projects.append(project)
        self.created.append(project)
        return project


class FlakyTaskService:
    """Accepts tasks but rejects the drafts at the given 1-based positions."""

    def __init__(self, fail_on=(), fail_batch=False):
        self.fail_on = set(fail_on)
        self.fail_batch = fail_batch
        self.batches = 0
        self.tasks = []

    def create_tasks(self, drafts):
        self.batches += 1
        if self.fail_batch:
            raise StorageError("disk full")
        results = []
        for position, draft in enumerate(drafts, start=1):
            if position in self.fail_on:
                results.append(StorageError("boom"))
                continue
            self.tasks.append(draft)
            results.append(draft)
        return results


@pytest.fixture
def services(tmp_path):
    store = JsonStore(data_dir=str(tmp_path / "data"))
    return ProjectService(store), TaskService(store)


@pytest.fixture
def populated(services):
    """Two projects and four tasks in the first week of 2024."""
    ps, ts = services
    alpha = ps.create_project("Alpha", TaskType.WORK, "#FF6B6B")
    home = ps.create_project("Home", TaskType.PERSONAL, "#52B788")
    ts.create_task(TaskDraft("Write report", TaskType.WORK, date(2024, 1, 2), alpha.id,
                             "Quarterly numbers", time(9, 0), time(10, 30), 90,
                             TaskStatus.COMPLETED))
    ts.create_task(TaskDraft("Review PRs", TaskType.WORK, date(2024, 1, 3), alpha.id,
                             duration=45))
    ts.create_task(TaskDraft("Laundry", TaskType.PERSONAL, date(2024, 1, 3), home.id,
                             duration=30, status=TaskStatus.COMPLETED))
    ts.create_task(TaskDraft("Out of range", TaskType.WORK, date(2024, 2, 1), alpha.id,
                             duration=600))
    return ps, ts, alpha, home


# ---------------------------------------------------------------------------
# Project resolver tests
# ---------------------------------------------------------------------------


class TestProjectResolver:
    def test_placeholders_resolve_to_none(self):
        service = FakeProjectService()
        resolver = ProjectResolver(service, [])
        for name in ("", None, "No Project", "N/A", "   "):
            assert resolver.resolve(name, TaskType.WORK) is None
        assert service.created == []

    def test_case_insensitive_match(self):
        existing = Project("p1", "Alpha", TaskType.WORK, "#000000")
        resolver = ProjectResolver(FakeProjectService([existing]), [existing])
        assert resolver.resolve("ALPHA", TaskType.WORK) == "p1"
        assert resolver.created_names == set()

    def test_type_must_match(self):
        existing = Project("p1", "Alpha", TaskType.WORK, "#000000")
        service = FakeProjectService([existing])
        resolver = ProjectResolver(service, [existing])
        project_id = resolver.resolve("Alpha", TaskType.PERSONAL)
        assert project_id != "p1"
        assert service.created[0].type == TaskType.PERSONAL

    def test_first_match_wins(self):
        first = Project("p1", "Alpha", TaskType.WORK, "#000000")
        second = Project("p2", "alpha", TaskType.WORK, "#111111")
        resolver = ProjectResolver(FakeProjectService(), [first, second])
        assert resolver.resolve("alpha", TaskType.WORK) == "p1"

    def test_created_once_and_reused(self):
        service = FakeProjectService()
        resolver = ProjectResolver(service, [])
        first = resolver.resolve("Beta", TaskType.WORK)
        second = resolver.resolve("beta", TaskType.WORK)
        assert first == second
        assert len(service.created) == 1
        assert resolver.created_names == {"Beta"}

    def test_seeded_color(self):
        service = FakeProjectService()
        resolver = ProjectResolver(service, [], rng=random.Random(42))
        resolver.resolve("Gamma", TaskType.WORK)
        assert service.created[0].color == random.Random(42).choice(PROJECT_COLORS)

    def test_persistence_failure_returns_none(self):
        resolver = ProjectResolver(FakeProjectService(fail=True), [])
        assert resolver.resolve("Delta", TaskType.WORK) is None
        assert resolver.created_names == set()


# ---------------------------------------------------------------------------
# Row validator tests
# ---------------------------------------------------------------------------


def _record(**overrides):
    record = dict(zip(TASK_COLUMNS, _row("Task", "Work", "Alpha", "01/02/2024")))
    record.update(overrides)
    return record


class TestRowValidator:
    def _validator(self, strict=False):
        return RowValidator(ProjectResolver(FakeProjectService(), []), strict=strict)

    def test_valid_row(self):
        draft = self._validator().validate(
            _record(**{"Start Time": "09:00", "End Time": "10:15", "Duration (HH:MM)": "01:15",
                       "Status": "Completed", "Description": "notes"}),
            2,
        )
        assert draft.title == "Task"
        assert draft.description == "notes"
        assert draft.type == TaskType.WORK
        assert draft.date == date(2024, 1, 2)
        assert draft.start_time == time(9, 0)
        assert draft.end_time == time(10, 15)
        assert draft.duration == 75
        assert draft.status == TaskStatus.COMPLETED
        assert draft.project_id == "p1"

    def test_first_missing_field_wins(self):
        with pytest.raises(RowValidationError) as exc:
            self._validator().validate(_record(**{"Task Title": None, "Type": None, "Date": None}), 5)
        assert str(exc.value) == "Row 5: Task title is required"

    def test_type_required(self):
        with pytest.raises(RowValidationError, match="Row 2: Type is required"):
            self._validator().validate(_record(Type=""), 2)

    def test_date_required(self):
        with pytest.raises(RowValidationError, match="Row 2: Date is required"):
            self._validator().validate(_record(Date=None), 2)

    def test_invalid_date(self):
        with pytest.raises(RowValidationError, match="Row 2: Invalid date format"):
            self._validator().validate(_record(Date="2024/13/45"), 2)

    def test_no_project(self):
        with pytest.raises(RowValidationError) as exc:
            self._validator().validate(_record(Project="No Project"), 4)
        assert exc.value.reason == "Project is required but could not be created"

    def test_unknown_type_defaults_to_personal(self):
        draft = self._validator().validate(_record(Type="Gardening"), 2)
        assert draft.type == TaskType.PERSONAL

    def test_malformed_optional_fields_degrade(self):
        draft = self._validator().validate(
            _record(**{"Start Time": "soon", "End Time": "-", "Duration (HH:MM)": "ab:cd",
                       "Status": "Done"}),
            2,
        )
        assert draft.start_time is None
        assert draft.end_time is None
        assert draft.duration is None
        assert draft.status == TaskStatus.PENDING

    def test_duration_not_recomputed_from_times(self):
        draft = self._validator().validate(
            _record(**{"Start Time": "09:00", "End Time": "10:00", "Duration (HH:MM)": "00:10"}), 2
        )
        assert draft.duration == 10

    def test_strict_rejects_unknown_type(self):
        with pytest.raises(RowValidationError, match='Unknown type "Gardening"'):
            self._validator(strict=True).validate(_record(Type="Gardening"), 2)

    def test_strict_rejects_unknown_status(self):
        with pytest.raises(RowValidationError, match='Unknown status "Done"'):
            self._validator(strict=True).validate(_record(Status="Done"), 2)

    def test_strict_accepts_known_values(self):
        draft = self._validator(strict=True).validate(_record(Type="personal", Status="PENDING"), 2)
        assert draft.type == TaskType.PERSONAL
        assert draft.status == TaskStatus.PENDING


# ---------------------------------------------------------------------------
# Importer tests
# ---------------------------------------------------------------------------


class TestTaskImporter:
    def test_scenario_missing_title(self, services, tmp_path):
        ps, ts = services
        path = _create_task_workbook(str(tmp_path / "in.xlsx"), [
            _row("A", "Work", "Alpha", "01/02/2024"),
            _row("", "Work", "Alpha", "01/03/2024"),
        ])
        result = TaskImporter(ps, ts).import_file(path)

        assert result.imported_count == 1
        assert result.failed_count == 1
        assert result.errors == ["Row 3: Task title is required"]
        assert result.created_projects == ["Alpha"]
        assert result.success is True
        assert result.outcome == "partial"
        assert len(ts.list_tasks()) == 1

    def test_one_project_per_name_and_type(self, services, tmp_path):
        ps, ts = services
        path = _create_task_workbook(str(tmp_path / "in.xlsx"), [
            _row("T1", "Work", "Beta", "01/02/2024"),
            _row("T2", "work", "beta", "01/02/2024"),
            _row("T3", "Work", "BETA", "01/03/2024"),
            _row("T4", "Personal", "Beta", "01/03/2024"),
        ])
        result = TaskImporter(ps, ts).import_file(path)

        assert result.imported_count == 4
        projects = ps.list_projects()
        assert len(projects) == 2
        assert {p.type for p in projects} == {TaskType.WORK, TaskType.PERSONAL}
        assert result.created_projects == ["Beta"]

    def test_existing_project_reused(self, services, tmp_path):
        ps, ts = services
        existing = ps.create_project("Alpha", TaskType.WORK, "#000000")
        path = _create_task_workbook(str(tmp_path / "in.xlsx"), [
            _row("T1", "Work", "alpha", "01/02/2024"),
        ])
        result = TaskImporter(ps, ts).import_file(path)

        assert result.created_projects == []
        assert ts.list_tasks()[0].project_id == existing.id
        assert result.outcome == "success"

    def test_missing_date_does_not_abort(self, services, tmp_path):
        ps, ts = services
        path = _create_task_workbook(str(tmp_path / "in.xlsx"), [
            _row("No date", "Work", "Alpha", None),
            _row("Good", "Work", "Alpha", "01/04/2024"),
        ])
        result = TaskImporter(ps, ts).import_file(path)

        assert result.errors == ["Row 2: Date is required"]
        assert result.imported_count == 1
        assert ts.list_tasks()[0].title == "Good"

    def test_errors_in_row_order(self, services, tmp_path):
        ps, ts = services
        path = _create_task_workbook(str(tmp_path / "in.xlsx"), [
            _row("A", "", "Alpha", "01/02/2024"),
            _row("B", "Work", "Alpha", "not a date"),
            _row("C", "Work", "N/A", "01/02/2024"),
        ])
        result = TaskImporter(ps, ts).import_file(path)

        assert result.errors == [
            "Row 2: Type is required",
            "Row 3: Invalid date format",
            "Row 4: Project is required but could not be created",
        ]
        assert result.success is False
        assert result.outcome == "failed"

    def test_native_date_cells(self, services, tmp_path):
        ps, ts = services
        path = _create_task_workbook(str(tmp_path / "in.xlsx"), [
            ["Native", "", "Personal", "Home", date(2024, 5, 6)],
        ], headers=TASK_COLUMNS[:5])
        result = TaskImporter(ps, ts).import_file(path)

        assert result.imported_count == 1
        assert ts.list_tasks()[0].date == date(2024, 5, 6)

    def test_blank_rows_skipped_keep_numbering(self, services, tmp_path):
        ps, ts = services
        path = _create_task_workbook(str(tmp_path / "in.xlsx"), [
            _row("A", "Work", "Alpha", "01/02/2024"),
            [None] * 9,
            _row("", "Work", "Alpha", "01/02/2024"),
        ])
        result = TaskImporter(ps, ts).import_file(path)

        assert result.imported_count == 1
        assert result.errors == ["Row 4: Task title is required"]

    def test_row_persistence_failure_continues(self, tmp_path):
        tasks = FlakyTaskService(fail_on={2})
        path = _create_task_workbook(str(tmp_path / "in.xlsx"), [
            _row("A", "Work", "Alpha", "01/02/2024"),
            _row("B", "Work", "Alpha", "01/02/2024"),
            _row("C", "Work", "Alpha", "01/02/2024"),
        ])
        result = TaskImporter(FakeProjectService(), tasks).import_file(path)

        assert result.imported_count == 2
        assert result.errors == ["Row 3: boom"]
        assert [t.title for t in tasks.tasks] == ["A", "C"]

    def test_rows_saved_in_one_batch(self, tmp_path):
        tasks = FlakyTaskService()
        path = _create_task_workbook(str(tmp_path / "in.xlsx"), [
            _row("A", "Work", "Alpha", "01/02/2024"),
            _row("", "Work", "Alpha", "01/02/2024"),
            _row("C", "Personal", "Home", "01/03/2024"),
        ])
        result = TaskImporter(FakeProjectService(), tasks).import_file(path)

        assert tasks.batches == 1
        assert result.imported_count == 2
        assert result.errors == ["Row 3: Task title is required"]

    def test_batch_save_failure_fails_every_valid_row(self, tmp_path):
        tasks = FlakyTaskService(fail_batch=True)
        path = _create_task_workbook(str(tmp_path / "in.xlsx"), [
            _row("A", "Work", "Alpha", "01/02/2024"),
            _row("B", "Work", "Alpha", None),
            _row("C", "Work", "Alpha", "01/02/2024"),
        ])
        result = TaskImporter(FakeProjectService(), tasks).import_file(path)

        assert result.success is False
        assert result.imported_count == 0
        assert result.errors == [
            "Row 2: disk full",
            "Row 3: Date is required",
            "Row 4: disk full",
        ]

    def test_header_only_sheet(self, services, tmp_path):
        ps, ts = services
        path = _create_task_workbook(str(tmp_path / "in.xlsx"), [])
        result = TaskImporter(ps, ts).import_file(path)

        assert result.success is False
        assert result.errors == ["No tasks found in the Excel file"]

    def test_corrupt_file(self, services):
        ps, ts = services
        result = TaskImporter(ps, ts).import_bytes(b"this is not a workbook")

        assert result.success is False
        assert result.imported_count == 0
        assert len(result.errors) == 1
        assert result.errors[0].startswith("Failed to read Excel file")
        assert ps.list_projects() == []

    def test_only_first_sheet_read(self, services, tmp_path):
        ps, ts = services
        path = str(tmp_path / "in.xlsx")
        wb = Workbook()
        ws = wb.active
        ws.append(TASK_COLUMNS)
        ws.append(_row("First", "Work", "Alpha", "01/02/2024"))
        other = wb.create_sheet("Other")
        other.append(TASK_COLUMNS)
        other.append(_row("Second", "Work", "Alpha", "01/02/2024"))
        wb.save(path)

        result = TaskImporter(ps, ts).import_file(path)
        assert result.imported_count == 1
        assert ts.list_tasks()[0].title == "First"

    def test_result_to_dict(self, services, tmp_path):
        ps, ts = services
        path = _create_task_workbook(str(tmp_path / "in.xlsx"), [
            _row("A", "Work", "Alpha", "01/02/2024"),
        ])
        d = TaskImporter(ps, ts).import_file(path).to_dict()
        assert d["success"] is True
        assert d["outcome"] == "success"
        assert d["imported_count"] == 1
        assert d["created_projects"] == ["Alpha"]


# ---------------------------------------------------------------------------
# Exporter tests
# ---------------------------------------------------------------------------


class TestTaskExporter:
    def test_export_tasks_with_statistics(self, populated, tmp_path):
        ps, ts, alpha, home = populated
        config = ExportConfig(date(2024, 1, 1), date(2024, 1, 7), type="all")
        path = TaskExporter(ps, ts).export_tasks(config, str(tmp_path))

        assert os.path.basename(path) == "Tasks_All_2024-01-01_to_2024-01-07.xlsx"
        wb = load_workbook(path, read_only=True)
        assert wb.sheetnames == ["Tasks", "Statistics"]
        wb.close()

        rows = _sheet_rows(path, "Tasks")
        assert list(rows[0]) == TASK_COLUMNS
        assert len(rows) == 4
        assert list(rows[1]) == [
            "Write report", "Quarterly numbers", "Work", "Alpha", "01/02/2024",
            "09:00", "10:30", "01:30", "completed",
        ]
        assert rows[2][5:8] == ("-", "-", "00:45")

        stats = {r[0]: r[1] for r in _sheet_rows(path, "Statistics")[1:] if r[0]}
        assert stats["Total Tasks"] == 3
        assert stats["Completed Tasks"] == 2
        assert stats["Completion Rate (%)"] == 67
        assert stats["Total Duration (HH:MM)"] == "02:45"
        assert stats["Work Duration (HH:MM)"] == "02:15"
        assert stats["Personal Duration (HH:MM)"] == "00:30"
        assert "Project Breakdown" in stats
        assert stats["Alpha"] == "02:15"
        assert stats["Home"] == "00:30"

    def test_type_filter_and_no_breakdown(self, populated, tmp_path):
        ps, ts, alpha, home = populated
        config = ExportConfig(date(2024, 1, 1), date(2024, 1, 7), type="personal",
                              include_projects=False)
        path = TaskExporter(ps, ts).export_tasks(config, str(tmp_path))

        assert os.path.basename(path).startswith("Tasks_Personal_")
        rows = _sheet_rows(path, "Tasks")
        assert [r[0] for r in rows[1:]] == ["Laundry"]
        metrics = [r[0] for r in _sheet_rows(path, "Statistics")]
        assert "Project Breakdown" not in metrics

    def test_without_statistics(self, populated, tmp_path):
        ps, ts, alpha, home = populated
        config = ExportConfig(date(2024, 1, 1), date(2024, 1, 7), include_statistics=False)
        path = TaskExporter(ps, ts).export_tasks(config, str(tmp_path / "out.xlsx"))

        assert path == str(tmp_path / "out.xlsx")
        wb = load_workbook(path, read_only=True)
        assert wb.sheetnames == ["Tasks"]
        wb.close()

    def test_unresolved_project_name(self, populated, tmp_path):
        ps, ts, alpha, home = populated
        ps.delete_project(home.id)
        config = ExportConfig(date(2024, 1, 3), date(2024, 1, 3))
        path = TaskExporter(ps, ts).export_tasks(config, str(tmp_path))

        projects = {r[0]: r[3] for r in _sheet_rows(path, "Tasks")[1:]}
        assert projects["Laundry"] == "N/A"
        stats = {r[0]: r[1] for r in _sheet_rows(path, "Statistics")[1:] if r[0]}
        assert stats["Unknown Project"] == "00:30"

    def test_export_to_stream(self, populated):
        ps, ts, alpha, home = populated
        buffer = io.BytesIO()
        name = TaskExporter(ps, ts).export_tasks(
            ExportConfig(date(2024, 1, 1), date(2024, 1, 7), type="work"), buffer
        )
        assert name == "Tasks_Work_2024-01-01_to_2024-01-07.xlsx"
        buffer.seek(0)
        wb = load_workbook(buffer, read_only=True)
        assert "Tasks" in wb.sheetnames
        wb.close()

    def test_project_export(self, populated, tmp_path):
        ps, ts, alpha, home = populated
        path = TaskExporter(ps, ts).export_project_tasks(
            alpha.id, date(2024, 1, 1), date(2024, 1, 7), str(tmp_path)
        )

        assert os.path.basename(path) == "Alpha_Tasks_2024-01-01_to_2024-01-07.xlsx"
        wb = load_workbook(path, read_only=True)
        assert wb.sheetnames == ["Alpha"]
        wb.close()
        rows = _sheet_rows(path, "Alpha")
        assert [r[0] for r in rows[1:]] == ["Write report", "Review PRs"]
        assert all(r[3] == "Alpha" for r in rows[1:])

    def test_project_export_unknown_project(self, populated, tmp_path):
        ps, ts, alpha, home = populated
        with pytest.raises(ExportError):
            TaskExporter(ps, ts).export_project_tasks(
                "missing", date(2024, 1, 1), date(2024, 1, 7), str(tmp_path)
            )

    def test_project_export_name_with_forbidden_characters(self, services, tmp_path):
        ps, ts = services
        client = ps.create_project("Client: ACME", TaskType.WORK)
        ts.create_task(TaskDraft("Kickoff", TaskType.WORK, date(2024, 1, 2), client.id, duration=60))
        path = TaskExporter(ps, ts).export_project_tasks(
            client.id, date(2024, 1, 1), date(2024, 1, 7), str(tmp_path)
        )

        assert os.path.basename(path) == "Client_ ACME_Tasks_2024-01-01_to_2024-01-07.xlsx"
        rows = _sheet_rows(path, "Client_ ACME")
        assert rows[1][0] == "Kickoff"
        assert rows[1][3] == "Client: ACME"

    def test_safe_sheet_title(self):
        assert safe_sheet_title("a/b\\c?d*e[f]g:h") == "a_b_c_d_e_f_g_h"
        assert safe_sheet_title("x" * 40) == "x" * 31
        assert safe_sheet_title("") == "Tasks"

    def test_zero_duration_written_as_clock(self, services, tmp_path):
        ps, ts = services
        alpha = ps.create_project("Alpha", TaskType.WORK)
        ts.create_task(TaskDraft("Stand-up", TaskType.WORK, date(2024, 1, 2), alpha.id, duration=0))
        ts.create_task(TaskDraft("Untimed", TaskType.WORK, date(2024, 1, 2), alpha.id))
        path = TaskExporter(ps, ts).export_tasks(
            ExportConfig(date(2024, 1, 1), date(2024, 1, 7), include_statistics=False), str(tmp_path)
        )

        durations = {r[0]: r[7] for r in _sheet_rows(path, "Tasks")[1:]}
        assert durations == {"Stand-up": "00:00", "Untimed": "-"}

    def test_weekly_summary(self, populated, tmp_path):
        ps, ts, alpha, home = populated
        path = TaskExporter(ps, ts).export_weekly_summary(
            date(2024, 1, 1), date(2024, 1, 7), str(tmp_path)
        )

        assert os.path.basename(path) == "Weekly_Summary_2024-01-01_to_2024-01-07.xlsx"
        wb = load_workbook(path, read_only=True)
        assert wb.sheetnames == ["Daily Summary", "Tasks"]
        wb.close()
        summary = _sheet_rows(path, "Daily Summary")
        assert summary[1] == ("2024-01-02", 1, 1, "01:30", "01:30", "00:00")
        assert summary[2] == ("2024-01-03", 2, 1, "01:15", "00:45", "00:30")
        assert len(_sheet_rows(path, "Tasks")) == 4

    def test_failure_raises_export_error(self, tmp_path):
        class BrokenTasks:
            def get_tasks_by_date_range(self, start, end):
                raise StorageError("unreadable")

        with pytest.raises(ExportError, match="Failed to export tasks to Excel") as exc:
            TaskExporter(FakeProjectService(), BrokenTasks()).export_tasks(
                ExportConfig(date(2024, 1, 1), date(2024, 1, 7)), str(tmp_path)
            )
        assert isinstance(exc.value.__cause__, StorageError)
        assert os.listdir(tmp_path) == []


# ---------------------------------------------------------------------------
# Round trip
# ---------------------------------------------------------------------------


class TestRoundTrip:
    def test_export_then_import(self, populated, tmp_path):
        ps, ts, alpha, home = populated
        config = ExportConfig(date(2024, 1, 1), date(2024, 1, 7))
        path = TaskExporter(ps, ts).export_tasks(config, str(tmp_path))

        fresh = JsonStore(data_dir=str(tmp_path / "fresh"))
        fresh_ps, fresh_ts = ProjectService(fresh), TaskService(fresh)
        result = TaskImporter(fresh_ps, fresh_ts).import_file(path)

        assert result.imported_count == 3
        assert result.errors == []
        assert sorted(result.created_projects) == ["Alpha", "Home"]

        def key(t):
            return (t.title, t.type, t.date, t.duration, t.status)

        original = sorted(key(t) for t in ts.get_tasks_by_date_range(config.start_date, config.end_date))
        imported = sorted(key(t) for t in fresh_ts.list_tasks())
        assert imported == original

    def test_zero_duration_survives(self, services, tmp_path):
        ps, ts = services
        alpha = ps.create_project("Alpha", TaskType.WORK)
        ts.create_task(TaskDraft("Stand-up", TaskType.WORK, date(2024, 1, 2), alpha.id, duration=0))
        path = TaskExporter(ps, ts).export_tasks(
            ExportConfig(date(2024, 1, 1), date(2024, 1, 7)), str(tmp_path)
        )

        fresh = JsonStore(data_dir=str(tmp_path / "fresh"))
        fresh_ts = TaskService(fresh)
        TaskImporter(ProjectService(fresh), fresh_ts).import_file(path)

        assert [t.duration for t in fresh_ts.list_tasks()] == [0]


# ---------------------------------------------------------------------------
# HTML report tests
# ---------------------------------------------------------------------------


class TestTimesheetReport:
    def test_render(self, populated, tmp_path):
        ps, ts, alpha, home = populated
        tasks = ts.get_tasks_by_date_range(date(2024, 1, 1), date(2024, 1, 7))
        projects = {p.id: p for p in ps.list_projects()}
        output_path = str(tmp_path / "timesheet.html")

        result_path = TimesheetReportGenerator().generate(tasks, projects, output_path, title="Week 1")
        assert result_path == output_path
        with open(output_path, "r", encoding="utf-8") as f:
            content = f.read()

        assert "Week 1" in content
        assert "Write report" in content
        assert "Quarterly numbers" in content
        assert "Alpha" in content
        assert "02:45" in content

    def test_empty(self):
        content = TimesheetReportGenerator().render([])
        assert "No tasks in this timesheet" in content

    def test_escapes_html(self):
        task = TaskDraft("<b>bold</b>", TaskType.WORK, date(2024, 1, 1), duration=5)
        content = TimesheetReportGenerator().render([task])
        assert "&lt;b&gt;bold&lt;/b&gt;" in content
